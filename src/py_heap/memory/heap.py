"""Heap — an allocator and its cells behind one object.

An allocator on its own only moves addresses around.  ``Heap`` pairs it
with a ``CellStorage`` of the same size so that callers can allocate,
write values through their handles, compact, and read the same values
back afterwards.

The allocator reports every compaction move through its relocation
handler; the heap copies the affected cells in the same order.  This
also covers the compaction a first-fit allocator runs by itself when a
request does not fit, so contents always follow their handles.

Configuration is just the constructor's keyword arguments: the size of
the address space and the placement strategy, by enum or by name.
"""

from __future__ import annotations

from enum import StrEnum

from py_heap.logging import Logger, LogLevel
from py_heap.memory.base import Allocator, LayoutEntry, Relocation
from py_heap.memory.best_fit import BestFitAllocator
from py_heap.memory.cells import CellStorage
from py_heap.memory.errors import AddressError, UnknownHandleError
from py_heap.memory.first_fit import FirstFitAllocator
from py_heap.memory.handle import Handle

DEFAULT_HEAP_SIZE = 64


class Strategy(StrEnum):
    """Available placement strategies."""

    FIRST_FIT = "first-fit"
    BEST_FIT = "best-fit"


def create_allocator(
    strategy: Strategy | str,
    *,
    size: int,
    logger: Logger | None = None,
) -> Allocator:
    """Build an allocator for the named strategy.

    Args:
        strategy: A ``Strategy`` or its string value.
        size: Number of cells in the address space.
        logger: Optional event log handed to the allocator.

    Returns:
        A fresh allocator with everything free.

    Raises:
        ValueError: If ``strategy`` names no known strategy.

    """
    try:
        chosen = Strategy(strategy)
    except ValueError:
        known = ", ".join(s.value for s in Strategy)
        msg = f"Unknown strategy {strategy!r} (expected one of: {known})"
        raise ValueError(msg) from None
    if chosen is Strategy.FIRST_FIT:
        return FirstFitAllocator(size=size, logger=logger)
    return BestFitAllocator(size=size, logger=logger)


class Heap:
    """An address space with cell contents that survive compaction."""

    def __init__(
        self,
        *,
        size: int = DEFAULT_HEAP_SIZE,
        strategy: Strategy | str = Strategy.BEST_FIT,
        logger: Logger | None = None,
    ) -> None:
        """Create an empty heap.

        Args:
            size: Number of cells.  Defaults to DEFAULT_HEAP_SIZE (64).
            strategy: Placement strategy.  Defaults to best fit.
            logger: Optional event log shared with the allocator.

        """
        self._allocator = create_allocator(strategy, size=size, logger=logger)
        self._strategy = Strategy(strategy)
        self._storage = CellStorage(size)
        self._logger = logger
        self._allocator.relocation_handler = self._apply_relocation

    @property
    def strategy(self) -> Strategy:
        """Return the placement strategy in use."""
        return self._strategy

    @property
    def allocator(self) -> Allocator:
        """Return the allocator that owns the bookkeeping."""
        return self._allocator

    @property
    def storage(self) -> CellStorage:
        """Return the backing cells."""
        return self._storage

    @property
    def total_size(self) -> int:
        """Return the number of cells."""
        return self._allocator.total_size

    @property
    def free_size(self) -> int:
        """Return the number of unallocated cells."""
        return self._allocator.free_size

    def allocate(self, size: int) -> Handle:
        """Reserve ``size`` cells (see the allocator for the errors raised)."""
        return self._allocator.allocate(size)

    def release(self, handle: Handle) -> None:
        """Give the cells behind ``handle`` back."""
        self._allocator.release(handle)

    def compact(self) -> list[Relocation]:
        """Compact the address space, moving contents along with their handles."""
        return self._allocator.compact()

    def layout(self) -> list[LayoutEntry]:
        """Return the current layout."""
        return self._allocator.layout()

    def read(self, handle: Handle, offset: int = 0) -> int:
        """Return the cell at ``offset`` inside the allocation.

        Raises:
            UnknownHandleError: If the handle was released or never allocated here.
            ForeignHandleError: If the handle belongs to another heap.
            AddressError: If ``offset`` lies outside the allocation.

        """
        return self._storage.read(self._address_of(handle, offset))

    def write(self, handle: Handle, value: int, offset: int = 0) -> None:
        """Store ``value`` in the cell at ``offset`` inside the allocation.

        Raises:
            UnknownHandleError: If the handle was released or never allocated here.
            ForeignHandleError: If the handle belongs to another heap.
            AddressError: If ``offset`` lies outside the allocation.

        """
        self._storage.write(self._address_of(handle, offset), value)

    def contents(self, handle: Handle) -> list[int]:
        """Return a copy of every cell in the allocation."""
        size = self._allocator.size_of(handle)
        return self._storage.snapshot(self._address_of(handle, 0), size)

    def _address_of(self, handle: Handle, offset: int) -> int:
        if isinstance(handle, Handle) and not handle.is_valid:
            msg = f"{handle!r} has been released"
            raise UnknownHandleError(msg)
        size = self._allocator.size_of(handle)
        if offset < 0 or offset >= size:
            msg = f"Offset {offset} outside allocation of {size} cells"
            raise AddressError(msg)
        return handle.address + offset

    def _apply_relocation(self, move: Relocation) -> None:
        self._storage.move(source=move.source, destination=move.destination, length=move.size)
        if self._logger is not None:
            self._logger.log(
                LogLevel.DEBUG,
                f"Copied {move.size} cells from {move.source} to {move.destination}",
                source="heap",
            )

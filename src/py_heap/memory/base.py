"""The allocator contract shared by every placement strategy.

An allocator manages the bookkeeping of a fixed address space
``[0, total_size)``.  It never touches cell contents; it only decides
which addresses belong to which allocation.

Design: Strategy pattern
    ``Allocator`` is a ``Protocol``.  ``FirstFitAllocator`` and
    ``BestFitAllocator`` satisfy it structurally and share no state or
    base class.  Small pieces of validation they both need live here as
    plain functions.

Compaction moves allocations.  Every move is described by a
``Relocation`` and handed to the allocator's optional relocation
handler, so whoever holds the cells (see ``py_heap.memory.heap``) can
copy the contents along.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from itertools import count
from typing import Protocol, TypeAlias

from py_heap.memory.errors import ForeignHandleError, InvalidSizeError, UnknownHandleError
from py_heap.memory.handle import Handle

_space_counter = count(start=1)


class BlockStatus(StrEnum):
    """Whether a stretch of addresses is in use."""

    FREE = "free"
    ALLOCATED = "allocated"


@dataclass(frozen=True)
class LayoutEntry:
    """One contiguous stretch of the address space with a single status."""

    start: int
    """First address of the stretch."""

    length: int
    """Number of cells in the stretch."""

    status: BlockStatus
    """FREE or ALLOCATED."""

    @property
    def end(self) -> int:
        """Return the address one past the last cell."""
        return self.start + self.length

    @property
    def is_free(self) -> bool:
        """Return True for a free stretch."""
        return self.status is BlockStatus.FREE


@dataclass(frozen=True)
class Relocation:
    """One allocation moved by compaction."""

    handle: Handle
    source: int
    destination: int
    size: int


RelocationHandler: TypeAlias = Callable[[Relocation], None]


class Allocator(Protocol):
    """Interface that every placement strategy must satisfy."""

    @property
    def total_size(self) -> int:
        """Return the number of cells in the address space."""
        ...  # pragma: no cover

    @property
    def free_size(self) -> int:
        """Return the number of unallocated cells."""
        ...  # pragma: no cover

    @property
    def allocated_size(self) -> int:
        """Return the number of allocated cells."""
        ...  # pragma: no cover

    @property
    def largest_free(self) -> int:
        """Return the size of the biggest free region."""
        ...  # pragma: no cover

    @property
    def relocation_handler(self) -> RelocationHandler | None:
        """Return the callback invoked for every compaction move."""
        ...  # pragma: no cover

    @relocation_handler.setter
    def relocation_handler(self, handler: RelocationHandler | None) -> None:
        """Install a callback invoked for every compaction move."""
        ...  # pragma: no cover

    def allocate(self, size: int) -> Handle:
        """Reserve ``size`` contiguous cells and return a handle to them."""
        ...  # pragma: no cover

    def release(self, handle: Handle) -> None:
        """Return the cells behind ``handle`` to the free pool."""
        ...  # pragma: no cover

    def compact(self) -> list[Relocation]:
        """Pack allocations toward address 0 and return the moves made."""
        ...  # pragma: no cover

    def layout(self) -> list[LayoutEntry]:
        """Return the address space as ordered, gap-free entries."""
        ...  # pragma: no cover

    def size_of(self, handle: Handle) -> int:
        """Return the number of cells owned by ``handle``."""
        ...  # pragma: no cover

    def handles(self) -> list[Handle]:
        """Return the live handles in address order."""
        ...  # pragma: no cover

    def owns(self, handle: Handle) -> bool:
        """Return True if ``handle`` names a live allocation here."""
        ...  # pragma: no cover


def new_space_id() -> int:
    """Return a fresh identifier for an address space."""
    return next(_space_counter)


def validate_total_size(total_size: int) -> None:
    """Reject an address space size that is not a positive integer.

    Raises:
        InvalidSizeError: If ``total_size`` is not a positive int.

    """
    if isinstance(total_size, bool) or not isinstance(total_size, int) or total_size <= 0:
        msg = f"Address space size must be a positive integer, got {total_size!r}"
        raise InvalidSizeError(msg)


def validate_request(size: int, *, total_size: int) -> None:
    """Reject a request size outside ``1..total_size``.

    Raises:
        InvalidSizeError: If ``size`` is not an int, not positive, or
            larger than the whole address space.

    """
    if isinstance(size, bool) or not isinstance(size, int):
        msg = f"Request size must be an integer, got {size!r}"
        raise InvalidSizeError(msg)
    if size <= 0:
        msg = f"Request size must be positive, got {size}"
        raise InvalidSizeError(msg)
    if size > total_size:
        msg = f"Request of {size} cells exceeds the address space of {total_size}"
        raise InvalidSizeError(msg)


def check_owner(handle: Handle, *, space_id: int) -> None:
    """Reject anything that is not a handle issued by this address space.

    Raises:
        UnknownHandleError: If ``handle`` is not a ``Handle`` at all.
        ForeignHandleError: If ``handle`` belongs to a different space.

    """
    if not isinstance(handle, Handle):
        msg = f"Not a handle: {handle!r}"
        raise UnknownHandleError(msg)
    if handle.space_id != space_id:
        msg = f"{handle!r} belongs to address space {handle.space_id}, not {space_id}"
        raise ForeignHandleError(msg)

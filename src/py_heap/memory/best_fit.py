"""Best-fit allocator — an explicit ledger of free and allocated regions.

The address space is kept as a chain of regions that tile
``[0, total_size)`` exactly.  Each region is either free or allocated,
and knows its address-order neighbours.

Allocation (best fit):
    Walk the chain and pick the **smallest** free region that can hold
    the request.  Ties go to the lowest address, because the walk is in
    address order and only a strictly smaller region replaces the
    current pick.  An exact fit is taken over in place; otherwise the
    region is split into an allocated front part and a free remainder.

Release (coalescing):
    The region is marked free and immediately merged with a free
    successor, then with a free predecessor.  Coalescing is eager, so
    two free regions are never neighbours once a call returns.

Compaction:
    Walking in address order, a free region followed by an allocated
    one swaps places with it (the allocation slides down, the hole
    bubbles up), and a free region followed by a free one absorbs it.
    One pass leaves every allocation packed from address 0 and at most
    one free region at the top.

Why an arena instead of linked objects?
    Regions live in a list and refer to their neighbours by index.
    Split, merge, and swap only rewrite integers in the slots involved,
    so there are no object references to rewire or leave dangling.
    Slots vacated by merges are recycled.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from py_heap.logging import Logger, LogLevel
from py_heap.memory.base import (
    BlockStatus,
    LayoutEntry,
    Relocation,
    RelocationHandler,
    check_owner,
    new_space_id,
    validate_request,
    validate_total_size,
)
from py_heap.memory.errors import OutOfMemoryError, UnknownHandleError
from py_heap.memory.handle import Handle


@dataclass
class _Region:
    """One slot of the region arena."""

    start: int
    size: int
    free: bool = True
    handle: Handle | None = None
    prev: int | None = None
    next: int | None = None


class BestFitAllocator:
    """Place each request in the smallest free region that fits."""

    name = "best-fit"

    def __init__(self, *, size: int, logger: Logger | None = None) -> None:
        """Create an allocator whose whole space is one free region.

        Args:
            size: Number of cells in the address space.
            logger: Optional event log.

        Raises:
            InvalidSizeError: If ``size`` is not a positive integer.

        """
        validate_total_size(size)
        self._total_size = size
        self._space_id = new_space_id()
        self._logger = logger
        self._relocation_handler: RelocationHandler | None = None
        self._regions: list[_Region | None] = [_Region(start=0, size=size)]
        self._spare: list[int] = []
        self._head = 0
        self._index_of: dict[Handle, int] = {}

    # -- Queries ---------------------------------------------------------------

    @property
    def total_size(self) -> int:
        """Return the number of cells in the address space."""
        return self._total_size

    @property
    def space_id(self) -> int:
        """Return the identifier stamped on every handle this allocator issues."""
        return self._space_id

    @property
    def free_size(self) -> int:
        """Return the number of unallocated cells."""
        return sum(region.size for _, region in self._walk() if region.free)

    @property
    def allocated_size(self) -> int:
        """Return the number of allocated cells."""
        return self._total_size - self.free_size

    @property
    def largest_free(self) -> int:
        """Return the size of the biggest free region (0 when full)."""
        return max((region.size for _, region in self._walk() if region.free), default=0)

    @property
    def region_count(self) -> int:
        """Return the number of regions currently tiling the space."""
        return sum(1 for _ in self._walk())

    @property
    def relocation_handler(self) -> RelocationHandler | None:
        """Return the callback invoked for every compaction move."""
        return self._relocation_handler

    @relocation_handler.setter
    def relocation_handler(self, handler: RelocationHandler | None) -> None:
        """Install a callback invoked for every compaction move."""
        self._relocation_handler = handler

    def layout(self) -> list[LayoutEntry]:
        """Return the region chain as layout entries in address order."""
        return [
            LayoutEntry(
                start=region.start,
                length=region.size,
                status=BlockStatus.FREE if region.free else BlockStatus.ALLOCATED,
            )
            for _, region in self._walk()
        ]

    def handles(self) -> list[Handle]:
        """Return the live handles in address order."""
        return [region.handle for _, region in self._walk() if region.handle is not None]

    def owns(self, handle: Handle) -> bool:
        """Return True if ``handle`` names a live allocation of this allocator."""
        return handle in self._index_of

    def size_of(self, handle: Handle) -> int:
        """Return the number of cells owned by ``handle``.

        Raises:
            ForeignHandleError: If the handle came from another allocator.
            UnknownHandleError: If the handle is not currently allocated.

        """
        return self._at(self._lookup(handle)).size

    # -- Operations ------------------------------------------------------------

    def allocate(self, size: int) -> Handle:
        """Reserve ``size`` cells in the smallest free region that fits.

        Args:
            size: Number of contiguous cells wanted.

        Returns:
            A handle whose address is the start of the new allocation.

        Raises:
            InvalidSizeError: If ``size`` is not in ``1..total_size``.
            OutOfMemoryError: If no free region is large enough.

        """
        validate_request(size, total_size=self._total_size)

        best: int | None = None
        best_size = 0
        for index, region in self._walk():
            if not region.free or region.size < size:
                continue
            if best is None or region.size < best_size:
                best, best_size = index, region.size

        if best is None:
            msg = f"Cannot allocate {size} cells: largest free region is {self.largest_free}"
            self._log(LogLevel.WARNING, msg)
            raise OutOfMemoryError(msg)

        region = self._at(best)
        if region.size > size:
            self._split(best, size)
        handle = Handle(address=region.start, space_id=self._space_id)
        region.free = False
        region.handle = handle
        self._index_of[handle] = best
        self._log(LogLevel.INFO, f"Allocated {size} cells at {region.start}")
        return handle

    def release(self, handle: Handle) -> None:
        """Free the region behind ``handle`` and merge it with free neighbours.

        Raises:
            ForeignHandleError: If the handle came from another allocator.
            UnknownHandleError: If the handle is not currently allocated.

        """
        index = self._lookup(handle)
        del self._index_of[handle]
        region = self._at(index)
        region.free = True
        region.handle = None
        handle._invalidate()  # noqa: SLF001
        self._log(LogLevel.INFO, f"Released {region.size} cells at {region.start}")

        if region.next is not None and self._at(region.next).free:
            self._absorb_next(index)
        if region.prev is not None and self._at(region.prev).free:
            self._absorb_next(region.prev)

    def compact(self) -> list[Relocation]:
        """Bubble free space to the top of the address space.

        Returns:
            Every move made, in the order it was applied.

        """
        moves: list[Relocation] = []
        index: int | None = self._head
        while index is not None:
            region = self._at(index)
            following = region.next
            if not region.free or following is None:
                index = following
                continue
            if self._at(following).free:
                self._absorb_next(index)
                continue
            move = self._swap(index, following)
            moves.append(move)
            if self._relocation_handler is not None:
                self._relocation_handler(move)
            index = following

        self._log(LogLevel.INFO, f"Compacted: {len(moves)} regions moved")
        return moves

    # -- Arena plumbing --------------------------------------------------------

    def _walk(self) -> Iterator[tuple[int, _Region]]:
        """Yield ``(index, region)`` pairs in address order."""
        index: int | None = self._head
        while index is not None:
            region = self._at(index)
            yield index, region
            index = region.next

    def _at(self, index: int) -> _Region:
        region = self._regions[index]
        if region is None:  # pragma: no cover
            msg = f"Region slot {index} is not in use"
            raise RuntimeError(msg)
        return region

    def _lookup(self, handle: Handle) -> int:
        check_owner(handle, space_id=self._space_id)
        index = self._index_of.get(handle)
        if index is None:
            msg = f"{handle!r} is not allocated in this address space"
            raise UnknownHandleError(msg)
        return index

    def _store(self, region: _Region) -> int:
        if self._spare:
            index = self._spare.pop()
            self._regions[index] = region
            return index
        self._regions.append(region)
        return len(self._regions) - 1

    def _split(self, index: int, size: int) -> None:
        """Cut region ``index`` down to ``size`` cells, chaining a free remainder after it."""
        region = self._at(index)
        remainder = _Region(
            start=region.start + size,
            size=region.size - size,
            prev=index,
            next=region.next,
        )
        remainder_index = self._store(remainder)
        if region.next is not None:
            self._at(region.next).prev = remainder_index
        region.next = remainder_index
        region.size = size

    def _absorb_next(self, index: int) -> None:
        """Merge the successor of region ``index`` into it and recycle its slot."""
        region = self._at(index)
        absorbed_index = region.next
        if absorbed_index is None:  # pragma: no cover
            return
        absorbed = self._at(absorbed_index)
        region.size += absorbed.size
        region.next = absorbed.next
        if absorbed.next is not None:
            self._at(absorbed.next).prev = index
        self._regions[absorbed_index] = None
        self._spare.append(absorbed_index)

    def _swap(self, free_index: int, used_index: int) -> Relocation:
        """Exchange a free region with the allocated region right after it.

        The slots keep their chain positions; their contents trade
        places, so the allocation now starts where the hole did.
        """
        hole = self._at(free_index)
        used = self._at(used_index)
        handle = used.handle
        if handle is None:  # pragma: no cover
            msg = f"Allocated region at {used.start} has no handle"
            raise RuntimeError(msg)

        source, destination = used.start, hole.start
        hole_size = hole.size
        hole.size, hole.free, hole.handle = used.size, False, handle
        used.start, used.size, used.free, used.handle = destination + hole.size, hole_size, True, None

        self._index_of[handle] = free_index
        handle._relocate(destination)  # noqa: SLF001
        self._log(LogLevel.DEBUG, f"Moved {hole.size} cells from {source} to {destination}")
        return Relocation(handle=handle, source=source, destination=destination, size=hole.size)

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=self.name)

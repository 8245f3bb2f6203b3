"""First-fit allocator — only allocations are tracked, holes are implied.

The ledger is a list of live handles sorted by address plus the size of
each.  Free space is never stored: a hole is simply the distance between
the end of one allocation and the start of the next, or the stretch
before the first allocation, or the tail after the last one.

Allocation (first fit):
    Walk the allocations in address order.  The first interior hole
    that is strictly larger than the request takes it, at the hole's
    start.  If none is, the tail is used when it is at least as large as
    the request.  If that fails too and compaction would make enough
    room, the allocator compacts once and tries exactly one more time.

Release:
    Drop the entry.  The hole it leaves is implied by its neighbours, so
    there is nothing to coalesce.

Compaction:
    Re-address every allocation back to back from 0, in address order.
"""

from __future__ import annotations

from bisect import insort

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


def _by_address(handle: Handle) -> int:
    return handle.address


class FirstFitAllocator:
    """Place each request in the lowest-addressed hole that fits."""

    name = "first-fit"

    def __init__(self, *, size: int, logger: Logger | None = None) -> None:
        """Create an allocator with no allocations.

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
        self._entries: list[Handle] = []
        self._sizes: dict[Handle, int] = {}

    @property
    def total_size(self) -> int:
        """Return the number of cells in the address space."""
        return self._total_size

    @property
    def space_id(self) -> int:
        """Return the identifier stamped on every handle this allocator issues."""
        return self._space_id

    @property
    def allocated_size(self) -> int:
        """Return the number of allocated cells."""
        return sum(self._sizes.values())

    @property
    def free_size(self) -> int:
        """Return the number of unallocated cells."""
        return self._total_size - self.allocated_size

    @property
    def largest_free(self) -> int:
        """Return the size of the biggest hole (0 when full)."""
        return max((entry.length for entry in self.layout() if entry.is_free), default=0)

    @property
    def relocation_handler(self) -> RelocationHandler | None:
        """Return the callback invoked for every compaction move."""
        return self._relocation_handler

    @relocation_handler.setter
    def relocation_handler(self, handler: RelocationHandler | None) -> None:
        """Install a callback invoked for every compaction move."""
        self._relocation_handler = handler

    def layout(self) -> list[LayoutEntry]:
        """Return allocations and the holes between them in address order."""
        entries: list[LayoutEntry] = []
        running_end = 0
        for handle in self._entries:
            if handle.address > running_end:
                entries.append(
                    LayoutEntry(
                        start=running_end,
                        length=handle.address - running_end,
                        status=BlockStatus.FREE,
                    )
                )
            size = self._sizes[handle]
            entries.append(LayoutEntry(start=handle.address, length=size, status=BlockStatus.ALLOCATED))
            running_end = handle.address + size
        if running_end < self._total_size:
            entries.append(
                LayoutEntry(
                    start=running_end,
                    length=self._total_size - running_end,
                    status=BlockStatus.FREE,
                )
            )
        return entries

    def handles(self) -> list[Handle]:
        """Return the live handles in address order."""
        return list(self._entries)

    def owns(self, handle: Handle) -> bool:
        """Return True if ``handle`` names a live allocation of this allocator."""
        return handle in self._sizes

    def size_of(self, handle: Handle) -> int:
        """Return the number of cells owned by ``handle``.

        Raises:
            ForeignHandleError: If the handle came from another allocator.
            UnknownHandleError: If the handle is not currently allocated.

        """
        self._check(handle)
        return self._sizes[handle]

    def allocate(self, size: int) -> Handle:
        """Reserve ``size`` cells in the first hole that fits.

        Args:
            size: Number of contiguous cells wanted.

        Returns:
            A handle whose address is the start of the new allocation.

        Raises:
            InvalidSizeError: If ``size`` is not in ``1..total_size``.
            OutOfMemoryError: If no hole fits, even after one compaction.

        """
        validate_request(size, total_size=self._total_size)

        address = self._find_hole(size)
        # One compaction, one retry.  Skipped when the free total is too
        # small, so a failing request never moves anything.
        if address is None and self.free_size >= size:
            self._log(LogLevel.INFO, f"No hole fits {size} cells, compacting and retrying")
            self.compact()
            address = self._find_hole(size)

        if address is None:
            msg = f"Cannot allocate {size} cells: only {self.free_size} free"
            self._log(LogLevel.WARNING, msg)
            raise OutOfMemoryError(msg)

        handle = Handle(address=address, space_id=self._space_id)
        insort(self._entries, handle, key=_by_address)
        self._sizes[handle] = size
        self._log(LogLevel.INFO, f"Allocated {size} cells at {address}")
        return handle

    def release(self, handle: Handle) -> None:
        """Forget the allocation behind ``handle``.

        Raises:
            ForeignHandleError: If the handle came from another allocator.
            UnknownHandleError: If the handle is not currently allocated.

        """
        self._check(handle)
        size = self._sizes.pop(handle)
        self._entries.remove(handle)
        handle._invalidate()  # noqa: SLF001
        self._log(LogLevel.INFO, f"Released {size} cells at {handle.address}")

    def compact(self) -> list[Relocation]:
        """Slide every allocation down so they sit back to back from 0.

        Returns:
            Every move made, in the order it was applied.

        """
        moves: list[Relocation] = []
        running_end = 0
        for handle in self._entries:
            size = self._sizes[handle]
            if handle.address != running_end:
                move = Relocation(handle=handle, source=handle.address, destination=running_end, size=size)
                handle._relocate(running_end)  # noqa: SLF001
                moves.append(move)
                self._log(LogLevel.DEBUG, f"Moved {size} cells from {move.source} to {move.destination}")
                if self._relocation_handler is not None:
                    self._relocation_handler(move)
            running_end += size

        self._log(LogLevel.INFO, f"Compacted: {len(moves)} regions moved")
        return moves

    def _find_hole(self, size: int) -> int | None:
        """Return the start of the first hole that fits ``size``, or None."""
        running_end = 0
        for handle in self._entries:
            if handle.address - running_end > size:
                return running_end
            running_end = handle.address + self._sizes[handle]
        if self._total_size - running_end >= size:
            return running_end
        return None

    def _check(self, handle: Handle) -> None:
        check_owner(handle, space_id=self._space_id)
        if handle not in self._sizes:
            msg = f"{handle!r} is not allocated in this address space"
            raise UnknownHandleError(msg)

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=self.name)

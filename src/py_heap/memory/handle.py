"""Handles — stable references to allocations whose address can move.

A handle is what ``allocate()`` hands back.  The caller reads its
``address`` to find the allocation, and passes the handle itself back
to ``release()``.

Compaction slides allocations around, so an address is not an
identity: a handle's address changes in place while the handle stays
the same object.  Handles therefore compare and hash by identity only,
which keeps them usable as dict keys on either side of a compaction.

Only the allocator that issued a handle moves it (``_relocate``), and
only that allocator retires it (``_invalidate``) when the allocation is
released.
"""

from itertools import count

# Serial numbers are unique across all address spaces in the process.
_serial_counter = count(start=1)


class Handle:
    """Reference to one allocation inside one address space."""

    __slots__ = ("_address", "_space_id", "_serial", "_valid")

    def __init__(self, *, address: int, space_id: int) -> None:
        """Create a live handle.

        Args:
            address: Start address of the allocation.
            space_id: Identifier of the issuing address space.

        """
        self._address = address
        self._space_id = space_id
        self._serial = next(_serial_counter)
        self._valid = True

    @property
    def address(self) -> int:
        """Return the current start address of the allocation."""
        return self._address

    @property
    def space_id(self) -> int:
        """Return the identifier of the address space that issued this handle."""
        return self._space_id

    @property
    def serial(self) -> int:
        """Return a process-wide unique number for this handle."""
        return self._serial

    @property
    def is_valid(self) -> bool:
        """Return True until the allocation is released."""
        return self._valid

    def _relocate(self, address: int) -> None:
        self._address = address

    def _invalidate(self) -> None:
        self._valid = False

    def __repr__(self) -> str:
        """Show serial, address, and liveness for debugging."""
        state = "live" if self._valid else "released"
        return f"Handle(#{self._serial} @ {self._address}, {state})"

"""Cell storage — the raw contents of the address space.

Allocators only decide who owns which addresses.  The values stored at
those addresses live here, in a flat list of integer cells.  Nothing in
this module knows about allocations; it reads, writes, and copies
cells, and refuses any address outside ``[0, size)``.
"""

from py_heap.memory.errors import AddressError

DEFAULT_CELL_VALUE = 0


class CellStorage:
    """A fixed number of integer cells addressed from 0."""

    def __init__(self, size: int, *, fill: int = DEFAULT_CELL_VALUE) -> None:
        """Create storage with every cell set to ``fill``.

        Args:
            size: Number of cells.
            fill: Initial value of every cell.

        """
        self._cells: list[int] = [fill] * size

    @property
    def size(self) -> int:
        """Return the number of cells."""
        return len(self._cells)

    def _validate_range(self, address: int, length: int = 1) -> None:
        """Raise AddressError unless ``[address, address + length)`` is in range."""
        if address < 0 or length < 0 or address + length > len(self._cells):
            msg = f"Cells {address}..{address + length - 1} outside address space of {len(self._cells)}"
            raise AddressError(msg)

    def read(self, address: int) -> int:
        """Return the value stored at ``address``.

        Raises:
            AddressError: If ``address`` is out of range.

        """
        self._validate_range(address)
        return self._cells[address]

    def write(self, address: int, value: int) -> None:
        """Store ``value`` at ``address``.

        Raises:
            AddressError: If ``address`` is out of range.

        """
        self._validate_range(address)
        self._cells[address] = value

    def snapshot(self, address: int, length: int) -> list[int]:
        """Return a copy of ``length`` cells starting at ``address``."""
        self._validate_range(address, length)
        return self._cells[address : address + length]

    def move(self, *, source: int, destination: int, length: int) -> None:
        """Copy ``length`` cells from ``source`` to ``destination``.

        Overlapping ranges are handled: the source is copied out before
        anything is written.

        Raises:
            AddressError: If either range is out of bounds.

        """
        self._validate_range(source, length)
        self._validate_range(destination, length)
        self._cells[destination : destination + length] = self._cells[source : source + length]

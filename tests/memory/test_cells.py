"""Tests for cell storage."""

import pytest

from py_heap.memory.cells import DEFAULT_CELL_VALUE, CellStorage
from py_heap.memory.errors import AddressError

SIZE = 8
VALUE = 42


class TestCellStorage:
    """Verify reads, writes, and bounds checks."""

    def test_cells_start_with_fill(self) -> None:
        """Every cell starts at the fill value."""
        storage = CellStorage(SIZE)
        assert storage.size == SIZE
        assert storage.snapshot(0, SIZE) == [DEFAULT_CELL_VALUE] * SIZE

    def test_write_then_read(self) -> None:
        """A written value reads back."""
        storage = CellStorage(SIZE)
        storage.write(SIZE - 1, VALUE)
        assert storage.read(SIZE - 1) == VALUE

    @pytest.mark.parametrize("address", [-1, SIZE, SIZE + 10])
    def test_out_of_range(self, address: int) -> None:
        """Addresses outside the space raise AddressError."""
        storage = CellStorage(SIZE)
        with pytest.raises(AddressError):
            storage.read(address)
        with pytest.raises(AddressError):
            storage.write(address, VALUE)

    def test_address_error_is_an_index_error(self) -> None:
        """AddressError can be caught as IndexError."""
        assert issubclass(AddressError, IndexError)

    def test_move_down_with_overlap(self) -> None:
        """Moving a range onto an overlapping lower range copies correctly."""
        storage = CellStorage(SIZE)
        for address in range(2, 6):
            storage.write(address, address)
        storage.move(source=2, destination=0, length=4)
        assert storage.snapshot(0, 4) == [2, 3, 4, 5]

    def test_move_out_of_range(self) -> None:
        """A move that would run past the end is refused."""
        storage = CellStorage(SIZE)
        with pytest.raises(AddressError):
            storage.move(source=0, destination=SIZE - 1, length=2)

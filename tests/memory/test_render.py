"""Tests for the text renderings of a layout."""

from py_heap.memory.base import BlockStatus, LayoutEntry
from py_heap.memory.first_fit import FirstFitAllocator
from py_heap.memory.render import ALLOCATED_CELL, FREE_CELL, format_bar, format_table

LAYOUT = [
    LayoutEntry(start=0, length=10, status=BlockStatus.ALLOCATED),
    LayoutEntry(start=10, length=5, status=BlockStatus.FREE),
]


class TestFormatTable:
    """Verify the one-line-per-region table."""

    def test_lines(self) -> None:
        """Each region prints its range, status, and size."""
        assert format_table(LAYOUT).splitlines() == [
            " 0 -  9 | Allocated (size 10)",
            "10 - 14 | Free      (size 5)",
        ]

    def test_empty_layout(self) -> None:
        """An empty layout renders as an empty string."""
        assert format_table([]) == ""


class TestFormatBar:
    """Verify the strip drawing."""

    def test_rows(self) -> None:
        """The strip shows one glyph per cell with labels above and below."""
        rows = format_bar(LAYOUT).splitlines()
        assert rows == [
            " 0         10",
            "┌" + "─" * 15 + "┐",
            "│" + ALLOCATED_CELL * 10 + FREE_CELL * 5 + "│",
            "└" + "─" * 15 + "┘",
            "          9    14",
        ]

    def test_renders_allocator_layout(self) -> None:
        """The strip width matches the address space."""
        allocator = FirstFitAllocator(size=12)
        allocator.allocate(3)
        strip = format_bar(allocator.layout()).splitlines()[2]
        assert strip == "│" + ALLOCATED_CELL * 3 + FREE_CELL * 9 + "│"

"""Tests for fragmentation statistics."""

from py_heap.memory.base import BlockStatus, LayoutEntry
from py_heap.memory.best_fit import BestFitAllocator
from py_heap.memory.stats import external_fragmentation, summarize

FREE = BlockStatus.FREE
ALLOCATED = BlockStatus.ALLOCATED

SPLIT_LAYOUT = [
    LayoutEntry(start=0, length=2, status=FREE),
    LayoutEntry(start=2, length=3, status=ALLOCATED),
    LayoutEntry(start=5, length=6, status=FREE),
]


class TestExternalFragmentation:
    """Verify the 1 - largest/total measure."""

    def test_split_free_space(self) -> None:
        """Holes of 2 and 6 cells give 1 - 6/8."""
        assert external_fragmentation(SPLIT_LAYOUT) == 0.25

    def test_single_hole_is_zero(self) -> None:
        """One hole means no fragmentation."""
        assert external_fragmentation([LayoutEntry(start=0, length=8, status=FREE)]) == 0.0

    def test_nothing_free_is_zero(self) -> None:
        """A full space is not fragmented."""
        assert external_fragmentation([LayoutEntry(start=0, length=8, status=ALLOCATED)]) == 0.0

    def test_compaction_removes_fragmentation(self) -> None:
        """After compaction the measure drops to zero."""
        allocator = BestFitAllocator(size=12)
        handles = [allocator.allocate(2) for _ in range(5)]
        allocator.release(handles[1])
        allocator.release(handles[3])
        assert external_fragmentation(allocator.layout()) > 0.0
        allocator.compact()
        assert external_fragmentation(allocator.layout()) == 0.0


class TestSummarize:
    """Verify the aggregate summary."""

    def test_counts(self) -> None:
        """Totals and counts are read off the layout."""
        summary = summarize(SPLIT_LAYOUT)
        assert summary.total == 11
        assert summary.allocated == 3
        assert summary.free == 8
        assert summary.largest_free == 6
        assert summary.hole_count == 2
        assert summary.allocation_count == 1
        assert summary.external_fragmentation == 0.25

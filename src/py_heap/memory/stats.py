"""Fragmentation statistics computed from a layout.

**External fragmentation** is the share of free memory that cannot be
used for one large request: ``1 - largest_free / total_free``.  It is 0
when all free cells form a single hole (or when nothing is free) and
approaches 1 as free space shatters into many small holes.

Both functions work on any ``layout()`` result, so they apply equally
to either allocator.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from py_heap.memory.base import LayoutEntry


@dataclass(frozen=True)
class LayoutSummary:
    """Aggregate numbers describing one layout."""

    total: int
    allocated: int
    free: int
    largest_free: int
    hole_count: int
    allocation_count: int
    external_fragmentation: float


def external_fragmentation(layout: Sequence[LayoutEntry]) -> float:
    """Return ``1 - largest_free / total_free`` (0.0 when nothing is free)."""
    holes = [entry.length for entry in layout if entry.is_free]
    total_free = sum(holes)
    if total_free == 0:
        return 0.0
    return 1.0 - max(holes) / total_free


def summarize(layout: Sequence[LayoutEntry]) -> LayoutSummary:
    """Collect totals, hole counts, and fragmentation for a layout."""
    holes = [entry.length for entry in layout if entry.is_free]
    allocations = [entry.length for entry in layout if not entry.is_free]
    return LayoutSummary(
        total=sum(holes) + sum(allocations),
        allocated=sum(allocations),
        free=sum(holes),
        largest_free=max(holes, default=0),
        hole_count=len(holes),
        allocation_count=len(allocations),
        external_fragmentation=external_fragmentation(layout),
    )

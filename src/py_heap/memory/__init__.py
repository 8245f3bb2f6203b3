"""Memory subsystem — placement strategies, handles, cells, and the heap.

Re-exports public symbols so callers can write::

    from py_heap.memory import Heap, Strategy
"""

from py_heap.memory.base import Allocator, BlockStatus, LayoutEntry, Relocation
from py_heap.memory.best_fit import BestFitAllocator
from py_heap.memory.cells import CellStorage
from py_heap.memory.errors import (
    AddressError,
    AllocationError,
    ForeignHandleError,
    InvalidSizeError,
    OutOfMemoryError,
    UnknownHandleError,
)
from py_heap.memory.first_fit import FirstFitAllocator
from py_heap.memory.handle import Handle
from py_heap.memory.heap import DEFAULT_HEAP_SIZE, Heap, Strategy, create_allocator
from py_heap.memory.stats import LayoutSummary, external_fragmentation, summarize

__all__ = [
    "DEFAULT_HEAP_SIZE",
    "AddressError",
    "AllocationError",
    "Allocator",
    "BestFitAllocator",
    "BlockStatus",
    "CellStorage",
    "FirstFitAllocator",
    "ForeignHandleError",
    "Handle",
    "Heap",
    "InvalidSizeError",
    "LayoutEntry",
    "LayoutSummary",
    "OutOfMemoryError",
    "Relocation",
    "Strategy",
    "UnknownHandleError",
    "create_allocator",
    "external_fragmentation",
    "summarize",
]

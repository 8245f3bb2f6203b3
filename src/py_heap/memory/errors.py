"""Allocation errors.

Every failure an allocator can report is a subclass of
``AllocationError`` so callers can catch the whole family at once.
All of them are recoverable: the ledger is left exactly as it was
before the failed call.
"""


class AllocationError(Exception):
    """Base class for allocator failures."""


class InvalidSizeError(AllocationError):
    """Raise when a requested size is not a positive integer within the space."""


class OutOfMemoryError(AllocationError):
    """Raise when no free region can hold a request."""


class UnknownHandleError(AllocationError):
    """Raise when a handle does not name a live allocation of this space."""


class ForeignHandleError(AllocationError):
    """Raise when a handle was issued by a different address space."""


class AddressError(IndexError):
    """Raise when a cell address falls outside the address space."""

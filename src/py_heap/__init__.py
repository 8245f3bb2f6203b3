"""py-heap — first-fit and best-fit allocation over a fixed address space."""

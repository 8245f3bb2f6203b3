"""Text renderings of a layout.

Two views are provided:

- ``format_table`` — one line per region::

     0 -  9 | Allocated (size 10)
    10 - 14 | Free      (size 5)

- ``format_bar`` — the whole address space as a strip, one character
  per cell (``█`` allocated, ``░`` free), framed with box drawing.  The
  first and last address of each region are printed alternately above
  and below the strip so neighbouring labels do not collide::

     0         10
    ┌───────────────┐
    │██████████░░░░░│
    └───────────────┘
              9    14

Neither function knows about allocators; they take ``layout()`` output.
"""

from collections.abc import Sequence

from py_heap.memory.base import LayoutEntry

ALLOCATED_CELL = "█"
FREE_CELL = "░"


def format_table(layout: Sequence[LayoutEntry]) -> str:
    """Return one ``start - end | Status (size n)`` line per region."""
    if not layout:
        return ""
    width = len(str(layout[-1].end - 1))
    lines = []
    for entry in layout:
        status = "Free" if entry.is_free else "Allocated"
        lines.append(
            f"{entry.start:>{width}} - {entry.end - 1:>{width}} | {status:<9} (size {entry.length})"
        )
    return "\n".join(lines)


def format_bar(layout: Sequence[LayoutEntry]) -> str:
    """Return a five-row strip drawing of the address space."""
    total = sum(entry.length for entry in layout)
    above = [" "] * (total + 2)
    below = [" "] * (total + 2)
    strip = ["│"]
    label_above = True

    for entry in layout:
        strip.append((FREE_CELL if entry.is_free else ALLOCATED_CELL) * entry.length)
        # Column 0 is the frame, so address a sits in column a + 1.
        _put_label(above if label_above else below, entry.start + 1, str(entry.start))
        label_above = not label_above
        _put_label(above if label_above else below, entry.end, str(entry.end - 1))
        label_above = not label_above

    strip.append("│")
    rows = [
        "".join(above).rstrip(),
        "┌" + "─" * total + "┐",
        "".join(strip),
        "└" + "─" * total + "┘",
        "".join(below).rstrip(),
    ]
    return "\n".join(rows)


def _put_label(row: list[str], column: int, text: str) -> None:
    for i, char in enumerate(text):
        if column + i < len(row):
            row[column + i] = char

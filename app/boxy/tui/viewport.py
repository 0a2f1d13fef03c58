"""Viewport computations for the package list.

The viewport is the window ``[scroll, scroll + capacity)`` into the
visible set. After every cursor move or resize the invariant
``scroll <= cursor < scroll + capacity`` is restored.
"""

from dataclasses import dataclass

from boxy.models.package import PackageItem
from boxy.tui.items import Section

# Header (2) + search bar (2) + section header (1) + blank and status slot (2)
# + help (2) = 9, plus one line for a second section header.
FIXED_OVERHEAD_LINES = 10


@dataclass(frozen=True, slots=True)
class SectionView:
    """Rows of one section that fall inside the viewport.

    Attributes:
        label: Section header text.
        total: Number of items in the whole section.
        rows: ``(index, item)`` pairs, index in the combined list.
    """

    label: str
    total: int
    rows: list[tuple[int, PackageItem]]


def capacity_for(height: int, overhead: int = FIXED_OVERHEAD_LINES) -> int:
    """Return how many list rows fit on a terminal of ``height`` lines (at least 1)."""
    return max(1, height - overhead)


def clamp_cursor(cursor: int, length: int) -> int:
    """Clamp ``cursor`` into ``[0, length)``, or 0 for an empty list."""
    if length <= 0:
        return 0
    return max(0, min(cursor, length - 1))


def ensure_visible(cursor: int, scroll: int, capacity: int) -> int:
    """Return the scroll offset that keeps ``cursor`` inside the viewport.

    Scrolls up when the cursor is above the window and down when it is
    below; otherwise the offset is kept.
    """
    capacity = max(1, capacity)
    scroll = max(0, scroll)
    if cursor < scroll:
        scroll = cursor
    if cursor >= scroll + capacity:
        scroll = cursor - capacity + 1
    return max(0, scroll)


def visible_slice(
    items: list[PackageItem],
    cursor: int,
    scroll: int,
    capacity: int,
) -> tuple[list[PackageItem], int]:
    """Return the rendered rows and the adjusted scroll offset.

    Args:
        items: Visible set.
        cursor: Cursor index into ``items``.
        scroll: Current scroll offset.
        capacity: Number of rows available.

    Returns:
        Tuple of (rows in the window, new scroll offset).
    """
    cursor = clamp_cursor(cursor, len(items))
    new_scroll = ensure_visible(cursor, scroll, capacity)
    return items[new_scroll : new_scroll + max(1, capacity)], new_scroll


def layout_sections(sections: list[Section], scroll: int, capacity: int) -> list[SectionView]:
    """Slice concatenated sections to the viewport.

    Sections share one index space in the order given. A section appears
    in the result only if at least one of its items is inside the window.
    """
    end = scroll + max(1, capacity)
    views: list[SectionView] = []
    offset = 0
    for section in sections:
        rows = [
            (offset + i, item)
            for i, item in enumerate(section.items)
            if scroll <= offset + i < end
        ]
        if rows:
            views.append(SectionView(label=section.label, total=len(section.items), rows=rows))
        offset += len(section.items)
    return views


def range_label(scroll: int, capacity: int, total: int) -> str | None:
    """Return a ``(first-last of total)`` hint when the list overflows, else None."""
    if total <= capacity:
        return None
    return f"({scroll + 1}-{min(scroll + capacity, total)} of {total})"

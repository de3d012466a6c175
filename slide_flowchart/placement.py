"""
Placement engine: where new child nodes go relative to their parent.

A fresh group of children is centred on the parent along the stacking axis
(the axis perpendicular to the creation direction).  Once a parent already
has children, new ones are appended after the last existing sibling instead,
so the order users arranged by hand is kept.

No validation happens here; callers reject infeasible gaps and paddings
before asking for positions.
"""
from typing import List, Optional, Sequence, Tuple

from .models import Bounds, Point, Side


def compute_child_positions(
    parent: Bounds,
    direction: Side,
    gap: float,
    count: int,
    child_size: Optional[Tuple[float, float]] = None,
) -> List[Point]:
    """
    Top-left corners for ``count`` fresh children on the ``direction`` side.

    Args:
        parent: Bounds of the parent node
        direction: Side of the parent the children are created on
        gap: Distance between parent and children and between siblings
        count: Number of children
        child_size: ``(width, height)`` of each child; defaults to the parent's

    Returns:
        One point per child, in stacking order
    """
    if count <= 0:
        return []

    direction = Side(direction)
    width, height = child_size or (parent.width, parent.height)

    # Group extent along the stacking axis, centred on the parent
    if direction.is_horizontal:
        size, parent_size = height, parent.height
    else:
        size, parent_size = width, parent.width
    total_extent = count * size + (count - 1) * gap
    group_offset = -(total_extent - parent_size) / 2

    positions = []
    for i in range(count):
        along = group_offset + i * (size + gap)
        if direction == Side.TOP:
            positions.append(Point(parent.left + along, parent.top - height - gap))
        elif direction == Side.BOTTOM:
            positions.append(Point(parent.left + along, parent.bottom + gap))
        elif direction == Side.RIGHT:
            positions.append(Point(parent.right + gap, parent.top + along))
        else:
            positions.append(Point(parent.left - width - gap, parent.top + along))

    return positions


def append_after_existing_siblings(
    existing: Sequence[Bounds],
    direction: Side,
    gap: float,
    count: int,
) -> List[Point]:
    """
    Top-left corners for ``count`` children appended after existing siblings.

    Siblings are ordered along the stacking axis (by ``left`` for children
    created above/below, by ``top`` for children created left/right) and the
    new ones continue the row or column from the last of them.
    """
    if count <= 0 or not existing:
        return []

    direction = Side(direction)
    if direction.is_horizontal:
        last = sorted(existing, key=lambda b: b.top)[-1]
        return [
            Point(last.left, last.top + (i + 1) * (last.height + gap))
            for i in range(count)
        ]

    last = sorted(existing, key=lambda b: b.left)[-1]
    return [
        Point(last.left + (i + 1) * (last.width + gap), last.top)
        for i in range(count)
    ]


def grid_row_height(parent: Bounds, row_count: int, padding: float, padding_top: float, gap: float) -> float:
    """Height of each row when ``row_count`` rows are fitted inside ``parent``."""
    available = parent.height - padding_top - padding
    return (available - gap * (row_count - 1)) / row_count


def grid_column_width(parent: Bounds, column_count: int, padding: float, gap: float) -> float:
    """Width of each cell of a row with ``column_count`` cells inside ``parent``."""
    available = parent.width - padding * 2
    return (available - gap * (column_count - 1)) / column_count


def compute_grid_cells(
    parent: Bounds,
    columns_per_row: Sequence[int],
    padding: float,
    padding_top: float,
    gap: float,
) -> List[List[Bounds]]:
    """
    Cells of a nested grid drawn inside ``parent``.

    Each row may have its own number of columns; all rows share one height.
    ``padding_top`` leaves room for the parent's own label.
    """
    if not columns_per_row:
        return []

    row_height = grid_row_height(parent, len(columns_per_row), padding, padding_top, gap)
    grid = []
    for row_index, column_count in enumerate(columns_per_row):
        column_width = grid_column_width(parent, column_count, padding, gap)
        top = parent.top + padding_top + row_index * (row_height + gap)
        grid.append([
            Bounds(parent.left + padding + col * (column_width + gap), top, column_width, row_height)
            for col in range(column_count)
        ])
    return grid

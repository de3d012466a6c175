"""Tests for child and grid placement."""

import pytest

from slide_flowchart.models import Bounds, Point, Side
from slide_flowchart.placement import (
    append_after_existing_siblings,
    compute_child_positions,
    compute_grid_cells,
)

PARENT = Bounds(100, 100, 160, 60)


def test_children_below_are_centred_on_the_parent():
    positions = compute_child_positions(PARENT, Side.BOTTOM, 20, 2)
    assert positions == [Point(10, 180), Point(190, 180)]


@pytest.mark.parametrize("direction", list(Side))
@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_group_is_centred_for_any_count(direction, count):
    """min(offset) + max(offset) + size == parent size along the stacking axis."""
    positions = compute_child_positions(PARENT, direction, 20, count)
    if direction.is_horizontal:
        offsets = [p.y - PARENT.top for p in positions]
        size = PARENT.height
    else:
        offsets = [p.x - PARENT.left for p in positions]
        size = PARENT.width
    assert min(offsets) + max(offsets) + size == pytest.approx(size)


@pytest.mark.parametrize("direction", list(Side))
@pytest.mark.parametrize("count", [1, 2, 4])
def test_smaller_children_are_centred_too(direction, count):
    width, height = 100, 40
    positions = compute_child_positions(PARENT, direction, 20, count, child_size=(width, height))
    if direction.is_horizontal:
        offsets = [p.y - PARENT.top for p in positions]
        size, parent_size = height, PARENT.height
    else:
        offsets = [p.x - PARENT.left for p in positions]
        size, parent_size = width, PARENT.width
    assert min(offsets) + max(offsets) + size == pytest.approx(parent_size)


def test_smaller_children_keep_the_gap_on_the_near_side():
    assert compute_child_positions(PARENT, Side.TOP, 20, 1, child_size=(100, 40))[0] == Point(130, 40)
    assert compute_child_positions(PARENT, Side.LEFT, 20, 1, child_size=(100, 40))[0] == Point(-20, 110)


def test_children_sit_one_gap_away_from_the_parent():
    assert compute_child_positions(PARENT, Side.TOP, 20, 1)[0].y == 20
    assert compute_child_positions(PARENT, Side.RIGHT, 20, 1)[0].x == 280
    assert compute_child_positions(PARENT, Side.LEFT, 20, 1)[0].x == -80


def test_no_children_no_positions():
    assert compute_child_positions(PARENT, Side.TOP, 20, 0) == []
    assert compute_child_positions(PARENT, Side.TOP, 20, -2) == []


def test_append_continues_the_row_after_the_last_sibling():
    existing = [Bounds(190, 180, 160, 60), Bounds(10, 180, 160, 60)]
    assert append_after_existing_siblings(existing, Side.BOTTOM, 20, 2) == [
        Point(370, 180),
        Point(550, 180),
    ]


def test_append_continues_the_column_for_side_children():
    existing = [Bounds(280, 60, 160, 60), Bounds(280, 140, 160, 60)]
    assert append_after_existing_siblings(existing, Side.RIGHT, 20, 1) == [Point(280, 220)]


def test_grid_cells_fill_the_parent():
    parent = Bounds(0, 0, 320, 230)
    grid = compute_grid_cells(parent, [2, 3], padding=10, padding_top=30, gap=10)

    assert [len(row) for row in grid] == [2, 3]
    first = grid[0][0]
    assert (first.x, first.y) == (10, 30)
    assert first.height == pytest.approx(90)
    assert first.width == pytest.approx(145)
    assert grid[1][2].right == pytest.approx(310)
    assert grid[1][0].bottom == pytest.approx(220)

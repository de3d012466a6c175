"""Tests for layout resolution and detection."""

from slide_flowchart.layout_resolver import detect_layout_from_geometry, resolve_layout
from slide_flowchart.models import Bounds

PARENT = Bounds(100, 100, 160, 60)


def test_own_layout_wins(canvas, add_node):
    add_node("graph[](DT)[A1][B1]")
    child = add_node("graph[A1](RL)[B1][]")
    assert resolve_layout(canvas, child) == "RL"


def test_parent_override_beats_inheritance(canvas, add_node):
    add_node("graph[](LR)[A1][B1:TD]")
    child = add_node("graph[A1]()[B1][]")
    assert resolve_layout(canvas, child) == "TD"


def test_nearest_declared_ancestor_is_inherited(canvas, add_node):
    add_node("graph[](DT)[A1][B1]")
    add_node("graph[A1]()[B1][C1]")
    grandchild = add_node("graph[A1|B1]()[C1][]")
    assert resolve_layout(canvas, grandchild) == "DT"

    add_node("graph[](DT)[A2][B1]")
    add_node("graph[A2](TD)[B1][C1]")
    other = add_node("graph[A2|B1]()[C1][]")
    assert resolve_layout(canvas, other) == "TD"


def test_default_is_lr(canvas, add_node):
    assert resolve_layout(canvas, add_node("graph[]()[A1][]")) == "LR"
    assert resolve_layout(canvas, add_node("graph[A9]()[B1][]")) == "LR"
    assert resolve_layout(canvas, add_node()) == "LR"


def test_detect_children_below():
    siblings = [Bounds(10, 180, 160, 60), Bounds(190, 180, 160, 60)]
    assert detect_layout_from_geometry(PARENT, siblings) == "TD"


def test_detect_children_to_the_right():
    siblings = [Bounds(280, 60, 160, 60), Bounds(280, 140, 160, 60)]
    assert detect_layout_from_geometry(PARENT, siblings) == "LR"


def test_detect_single_child_uses_its_offset():
    assert detect_layout_from_geometry(PARENT, [Bounds(-80, 100, 160, 60)]) == "RL"
    assert detect_layout_from_geometry(PARENT, [Bounds(100, 20, 160, 60)]) == "DT"


def test_detect_without_children():
    assert detect_layout_from_geometry(PARENT, []) == "LR"

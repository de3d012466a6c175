"""Tests for the relationship synchronizer."""

from slide_flowchart.descriptor import parse_descriptor
from slide_flowchart.models import ChildRef, Descriptor
from slide_flowchart.sync import (
    attach_children,
    clear_descriptor,
    ensure_descriptor,
    initialize_root,
    with_child_layout,
)


def test_attach_is_idempotent():
    parent = Descriptor("A1", layout="LR")
    once = attach_children(parent, ["B1", "B2"])
    twice = attach_children(once, ["B1", "B2"])
    assert once.child_ids == ["B1", "B2"]
    assert twice == once


def test_attach_keeps_existing_overrides():
    parent = Descriptor("A1", children=[ChildRef("B1", "TD")])
    merged = attach_children(parent, ["B1", ChildRef("B2", "RL")])
    assert merged.children == [ChildRef("B1", "TD"), ChildRef("B2", "RL")]


def test_attach_does_not_touch_the_input():
    parent = Descriptor("A1")
    attach_children(parent, ["B1"])
    assert parent.children == []


def test_with_child_layout_replaces_or_clears():
    parent = Descriptor("A1", children=[ChildRef("B1", "TD"), ChildRef("B2")])
    assert with_child_layout(parent, "B2", "LR").children[1] == ChildRef("B2", "LR")
    assert with_child_layout(parent, "B1", "").children[0] == ChildRef("B1")


def test_initialize_root_takes_the_lowest_free_id(canvas, add_node):
    add_node("graph[][A1][]")
    add_node("graph[][A3][]")
    node = add_node()

    descriptor = initialize_root(canvas, node)
    assert descriptor.current == "A2"
    assert descriptor.layout == ""
    assert canvas.get_node_descriptor_text(node) == "graph[][A2][]"


def test_ensure_descriptor_upgrades_untyped_nodes(canvas, add_node):
    node = add_node()
    descriptor = ensure_descriptor(canvas, node)
    assert descriptor.current == "A1"
    assert descriptor.layout == "LR"


def test_clear_descriptor(canvas, add_node):
    node = add_node("graph[][A1][]")
    assert clear_descriptor(canvas, node) == "graph[][A1][]"
    assert parse_descriptor(canvas.get_node_descriptor_text(node)) is None

"""Tests for the python-pptx canvas."""

import pytest
from pptx.util import Pt

from slide_flowchart.canvas import PPTXCanvas, anchor_points_for, px, to_px
from slide_flowchart.models import Bounds, EdgeStyle, Point


def _cnvpr(slide, node):
    shape = next(s for s in slide.shapes if s.shape_id == node)
    return shape, shape._element._nvXxPr.cNvPr


def test_px_round_trip():
    assert px(96) == 914400
    assert to_px(px(123)) == 123
    assert to_px(None) == 0


def test_created_node_reports_its_bounds_and_kind(canvas):
    node = canvas.create_node("OVAL", 10, 20, 160, 60)
    assert canvas.get_node_bounds(node) == Bounds(10, 20, 160, 60)
    assert canvas.get_node_kind(node) == "OVAL"
    assert canvas.has_node(node)
    assert node in canvas.get_all_nodes_on_page()


def test_unknown_kind_falls_back_to_rectangle(canvas):
    node = canvas.create_node("NOT_A_SHAPE", 0, 0, 10, 10)
    assert canvas.get_node_kind(node) == "RECTANGLE"


def test_descriptor_lives_in_the_alt_text_description(canvas, slide):
    node = canvas.create_node("RECTANGLE", 0, 0, 100, 50)
    canvas.set_node_descriptor_text(node, "graph[][A1][]")

    _, cnvpr = _cnvpr(slide, node)
    assert cnvpr.get("descr") == "graph[][A1][]"
    assert canvas.get_node_descriptor_text(node) == "graph[][A1][]"

    canvas.set_node_descriptor_text(node, "")
    assert cnvpr.get("descr") is None
    assert canvas.get_node_descriptor_text(node) == ""


def test_legacy_title_is_read_and_migrated(canvas, slide):
    node = canvas.create_node("RECTANGLE", 0, 0, 100, 50)
    _, cnvpr = _cnvpr(slide, node)
    cnvpr.set("title", "graph[][A1][B1]")

    assert canvas.get_node_descriptor_text(node) == "graph[][A1][B1]"

    canvas.set_node_descriptor_text(node, "graph[](LR)[A1][B1,B2]")
    assert cnvpr.get("title") is None
    assert cnvpr.get("descr") == "graph[](LR)[A1][B1,B2]"


def test_legacy_text_body_is_read_and_migrated(canvas, slide):
    node = canvas.create_node("RECTANGLE", 0, 0, 100, 50)
    shape, _ = _cnvpr(slide, node)
    shape.text_frame.text = "graph[][A2][]"

    assert canvas.get_node_descriptor_text(node) == "graph[][A2][]"

    canvas.set_node_descriptor_text(node, "graph[][A2][]")
    assert shape.text_frame.text == ""


def test_plain_labels_are_not_descriptors(canvas):
    node = canvas.create_node("RECTANGLE", 0, 0, 100, 50)
    canvas.set_node_text(node, "Start")
    assert canvas.get_node_descriptor_text(node) == ""


def test_edges_are_connectors_and_not_nodes(canvas, slide):
    edge = canvas.draw_edge(Point(180, 160), Point(90, 180), EdgeStyle(end_arrow="FILL_ARROW"))
    connector = next(s for s in slide.shapes if s.shape_id == edge)

    assert edge in canvas.get_all_edges_on_page()
    assert edge not in canvas.get_all_nodes_on_page()
    assert to_px(connector.begin_x) == 180
    assert to_px(connector.end_y) == 180
    assert connector.line.width == Pt(1.5)

    ln = connector._element.spPr.ln
    assert ln.find("{http://schemas.openxmlformats.org/drawingml/2006/main}tailEnd").get("type") == "triangle"
    assert ln.find("{http://schemas.openxmlformats.org/drawingml/2006/main}headEnd").get("type") == "none"


def test_find_node_by_id_or_name(canvas, slide):
    node = canvas.create_node("RECTANGLE", 0, 0, 100, 50)
    shape, _ = _cnvpr(slide, node)
    assert canvas.find_node(str(node)) == node
    assert canvas.find_node(shape.name) == node
    assert canvas.find_node("missing") is None


def test_select_replaces_or_extends(canvas):
    canvas.select(3)
    canvas.select(4, additive=True)
    canvas.select(4, additive=True)
    assert canvas.selection == [3, 4]
    canvas.select(5)
    assert canvas.selection == [5]


def test_missing_node_raises(slide):
    with pytest.raises(KeyError):
        PPTXCanvas(slide).get_node_bounds(999)


def test_anchor_points_spread_over_the_ellipse():
    points = anchor_points_for(Bounds(0, 0, 100, 100), 4)
    assert points == [Point(50, 0), Point(0, 50), Point(50, 100), Point(100, 50)]
    assert anchor_points_for(Bounds(0, 0, 100, 100), 0) == []

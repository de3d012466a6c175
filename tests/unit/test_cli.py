"""Tests for the slideflow command line and the editor facade."""

import pytest
from pptx import Presentation

from slide_flowchart.generator import FlowchartEditor, main


def _run(capsys, *argv):
    main([str(a) for a in argv])
    return capsys.readouterr().out.strip()


def test_cli_builds_a_small_tree(tmp_path, capsys):
    deck = tmp_path / "flow.pptx"

    node = _run(capsys, deck, "add-node", "--text", "Start")
    assert deck.exists()
    assert _run(capsys, deck, "init-root", node) == "A1"
    assert _run(capsys, deck, "add-children", node, "-d", "bottom", "-n", "2") == "B1 B2"

    description = _run(capsys, deck, "describe", node)
    assert "Children: B1, B2" in description

    prs = Presentation(str(deck))
    descriptions = [
        s._element._nvXxPr.cNvPr.get("descr") for s in prs.slides[0].shapes
    ]
    assert "graph[A1](LR)[B2][]" in descriptions


def test_cli_writes_to_a_separate_output(tmp_path, capsys):
    deck = tmp_path / "flow.pptx"
    out = tmp_path / "out" / "flow.pptx"

    node = _run(capsys, deck, "add-node")
    _run(capsys, deck, "-o", out, "add-children", node, "--text", "Left", "--text", "Right")

    assert out.exists()
    assert "No flowchart" not in _run(capsys, out, "analyze")


def test_cli_reports_unknown_shapes(tmp_path, capsys):
    deck = tmp_path / "flow.pptx"
    _run(capsys, deck, "add-node")

    with pytest.raises(SystemExit) as exc:
        main([str(deck), "describe", "nope"])
    assert exc.value.code == 1


def test_editor_opens_and_saves(tmp_path):
    editor = FlowchartEditor(theme="dark")
    node = editor.add_node("Hello")
    editor.commands.create_children(node, "RIGHT", count=1)

    saved = editor.save(tmp_path / "deck")
    assert saved.suffix == ".pptx"

    reopened = FlowchartEditor(saved)
    assert len(reopened.canvas.get_all_nodes_on_page()) == 2
    assert reopened.node(str(node)) == node


def test_editor_rejects_bad_slide_index(tmp_path):
    with pytest.raises(IndexError):
        FlowchartEditor(slide_index=3)

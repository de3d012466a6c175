"""Test theme loader and CSS variable parsing."""

import pytest

from slide_flowchart.css_utils import CSSParser, hex_to_rgb, load_style
from slide_flowchart.theme_loader import get_css, list_available_themes, validate_theme


def test_get_css_default():
    """Test that default theme loads and returns CSS content."""
    css = get_css("default")

    assert isinstance(css, str)
    assert ":root" in css
    assert "--node-gap" in css


def test_get_css_invalid_theme():
    """Test that invalid theme names raise appropriate errors."""
    # Non-existent theme
    with pytest.raises(FileNotFoundError):
        get_css("nonexistent")

    # Invalid characters (path traversal attempt)
    with pytest.raises(ValueError):
        get_css("../evil")

    with pytest.raises(ValueError):
        get_css("theme/../../evil")


def test_list_available_themes():
    """Test that list_available_themes returns expected themes."""
    themes = list_available_themes()

    assert "default" in themes
    assert "dark" in themes
    assert themes == sorted(themes)


def test_validate_theme():
    assert validate_theme("default") is True
    assert validate_theme("dark") is True
    assert validate_theme("nonexistent") is False
    assert validate_theme("../evil") is False


def test_theme_from_a_css_file(tmp_path):
    """A user CSS file works wherever a theme name does."""
    custom = tmp_path / "brand.css"
    custom.write_text(get_css("default").replace("--node-gap: 20px", "--node-gap: 48px"), encoding="utf-8")

    assert validate_theme(custom)
    assert load_style(str(custom)).node_gap == 48

    with pytest.raises(FileNotFoundError):
        get_css(tmp_path / "missing.css")


def test_default_style():
    """The default theme supplies every flowchart variable."""
    style = load_style("default")

    assert style.node_gap == 20
    assert (style.node_width, style.node_height) == (160, 60)
    assert style.node_kind == "ROUNDED_RECTANGLE"
    assert style.edge_style.line_type == "STRAIGHT"
    assert style.edge_style.end_arrow == "FILL_ARROW"
    assert style.grid_padding_top == 30


def test_dark_style_differs():
    style = load_style("dark")

    assert style.node_kind == "RECTANGLE"
    assert style.line_type == "BENT"
    assert style.node_fill == "#2D2D2D"


def test_css_parser_errors():
    parser = CSSParser("default")

    with pytest.raises(ValueError, match="not found"):
        parser.get_raw_value("no-such-variable")
    with pytest.raises(ValueError, match="not a pixel value"):
        parser.get_px_value("node-kind")


def test_hex_to_rgb():
    assert hex_to_rgb("#2196F3") == (0x21, 0x96, 0xF3)
    assert hex_to_rgb("#fff") == (255, 255, 255)
    assert hex_to_rgb("blue") is None
    assert hex_to_rgb("") is None

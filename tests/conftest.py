import sys
from pathlib import Path

import pytest
from pptx import Presentation

# Ensure project root is on sys.path so `import slide_flowchart` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from slide_flowchart.canvas import PPTXCanvas  # noqa: E402
from slide_flowchart.commands import FlowchartCommands  # noqa: E402
from slide_flowchart.css_utils import load_style  # noqa: E402


@pytest.fixture
def slide():
    prs = Presentation()
    return prs.slides.add_slide(prs.slide_layouts[6])


@pytest.fixture
def canvas(slide):
    return PPTXCanvas(slide, style=load_style("default"))


@pytest.fixture
def commands(canvas):
    return FlowchartCommands(canvas, load_style("default"))


@pytest.fixture
def add_node(canvas):
    """Draw a rectangle, optionally carrying descriptor text."""
    def _add(descriptor="", x=100, y=100, width=160, height=60, kind="RECTANGLE"):
        node = canvas.create_node(kind, x, y, width, height)
        if descriptor:
            canvas.set_node_descriptor_text(node, descriptor)
        return node
    return _add

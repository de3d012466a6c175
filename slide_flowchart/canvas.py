"""
Host canvas boundary.

The hierarchy code never touches python-pptx directly; it talks to a
:class:`Canvas`, which exposes the handful of operations it needs on one page
(slide): enumerate nodes, read/write the descriptor text, read bounds, create
nodes, list anchor points, draw edges and select.  :class:`PPTXCanvas` is the
implementation over a python-pptx slide.

Geometry crosses the boundary in CSS pixels (96 DPI); node references are the
slide-local ``shape_id`` integers.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import numpy as np
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE, MSO_SHAPE_TYPE
from pptx.oxml import parse_xml
from pptx.oxml.ns import nsdecls, qn
from pptx.shapes.connector import Connector
from pptx.util import Emu, Pt

from .css_utils import FlowchartStyle, hex_to_rgb
from .descriptor import looks_like_descriptor
from .models import Bounds, EdgeStyle, Point

logger = logging.getLogger(__name__)

EMU_PER_PX = 9525  # 914400 EMU per inch / 96 px per inch
DEFAULT_KIND = "RECTANGLE"


def px(pixels):
    """CSS pixels -> python-pptx length."""
    return Emu(int(round(pixels * EMU_PER_PX)))


def to_px(length) -> float:
    """python-pptx length (EMU) -> CSS pixels."""
    return (length or 0) / EMU_PER_PX


class Canvas(ABC):
    """Operations the flowchart core needs from the host page."""

    @abstractmethod
    def get_all_nodes_on_page(self) -> List[int]:
        """Every node on the current page, in z-order."""

    @abstractmethod
    def has_node(self, node: int) -> bool:
        ...

    @abstractmethod
    def get_node_descriptor_text(self, node: int) -> str:
        """Descriptor text stored on ``node``, or ``""`` if none."""

    @abstractmethod
    def set_node_descriptor_text(self, node: int, text: str) -> None:
        """Store ``text`` verbatim; an empty string removes the descriptor."""

    @abstractmethod
    def get_node_bounds(self, node: int) -> Bounds:
        ...

    @abstractmethod
    def get_node_kind(self, node: int) -> str:
        ...

    @abstractmethod
    def create_node(self, kind: str, x: float, y: float, width: float, height: float) -> int:
        ...

    @abstractmethod
    def set_node_text(self, node: int, text: str) -> None:
        ...

    @abstractmethod
    def get_anchor_points(self, node: int) -> List[Point]:
        """Connection sites of ``node`` in the host's index order."""

    @abstractmethod
    def draw_edge(self, point_a: Point, point_b: Point, style: EdgeStyle) -> int:
        ...

    @abstractmethod
    def get_all_edges_on_page(self) -> List[int]:
        ...

    @abstractmethod
    def select(self, node: int, additive: bool = False) -> None:
        ...


# Connection sites per auto shape.  Unlisted kinds get four.
ANCHOR_COUNTS: Dict[str, int] = {
    "RECTANGLE": 4,
    "ROUNDED_RECTANGLE": 4,
    "SNIP_1_RECTANGLE": 4,
    "DIAMOND": 4,
    "FLOWCHART_PROCESS": 4,
    "FLOWCHART_ALTERNATE_PROCESS": 4,
    "FLOWCHART_DECISION": 4,
    "FLOWCHART_TERMINATOR": 4,
    "FLOWCHART_DOCUMENT": 4,
    "OVAL": 8,
    "FLOWCHART_CONNECTOR": 8,
    "OCTAGON": 8,
    "HEXAGON": 6,
    "PENTAGON": 2,
    "CHEVRON": 2,
    "LINE_INVERSE": 1,
}

# Angle (degrees, counter-clockwise from the positive x axis) of anchor 0.
# Four sites start at the top like PowerPoint's rectangle (top, left, bottom,
# right); eight start at the top-right so index 1 is the top.
_ANCHOR_START_ANGLE = {1: 90.0, 2: 45.0, 4: 90.0, 8: 45.0}

_CONNECTOR_TYPES = {
    "STRAIGHT": MSO_CONNECTOR.STRAIGHT,
    "BENT": MSO_CONNECTOR.ELBOW,
    "ELBOW": MSO_CONNECTOR.ELBOW,
    "CURVED": MSO_CONNECTOR.CURVE,
    "CURVE": MSO_CONNECTOR.CURVE,
}

# Arrow style names -> DrawingML line-end types
_ARROW_TYPES = {
    "NONE": "none",
    "FILL_ARROW": "triangle",
    "STEALTH_ARROW": "stealth",
    "OPEN_ARROW": "arrow",
    "FILL_CIRCLE": "oval",
    "FILL_DIAMOND": "diamond",
}


def anchor_points_for(bounds: Bounds, count: int) -> List[Point]:
    """``count`` sites spread evenly over the ellipse inscribed in ``bounds``."""
    if count <= 0:
        return []
    start = _ANCHOR_START_ANGLE.get(count, 90.0)
    angles = np.deg2rad(start + np.arange(count) * 360.0 / count)
    center = bounds.center
    xs = center.x + (bounds.width / 2) * np.cos(angles)
    ys = center.y - (bounds.height / 2) * np.sin(angles)
    return [Point(round(float(x), 4), round(float(y), 4)) for x, y in zip(xs, ys)]


class PPTXCanvas(Canvas):
    """
    Canvas over a single python-pptx slide.

    The descriptor lives in the shape's alt-text description
    (``p:cNvPr/@descr``).  Older decks kept it in the alt-text title or in
    the shape's own text; both are read as a fallback and cleaned up on the
    next write.
    """

    def __init__(self, slide, style: Optional[FlowchartStyle] = None, debug: bool = False):
        self.slide = slide
        self.style = style
        self.debug = debug
        self.selection: List[int] = []

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @staticmethod
    def _is_node(shape) -> bool:
        if isinstance(shape, Connector):
            return False
        return shape.shape_type != MSO_SHAPE_TYPE.GROUP

    def _shape(self, node: int):
        for shape in self.slide.shapes:
            if shape.shape_id == node:
                return shape
        raise KeyError(f"No shape with id {node} on this slide")

    def find_node(self, key) -> Optional[int]:
        """Resolve a shape id (int or digit string) or shape name to a node."""
        key = str(key)
        for shape in self.slide.shapes:
            if not self._is_node(shape):
                continue
            if str(shape.shape_id) == key or shape.name == key:
                return shape.shape_id
        return None

    def get_all_nodes_on_page(self) -> List[int]:
        return [shape.shape_id for shape in self.slide.shapes if self._is_node(shape)]

    def has_node(self, node: int) -> bool:
        return any(
            shape.shape_id == node and self._is_node(shape)
            for shape in self.slide.shapes
        )

    def get_all_edges_on_page(self) -> List[int]:
        return [shape.shape_id for shape in self.slide.shapes if isinstance(shape, Connector)]

    # ------------------------------------------------------------------
    # Descriptor storage
    # ------------------------------------------------------------------

    @staticmethod
    def _cnvpr(shape):
        return shape._element._nvXxPr.cNvPr

    def get_node_descriptor_text(self, node: int) -> str:
        shape = self._shape(node)
        cnvpr = self._cnvpr(shape)

        descr = cnvpr.get("descr")
        if descr:
            return descr

        # Legacy locations
        title = cnvpr.get("title")
        if looks_like_descriptor(title):
            return title.strip()
        if shape.has_text_frame and looks_like_descriptor(shape.text_frame.text):
            return shape.text_frame.text.strip()
        return ""

    def set_node_descriptor_text(self, node: int, text: str) -> None:
        shape = self._shape(node)
        cnvpr = self._cnvpr(shape)

        if text:
            cnvpr.set("descr", text)
        else:
            cnvpr.attrib.pop("descr", None)

        if looks_like_descriptor(cnvpr.get("title")):
            cnvpr.attrib.pop("title", None)
            logger.debug(f"🔁 Migrated descriptor off the alt-text title of shape {node}")
        if shape.has_text_frame and looks_like_descriptor(shape.text_frame.text):
            shape.text_frame.text = ""
            logger.debug(f"🔁 Migrated descriptor out of the text of shape {node}")

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def get_node_bounds(self, node: int) -> Bounds:
        shape = self._shape(node)
        return Bounds(to_px(shape.left), to_px(shape.top), to_px(shape.width), to_px(shape.height))

    def get_node_kind(self, node: int) -> str:
        shape = self._shape(node)
        try:
            return shape.auto_shape_type.name
        except (AttributeError, ValueError):
            # text boxes, pictures and other non-auto shapes
            return DEFAULT_KIND

    def create_node(self, kind: str, x: float, y: float, width: float, height: float) -> int:
        shape_type = getattr(MSO_SHAPE, (kind or DEFAULT_KIND).upper(), None)
        if shape_type is None:
            logger.warning(f"⚠️ Unknown shape kind '{kind}', using {DEFAULT_KIND}")
            shape_type = getattr(MSO_SHAPE, DEFAULT_KIND)

        shape = self.slide.shapes.add_shape(shape_type, px(x), px(y), px(width), px(height))
        self._apply_node_style(shape)

        if self.debug:
            logger.debug(f"🟦 Created {kind} shape {shape.shape_id} at ({x:.0f}, {y:.0f}) {width:.0f}x{height:.0f}")
        return shape.shape_id

    def set_node_text(self, node: int, text: str) -> None:
        shape = self._shape(node)
        if not shape.has_text_frame:
            logger.warning(f"⚠️ Shape {node} has no text frame, text not set")
            return
        shape.text_frame.text = text
        rgb = hex_to_rgb(self.style.text_color) if self.style else None
        if rgb:
            for paragraph in shape.text_frame.paragraphs:
                for run in paragraph.runs:
                    run.font.color.rgb = RGBColor(*rgb)

    def _apply_node_style(self, shape) -> None:
        if not self.style:
            return
        fill_rgb = hex_to_rgb(self.style.node_fill)
        if fill_rgb:
            shape.fill.solid()
            shape.fill.fore_color.rgb = RGBColor(*fill_rgb)
        line_rgb = hex_to_rgb(self.style.node_line_color)
        if line_rgb:
            shape.line.color.rgb = RGBColor(*line_rgb)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def get_anchor_points(self, node: int) -> List[Point]:
        count = ANCHOR_COUNTS.get(self.get_node_kind(node), 4)
        return anchor_points_for(self.get_node_bounds(node), count)

    def draw_edge(self, point_a: Point, point_b: Point, style: EdgeStyle) -> int:
        connector_type = _CONNECTOR_TYPES.get(style.line_type.upper())
        if connector_type is None:
            logger.warning(f"⚠️ Unknown line type '{style.line_type}', drawing a straight connector")
            connector_type = MSO_CONNECTOR.STRAIGHT

        connector = self.slide.shapes.add_connector(
            connector_type, px(point_a.x), px(point_a.y), px(point_b.x), px(point_b.y)
        )
        self._apply_edge_style(connector, style)
        return connector.shape_id

    def _apply_edge_style(self, connector, style: EdgeStyle) -> None:
        line_rgb = hex_to_rgb(self.style.node_line_color) if self.style else None
        if line_rgb:
            connector.line.color.rgb = RGBColor(*line_rgb)
        connector.line.width = Pt(1.5)

        ln = connector._element.spPr.get_or_add_ln()
        for tag, arrow in (("a:headEnd", style.start_arrow), ("a:tailEnd", style.end_arrow)):
            existing = ln.find(qn(tag))
            if existing is not None:
                ln.remove(existing)
            end_type = _ARROW_TYPES.get((arrow or "NONE").upper(), (arrow or "none").lower())
            ln.append(parse_xml(f'<{tag} type="{end_type}" w="med" len="med" {nsdecls("a")}/>'))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, node: int, additive: bool = False) -> None:
        if not additive:
            self.selection = [node]
        elif node not in self.selection:
            self.selection.append(node)

"""
Connection-site selection and edge drawing between two nodes.
"""
import logging
from typing import Optional, Tuple

from .canvas import Canvas
from .models import EdgeStyle, Point, Side

logger = logging.getLogger(__name__)

HORIZONTAL = "horizontal"
VERTICAL = "vertical"

# Preferred anchor index per side, keyed by the node's anchor count.  Left and
# right are swapped relative to the host's raw ordering.
PREFERRED_SITES = {
    8: {Side.TOP: 1, Side.LEFT: 3, Side.BOTTOM: 5, Side.RIGHT: 7},
    4: {Side.TOP: 0, Side.LEFT: 1, Side.BOTTOM: 2, Side.RIGHT: 3},
    2: {Side.TOP: 0, Side.RIGHT: 0, Side.LEFT: 1, Side.BOTTOM: 1},
    1: {Side.TOP: 0, Side.RIGHT: 0, Side.LEFT: 0, Side.BOTTOM: 0},
}


def pick_connection_site(anchor_count: int, side: Side) -> Optional[int]:
    """
    Anchor index to use on ``side`` of a node with ``anchor_count`` anchors.

    Returns ``None`` when the node has no anchors and ``0`` for anchor counts
    without a preferred mapping.
    """
    if anchor_count <= 0:
        return None
    mapping = PREFERRED_SITES.get(anchor_count)
    if mapping is None:
        return 0
    return mapping[Side(side)]


def determine_sides(center_a: Point, center_b: Point, orientation: str) -> Tuple[Side, Side]:
    """Sides of A and B facing each other; ties fall to the "not greater" branch."""
    if orientation == HORIZONTAL:
        if center_b.x - center_a.x > 0:
            return Side.RIGHT, Side.LEFT
        return Side.LEFT, Side.RIGHT

    if center_b.y - center_a.y > 0:
        return Side.BOTTOM, Side.TOP
    return Side.TOP, Side.BOTTOM


def orientation_between(center_a: Point, center_b: Point) -> str:
    """Dominant axis of the vector from A to B."""
    dx = abs(center_b.x - center_a.x)
    dy = abs(center_b.y - center_a.y)
    return HORIZONTAL if dx > dy else VERTICAL


def connection_point(canvas: Canvas, node: int, side: Side) -> Optional[Point]:
    """Anchor point of ``node`` on ``side``, or ``None`` if it has no anchors."""
    anchors = canvas.get_anchor_points(node)
    index = pick_connection_site(len(anchors), side)
    if index is None:
        return None
    return anchors[index]


def connect_nodes(
    canvas: Canvas,
    node_a: int,
    node_b: int,
    side_a: Side,
    side_b: Side,
    style: EdgeStyle,
) -> Optional[int]:
    """
    Draw an edge from ``side_a`` of A to ``side_b`` of B.

    Returns the new edge, or ``None`` when either end can not be resolved; in
    that case nothing is drawn.
    """
    point_a = connection_point(canvas, node_a, side_a)
    point_b = connection_point(canvas, node_b, side_b)
    if point_a is None or point_b is None:
        logger.warning(f"⚠️ Could not resolve suitable connection sites between shapes {node_a} and {node_b}")
        return None

    edge = canvas.draw_edge(point_a, point_b, style)
    logger.debug(f"🔗 Edge {edge}: {node_a}.{Side(side_a).value} -> {node_b}.{Side(side_b).value}")
    return edge

"""
Effective layout of a node.

A node's own layout wins; otherwise its parent's per-child override, then the
nearest ancestor with a declared layout, then ``LR``.
"""
import logging
from typing import List, Optional, Sequence

import numpy as np

from .canvas import Canvas
from .models import DEFAULT_LAYOUT, Bounds, Descriptor, Layout
from .traversal import NodeEntry, find_node_by_id, lookup, read_descriptor, scan_page

logger = logging.getLogger(__name__)


def resolve_descriptor_layout(descriptor: Descriptor, entries: Sequence[NodeEntry]) -> str:
    if descriptor.layout:
        return descriptor.layout

    chain = descriptor.parent_chain
    if chain:
        parent = find_node_by_id(entries, chain[-1], chain[:-1])
        if parent is not None:
            override = parent[1].child(descriptor.current)
            if override is not None and override.layout:
                return override.layout

    for depth in range(len(chain) - 1, -1, -1):
        ancestor = find_node_by_id(entries, chain[depth], chain[:depth])
        if ancestor is not None and ancestor[1].layout:
            return ancestor[1].layout

    return DEFAULT_LAYOUT


def resolve_layout(canvas: Canvas, node: int, entries: Optional[List[NodeEntry]] = None) -> str:
    """Effective layout token for ``node``; ``LR`` for nodes without a descriptor."""
    if entries is None:
        entries = scan_page(canvas)
    descriptor = lookup(entries, node) or read_descriptor(canvas, node)
    if descriptor is None:
        return DEFAULT_LAYOUT
    return resolve_descriptor_layout(descriptor, entries)


def detect_layout_from_geometry(parent: Bounds, siblings: Sequence[Bounds]) -> str:
    """
    Guess the layout children were laid out with from where they sit.

    Siblings stack along the axis with the larger spread of their centres, so
    the flow runs along the other axis, towards the side the group sits on.
    A single child (or an even spread) falls back to the dominant axis of its
    offset from the parent.
    """
    if not siblings:
        return DEFAULT_LAYOUT

    centers = np.array([[b.center.x, b.center.y] for b in siblings], dtype=float)
    parent_center = np.array([parent.center.x, parent.center.y], dtype=float)
    offset = centers.mean(axis=0) - parent_center

    var_x, var_y = centers.var(axis=0)
    if len(siblings) > 1 and not np.isclose(var_x, var_y):
        horizontal_flow = var_y > var_x
    else:
        horizontal_flow = abs(offset[0]) >= abs(offset[1])

    if horizontal_flow:
        layout = Layout.LR if offset[0] >= 0 else Layout.RL
    else:
        layout = Layout.TD if offset[1] >= 0 else Layout.DT

    logger.debug(f"📐 Detected layout {layout.value} from {len(siblings)} sibling(s)")
    return layout.value

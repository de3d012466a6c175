"""
Relationship synchronizer: keeps parent and child descriptors in step.
"""
import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Union

from .canvas import Canvas
from .descriptor import serialize_descriptor
from .models import ChildRef, Descriptor
from .naming import ROOT_LEVEL, find_next_available_root_id
from .traversal import NodeEntry, lookup, scan_page

logger = logging.getLogger(__name__)


def _as_child_ref(child: Union[ChildRef, str]) -> ChildRef:
    if isinstance(child, ChildRef):
        return child
    return ChildRef(id=str(child))


def attach_children(parent: Descriptor, new_children: Iterable[Union[ChildRef, str]]) -> Descriptor:
    """
    Merge ``new_children`` into the parent's children list.

    Entries are keyed by ID; an existing entry keeps its layout override unless
    the new entry carries one.  Attaching the same children twice is a no-op.
    """
    merged: List[ChildRef] = list(parent.children)
    positions = {ref.id: i for i, ref in enumerate(merged)}

    for child in new_children:
        ref = _as_child_ref(child)
        if not ref.id:
            continue
        if ref.id in positions:
            if ref.layout:
                merged[positions[ref.id]] = ref
            continue
        positions[ref.id] = len(merged)
        merged.append(ref)

    return replace(parent, children=merged)


def with_child_layout(parent: Descriptor, child_id: str, layout: str) -> Descriptor:
    """Replace the layout override of one existing child entry."""
    children = [
        ChildRef(ref.id, layout) if ref.id == child_id else ref
        for ref in parent.children
    ]
    return replace(parent, children=children)


def write_descriptor(canvas: Canvas, node: int, descriptor: Descriptor) -> str:
    text = serialize_descriptor(descriptor)
    canvas.set_node_descriptor_text(node, text)
    logger.debug(f"📝 Shape {node}: {text}")
    return text


def initialize_root(canvas: Canvas, node: int, entries: Optional[List[NodeEntry]] = None) -> Descriptor:
    """
    Turn ``node`` into a new root with the lowest free ``A<n>`` ID on the page.

    The result has an empty chain, no layout and no children.
    """
    if entries is None:
        entries = scan_page(canvas)
    used = [d.current for other, d in entries if other != node and d.level == ROOT_LEVEL]
    descriptor = Descriptor(current=find_next_available_root_id(used))
    write_descriptor(canvas, node, descriptor)
    logger.info(f"🌱 Shape {node} is now root {descriptor.current}")
    return descriptor


def ensure_descriptor(canvas: Canvas, node: int) -> Descriptor:
    """
    Descriptor of ``node`` as stored on the page, creating a root for untyped nodes.

    The descriptor is read back after the upgrade so the caller sees exactly
    what the page holds.
    """
    entries = scan_page(canvas)
    descriptor = lookup(entries, node)
    if descriptor is not None:
        return descriptor

    initialize_root(canvas, node, entries)
    return lookup(scan_page(canvas), node)


def clear_descriptor(canvas: Canvas, node: int) -> str:
    """Remove the descriptor of ``node``; returns what was stored."""
    previous = canvas.get_node_descriptor_text(node)
    canvas.set_node_descriptor_text(node, "")
    if previous:
        logger.info(f"🧹 Cleared relationship data from shape {node}")
    return previous

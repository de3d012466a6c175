"""
Relationship queries over a page.

Descriptors are the only persisted structure, so every query parses the
descriptor of every node on the page and filters.  There is no index;
hand-edited, copied or half-deleted hierarchies are read as they are.
"""
from collections import deque
from typing import Iterable, List, Optional, Sequence, Tuple

from .canvas import Canvas
from .descriptor import parse_descriptor
from .models import Descriptor

NodeEntry = Tuple[int, Descriptor]


def read_descriptor(canvas: Canvas, node: int) -> Optional[Descriptor]:
    return parse_descriptor(canvas.get_node_descriptor_text(node))


def scan_page(canvas: Canvas) -> List[NodeEntry]:
    """``(node, descriptor)`` for every node on the page that has one."""
    entries = []
    for node in canvas.get_all_nodes_on_page():
        descriptor = read_descriptor(canvas, node)
        if descriptor is not None:
            entries.append((node, descriptor))
    return entries


def lookup(entries: Iterable[NodeEntry], node: int) -> Optional[Descriptor]:
    for other, descriptor in entries:
        if other == node:
            return descriptor
    return None


def find_node_by_id(
    entries: Iterable[NodeEntry],
    node_id: str,
    chain: Optional[Sequence[str]] = None,
) -> Optional[NodeEntry]:
    """
    Node whose ``current`` is ``node_id``.

    IDs are only unique among siblings, so when ``chain`` is given a node
    sitting at exactly that chain wins; otherwise the first ID match is used.
    """
    fallback = None
    for node, descriptor in entries:
        if descriptor.current != node_id:
            continue
        if chain is None or descriptor.parent_chain == list(chain):
            return node, descriptor
        if fallback is None:
            fallback = (node, descriptor)
    return fallback


def is_child_of(descriptor: Descriptor, parent: Descriptor) -> bool:
    """True if ``descriptor`` hangs directly under ``parent``.

    Chains written by older versions held only the immediate parent.
    """
    if descriptor.parent_chain == parent.parent_chain + [parent.current]:
        return True
    return len(descriptor.parent_chain) == 1 and descriptor.parent_id == parent.current


def children_of(entries: Iterable[NodeEntry], parent: Descriptor) -> List[NodeEntry]:
    return [(node, d) for node, d in entries if is_child_of(d, parent)]


def find_siblings(canvas: Canvas, node: int) -> List[int]:
    """The node itself followed by every node with the same parent chain."""
    descriptor = read_descriptor(canvas, node)
    if descriptor is None:
        return []

    siblings = [node]
    for other, other_descriptor in scan_page(canvas):
        if other == node:
            continue
        if other_descriptor.chain_key == descriptor.chain_key:
            siblings.append(other)
    return siblings


def find_level_peers(canvas: Canvas, node: int) -> List[int]:
    """The node itself followed by every node at the same level, any parent."""
    descriptor = read_descriptor(canvas, node)
    if descriptor is None or not descriptor.level:
        return []

    peers = [node]
    for other, other_descriptor in scan_page(canvas):
        if other == node:
            continue
        if other_descriptor.level == descriptor.level:
            peers.append(other)
    return peers


def find_ancestors(canvas: Canvas, node: int) -> List[int]:
    """Ancestors from the root down to the immediate parent; missing ones are skipped."""
    descriptor = read_descriptor(canvas, node)
    if descriptor is None:
        return []

    entries = scan_page(canvas)
    chain = descriptor.parent_chain
    ancestors = []
    for depth, ancestor_id in enumerate(chain):
        found = find_node_by_id(entries, ancestor_id, chain[:depth])
        if found is not None and found[0] != node and found[0] not in ancestors:
            ancestors.append(found[0])
    return ancestors


def find_family(canvas: Canvas, node: int) -> List[int]:
    """
    Every descendant of ``node``.

    Expands breadth-first from the node's ID, matching nodes whose chain ends
    with the frontier ID.  Each ID is expanded at most once, so cyclic or
    self-referencing data still terminates.
    """
    descriptor = read_descriptor(canvas, node)
    if descriptor is None:
        return []

    entries = scan_page(canvas)
    family = []
    visited = set()
    frontier = deque([descriptor.current])

    while frontier:
        parent_id = frontier.popleft()
        if parent_id in visited:
            continue
        visited.add(parent_id)

        for other, other_descriptor in entries:
            if other_descriptor.parent_id != parent_id:
                continue
            if other != node and other not in family:
                family.append(other)
            frontier.append(other_descriptor.current)

    return family

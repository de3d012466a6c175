"""
Codec for the relationship descriptor stored on each flowchart node.

Two textual forms exist::

    graph[A1|B2](TD)[C3][D1,D2:LR]     current form
    graph[A1][B2][C1,C2]               legacy form, read as layout LR

Parsing tries the current grammar first, then the legacy one, and never
raises: anything that does not fit yields ``None`` and the node is treated as
untyped.  Serialization writes the current form, except that a root without a
layout collapses to the legacy form (``graph[][A1][B1,B2]``).
"""
import re
from typing import List, Optional

from .models import ChildRef, Descriptor, DEFAULT_LAYOUT, LAYOUT_TOKENS

PREFIX = "graph["

_CURRENT_FORM = re.compile(r"graph\[([^\]]*)\]\(([^)]*)\)\[([^\]]*)\]\[([^\]]*)\]")
_LEGACY_FORM = re.compile(r"graph\[([^\]]*)\]\[([^\]]*)\]\[([^\]]*)\]")


def looks_like_descriptor(text) -> bool:
    """Cheap check used when probing legacy storage locations."""
    return isinstance(text, str) and text.strip().startswith(PREFIX)


def _split_chain(raw: str) -> List[str]:
    # Chain entries are bare IDs; a stray ``id:layout`` keeps only the id.
    chain = []
    for segment in raw.split("|"):
        segment = segment.split(":", 1)[0].strip()
        if segment:
            chain.append(segment)
    return chain


def _split_children(raw: str) -> List[ChildRef]:
    children = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        child_id, _, layout = entry.partition(":")
        child_id = child_id.strip()
        layout = layout.strip()
        if not child_id:
            continue
        if layout not in LAYOUT_TOKENS:
            layout = ""
        children.append(ChildRef(child_id, layout))
    return children


def parse_descriptor(text) -> Optional[Descriptor]:
    """
    Parse descriptor text.

    Args:
        text: Raw text read from a node (may be ``None`` or empty)

    Returns:
        The parsed :class:`Descriptor`, or ``None`` if the text is not a
        well-formed descriptor
    """
    if not looks_like_descriptor(text):
        return None
    text = text.strip()

    match = _CURRENT_FORM.fullmatch(text)
    if match:
        chain_raw, layout, current, children_raw = match.groups()
        layout = layout.strip()
        if layout and layout not in LAYOUT_TOKENS:
            return None
    else:
        match = _LEGACY_FORM.fullmatch(text)
        if not match:
            return None
        chain_raw, current, children_raw = match.groups()
        layout = DEFAULT_LAYOUT

    current = current.strip()
    if not current:
        return None

    return Descriptor(
        current=current,
        parent_chain=_split_chain(chain_raw),
        layout=layout,
        children=_split_children(children_raw),
    )


def serialize_descriptor(descriptor: Descriptor) -> str:
    """Render a :class:`Descriptor` back to its textual form."""
    chain = "|".join(descriptor.parent_chain)
    children = ",".join(str(child) for child in descriptor.children)
    if not descriptor.parent_chain and not descriptor.layout:
        return f"graph[][{descriptor.current}][{children}]"
    return f"graph[{chain}]({descriptor.layout})[{descriptor.current}][{children}]"


def describe_descriptor(text) -> str:
    """Human-readable breakdown of descriptor text for the describe command."""
    descriptor = parse_descriptor(text)
    if descriptor is None:
        if text:
            return f"📊 Graph ID:\n{text}\n(unparsable)"
        return "No Graph ID found. This shape may not be part of a flowchart."

    children = ", ".join(str(child) for child in descriptor.children)
    details = [
        f"📊 Graph ID:\n{text}",
        f"├─ Parent: {descriptor.chain_key or '(root)'}",
        f"├─ Layout: {descriptor.layout or '(inherited)'}",
        f"├─ Current: {descriptor.current}",
        f"└─ Children: {children or '(none)'}",
    ]
    return "\n".join(details)

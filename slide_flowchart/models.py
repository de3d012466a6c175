"""
Data models for the flowchart hierarchy.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

_LEVEL_RE = re.compile(r"[A-Z]+")


class Side(str, Enum):
    """A side of a node, used both as a creation direction and as an edge end."""
    TOP = "TOP"
    RIGHT = "RIGHT"
    BOTTOM = "BOTTOM"
    LEFT = "LEFT"

    @property
    def opposite(self) -> "Side":
        return {
            Side.TOP: Side.BOTTOM,
            Side.BOTTOM: Side.TOP,
            Side.LEFT: Side.RIGHT,
            Side.RIGHT: Side.LEFT,
        }[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Side.LEFT, Side.RIGHT)


class Layout(str, Enum):
    """Flow from a parent to its children.

    ``LR`` puts children to the right, ``RL`` to the left, ``TD`` below and
    ``DT`` above; siblings stack along the perpendicular axis.
    """
    LR = "LR"
    RL = "RL"
    TD = "TD"
    DT = "DT"

    @property
    def is_horizontal(self) -> bool:
        return self in (Layout.LR, Layout.RL)

    @property
    def direction(self) -> Side:
        """Side of the parent on which children of this layout are placed."""
        return {
            Layout.LR: Side.RIGHT,
            Layout.RL: Side.LEFT,
            Layout.TD: Side.BOTTOM,
            Layout.DT: Side.TOP,
        }[self]


LAYOUT_TOKENS = tuple(layout.value for layout in Layout)
DEFAULT_LAYOUT = Layout.LR.value


@dataclass(frozen=True)
class ChildRef:
    """One entry of a parent's ``children`` list (``id`` or ``id:layout``)."""
    id: str
    layout: str = ""

    def __str__(self) -> str:
        return f"{self.id}:{self.layout}" if self.layout else self.id


@dataclass
class Descriptor:
    """
    The relationship record persisted on a node.

    ``parent_chain`` runs from the root to the immediate parent and holds bare
    IDs only.  ``layout`` is empty when the node inherits its layout.
    """
    current: str
    parent_chain: List[str] = field(default_factory=list)
    layout: str = ""
    children: List[ChildRef] = field(default_factory=list)

    @property
    def level(self) -> str:
        """Leading letter-run of ``current`` (``"B"`` for ``"B12"``)."""
        match = _LEVEL_RE.match(self.current)
        return match.group(0) if match else ""

    @property
    def parent_id(self) -> Optional[str]:
        """ID of the immediate parent, ``None`` for a root."""
        return self.parent_chain[-1] if self.parent_chain else None

    @property
    def chain_key(self) -> str:
        """The chain joined with ``|``, as written in the descriptor."""
        return "|".join(self.parent_chain)

    @property
    def is_root(self) -> bool:
        return not self.parent_chain

    @property
    def child_ids(self) -> List[str]:
        return [child.id for child in self.children]

    def child(self, child_id: str) -> Optional[ChildRef]:
        for entry in self.children:
            if entry.id == child_id:
                return entry
        return None


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """
    Axis-aligned box of a node, in CSS pixels.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self):
        """Alias for x."""
        return self.x

    @property
    def top(self):
        """Alias for y."""
        return self.y

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def size_along(self, side: Side) -> float:
        """Extent perpendicular to ``side``, i.e. along the sibling stacking axis."""
        return self.height if Side(side).is_horizontal else self.width


@dataclass(frozen=True)
class EdgeStyle:
    """Connector styling passed through to the host unchanged."""
    line_type: str = "STRAIGHT"  # STRAIGHT, BENT or CURVED
    start_arrow: str = "NONE"
    end_arrow: str = "FILL_ARROW"


@dataclass
class CreationResult:
    """Outcome of a command that creates nodes and edges."""
    parent: Optional[int] = None
    created: List[int] = field(default_factory=list)
    child_ids: List[str] = field(default_factory=list)
    edges: List[int] = field(default_factory=list)
    skipped_edges: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when every requested edge was drawn."""
        return not self.skipped_edges

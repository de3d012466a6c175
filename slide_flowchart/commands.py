"""
User-level flowchart commands.

Each command validates the selection, then drives the placement engine, the
namer, the synchronizer and the connection selector against one page.
Precondition failures raise before anything on the page changes; a missing
connection site only skips that edge.
"""
import logging
from typing import List, Optional, Sequence, Union

from .canvas import Canvas
from .connection import HORIZONTAL, VERTICAL, connect_nodes, determine_sides, orientation_between
from .css_utils import FlowchartStyle, load_style
from .descriptor import describe_descriptor
from .layout_resolver import detect_layout_from_geometry, resolve_descriptor_layout, resolve_layout
from .models import LAYOUT_TOKENS, ChildRef, CreationResult, Descriptor, EdgeStyle, Layout, Side
from .naming import generate_sibling_ids, level_depth, next_level, next_sibling_number
from .placement import (
    append_after_existing_siblings,
    compute_child_positions,
    compute_grid_cells,
    grid_column_width,
    grid_row_height,
)
from .sync import (
    attach_children,
    clear_descriptor,
    ensure_descriptor,
    initialize_root,
    with_child_layout,
    write_descriptor,
)
from .traversal import (
    children_of,
    find_ancestors,
    find_family,
    find_level_peers,
    find_node_by_id,
    find_siblings,
    lookup,
    read_descriptor,
    scan_page,
)

logger = logging.getLogger(__name__)


class FlowchartError(ValueError):
    """Base class for command failures reported to the user."""


class SelectionError(FlowchartError):
    """The selection does not satisfy the command's preconditions."""


class GeometryError(FlowchartError):
    """The requested gaps or paddings leave no room for the new nodes."""


NO_DESCRIPTOR = "Selected shape must have a graph ID. Please create it as part of a flowchart first."


class FlowchartCommands:
    """
    Flowchart editing commands bound to one canvas page.

    Args:
        canvas: Page to operate on
        style: Visual defaults; the ``default`` theme is used when omitted
    """

    def __init__(self, canvas: Canvas, style: Optional[FlowchartStyle] = None):
        self.canvas = canvas
        self.style = style or load_style()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_node(self, node: int) -> None:
        if node is None or not self.canvas.has_node(node):
            raise SelectionError(f"❌ Shape {node} is not on this slide")

    def _require_descriptor(self, node: int) -> Descriptor:
        self._require_node(node)
        descriptor = read_descriptor(self.canvas, node)
        if descriptor is None:
            raise SelectionError(f"❌ {NO_DESCRIPTOR}")
        return descriptor

    @staticmethod
    def _side(direction: Union[Side, str]) -> Side:
        try:
            return Side(str(getattr(direction, "value", direction)).upper())
        except ValueError:
            raise SelectionError(
                f"❌ Unknown direction '{direction}'. Use one of: {', '.join(s.value for s in Side)}"
            ) from None

    @staticmethod
    def _layout_token(layout: Optional[str]) -> str:
        token = (layout or "").strip().upper()
        if token and token not in LAYOUT_TOKENS:
            raise SelectionError(f"❌ Unknown layout '{layout}'. Use one of: {', '.join(LAYOUT_TOKENS)}")
        return token

    def _edge_style(self, edge_style: Optional[EdgeStyle]) -> EdgeStyle:
        return edge_style or self.style.edge_style

    def _link(self, result: CreationResult, parent: int, child: int,
              parent_side: Side, child_side: Side, edge_style: EdgeStyle) -> None:
        edge = connect_nodes(self.canvas, parent, child, parent_side, child_side, edge_style)
        if edge is None:
            result.skipped_edges.append((parent, child))
        else:
            result.edges.append(edge)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def initialize_root(self, node: int) -> Descriptor:
        """Make ``node`` a root with the lowest free ``A<n>`` ID; existing roots are left as they are."""
        self._require_node(node)
        descriptor = read_descriptor(self.canvas, node)
        if descriptor is not None and descriptor.is_root:
            logger.info(f"ℹ️ Shape {node} is already root {descriptor.current}")
            return descriptor
        return initialize_root(self.canvas, node)

    def create_children(
        self,
        node: int,
        direction: Union[Side, str],
        count: int = 1,
        gap: Optional[float] = None,
        texts: Optional[Sequence[str]] = None,
        edge_style: Optional[EdgeStyle] = None,
    ) -> CreationResult:
        """
        Create children of ``node`` on its ``direction`` side and link them.

        An untyped node becomes a new root first.  When the parent already has
        children, the new ones are appended after the last of them; otherwise
        they are centred on the parent.  ``texts``, when given, sets the
        number of children and their labels.

        Raises:
            SelectionError: ``node`` is not on the page or the direction is unknown
            GeometryError: The parent has no size or ``gap`` leaves no room
        """
        self._require_node(node)
        direction = self._side(direction)
        texts = list(texts) if texts else []
        if texts:
            count = len(texts)
        gap = self.style.node_gap if gap is None else gap

        result = CreationResult(parent=node)
        if count <= 0:
            logger.info("ℹ️ Nothing to create")
            return result

        parent_bounds = self.canvas.get_node_bounds(node)
        if parent_bounds.width <= 0 or parent_bounds.height <= 0:
            raise GeometryError(f"❌ Shape {node} has no size; can not place children around it")
        if parent_bounds.size_along(direction) + gap <= 0:
            raise GeometryError(f"❌ Gap {gap} leaves no room between children")

        parent = ensure_descriptor(self.canvas, node)
        entries = scan_page(self.canvas)
        child_level = next_level(parent.level)
        existing = [(n, d) for n, d in children_of(entries, parent) if d.level == child_level]

        if existing:
            positions = append_after_existing_siblings(
                [self.canvas.get_node_bounds(n) for n, _ in existing], direction, gap, count
            )
        else:
            positions = compute_child_positions(parent_bounds, direction, gap, count)

        start = next_sibling_number(child_level, parent.child_ids + [d.current for _, d in existing])
        child_ids = generate_sibling_ids(child_level, count, start)
        chain = parent.parent_chain + [parent.current]
        kind = self.canvas.get_node_kind(node)

        for i, (position, child_id) in enumerate(zip(positions, child_ids)):
            child = self.canvas.create_node(
                kind, position.x, position.y, parent_bounds.width, parent_bounds.height
            )
            if i < len(texts) and texts[i].strip():
                self.canvas.set_node_text(child, texts[i])
            write_descriptor(self.canvas, child, Descriptor(child_id, list(chain), parent.layout))
            result.created.append(child)
            result.child_ids.append(child_id)

        write_descriptor(self.canvas, node, attach_children(parent, child_ids))

        edge_style = self._edge_style(edge_style)
        for child in result.created:
            self._link(result, node, child, direction, direction.opposite, edge_style)

        logger.info(f"✅ Created {len(result.created)} child(ren) of {parent.current}: {', '.join(child_ids)}")
        return result

    def create_sibling(
        self,
        node: int,
        gap: Optional[float] = None,
        edge_style: Optional[EdgeStyle] = None,
    ) -> CreationResult:
        """
        Add one sibling after the last existing sibling of ``node``.

        The sibling is linked to the shared parent and laid out with the
        parent's override for ``node`` or, failing that, the parent's layout.
        """
        descriptor = self._require_descriptor(node)
        if descriptor.is_root:
            raise SelectionError("❌ Cannot create sibling for root shapes.")

        entries = scan_page(self.canvas)
        found = find_node_by_id(entries, descriptor.parent_id, descriptor.parent_chain[:-1])
        if found is None:
            raise SelectionError("❌ Could not find parent shape. The hierarchy may be broken.")
        parent_node, parent = found

        override = parent.child(descriptor.current)
        if override is not None and override.layout:
            layout = override.layout
        else:
            layout = resolve_descriptor_layout(parent, entries)
        direction = Layout(layout).direction
        gap = self.style.node_gap if gap is None else gap

        siblings = [(n, d) for n, d in children_of(entries, parent) if d.level == descriptor.level]
        if not any(n == node for n, _ in siblings):
            siblings.append((node, descriptor))
        sibling_bounds = [self.canvas.get_node_bounds(n) for n, _ in siblings]
        position = append_after_existing_siblings(sibling_bounds, direction, gap, 1)[0]

        number = next_sibling_number(descriptor.level, parent.child_ids + [d.current for _, d in siblings])
        sibling_id = generate_sibling_ids(descriptor.level, 1, number)[0]

        bounds = self.canvas.get_node_bounds(node)
        sibling = self.canvas.create_node(
            self.canvas.get_node_kind(node), position.x, position.y, bounds.width, bounds.height
        )
        write_descriptor(self.canvas, sibling, Descriptor(sibling_id, list(descriptor.parent_chain), layout))
        write_descriptor(self.canvas, parent_node, attach_children(parent, [ChildRef(sibling_id, layout)]))

        result = CreationResult(parent=parent_node, created=[sibling], child_ids=[sibling_id])
        self._link(result, parent_node, sibling, direction, direction.opposite, self._edge_style(edge_style))
        logger.info(f"✅ Created sibling {sibling_id} next to {descriptor.current}")
        return result

    def split_into_grid(
        self,
        node: int,
        rows: Sequence[Sequence[str]],
        padding: Optional[float] = None,
        padding_top: Optional[float] = None,
        gap: Optional[float] = None,
    ) -> List[List[int]]:
        """
        Draw a grid of cells inside ``node``, one list of labels per row.

        Cells are plain shapes without descriptors.  All sizes are checked
        before the first cell is drawn.
        """
        self._require_node(node)
        rows = [list(row) for row in rows if len(row) > 0]
        if not rows:
            raise SelectionError("❌ Please provide at least one row with one cell")

        padding = self.style.grid_padding if padding is None else padding
        padding_top = self.style.grid_padding_top if padding_top is None else padding_top
        gap = self.style.grid_gap if gap is None else gap
        parent = self.canvas.get_node_bounds(node)

        if grid_row_height(parent, len(rows), padding, padding_top, gap) <= 0:
            raise GeometryError("❌ Parent shape is too small for the specified layout.")
        for index, row in enumerate(rows, start=1):
            if grid_column_width(parent, len(row), padding, gap) <= 0:
                raise GeometryError(f"❌ Row {index} has too many columns for the available width")

        cells = compute_grid_cells(parent, [len(row) for row in rows], padding, padding_top, gap)
        created = []
        for row, row_cells in zip(rows, cells):
            row_nodes = []
            for text, cell in zip(row, row_cells):
                cell_node = self.canvas.create_node(self.style.node_kind, cell.x, cell.y, cell.width, cell.height)
                if text.strip():
                    self.canvas.set_node_text(cell_node, text.strip())
                row_nodes.append(cell_node)
            created.append(row_nodes)

        logger.info(f"✅ Split shape {node} into {sum(len(r) for r in created)} cell(s) over {len(created)} row(s)")
        return created

    # ------------------------------------------------------------------
    # Connecting
    # ------------------------------------------------------------------

    def connect(
        self,
        node_a: int,
        node_b: int,
        orientation: Optional[str] = None,
        edge_style: Optional[EdgeStyle] = None,
    ) -> Optional[int]:
        """
        Draw an edge between two nodes without touching their descriptors.

        ``orientation`` is ``horizontal`` or ``vertical``; by default the
        dominant axis between the two centres is used.
        """
        self._require_node(node_a)
        self._require_node(node_b)
        if node_a == node_b:
            raise SelectionError("❌ Please select two different shapes.")

        center_a = self.canvas.get_node_bounds(node_a).center
        center_b = self.canvas.get_node_bounds(node_b).center
        if orientation is None:
            orientation = orientation_between(center_a, center_b)
        elif orientation not in (HORIZONTAL, VERTICAL):
            raise SelectionError(f"❌ Orientation must be '{HORIZONTAL}' or '{VERTICAL}'")

        side_a, side_b = determine_sides(center_a, center_b, orientation)
        return connect_nodes(self.canvas, node_a, node_b, side_a, side_b, self._edge_style(edge_style))

    def connect_and_link(
        self,
        node_a: int,
        node_b: int,
        edge_style: Optional[EdgeStyle] = None,
    ) -> CreationResult:
        """
        Connect two nodes and record them as parent and child.

        The shallower node becomes the parent (the first one on a tie, or the
        typed one when only one has a descriptor).  The child keeps its ID when
        that ID sits at the parent's next level and no other child of the
        parent uses it; otherwise it gets the next free number at that level.
        It is moved under the parent's chain; its own descendants are left as
        they are.
        """
        self._require_node(node_a)
        self._require_node(node_b)
        if node_a == node_b:
            raise SelectionError("❌ Please select two different shapes.")

        first = read_descriptor(self.canvas, node_a)
        second = read_descriptor(self.canvas, node_b)
        if first is None and second is not None:
            parent_node, child_node = node_b, node_a
        elif first is not None and second is not None and level_depth(second.level) < level_depth(first.level):
            parent_node, child_node = node_b, node_a
        else:
            parent_node, child_node = node_a, node_b

        if child_node in find_ancestors(self.canvas, parent_node):
            raise SelectionError("❌ The child shape is already an ancestor of the parent shape.")

        parent = ensure_descriptor(self.canvas, parent_node)
        entries = scan_page(self.canvas)
        child = lookup(entries, child_node)

        child_level = next_level(parent.level)
        page_children = children_of(entries, parent)
        others = [d.current for n, d in page_children if n != child_node]
        linked_here = any(n == child_node for n, _ in page_children)

        if child is not None and child.level == child_level and child.current not in others and (
            linked_here or child.current not in parent.child_ids
        ):
            child_id = child.current
        else:
            child_id = generate_sibling_ids(
                child_level, 1, next_sibling_number(child_level, parent.child_ids + others)
            )[0]
            if child is not None:
                logger.info(f"🔁 Renumbered {child.current} to {child_id} under {parent.current}")
        grandchildren = list(child.children) if child is not None else []

        chain = parent.parent_chain + [parent.current]
        write_descriptor(self.canvas, child_node, Descriptor(child_id, chain, parent.layout, grandchildren))
        write_descriptor(self.canvas, parent_node, attach_children(parent, [child_id]))

        layout = Layout(resolve_layout(self.canvas, parent_node))
        orientation = HORIZONTAL if layout.is_horizontal else VERTICAL
        side_a, side_b = determine_sides(
            self.canvas.get_node_bounds(parent_node).center,
            self.canvas.get_node_bounds(child_node).center,
            orientation,
        )

        result = CreationResult(parent=parent_node, child_ids=[child_id])
        self._link(result, parent_node, child_node, side_a, side_b, self._edge_style(edge_style))
        logger.info(f"✅ Linked {child_id} under {parent.current}")
        return result

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _select_all(self, node: int, related: List[int], label: str) -> List[int]:
        selected = [node]
        for other in related:
            if other not in selected:
                selected.append(other)

        self.canvas.select(selected[0], additive=False)
        for other in selected[1:]:
            self.canvas.select(other, additive=True)

        if len(selected) == 1:
            logger.info(f"ℹ️ No {label} found for shape {node}")
        else:
            logger.info(f"🎯 Selected {len(selected)} shape(s): {label}")
        return selected

    def select_siblings(self, node: int) -> List[int]:
        self._require_descriptor(node)
        return self._select_all(node, find_siblings(self.canvas, node), "siblings")

    def select_level(self, node: int) -> List[int]:
        self._require_descriptor(node)
        return self._select_all(node, find_level_peers(self.canvas, node), "level peers")

    def select_ancestors(self, node: int) -> List[int]:
        self._require_descriptor(node)
        return self._select_all(node, find_ancestors(self.canvas, node), "ancestors")

    def select_family(self, node: int) -> List[int]:
        self._require_descriptor(node)
        return self._select_all(node, find_family(self.canvas, node), "descendants")

    # ------------------------------------------------------------------
    # Inspection and editing
    # ------------------------------------------------------------------

    def describe(self, node: int) -> str:
        self._require_node(node)
        return describe_descriptor(self.canvas.get_node_descriptor_text(node))

    def clear_relationship(self, node: int) -> str:
        """Drop the descriptor of ``node``; other nodes keep referring to it."""
        self._require_node(node)
        return clear_descriptor(self.canvas, node)

    def set_layout(self, node: int, layout: Optional[str]) -> Descriptor:
        """Set the declared layout of ``node``; an empty layout means inherit."""
        descriptor = self._require_descriptor(node)
        descriptor.layout = self._layout_token(layout)
        write_descriptor(self.canvas, node, descriptor)
        return descriptor

    def set_child_layout(self, node: int, child_id: str, layout: Optional[str]) -> Descriptor:
        """Set (or with an empty layout, clear) the override for one child of ``node``."""
        descriptor = self._require_descriptor(node)
        if descriptor.child(child_id) is None:
            raise SelectionError(f"❌ {child_id} is not a child of {descriptor.current}")
        updated = with_child_layout(descriptor, child_id, self._layout_token(layout))
        write_descriptor(self.canvas, node, updated)
        return updated

    def analyze_page(self) -> str:
        """Summary of the hierarchy on the page with the layout each parent appears to use."""
        entries = scan_page(self.canvas)
        if not entries:
            return "No flowchart shapes found on this slide."

        lines = [
            f"📊 {len(self.canvas.get_all_nodes_on_page())} shape(s), {len(entries)} in flowcharts, "
            f"{len(self.canvas.get_all_edges_on_page())} connector(s)"
        ]
        for node, descriptor in entries:
            children = children_of(entries, descriptor)
            line = f"{'  ' * len(descriptor.parent_chain)}{descriptor.current} (shape {node})"
            if children:
                detected = detect_layout_from_geometry(
                    self.canvas.get_node_bounds(node),
                    [self.canvas.get_node_bounds(n) for n, _ in children],
                )
                declared = resolve_descriptor_layout(descriptor, entries)
                line += f" layout {declared}, looks like {detected}"
                if detected != declared:
                    line += " ⚠️"
            lines.append(line)
        return "\n".join(lines)

#!/usr/bin/env python3
"""
Flowchart editor that ties together a PPTX deck, one of its slides and the
flowchart commands.
"""

import logging
from pathlib import Path

from pptx import Presentation

from .canvas import PPTXCanvas
from .commands import FlowchartCommands
from .css_utils import load_style

logger = logging.getLogger(__name__)

BLANK_LAYOUT_INDEX = 6


class FlowchartEditor:
    """
    Open (or create) a presentation and edit the flowchart on one slide.
    """

    def __init__(
        self,
        path=None,
        *,
        slide_index: int = 0,
        theme: str = "default",
        debug: bool = False,
    ):
        """Create a new :class:`FlowchartEditor`.

        Parameters
        ----------
        path
            PPTX file to open.  When ``None`` or missing on disk a new
            presentation with one blank slide is created instead.
        slide_index
            Zero-based index of the slide to edit.
        theme
            Name of a bundled CSS theme, or path to a ``.css`` file,
            supplying sizes, gaps and colours.
        debug
            Enable verbose logging.
        """
        self.debug = debug
        self.theme = theme
        self.path = Path(path) if path else None

        if self.path and self.path.exists():
            self.presentation = Presentation(str(self.path))
            logger.info(f"📂 Opened {self.path}")
        else:
            self.presentation = Presentation()
            self.presentation.slides.add_slide(self.presentation.slide_layouts[BLANK_LAYOUT_INDEX])

        slides = self.presentation.slides
        if not 0 <= slide_index < len(slides):
            raise IndexError(f"❌ Slide {slide_index} out of range; the deck has {len(slides)} slide(s)")

        self.style = load_style(theme)
        self.slide = slides[slide_index]
        self.canvas = PPTXCanvas(self.slide, style=self.style, debug=debug)
        self.commands = FlowchartCommands(self.canvas, self.style)

    def add_node(self, text: str = "", x=None, y=None, width=None, height=None) -> int:
        """Draw a plain node with the theme's kind and size (no descriptor)."""
        node = self.canvas.create_node(
            self.style.node_kind,
            40 if x is None else x,
            40 if y is None else y,
            self.style.node_width if width is None else width,
            self.style.node_height if height is None else height,
        )
        if text:
            self.canvas.set_node_text(node, text)
        return node

    def node(self, key) -> int:
        """Resolve a shape id or shape name on the slide."""
        node = self.canvas.find_node(key)
        if node is None:
            raise KeyError(f"❌ No shape '{key}' on slide")
        return node

    def save(self, output_path=None) -> Path:
        output_path = Path(output_path) if output_path else self.path
        if output_path is None:
            raise ValueError("❌ No output path given")
        if output_path.suffix != ".pptx":
            output_path = output_path.with_suffix(".pptx")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.presentation.save(str(output_path))
        logger.info(f"💾 Saved {output_path}")
        return output_path


def main(argv=None):
    """Command-line entry point for the flowchart editor."""
    import argparse
    import sys

    from .commands import FlowchartError
    from .models import Side

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="slideflow", description="Edit hierarchical flowcharts on PPTX slides.")
        p.add_argument("pptx", type=Path, help="Presentation to edit (created if missing)")
        p.add_argument("--output", "-o", type=Path, help="Destination PPTX path (default: overwrite input)")
        p.add_argument("--slide", "-s", type=int, default=0, help="Zero-based slide index")
        p.add_argument("--theme", "-t", default="default", help="CSS theme name (default, dark, …) or path to a .css file")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")

        sub = p.add_subparsers(dest="command", required=True)

        c = sub.add_parser("add-node", help="Draw a new plain shape")
        c.add_argument("--text", default="")
        c.add_argument("--x", type=float)
        c.add_argument("--y", type=float)

        c = sub.add_parser("init-root", help="Make a shape a flowchart root")
        c.add_argument("shape", help="Shape id or name")

        c = sub.add_parser("add-children", help="Create linked children on one side of a shape")
        c.add_argument("shape")
        c.add_argument("--direction", "-d", type=str.upper, default="BOTTOM", choices=[s.value for s in Side])
        c.add_argument("--count", "-n", type=int, default=1)
        c.add_argument("--gap", type=float)
        c.add_argument("--text", action="append", help="Child label; repeat for several children")

        c = sub.add_parser("add-sibling", help="Create a sibling after the last one")
        c.add_argument("shape")
        c.add_argument("--gap", type=float)

        c = sub.add_parser("connect", help="Link two shapes as parent and child")
        c.add_argument("first")
        c.add_argument("second")

        c = sub.add_parser("link", help="Draw a connector without recording a relationship")
        c.add_argument("first")
        c.add_argument("second")
        c.add_argument("--orientation", choices=["horizontal", "vertical"])

        c = sub.add_parser("select", help="Print the related shapes that would be selected")
        c.add_argument("shape")
        c.add_argument("--scope", choices=["siblings", "level", "ancestors", "family"], default="siblings")

        c = sub.add_parser("describe", help="Show a shape's relationship data")
        c.add_argument("shape")

        c = sub.add_parser("clear", help="Remove a shape's relationship data")
        c.add_argument("shape")

        c = sub.add_parser("set-layout", help="Set a shape's layout, or a child's override with --child")
        c.add_argument("shape")
        c.add_argument("layout", nargs="?", default="", help="LR, RL, TD or DT; omit to inherit")
        c.add_argument("--child", help="Child ID whose override to set")

        c = sub.add_parser("split", help="Draw a grid of cells inside a shape")
        c.add_argument("shape")
        c.add_argument("--row", action="append", required=True, help="Cell labels separated by '|'; repeat per row")
        c.add_argument("--padding", type=float)
        c.add_argument("--padding-top", type=float)
        c.add_argument("--gap", type=float)

        sub.add_parser("analyze", help="Summarise the flowchart on the slide")
        return p

    def _run(args) -> bool:
        """Execute one subcommand; read-only ones return before saving."""
        editor = FlowchartEditor(args.pptx, slide_index=args.slide, theme=args.theme, debug=args.debug)
        commands = editor.commands

        if args.command == "add-node":
            node = editor.add_node(args.text, args.x, args.y)
            print(node)
        elif args.command == "init-root":
            print(commands.initialize_root(editor.node(args.shape)).current)
        elif args.command == "add-children":
            result = commands.create_children(
                editor.node(args.shape), args.direction, args.count, args.gap, texts=args.text
            )
            print(" ".join(result.child_ids))
        elif args.command == "add-sibling":
            print(" ".join(commands.create_sibling(editor.node(args.shape), args.gap).child_ids))
        elif args.command == "connect":
            print(" ".join(commands.connect_and_link(editor.node(args.first), editor.node(args.second)).child_ids))
        elif args.command == "link":
            commands.connect(editor.node(args.first), editor.node(args.second), args.orientation)
        elif args.command == "select":
            select = {
                "siblings": commands.select_siblings,
                "level": commands.select_level,
                "ancestors": commands.select_ancestors,
                "family": commands.select_family,
            }[args.scope]
            print(" ".join(str(n) for n in select(editor.node(args.shape))))
            return False
        elif args.command == "describe":
            print(commands.describe(editor.node(args.shape)))
            return False
        elif args.command == "clear":
            commands.clear_relationship(editor.node(args.shape))
        elif args.command == "set-layout":
            if args.child:
                commands.set_child_layout(editor.node(args.shape), args.child, args.layout)
            else:
                commands.set_layout(editor.node(args.shape), args.layout)
        elif args.command == "split":
            rows = [row.split("|") for row in args.row]
            commands.split_into_grid(editor.node(args.shape), rows, args.padding, args.padding_top, args.gap)
        elif args.command == "analyze":
            print(commands.analyze_page())
            return False

        editor.save(args.output or args.pptx)
        return True

    # Set up logging
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s  %(message)s",
    )

    try:
        _run(args)
    except (FlowchartError, FileNotFoundError, KeyError, IndexError) as exc:
        logger.error(str(exc).strip("'\""))
        sys.exit(1)


if __name__ == "__main__":
    main()

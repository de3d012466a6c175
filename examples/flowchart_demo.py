#!/usr/bin/env python3
"""
🎯 Flowchart Demo - Slide Flowchart
===================================

Builds one small flowchart per theme, exercising:
• Roots, children and appended children
• Siblings and layout overrides
• Connecting existing shapes into the hierarchy
• Nested grids
• Relationship queries and the page analysis report

Run this file and open the decks written to ``output/``.
"""

import logging
import sys
from pathlib import Path

# Add the project root to the path so we can import our modules
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from slide_flowchart.generator import FlowchartEditor

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)


def build_demo(theme: str, output_dir: Path) -> Path:
    """Draw the demo flowchart with ``theme`` and save it."""
    editor = FlowchartEditor(theme=theme)
    commands = editor.commands

    start = editor.add_node("Start", x=380, y=40)
    commands.initialize_root(start)
    commands.set_layout(start, "TD")

    first_round = commands.create_children(start, "BOTTOM", texts=["Plan", "Build"])
    plan, build = first_round.created
    commands.create_children(start, "BOTTOM", texts=["Ship"])

    commands.create_children(build, "BOTTOM", texts=["Code", "Test"])
    commands.create_sibling(plan)

    review = editor.add_node("Review", x=40, y=420)
    commands.connect_and_link(review, plan)

    board = editor.add_node("Board", x=620, y=400, width=260, height=200)
    commands.split_into_grid(board, [["Todo", "Doing"], ["Done"]])

    logger.info(f"🎯 Family of Start: {commands.select_family(start)}")
    logger.info("\n" + commands.analyze_page())

    output_path = editor.save(output_dir / f"flowchart_demo_{theme}.pptx")
    return output_path


def main():
    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)

    demos_generated = []
    for theme in ("default", "dark"):
        demos_generated.append(build_demo(theme, output_dir))

    print("\n📁 Generated Files:")
    for path in demos_generated:
        print(f"   • {path}")


if __name__ == "__main__":
    main()

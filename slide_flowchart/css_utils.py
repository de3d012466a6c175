"""
CSS utilities for flowchart styling.

Node sizes, gaps, connector defaults and colours are read from the ``:root``
variables of a theme file so users can adjust them without touching code.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .models import EdgeStyle
from .theme_loader import get_css


@dataclass(frozen=True)
class FlowchartStyle:
    """Visual defaults for nodes and connectors created by the editor."""
    node_gap: int
    node_width: int
    node_height: int
    node_kind: str
    line_type: str
    start_arrow: str
    end_arrow: str
    node_fill: Optional[str]
    node_line_color: Optional[str]
    text_color: Optional[str]
    grid_padding: int
    grid_padding_top: int
    grid_gap: int

    @property
    def edge_style(self) -> EdgeStyle:
        return EdgeStyle(
            line_type=self.line_type,
            start_arrow=self.start_arrow,
            end_arrow=self.end_arrow,
        )


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """``#rgb`` / ``#rrggbb`` -> ``(r, g, b)``; ``None`` for anything else."""
    if not hex_color:
        return None
    hexval = hex_color.strip().lstrip('#')
    if len(hexval) == 3:
        hexval = ''.join(c * 2 for c in hexval)
    if len(hexval) != 6:
        return None
    try:
        return tuple(int(hexval[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


class CSSParser:
    """
    Parses the ``:root`` variables of a flowchart theme.
    """

    def __init__(self, theme: str = "default"):
        self.theme = theme
        self.css_content = get_css(theme)
        self._css_vars = None

    def get_css_variables(self) -> Dict[str, str]:
        """Extract all CSS variables from :root section. Cached for performance."""
        if self._css_vars is not None:
            return self._css_vars

        root_match = re.search(r':root\s*\{([^}]+)\}', self.css_content, re.DOTALL)
        if not root_match:
            raise ValueError(f"No :root section found in theme '{self.theme}'")

        root_content = root_match.group(1)

        variable_pattern = r'--([^:]+):\s*([^;]+);'
        css_vars = re.findall(variable_pattern, root_content)
        self._css_vars = {name.strip(): value.strip() for name, value in css_vars}

        return self._css_vars

    def get_px_value(self, variable_name: str) -> int:
        """Get pixel value from CSS variable."""
        value = self.get_raw_value(variable_name)

        px_match = re.search(r'(-?\d+)px', value)
        if not px_match:
            raise ValueError(f"CSS variable '--{variable_name}' is not a pixel value: {value}")

        return int(px_match.group(1))

    def get_raw_value(self, variable_name: str) -> str:
        """Get raw CSS variable value."""
        vars_dict = self.get_css_variables()
        value = vars_dict.get(variable_name)
        if not value:
            raise ValueError(f"❌ CSS variable '--{variable_name}' not found in theme '{self.theme}'")
        return value.strip('\'"')

    def get_color(self, variable_name: str) -> Optional[str]:
        """Colour variable as ``#rrggbb``; ``None`` when unset or ``none``."""
        value = self.get_css_variables().get(variable_name)
        if not value or value.lower() in ('none', 'transparent', 'inherit'):
            return None
        if hex_to_rgb(value) is None:
            raise ValueError(f"❌ CSS variable '--{variable_name}' in theme '{self.theme}' is not a hex colour: {value}")
        return value

    def get_flowchart_style(self) -> FlowchartStyle:
        """Collect every flowchart variable into a :class:`FlowchartStyle`."""
        return FlowchartStyle(
            node_gap=self.get_px_value('node-gap'),
            node_width=self.get_px_value('node-width'),
            node_height=self.get_px_value('node-height'),
            node_kind=self.get_raw_value('node-kind').upper(),
            line_type=self.get_raw_value('line-type').upper(),
            start_arrow=self.get_raw_value('start-arrow').upper(),
            end_arrow=self.get_raw_value('end-arrow').upper(),
            node_fill=self.get_color('node-fill'),
            node_line_color=self.get_color('node-line-color'),
            text_color=self.get_color('text-color'),
            grid_padding=self.get_px_value('grid-padding'),
            grid_padding_top=self.get_px_value('grid-padding-top'),
            grid_gap=self.get_px_value('grid-gap'),
        )


def load_style(theme: str = "default") -> FlowchartStyle:
    """Shortcut for ``CSSParser(theme).get_flowchart_style()``."""
    return CSSParser(theme).get_flowchart_style()

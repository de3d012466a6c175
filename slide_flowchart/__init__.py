"""
Slide Flowchart Package

Hierarchical flowchart editing on PowerPoint slides: every node carries a
small relationship descriptor, and children, siblings and connectors are
created and queried from those descriptors alone.
"""

from .canvas import Canvas, PPTXCanvas
from .commands import FlowchartCommands, FlowchartError, GeometryError, SelectionError
from .descriptor import parse_descriptor, serialize_descriptor
from .generator import FlowchartEditor
from .models import Bounds, ChildRef, CreationResult, Descriptor, EdgeStyle, Layout, Point, Side

__all__ = [
    'FlowchartEditor', 'FlowchartCommands', 'Canvas', 'PPTXCanvas',
    'FlowchartError', 'SelectionError', 'GeometryError',
    'parse_descriptor', 'serialize_descriptor',
    'Bounds', 'ChildRef', 'CreationResult', 'Descriptor', 'EdgeStyle', 'Layout', 'Point', 'Side',
]

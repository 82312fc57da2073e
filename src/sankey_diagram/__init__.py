"""Layered Sankey diagram layout and SVG rendering."""

from sankey_diagram.api import compute_layout, render_svg, save_svg
from sankey_diagram.errors import (
    CycleError,
    NegativeValueError,
    SankeyError,
    UnbalancedNodeError,
    UnknownNodeError,
)
from sankey_diagram.graph import NodeId, SankeyEdge, SankeyGraph, SankeyNode
from sankey_diagram.layout import LayoutEdge, LayoutNode, LayoutResult
from sankey_diagram.style import ResolvedStyle, SankeyStyle, format_number

__all__ = [
    "CycleError",
    "LayoutEdge",
    "LayoutNode",
    "LayoutResult",
    "NegativeValueError",
    "NodeId",
    "ResolvedStyle",
    "SankeyEdge",
    "SankeyError",
    "SankeyGraph",
    "SankeyNode",
    "SankeyStyle",
    "UnbalancedNodeError",
    "UnknownNodeError",
    "compute_layout",
    "format_number",
    "render_svg",
    "save_svg",
]

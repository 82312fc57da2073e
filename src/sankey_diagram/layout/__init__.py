"""Layered Sankey layout: layers, scale, node boxes, edge ribbons."""

from sankey_diagram.layout.engine import (
    LayerAssignment,
    assign_anchors,
    assign_coordinates,
    build_edges,
    compute_scale,
    display_text,
    full_layout,
    layer_x_positions,
    ribbon_path,
)
from sankey_diagram.layout.types import Anchor, LayoutEdge, LayoutNode, LayoutResult, PathCommand

__all__ = [
    "Anchor",
    "LayerAssignment",
    "LayoutEdge",
    "LayoutNode",
    "LayoutResult",
    "PathCommand",
    "assign_anchors",
    "assign_coordinates",
    "build_edges",
    "compute_scale",
    "display_text",
    "full_layout",
    "layer_x_positions",
    "ribbon_path",
]

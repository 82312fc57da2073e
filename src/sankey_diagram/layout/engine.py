"""Layout engine: turns a SankeyGraph into positioned boxes and ribbons.

Phases:
  1. Layer assignment (dependency-count elimination, left to right)
  2. Scale (one flow-to-pixel factor that fits the fullest layer)
  3. Coordinate assignment (node boxes, then edge anchors)
  4. Ribbon geometry (closed bezier outline per edge)

Every phase reads the graph and never mutates it, so running the pipeline
twice on the same graph gives identical results.
"""

from __future__ import annotations

import logging
import math

import networkx as nx

from sankey_diagram.errors import CycleError, UnbalancedNodeError
from sankey_diagram.graph import NodeId, SankeyEdge, SankeyGraph
from sankey_diagram.layout.types import Anchor, LayoutEdge, LayoutNode, LayoutResult, PathCommand
from sankey_diagram.style import NumberFormat, ResolvedStyle, SankeyStyle

logger = logging.getLogger(__name__)

# ─── Layer Assignment ─────────────────────────────────────────────────────────


class LayerAssignment:
    """Result of layer assignment: nodes grouped into left-to-right layers.

    Layer 0 holds every node without incoming edges. A node's layer index is
    the length of the longest path reaching it, so every edge crosses strictly
    forward.

    Attributes:
        layers: Node ids per layer, in placement order.
        layer_index: Maps node id → layer index.
    """

    def __init__(self, layers: list[list[NodeId]]) -> None:
        self.layers = layers
        self.layer_index: dict[NodeId, int] = {
            node_id: idx for idx, layer in enumerate(layers) for node_id in layer
        }

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @classmethod
    def assign(cls, graph: SankeyGraph) -> LayerAssignment:
        """Partition ``graph`` into layers using Kahn's algorithm, one layer per round.

        The seed layer is in handle order; later layers are in the order their
        nodes' last incoming edge was consumed (sources in layer order, each
        source's edges in creation order).

        Raises:
            CycleError: some nodes never reach in-degree zero.
        """
        node_ids = graph.node_ids()
        in_degree: list[int] = [graph.digraph.in_degree(nid.index) for nid in node_ids]

        outputs: list[list[SankeyEdge]] = [[] for _ in node_ids]
        for edge in graph.edges:
            outputs[edge.source.index].append(edge)

        layers: list[list[NodeId]] = []
        next_layer = [nid for nid in node_ids if in_degree[nid.index] == 0]

        while next_layer:
            layers.append(next_layer)
            current_layer = next_layer
            next_layer = []
            for node_id in current_layer:
                for edge in outputs[node_id.index]:
                    target = edge.target.index
                    in_degree[target] -= 1
                    if in_degree[target] == 0:
                        next_layer.append(edge.target)

        placed = sum(len(layer) for layer in layers)
        if placed < len(node_ids):
            unplaced = [nid for nid in node_ids if in_degree[nid.index] > 0]
            raise CycleError(unplaced, _find_cycle(graph, unplaced))

        logger.debug("assigned %d nodes to %d layers", placed, len(layers))
        return cls(layers)


def _find_cycle(graph: SankeyGraph, unplaced: list[NodeId]) -> list[tuple[NodeId, NodeId]]:
    """One cycle among the unplaced nodes.

    Every unplaced node keeps an unplaced predecessor, so the induced subgraph
    always contains a cycle.
    """
    node_ids = graph.node_ids()
    sub = graph.digraph.subgraph(nid.index for nid in unplaced)
    return [(node_ids[u], node_ids[v]) for u, v, *_ in nx.find_cycle(sub)]


# ─── Scale ────────────────────────────────────────────────────────────────────


def compute_scale(
    graph: SankeyGraph,
    layers: list[list[NodeId]],
    height: float,
    style: ResolvedStyle,
) -> float:
    """Return the largest flow-to-pixel factor at which every layer fits vertically.

    Each layer must satisfy ``sum(flow) * scale + separation * (n - 1) <=
    height - 2 * border``; the tightest layer wins. Layers with no flow are
    skipped and negative fixed values count as zero. With no flow anywhere
    the scale is 0.
    """
    usable = height - 2 * style.border
    best = math.inf
    for idx, layer in enumerate(layers):
        total_flow = sum(max(0.0, graph.flow(nid)) for nid in layer)
        if total_flow <= 0:
            logger.debug("layer %d has no flow, skipped for scale", idx)
            continue
        available = usable - style.node_separation * (len(layer) - 1)
        layer_scale = available / total_flow
        logger.debug("layer %d: flow=%g scale=%g", idx, total_flow, layer_scale)
        best = min(best, layer_scale)

    if math.isinf(best):
        return 0.0
    if best < 0:
        logger.warning("node separation exceeds the canvas height; scale clamped to 0")
        return 0.0
    logger.debug("global scale %g", best)
    return best


# ─── Coordinate Assignment ────────────────────────────────────────────────────


def layer_x_positions(layer_count: int, width: float, style: ResolvedStyle) -> list[float]:
    """Left edge x of each layer, spread evenly between the borders.

    A single layer is centred horizontally.
    """
    if layer_count == 0:
        return []
    if layer_count == 1:
        return [(width - style.node_width) / 2]
    gap = (width - 2 * style.border - layer_count * style.node_width) / (layer_count - 1)
    return [style.border + i * (style.node_width + gap) for i in range(layer_count)]


def display_text(label: str | None, value: float, number_format: NumberFormat) -> list[str]:
    """Text lines shown for a node or edge: the label (if any) above the formatted value."""
    number = number_format(value)
    return [label, number] if label is not None else [number]


def assign_coordinates(
    graph: SankeyGraph,
    layers: list[list[NodeId]],
    scale: float,
    width: float,
    height: float,
    style: ResolvedStyle,
) -> list[LayoutNode]:
    """Place every node box; the result is indexed by node handle.

    Nodes stack top to bottom in layer order with ``node_separation`` between
    boxes, and each layer is centred inside the border band. Box heights are
    never negative.
    """
    xs = layer_x_positions(len(layers), width, style)
    placed: dict[int, LayoutNode] = {}

    for layer_idx, layer in enumerate(layers):
        total_height = sum(max(0.0, graph.flow(nid) * scale) for nid in layer)
        total_height += style.node_separation * (len(layer) - 1)
        y = style.border + (height - 2 * style.border - total_height) / 2

        for order, node_id in enumerate(layer):
            node = graph.node(node_id)
            box_height = max(0.0, node.flow * scale)
            placed[node_id.index] = LayoutNode(
                id=node_id,
                layer=layer_idx,
                order=order,
                x=xs[layer_idx],
                y=y,
                width=style.node_width,
                height=box_height,
                flow=node.flow,
                label=node.label,
                color=node.color,
                text=display_text(node.label, node.flow, style.number_format),
            )
            y += box_height + style.node_separation

    return [placed[i] for i in sorted(placed)]


def assign_anchors(
    graph: SankeyGraph,
    nodes: list[LayoutNode],
    scale: float,
) -> list[tuple[SankeyEdge, Anchor, Anchor]]:
    """Give each edge a span on its source's right side and its target's left side.

    Every node keeps an output cursor and an input cursor starting at its top.
    Edges claim ``value * scale`` from both cursors in creation order, so a
    node's edges never overlap while the node is balanced.
    """
    out_cursor = [n.y for n in nodes]
    in_cursor = [n.y for n in nodes]

    anchors: list[tuple[SankeyEdge, Anchor, Anchor]] = []
    for edge in graph.edges:
        thickness = edge.value * scale
        src = nodes[edge.source.index]
        tgt = nodes[edge.target.index]

        from_top = out_cursor[src.id.index]
        to_top = in_cursor[tgt.id.index]
        out_cursor[src.id.index] = from_top + thickness
        in_cursor[tgt.id.index] = to_top + thickness

        anchors.append(
            (
                edge,
                Anchor(x=src.x + src.width, y_top=from_top, y_bottom=from_top + thickness),
                Anchor(x=tgt.x, y_top=to_top, y_bottom=to_top + thickness),
            )
        )
    return anchors


# ─── Ribbon Geometry ──────────────────────────────────────────────────────────


def ribbon_path(source: Anchor, target: Anchor) -> list[PathCommand]:
    """Closed outline of a ribbon from ``source`` to ``target``.

    Top curve left to right, straight drop at the target, bottom curve back.
    Both curves bend around the horizontal midpoint, giving the S shape.
    """
    mid_x = (source.x + target.x) / 2
    return [
        PathCommand("M", ((source.x, source.y_top),)),
        PathCommand(
            "C",
            ((mid_x, source.y_top), (mid_x, target.y_top), (target.x, target.y_top)),
        ),
        PathCommand("L", ((target.x, target.y_bottom),)),
        PathCommand(
            "C",
            ((mid_x, target.y_bottom), (mid_x, source.y_bottom), (source.x, source.y_bottom)),
        ),
        PathCommand("Z"),
    ]


def build_edges(
    graph: SankeyGraph,
    nodes: list[LayoutNode],
    scale: float,
    style: ResolvedStyle,
) -> list[LayoutEdge]:
    """Anchor every edge and attach its ribbon outline, in creation order."""
    edges: list[LayoutEdge] = []
    for edge, source, target in assign_anchors(graph, nodes, scale):
        edges.append(
            LayoutEdge(
                id=edge.id,
                source=edge.source,
                target=edge.target,
                value=edge.value,
                thickness=edge.value * scale,
                source_anchor=source,
                target_anchor=target,
                path=ribbon_path(source, target),
                label=edge.label,
                color=edge.color,
                text=display_text(edge.label, edge.value, style.number_format),
            )
        )
    return edges


# ─── Full Layout Pipeline ──────────────────────────────────────────────────────


def full_layout(
    graph: SankeyGraph,
    width: float,
    height: float,
    style: SankeyStyle | None = None,
    strict: bool = False,
) -> LayoutResult:
    """Run the full layout pipeline.

    With ``strict`` set, fixed-value nodes over-drawn by their edges raise
    ``UnbalancedNodeError``; otherwise they are logged and laid out anyway
    (their ribbons overflow the box).
    """
    resolved = (style or SankeyStyle()).resolve(width, height)

    negative = [n.id for n in graph.nodes if n.value is not None and n.value < 0]
    if negative:
        logger.warning(
            "negative fixed value on %d node(s), drawn with zero height: %s",
            len(negative),
            ", ".join(str(n) for n in negative),
        )

    unbalanced = graph.unbalanced_nodes()
    if unbalanced:
        if strict:
            raise UnbalancedNodeError(unbalanced)
        logger.warning(
            "edges exceed the fixed value of %d node(s): %s",
            len(unbalanced),
            ", ".join(str(n) for n in unbalanced),
        )

    la = LayerAssignment.assign(graph)
    scale = compute_scale(graph, la.layers, height, resolved)
    nodes = assign_coordinates(graph, la.layers, scale, width, height, resolved)
    edges = build_edges(graph, nodes, scale, resolved)

    return LayoutResult(
        width=width,
        height=height,
        scale=scale,
        style=resolved,
        layers=la.layers,
        nodes=nodes,
        edges=edges,
    )

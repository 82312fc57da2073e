"""Layout types shared between the layout engine and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field

from sankey_diagram.graph import NodeId
from sankey_diagram.style import ResolvedStyle


@dataclass
class LayoutNode:
    """A positioned node box in canvas units."""

    id: NodeId
    layer: int
    order: int
    x: float
    y: float
    width: float
    height: float
    flow: float
    label: str | None = None
    color: str | None = None
    text: list[str] = field(default_factory=list)

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Anchor:
    """Where a ribbon touches a node: a vertical span at one x position."""

    x: float
    y_top: float
    y_bottom: float


@dataclass(frozen=True)
class PathCommand:
    """One ribbon outline primitive in absolute canvas coordinates.

    ``op`` is ``"M"`` (move, one point), ``"C"`` (cubic bezier: two control
    points then the end point), ``"L"`` (line, one point) or ``"Z"`` (close).
    """

    op: str
    points: tuple[tuple[float, float], ...] = ()


@dataclass
class LayoutEdge:
    """A positioned edge ribbon."""

    id: int
    source: NodeId
    target: NodeId
    value: float
    thickness: float
    source_anchor: Anchor
    target_anchor: Anchor
    path: list[PathCommand]
    label: str | None = None
    color: str | None = None
    text: list[str] = field(default_factory=list)

    @property
    def midpoint(self) -> tuple[float, float]:
        """Label position: halfway between the source's top and the target's bottom."""
        return (
            (self.source_anchor.x + self.target_anchor.x) / 2,
            (self.source_anchor.y_top + self.target_anchor.y_bottom) / 2,
        )


@dataclass
class LayoutResult:
    """Self-contained layout output, everything renderers need."""

    width: float
    height: float
    scale: float
    style: ResolvedStyle
    layers: list[list[NodeId]]
    nodes: list[LayoutNode]
    edges: list[LayoutEdge]

    def node(self, node_id: NodeId) -> LayoutNode:
        return self.nodes[node_id.index]

    def layer_of(self, node_id: NodeId) -> int:
        return self.node(node_id).layer

    def edges_by_z_order(self) -> list[LayoutEdge]:
        """Edges in drawing order: largest value first so thin ribbons stay on top."""
        return sorted(self.edges, key=lambda e: e.value, reverse=True)

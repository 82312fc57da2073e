"""Exception hierarchy for graph construction and layout."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sankey_diagram.graph import NodeId


class SankeyError(ValueError):
    """Base class for every error raised by sankey_diagram."""


class UnknownNodeError(SankeyError):
    """Raised when an edge references a node handle from another graph (or none at all)."""

    def __init__(self, node_id: object) -> None:
        super().__init__(f"unknown node: {node_id!r}")
        self.node_id = node_id


class NegativeValueError(SankeyError):
    """Raised when an edge is given a negative, NaN or infinite value."""

    def __init__(self, value: float) -> None:
        super().__init__(f"edge value must be finite and >= 0, got {value!r}")
        self.value = value


class CycleError(SankeyError):
    """Raised when layer assignment cannot place every node.

    Attributes:
        unplaced: Node ids that never reached in-degree zero, in handle order.
        cycle: One concrete cycle among the unplaced nodes, as a list of
            (source, target) node id pairs.
    """

    def __init__(self, unplaced: list[NodeId], cycle: list[tuple[NodeId, NodeId]]) -> None:
        names = ", ".join(str(n) for n in unplaced)
        super().__init__(f"cycle detected, unplaced nodes: [{names}]")
        self.unplaced = unplaced
        self.cycle = cycle


class UnbalancedNodeError(SankeyError):
    """Raised by strict layout when fixed-value nodes are over-drawn by their edges."""

    def __init__(self, nodes: list[NodeId]) -> None:
        names = ", ".join(str(n) for n in nodes)
        super().__init__(f"edges exceed the fixed value of nodes: [{names}]")
        self.nodes = nodes

"""Flow model: nodes with quantities and the edges that move flow between them.

The graph is built incrementally: ``add_node`` hands out stable integer-backed
handles, ``add_edge`` records an edge and updates the running input/output
totals of both endpoints in one step. Nothing else mutates a node.

Topology lives in a ``networkx.MultiDiGraph`` (parallel edges are allowed);
the creation-ordered edge list is kept alongside it because anchor assignment
follows the order in which edges were added.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, replace

import networkx as nx

from sankey_diagram.errors import NegativeValueError, UnknownNodeError

_graph_tokens = itertools.count()


@dataclass(frozen=True)
class NodeId:
    """Opaque handle returned by ``SankeyGraph.add_node``.

    ``index`` is the node's position in creation order; ``graph`` identifies
    the owning graph so handles cannot be mixed between instances.
    """

    index: int
    graph: int

    def __str__(self) -> str:
        return f"n{self.index}"


@dataclass(frozen=True)
class SankeyNode:
    """A node and its running edge totals.

    ``value`` is the optional fixed flow. ``current_input`` and
    ``current_output`` only ever grow: ``SankeyGraph.add_edge`` swaps in an
    updated copy, and nothing else can change them.
    """

    id: NodeId
    value: float | None = None
    label: str | None = None
    color: str | None = None
    current_input: float = 0.0
    current_output: float = 0.0

    @property
    def required_input(self) -> float:
        return self.value if self.value is not None else self.current_output

    @property
    def required_output(self) -> float:
        return self.value if self.value is not None else self.current_input

    @property
    def remaining_input(self) -> float:
        return self.required_input - self.current_input

    @property
    def remaining_output(self) -> float:
        return self.required_output - self.current_output

    @property
    def flow(self) -> float:
        """Height-determining quantity: the fixed value, else the larger running total."""
        if self.value is not None:
            return self.value
        return max(self.current_input, self.current_output)


@dataclass(frozen=True)
class SankeyEdge:
    """An edge carrying ``value`` units of flow from ``source`` to ``target``."""

    id: int
    source: NodeId
    target: NodeId
    value: float
    label: str | None = None
    color: str | None = None


class SankeyGraph:
    """Owns every node and edge of one diagram.

    Example:
        >>> g = SankeyGraph()
        >>> salary = g.add_node(50000.0, "Salary")
        >>> income = g.add_node(label="Income")
        >>> _ = g.add_edge(salary, income, g.remaining_output(salary))
        >>> g.flow(income)
        50000.0
    """

    def __init__(self) -> None:
        self._token = next(_graph_tokens)
        self._nodes: list[SankeyNode] = []
        self._edges: list[SankeyEdge] = []
        self.digraph: nx.MultiDiGraph = nx.MultiDiGraph()

    # ─── Construction ─────────────────────────────────────────────────────

    def add_node(
        self,
        value: float | None = None,
        label: str | None = None,
        color: str | None = None,
    ) -> NodeId:
        """Create a node and return its handle. Always succeeds."""
        node_id = NodeId(index=len(self._nodes), graph=self._token)
        node = SankeyNode(id=node_id, value=value, label=label, color=color)
        self._nodes.append(node)
        self.digraph.add_node(node_id.index, data=node)
        return node_id

    def add_edge(
        self,
        source: NodeId,
        target: NodeId,
        value: float,
        label: str | None = None,
        color: str | None = None,
    ) -> SankeyEdge:
        """Add an edge and credit its value to both endpoints.

        Raises:
            UnknownNodeError: ``source`` or ``target`` was not created by this graph.
            NegativeValueError: ``value`` is negative, NaN or infinite.
        """
        self.node(source)
        self.node(target)
        if not math.isfinite(value) or value < 0:
            raise NegativeValueError(value)

        edge = SankeyEdge(
            id=len(self._edges),
            source=source,
            target=target,
            value=value,
            label=label,
            color=color,
        )
        self._edges.append(edge)
        self.digraph.add_edge(source.index, target.index, key=edge.id, data=edge)
        src = self._nodes[source.index]
        self._store(replace(src, current_output=src.current_output + value))
        tgt = self._nodes[target.index]
        self._store(replace(tgt, current_input=tgt.current_input + value))
        return edge

    def _store(self, node: SankeyNode) -> None:
        self._nodes[node.id.index] = node
        self.digraph.nodes[node.id.index]["data"] = node

    # ─── Lookup ───────────────────────────────────────────────────────────

    def node(self, node_id: NodeId) -> SankeyNode:
        """Return the stored node for ``node_id``, rejecting foreign handles."""
        if (
            not isinstance(node_id, NodeId)
            or node_id.graph != self._token
            or not 0 <= node_id.index < len(self._nodes)
        ):
            raise UnknownNodeError(node_id)
        return self._nodes[node_id.index]

    def node_ids(self) -> list[NodeId]:
        """All node handles in creation order."""
        return [n.id for n in self._nodes]

    @property
    def nodes(self) -> list[SankeyNode]:
        return list(self._nodes)

    @property
    def edges(self) -> list[SankeyEdge]:
        """All edges in creation order."""
        return list(self._edges)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    # ─── Per-node accessors ───────────────────────────────────────────────

    def value(self, node_id: NodeId) -> float | None:
        return self.node(node_id).value

    def label(self, node_id: NodeId) -> str | None:
        return self.node(node_id).label

    def color(self, node_id: NodeId) -> str | None:
        return self.node(node_id).color

    def current_input(self, node_id: NodeId) -> float:
        return self.node(node_id).current_input

    def current_output(self, node_id: NodeId) -> float:
        return self.node(node_id).current_output

    def required_input(self, node_id: NodeId) -> float:
        return self.node(node_id).required_input

    def required_output(self, node_id: NodeId) -> float:
        return self.node(node_id).required_output

    def remaining_input(self, node_id: NodeId) -> float:
        return self.node(node_id).remaining_input

    def remaining_output(self, node_id: NodeId) -> float:
        return self.node(node_id).remaining_output

    def flow(self, node_id: NodeId) -> float:
        return self.node(node_id).flow

    # ─── Balance checks ───────────────────────────────────────────────────

    def unbalanced_nodes(self, tolerance: float = 1e-9) -> list[NodeId]:
        """Nodes with a fixed value whose edges draw more than that value.

        Unfixed nodes are never reported: their flow is the larger of the two
        totals, so their anchors always fit. ``tolerance`` is relative to the
        node's value.
        """
        result: list[NodeId] = []
        for node in self._nodes:
            if node.value is None:
                continue
            slack = tolerance * max(1.0, abs(node.value))
            if node.remaining_input < -slack or node.remaining_output < -slack:
                result.append(node.id)
        return result

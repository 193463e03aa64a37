"""Graph model snapshot consumed by the canvas.

The canvas never mutates a GraphModel. The external state container builds a
new snapshot for every change and hands it to ``Canvas.update``; changes
requested from the canvas travel the other way as intents.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from blockcanvas.coordinates import Point
from blockcanvas.exceptions import ModelError
from blockcanvas.schema import PortSide


@dataclass(frozen=True)
class Node:
    """A placed block.

    Attributes:
        id: Unique, stable identifier
        kind: Schema entry this block is an instance of
        position: Top-left corner in canvas pixels (a multiple of the grid unit)
        params: Current parameter values by name
    """

    id: int
    kind: str
    position: Point
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.position, Point):
            object.__setattr__(self, "position", Point.of(self.position))


@dataclass(frozen=True)
class Source:
    """Edge origin: an output port on a node."""

    id: int
    output: int | str


@dataclass(frozen=True)
class Target:
    """Edge destination: an input port on a node."""

    id: int
    input: int | str


@dataclass(frozen=True)
class Edge:
    """A directed connection from an output port to an input port."""

    id: int
    source: Source
    target: Target


@dataclass(frozen=True)
class PortRef:
    """A specific port on a specific node, used by connection gestures."""

    node_id: int
    port: int | str
    side: PortSide


def _unique_by_id(items: Iterable[Any], what: str) -> dict[int, Any]:
    result: dict[int, Any] = {}
    for item in items:
        if item.id in result:
            raise ModelError(f"Duplicate {what} id {item.id}")
        result[item.id] = item
    return result


@dataclass(frozen=True)
class GraphModel:
    """Immutable snapshot of the nodes and edges on a canvas.

    Attributes:
        nodes: Map of node id -> Node
        edges: Map of edge id -> Edge

    Example:
        >>> model = GraphModel.build(
        ...     nodes=[Node(1, "source", Point(0, 0)), Node(2, "sink", Point(120, 0))],
        ...     edges=[Edge(1, Source(1, 0), Target(2, 0))],
        ... )
        >>> sorted(model.nodes)
        [1, 2]
    """

    nodes: Mapping[int, Node] = field(default_factory=dict)
    edges: Mapping[int, Edge] = field(default_factory=dict)

    @classmethod
    def build(cls, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()) -> GraphModel:
        """Build a snapshot from node and edge lists.

        Raises:
            ModelError: If node ids or edge ids are not unique
        """
        return cls(nodes=_unique_by_id(nodes, "node"), edges=_unique_by_id(edges, "edge"))

    def dangling_edges(self) -> list[Edge]:
        """Edges whose source or target node is not in the snapshot."""
        return [
            edge
            for edge in self.edges.values()
            if edge.source.id not in self.nodes or edge.target.id not in self.nodes
        ]

    def to_nx_graph(self) -> nx.MultiDiGraph:
        """Convert to a NetworkX MultiDiGraph.

        Nodes carry ``kind``, ``position`` and ``params`` attributes. Each edge
        is keyed by its edge id and carries ``output`` and ``input``. Dangling
        endpoints appear as nodes with ``missing=True``.
        """
        G = nx.MultiDiGraph()
        for node in self.nodes.values():
            G.add_node(node.id, kind=node.kind, position=node.position, params=dict(node.params), missing=False)
        for edge in self.edges.values():
            for endpoint in (edge.source.id, edge.target.id):
                if endpoint not in G:
                    G.add_node(endpoint, missing=True)
            G.add_edge(
                edge.source.id,
                edge.target.id,
                key=edge.id,
                output=edge.source.output,
                input=edge.target.input,
            )
        return G

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GraphModel:
        """Load a snapshot from JSON-style data.

        Expected shape::

            {
                "nodes": [{"id": 1, "kind": "add", "position": [0, 0], "params": {"x": "1"}}],
                "edges": [{"id": 1, "source": {"id": 1, "output": 0},
                           "target": {"id": 2, "input": "a"}}],
            }
        """
        try:
            nodes = [
                Node(
                    id=int(n["id"]),
                    kind=str(n["kind"]),
                    position=Point.of(n.get("position", (0, 0))),
                    params={str(k): str(v) for k, v in (n.get("params") or {}).items()},
                )
                for n in data.get("nodes", ())
            ]
            edges = [
                Edge(
                    id=int(e["id"]),
                    source=Source(int(e["source"]["id"]), e["source"]["output"]),
                    target=Target(int(e["target"]["id"]), e["target"]["input"]),
                )
                for e in data.get("edges", ())
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise ModelError(f"Malformed graph data: {exc}") from exc
        return cls.build(nodes, edges)

    def to_dict(self) -> dict[str, Any]:
        """Inverse of from_dict."""
        return {
            "nodes": [
                {
                    "id": n.id,
                    "kind": n.kind,
                    "position": [n.position.x, n.position.y],
                    "params": dict(n.params),
                }
                for n in sorted(self.nodes.values(), key=lambda n: n.id)
            ],
            "edges": [
                {
                    "id": e.id,
                    "source": {"id": e.source.id, "output": e.source.output},
                    "target": {"id": e.target.id, "input": e.target.input},
                }
                for e in sorted(self.edges.values(), key=lambda e: e.id)
            ],
        }

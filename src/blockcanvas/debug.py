"""Debug utilities for blockcanvas rendering.

Provides programmatic tools to spot rendering problems on a live canvas.

Usage:
    from blockcanvas.debug import CanvasDebugger

    debugger = CanvasDebugger(canvas)

    # Quick validation
    result = debugger.validate()
    if not result.valid:
        print("Issues found:", result.errors)

    # Trace node connections ("points from" / "points to")
    info = debugger.trace_node(3)
    print(f"Incoming: {info.incoming_edges}")

    # Full diagnostics
    issues = debugger.find_issues()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import networkx as nx

from blockcanvas.coordinates import Point
from blockcanvas.render.geometry import parse_path_endpoints
from blockcanvas.render.ports import source_position, target_position
from blockcanvas.render.surface import select_all
from blockcanvas.schema import PortSide, has_port

if TYPE_CHECKING:
    from blockcanvas.canvas import Canvas


# =============================================================================
# Connector geometry
# =============================================================================


@dataclass(frozen=True)
class ConnectorGeometry:
    """Connector endpoints extracted from the rendered path.

    The start and end points come from the ``d`` attribute on the surface,
    not from the model.
    """

    edge_id: int
    start: Point
    end: Point


@dataclass
class ConnectorValidator:
    """Validates rendered connectors against resolved port anchors.

    Checks that each connector starts at its source anchor and ends at its
    target anchor.
    """

    anchors: dict[int, tuple[Point, Point]]  # edge id -> (source, target)
    connectors: list[ConnectorGeometry]
    tolerance: float = 0.0

    def validate_connector(self, connector: ConnectorGeometry) -> list[str]:
        """Returns list of issues (empty = valid)."""
        expected = self.anchors.get(connector.edge_id)
        if expected is None:
            return [f"Connector {connector.edge_id} has no edge in the model"]

        issues = []
        for label, actual, anchor in (
            ("start", connector.start, expected[0]),
            ("end", connector.end, expected[1]),
        ):
            dx = abs(actual.x - anchor.x)
            dy = abs(actual.y - anchor.y)
            if dx > self.tolerance or dy > self.tolerance:
                issues.append(
                    f"Connector {label} ({actual.x:.1f}, {actual.y:.1f}) is "
                    f"{max(dx, dy):.1f}px from anchor ({anchor.x:.1f}, {anchor.y:.1f})"
                )
        return issues

    def validate_all(self) -> dict[int, list[str]]:
        """Returns {edge_id: [issues]} for all connectors with issues."""
        return {c.edge_id: issues for c in self.connectors if (issues := self.validate_connector(c))}


def format_issues(issues: dict[int, list[str]]) -> str:
    """Format connector issues for display in test failures."""
    lines = []
    for edge_id, edge_issues in issues.items():
        lines.append(f"  edge {edge_id}:")
        for issue in edge_issues:
            lines.append(f"    - {issue}")
    return "\n".join(lines)


# =============================================================================
# Reports
# =============================================================================


@dataclass
class ValidationResult:
    """Result of canvas validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class NodeTrace:
    """Trace information for a single node."""

    status: str  # "FOUND" or "NOT_FOUND"
    node_id: int
    kind: str | None = None
    position: Point | None = None
    size: tuple[float, float] | None = None
    incoming_edges: list[dict[str, Any]] = field(default_factory=list)
    outgoing_edges: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class IssueReport:
    """Comprehensive issue report."""

    dangling_edges: list[str] = field(default_factory=list)
    self_loops: list[str] = field(default_factory=list)
    invalid_ports: list[str] = field(default_factory=list)
    misplaced_connectors: list[str] = field(default_factory=list)
    orphan_elements: list[str] = field(default_factory=list)
    unmeasured_nodes: list[int] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        """True if any issues were found.

        Unmeasured nodes are not counted; a measurement may still arrive.
        """
        return bool(
            self.dangling_edges
            or self.self_loops
            or self.invalid_ports
            or self.misplaced_connectors
            or self.orphan_elements
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dangling_edges": list(self.dangling_edges),
            "self_loops": list(self.self_loops),
            "invalid_ports": list(self.invalid_ports),
            "misplaced_connectors": list(self.misplaced_connectors),
            "orphan_elements": list(self.orphan_elements),
            "unmeasured_nodes": list(self.unmeasured_nodes),
            "has_issues": self.has_issues,
        }


# =============================================================================
# Debugger
# =============================================================================


class CanvasDebugger:
    """Debug helper for a live canvas.

    Cross-checks the model (through its NetworkX view), the schema and the
    rendered surface.
    """

    def __init__(self, canvas: Canvas, *, tolerance: float = 0.0):
        self.canvas = canvas
        self.tolerance = tolerance

    @property
    def graph(self) -> nx.MultiDiGraph:
        return self.canvas.model.to_nx_graph()

    def extract_connectors(self) -> list[ConnectorGeometry]:
        """Read connector endpoints back from the rendered "edges" layer."""
        surface = self.canvas.surface
        if surface is None:
            return []
        connectors = []
        for element in surface.layer("edges"):
            raw_id = element.get("data-id")
            path = next(select_all(element, "path", "curve"), None)
            endpoints = parse_path_endpoints(path.get("d") if path is not None else None)
            if raw_id is None or endpoints is None:
                continue
            connectors.append(ConnectorGeometry(int(raw_id), *endpoints))
        return connectors

    def expected_anchors(self) -> dict[int, tuple[Point, Point]]:
        """Resolved anchors of every edge whose endpoints both exist."""
        ctx = self.canvas.context
        return {
            edge.id: (source_position(ctx, edge.source), target_position(ctx, edge.target))
            for edge in ctx.edges.values()
            if edge.source.id in ctx.nodes and edge.target.id in ctx.nodes
        }

    def validate(self) -> ValidationResult:
        """Validate the model against the schema.

        Checks for:
        - Dangling edges (edges referencing absent nodes)
        - Self-loops (edge from a node to itself)
        - Ports the node's kind does not declare
        - Unknown block kinds (warning)

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[str] = []
        warnings: list[str] = []

        G = self.graph
        schema = self.canvas.context.schema

        for source, target, edge_id in G.edges(keys=True):
            if G.nodes[source].get("missing"):
                errors.append(f"Edge {edge_id} source node {source} not found (target: {target})")
            if G.nodes[target].get("missing"):
                errors.append(f"Edge {edge_id} target node {target} not found (source: {source})")
            if source == target:
                errors.append(f"Edge {edge_id} is a self-loop on node {source}")

        errors.extend(self._invalid_ports(G))

        for node_id, attrs in G.nodes(data=True):
            if not attrs.get("missing") and attrs["kind"] not in schema:
                warnings.append(f"Node {node_id} has unknown kind '{attrs['kind']}'")

        return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)

    def _invalid_ports(self, G: nx.MultiDiGraph) -> list[str]:
        schema = self.canvas.context.schema
        problems = []
        for source, target, edge_id, data in G.edges(keys=True, data=True):
            for node_id, port, side in (
                (source, data["output"], PortSide.OUTPUT),
                (target, data["input"], PortSide.INPUT),
            ):
                attrs = G.nodes[node_id]
                if attrs.get("missing"):
                    continue
                if not has_port(schema, attrs["kind"], side, port):
                    problems.append(
                        f"Edge {edge_id}: node {node_id} ('{attrs['kind']}') has no {side.value} port {port!r}"
                    )
        return problems

    def trace_node(self, node_id: int) -> NodeTrace:
        """Trace detailed information about a specific node.

        Shows "points from" (incoming edges) and "points to" (outgoing edges).
        """
        G = self.graph
        if node_id not in G.nodes or G.nodes[node_id].get("missing"):
            return NodeTrace(status="NOT_FOUND", node_id=node_id)

        attrs = G.nodes[node_id]
        incoming = [
            {"edge": key, "from": src, "output": data["output"], "input": data["input"]}
            for src, _, key, data in G.in_edges(node_id, keys=True, data=True)
        ]
        outgoing = [
            {"edge": key, "to": tgt, "output": data["output"], "input": data["input"]}
            for _, tgt, key, data in G.out_edges(node_id, keys=True, data=True)
        ]
        size = self.canvas.context.content_dimensions.get(node_id)
        return NodeTrace(
            status="FOUND",
            node_id=node_id,
            kind=attrs["kind"],
            position=attrs["position"],
            size=tuple(size) if size is not None else None,
            incoming_edges=incoming,
            outgoing_edges=outgoing,
        )

    def find_issues(self) -> IssueReport:
        """Run comprehensive diagnostics and return all found issues.

        This is the main debugging entry point.
        """
        G = self.graph
        ctx = self.canvas.context
        report = IssueReport()

        for source, target, edge_id in G.edges(keys=True):
            missing = [n for n in (source, target) if G.nodes[n].get("missing")]
            if missing:
                report.dangling_edges.append(f"{edge_id}: {source} -> {target} (missing {missing})")
            if source == target:
                report.self_loops.append(f"{edge_id}: {source}")

        report.invalid_ports = self._invalid_ports(G)

        validator = ConnectorValidator(self.expected_anchors(), self.extract_connectors(), self.tolerance)
        for edge_id, issues in validator.validate_all().items():
            report.misplaced_connectors.extend(f"{edge_id}: {issue}" for issue in issues)

        report.orphan_elements = self._orphan_elements()
        report.unmeasured_nodes = sorted(n for n in ctx.nodes if n not in ctx.content_dimensions)
        return report

    def _orphan_elements(self) -> list[str]:
        surface = self.canvas.surface
        if surface is None:
            return []
        ctx = self.canvas.context
        orphans = []
        for layer, known in (("nodes", ctx.nodes), ("edges", ctx.edges)):
            for element in surface.layer(layer):
                raw_id = element.get("data-id")
                if raw_id is None or int(raw_id) not in known:
                    orphans.append(f"{layer}: element data-id={raw_id}")
        return orphans

    def debug_dump(self) -> dict[str, Any]:
        """Return a complete state snapshot for debugging."""
        G = self.graph
        ctx = self.canvas.context
        validation = self.validate()
        return {
            "nodes": [
                {
                    "id": node_id,
                    "kind": attrs.get("kind"),
                    "missing": attrs.get("missing", False),
                    "position": list(attrs["position"]) if "position" in attrs else None,
                    "size": list(ctx.content_dimensions[node_id]) if node_id in ctx.content_dimensions else None,
                }
                for node_id, attrs in G.nodes(data=True)
            ],
            "edges": [
                {"id": key, "source": src, "target": tgt, "output": data["output"], "input": data["input"]}
                for src, tgt, key, data in G.edges(keys=True, data=True)
            ],
            "validation": {
                "valid": validation.valid,
                "errors": validation.errors,
                "warnings": validation.warnings,
            },
            "stats": {
                "total_nodes": len(ctx.nodes),
                "total_edges": len(ctx.edges),
                "rendered_edges": len(self.canvas.edges.handles),
                "has_cycles": not nx.is_directed_acyclic_graph(G),
            },
        }


def validate_canvas(canvas: Canvas) -> ValidationResult:
    """Quick validation of a canvas.

    Example:
        >>> result = validate_canvas(canvas)
        >>> if not result.valid:
        ...     print("Errors:", result.errors)
    """
    return CanvasDebugger(canvas).validate()


def find_issues(canvas: Canvas) -> IssueReport:
    """Quick issue discovery for a canvas.

    Example:
        >>> issues = find_issues(canvas)
        >>> if issues.has_issues:
        ...     print("Dangling edges:", issues.dangling_edges)
    """
    return CanvasDebugger(canvas).find_issues()

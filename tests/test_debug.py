"""Tests for canvas debugging and validation utilities."""

from __future__ import annotations

from blockcanvas import Edge, Node, Point, Size, Source, Target
from blockcanvas.debug import (
    CanvasDebugger,
    ConnectorGeometry,
    ConnectorValidator,
    find_issues,
    format_issues,
    validate_canvas,
)
from blockcanvas.render.surface import append, select_all
from conftest import make_model, two_node_model


class TestConnectorValidator:
    def test_matching_connector_is_valid(self):
        validator = ConnectorValidator(
            anchors={1: (Point(120, 20), Point(180, 20))},
            connectors=[ConnectorGeometry(1, Point(120, 20), Point(180, 20))],
        )
        assert validator.validate_all() == {}

    def test_offset_reported(self):
        validator = ConnectorValidator(
            anchors={1: (Point(120, 20), Point(180, 20))},
            connectors=[ConnectorGeometry(1, Point(120, 20), Point(180, 50))],
        )
        issues = validator.validate_all()
        assert list(issues) == [1]
        assert "end" in issues[1][0]
        assert "30.0px" in issues[1][0]

    def test_tolerance(self):
        validator = ConnectorValidator(
            anchors={1: (Point(0, 0), Point(10, 10))},
            connectors=[ConnectorGeometry(1, Point(0.5, 0), Point(10, 10))],
            tolerance=1.0,
        )
        assert validator.validate_all() == {}

    def test_connector_without_edge(self):
        validator = ConnectorValidator(anchors={}, connectors=[ConnectorGeometry(4, Point(0, 0), Point(1, 1))])
        assert validator.validate_all() == {4: ["Connector 4 has no edge in the model"]}

    def test_format_issues(self):
        text = format_issues({3: ["first", "second"]})
        assert text == "  edge 3:\n    - first\n    - second"


class TestValidate:
    def test_clean_canvas(self, canvas):
        canvas.update(two_node_model())
        result = validate_canvas(canvas)
        assert result.valid
        assert result.errors == []

    def test_dangling_and_self_loop(self, canvas):
        canvas.update(
            make_model(
                nodes=[Node(1, "add", Point(0, 0))],
                edges=[Edge(1, Source(1, 0), Target(1, 0)), Edge(2, Source(1, 0), Target(9, 0))],
            )
        )
        result = CanvasDebugger(canvas).validate()
        assert not result.valid
        assert "Edge 1 is a self-loop on node 1" in result.errors
        assert "Edge 2 target node 9 not found (source: 1)" in result.errors

    def test_undeclared_port(self, canvas):
        canvas.update(
            make_model(
                nodes=[Node(1, "source", Point(0, 0)), Node(2, "sink", Point(180, 0))],
                edges=[Edge(1, Source(1, 0), Target(2, "bogus"))],
            )
        )
        result = CanvasDebugger(canvas).validate()
        assert result.errors == ["Edge 1: node 2 ('sink') has no input port 'bogus'"]

    def test_unknown_kind_is_warning(self, canvas):
        canvas.update(make_model(nodes=[Node(1, "mystery", Point(0, 0))]))
        result = CanvasDebugger(canvas).validate()
        assert result.valid
        assert result.warnings == ["Node 1 has unknown kind 'mystery'"]


class TestFindIssues:
    def test_clean_canvas(self, canvas):
        canvas.update(two_node_model())
        report = find_issues(canvas)
        assert not report.has_issues
        assert report.unmeasured_nodes == []

    def test_dangling_edge(self, canvas):
        canvas.update(make_model(nodes=[Node(1, "source", Point(0, 0))], edges=two_node_model().edges.values()))
        report = find_issues(canvas)
        assert report.has_issues
        assert report.dangling_edges == ["10: 1 -> 2 (missing [2])"]

    def test_tampered_connector_detected(self, canvas):
        canvas.update(two_node_model())
        for path in select_all(canvas.edges.handles[10], "path", "curve"):
            path.set("d", "M 0 0 Q 0 0 0 0 T 0 0")
        report = find_issues(canvas)
        assert len(report.misplaced_connectors) == 2
        assert all(issue.startswith("10: ") for issue in report.misplaced_connectors)

    def test_orphan_element_detected(self, canvas):
        canvas.update(two_node_model())
        append(canvas.surface.layer("nodes"), "g", {"class": "node", "data-id": "77"})
        assert find_issues(canvas).orphan_elements == ["nodes: element data-id=77"]

    def test_unmeasured_nodes_not_an_issue(self, canvas, oracle):
        oracle.default = None
        canvas.update(two_node_model())
        report = find_issues(canvas)
        assert report.unmeasured_nodes == [1, 2]
        assert not report.has_issues

    def test_to_dict(self, canvas):
        canvas.update(two_node_model())
        data = find_issues(canvas).to_dict()
        assert data["has_issues"] is False
        assert set(data) >= {"dangling_edges", "misplaced_connectors", "unmeasured_nodes"}


class TestTraceNode:
    def test_found(self, canvas):
        canvas.update(two_node_model())
        trace = CanvasDebugger(canvas).trace_node(2)
        assert trace.status == "FOUND"
        assert trace.kind == "sink"
        assert trace.size == (120, 60)
        assert trace.incoming_edges == [{"edge": 10, "from": 1, "output": 0, "input": 0}]
        assert trace.outgoing_edges == []

    def test_not_found(self, canvas):
        assert CanvasDebugger(canvas).trace_node(5).status == "NOT_FOUND"


class TestDebugDump:
    def test_snapshot(self, canvas):
        canvas.update(two_node_model())
        dump = CanvasDebugger(canvas).debug_dump()
        assert dump["stats"] == {"total_nodes": 2, "total_edges": 1, "rendered_edges": 1, "has_cycles": False}
        assert dump["validation"]["valid"] is True
        assert {n["id"] for n in dump["nodes"]} == {1, 2}

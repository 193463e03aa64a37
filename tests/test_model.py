"""Tests for graph model snapshots."""

from __future__ import annotations

import pytest

from blockcanvas import Edge, GraphModel, ModelError, Node, Point, Source, Target
from conftest import two_node_model


class TestNode:
    def test_position_coerced_to_point(self):
        node = Node(1, "add", (40, 80))
        assert node.position == Point(40, 80)

    def test_params_default_empty(self):
        assert Node(1, "add", Point(0, 0)).params == {}

    def test_frozen(self):
        node = Node(1, "add", Point(0, 0))
        with pytest.raises(AttributeError):
            node.kind = "sink"  # type: ignore[misc]


class TestBuild:
    def test_keys_by_id(self):
        model = two_node_model()
        assert sorted(model.nodes) == [1, 2]
        assert list(model.edges) == [10]

    def test_duplicate_node_id_raises(self):
        with pytest.raises(ModelError, match="Duplicate node id 1"):
            GraphModel.build(nodes=[Node(1, "a", Point(0, 0)), Node(1, "b", Point(0, 0))])

    def test_duplicate_edge_id_raises(self):
        edge = Edge(5, Source(1, 0), Target(2, 0))
        with pytest.raises(ModelError, match="Duplicate edge id 5"):
            GraphModel.build(edges=[edge, edge])

    def test_equal_snapshots_compare_equal(self):
        assert two_node_model() == two_node_model()


class TestDanglingEdges:
    def test_none_when_complete(self):
        assert two_node_model().dangling_edges() == []

    def test_reports_edge_with_missing_target(self):
        model = GraphModel.build(
            nodes=[Node(1, "source", Point(0, 0))],
            edges=[Edge(10, Source(1, 0), Target(2, 0))],
        )
        assert [e.id for e in model.dangling_edges()] == [10]


class TestNetworkXView:
    def test_edges_keyed_by_id(self):
        G = two_node_model().to_nx_graph()
        assert list(G.edges(keys=True)) == [(1, 2, 10)]
        assert G.edges[1, 2, 10]["output"] == 0
        assert G.edges[1, 2, 10]["input"] == 0

    def test_node_attributes(self):
        G = two_node_model().to_nx_graph()
        assert G.nodes[2]["kind"] == "sink"
        assert G.nodes[2]["position"] == Point(180, 0)
        assert G.nodes[2]["missing"] is False

    def test_missing_endpoint_marked(self):
        model = GraphModel.build(edges=[Edge(1, Source(7, 0), Target(8, "in"))])
        G = model.to_nx_graph()
        assert G.nodes[7]["missing"] is True
        assert G.nodes[8]["missing"] is True


class TestDictConversion:
    def test_from_dict(self):
        model = GraphModel.from_dict(
            {
                "nodes": [
                    {"id": 1, "kind": "source", "position": [0, 40], "params": {"value": 3}},
                    {"id": 2, "kind": "sink", "position": [240, 40]},
                ],
                "edges": [{"id": 1, "source": {"id": 1, "output": "out"}, "target": {"id": 2, "input": 0}}],
            }
        )
        assert model.nodes[1].params == {"value": "3"}
        assert model.nodes[2].position == Point(240, 40)
        assert model.edges[1].source == Source(1, "out")
        assert model.edges[1].target == Target(2, 0)

    def test_round_trip(self):
        model = two_node_model()
        assert GraphModel.from_dict(model.to_dict()) == model

    def test_missing_field_raises_model_error(self):
        with pytest.raises(ModelError, match="Malformed graph data"):
            GraphModel.from_dict({"nodes": [{"id": 1}]})

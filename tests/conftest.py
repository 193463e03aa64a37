"""Shared fixtures for blockcanvas tests."""

from __future__ import annotations

import pytest

from blockcanvas import (
    BlockSchema,
    Canvas,
    CanvasConfig,
    Edge,
    GraphModel,
    IntentProcessor,
    Node,
    Point,
    Size,
    Source,
    SvgSurface,
    Target,
)


SCHEMA = {
    "source": BlockSchema(outputs=("out",), params=("value",), label="Source"),
    "add": BlockSchema(inputs=("a", "b"), outputs=("sum",), params=("scale",)),
    "sink": BlockSchema(inputs=("in",)),
}


class RecordingProcessor(IntentProcessor):
    """Collects all intents for assertion."""

    def __init__(self):
        self.intents: list = []
        self.shutdown_called = False

    def on_intent(self, intent):
        self.intents.append(intent)

    def shutdown(self):
        self.shutdown_called = True

    def of_type(self, cls):
        return [i for i in self.intents if isinstance(i, cls)]


class FixedOracle:
    """Layout oracle returning preset sizes; unknown ids stay unmeasured."""

    def __init__(self, sizes: dict[int, Size] | None = None, default: Size | None = None):
        self.sizes = dict(sizes or {})
        self.default = default
        self.calls: list[int] = []

    def __call__(self, node):
        self.calls.append(node.id)
        return self.sizes.get(node.id, self.default)


def make_model(nodes=(), edges=()) -> GraphModel:
    return GraphModel.build(nodes=nodes, edges=edges)


def two_node_model(b_position=(180, 0)) -> GraphModel:
    """Node 1 (source) wired to node 2 (sink) through edge 10."""
    return make_model(
        nodes=[Node(1, "source", Point(0, 0)), Node(2, "sink", Point.of(b_position))],
        edges=[Edge(10, Source(1, 0), Target(2, 0))],
    )


@pytest.fixture
def schema():
    return dict(SCHEMA)


@pytest.fixture
def oracle():
    return FixedOracle(default=Size(120, 60))


@pytest.fixture
def processor():
    return RecordingProcessor()


@pytest.fixture
def config(schema, oracle):
    return CanvasConfig(unit=60, dimensions=(10, 10), schema=schema, layout_oracle=oracle)


@pytest.fixture
def canvas(config, processor):
    c = Canvas(config, processors=[processor])
    c.attach(SvgSurface(config.unit, config.extent))
    return c

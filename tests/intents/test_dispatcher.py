"""Tests for intent types, processors and the dispatcher."""

from __future__ import annotations

import logging

import pytest

from blockcanvas.coordinates import Point
from blockcanvas.intents import (
    CallbackProcessor,
    Connect,
    CreateNode,
    IntentDispatcher,
    IntentProcessor,
    TypedIntentProcessor,
    UpdateParam,
)
from blockcanvas.model import Source, Target


class FailingProcessor(IntentProcessor):
    def on_intent(self, intent):
        raise RuntimeError("boom")

    def shutdown(self):
        raise RuntimeError("shutdown boom")


class CollectingProcessor(IntentProcessor):
    def __init__(self):
        self.intents = []
        self.shutdown_called = False

    def on_intent(self, intent):
        self.intents.append(intent)

    def shutdown(self):
        self.shutdown_called = True


class TestIntentTypes:
    def test_timestamp_ignored_in_equality(self):
        a = CreateNode(kind="add", position=Point(40, 0), timestamp=1.0)
        b = CreateNode(kind="add", position=Point(40, 0), timestamp=2.0)
        assert a == b

    def test_timestamp_defaults_to_now(self):
        assert UpdateParam(node_id=1, param="x", value="2").timestamp > 0


class TestTypedIntentProcessor:
    def test_routes_by_type(self):
        seen = []

        class Handler(TypedIntentProcessor):
            def on_create_node(self, intent):
                seen.append(("create", intent.kind))

            def on_connect(self, intent):
                seen.append(("connect", intent.source.id, intent.target.id))

        handler = Handler()
        handler.on_intent(CreateNode(kind="add"))
        handler.on_intent(Connect(source=Source(1, 0), target=Target(2, 0)))
        handler.on_intent(UpdateParam(node_id=1, param="x", value="1"))

        assert seen == [("create", "add"), ("connect", 1, 2)]


class TestCallbackProcessor:
    def test_forwards_intents(self):
        received = []
        processor = CallbackProcessor(received.append)
        intent = CreateNode(kind="sink")
        processor.on_intent(intent)
        assert received == [intent]


class TestIntentDispatcher:
    def test_inactive_without_processors(self):
        assert not IntentDispatcher().active

    def test_emits_to_all_processors(self):
        first, second = CollectingProcessor(), CollectingProcessor()
        dispatcher = IntentDispatcher([first, second])
        intent = CreateNode(kind="add")
        dispatcher.emit(intent)
        assert first.intents == [intent]
        assert second.intents == [intent]

    def test_add_and_remove(self):
        processor = CollectingProcessor()
        dispatcher = IntentDispatcher()
        dispatcher.add(processor)
        assert dispatcher.active
        dispatcher.remove(processor)
        dispatcher.remove(processor)
        assert not dispatcher.active

    def test_failure_logged_and_swallowed(self, caplog):
        collector = CollectingProcessor()
        dispatcher = IntentDispatcher([FailingProcessor(), collector])
        with caplog.at_level(logging.WARNING, logger="blockcanvas.intents.dispatcher"):
            dispatcher.emit(CreateNode(kind="add"))
        assert len(collector.intents) == 1
        assert "Dropped CreateNode for processor" in caplog.text

    def test_strict_propagates(self):
        dispatcher = IntentDispatcher([FailingProcessor()], strict=True)
        with pytest.raises(RuntimeError, match="boom"):
            dispatcher.emit(CreateNode(kind="add"))

    def test_shutdown_reaches_every_processor(self):
        collector = CollectingProcessor()
        dispatcher = IntentDispatcher([FailingProcessor(), collector])
        dispatcher.shutdown()
        assert collector.shutdown_called

    def test_strict_shutdown_raises_after_all(self):
        collector = CollectingProcessor()
        dispatcher = IntentDispatcher([FailingProcessor(), collector], strict=True)
        with pytest.raises(RuntimeError, match="shutdown boom"):
            dispatcher.shutdown()
        assert collector.shutdown_called

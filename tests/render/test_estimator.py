"""Tests for the default layout oracle."""

from __future__ import annotations

from blockcanvas import BlockSchema, LayoutEstimator, LayoutMetrics, Node, Point, Size
from conftest import SCHEMA

METRICS = LayoutMetrics()


class TestLayoutEstimator:
    def test_height_from_ports_and_params(self):
        size = LayoutEstimator(SCHEMA, METRICS)(Node(1, "add", Point(0, 0)))
        # header + 2 port rows + 1 param row + padding
        assert size.height == 20 + 2 * 24 + 24 + 8

    def test_minimum_width(self):
        size = LayoutEstimator(SCHEMA, METRICS)(Node(1, "sink", Point(0, 0)))
        assert size == Size(120, 20 + 24 + 8)

    def test_long_label_widens(self):
        schema = {"wide": BlockSchema(label="x" * 30)}
        size = LayoutEstimator(schema, METRICS)(Node(1, "wide", Point(0, 0)))
        assert size.width == 30 * 7 + 2 * 12

    def test_unknown_kind_unmeasured(self):
        assert LayoutEstimator(SCHEMA, METRICS)(Node(1, "mystery", Point(0, 0))) is None

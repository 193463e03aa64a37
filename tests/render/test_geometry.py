"""Tests for connector curve geometry."""

from __future__ import annotations

import pytest

from blockcanvas.coordinates import Point
from blockcanvas.render.geometry import MIN_CURVE_EXTENT, control_offset, curve_path, parse_path_endpoints


class TestControlOffset:
    def test_quarter_of_horizontal_span(self):
        assert control_offset(Point(0, 0), Point(100, 0)) == 25

    def test_widened_by_vertical_span(self):
        assert control_offset(Point(0, 0), Point(40, 100)) == 50

    def test_capped_on_long_vertical_runs(self):
        assert control_offset(Point(0, 0), Point(0, 1000)) == MIN_CURVE_EXTENT

    def test_backward_connector(self):
        # Target left of source: the vertical term still pushes the control point right
        assert control_offset(Point(200, 0), Point(0, 80)) == 40

    @pytest.mark.parametrize(
        "p1, p2",
        [
            (Point(0, 0), Point(300, 50)),
            (Point(10, 10), Point(-300, -500)),
            (Point(5, 5), Point(5, 5)),
            (Point(0, 0), Point(1000, 1000)),
            (Point(0, 0), Point(-1000, 30)),
            (Point(-50, 20), Point(60, -400)),
            (Point(0, 0), Point(416, 208)),
            (Point(0, 0), Point(0.5, -0.25)),
        ],
    )
    def test_bounds(self, p1, p2):
        offset = control_offset(p1, p2)
        dx, dy = p2.x - p1.x, p2.y - p1.y
        assert offset >= dx / 4
        assert offset >= min(MIN_CURVE_EXTENT, abs(dy) / 2)
        assert offset <= max(dx / 4, min(MIN_CURVE_EXTENT, abs(dy) / 2))

    def test_bounds_over_grid(self):
        steps = range(-1200, 1201, 75)
        for dx in steps:
            for dy in steps:
                offset = control_offset(Point(0, 0), Point(dx, dy))
                lower = max(dx / 4, min(MIN_CURVE_EXTENT, abs(dy) / 2))
                assert offset == pytest.approx(lower), (dx, dy)


class TestCurvePath:
    def test_horizontal_connector(self):
        assert curve_path(Point(120, 20), Point(180, 20)) == "M 120 20 Q 135 20 150 20 T 180 20"

    def test_control_point_level_with_source(self):
        d = curve_path(Point(0, 0), Point(100, 200))
        assert d == "M 0 0 Q 100 0 50 100 T 100 200"

    def test_degenerate_connector(self):
        assert curve_path(Point(30, 30), Point(30, 30)) == "M 30 30 Q 30 30 30 30 T 30 30"

    def test_fractional_coordinates(self):
        assert curve_path(Point(0, 0), Point(10, 1)) == "M 0 0 Q 2.5 0 5 0.5 T 10 1"

    def test_endpoints_recoverable(self):
        p1, p2 = Point(12.5, -40), Point(300, 77)
        assert parse_path_endpoints(curve_path(p1, p2)) == (p1, p2)


class TestParsePathEndpoints:
    @pytest.mark.parametrize("d", [None, "", "M 0 0 L 10 10", "M a b Q 1 1 2 2 T 3 3"])
    def test_rejects_foreign_paths(self, d):
        assert parse_path_endpoints(d) is None

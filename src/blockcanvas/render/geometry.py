"""Connector curve geometry.

A connector is two quadratic segments joined at the midpoint of its
endpoints: the first leaves the source horizontally toward a control point
level with the source, the second is its smooth reflection ending at the
target.
"""

from __future__ import annotations

from blockcanvas.coordinates import Point
from blockcanvas.render.surface import format_number

# Upper bound of the horizontal control offset on long vertical runs
MIN_CURVE_EXTENT = 104


def control_offset(p1: Point, p2: Point) -> float:
    """Horizontal distance from the source to the first control point.

    At least a quarter of the horizontal span, widened toward half the
    vertical span but never beyond MIN_CURVE_EXTENT.

    Example:
        >>> control_offset(Point(0, 0), Point(100, 0))
        25.0
        >>> control_offset(Point(0, 0), Point(100, 400))
        104
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    return max(min(MIN_CURVE_EXTENT, abs(dy / 2)), dx / 4)


def curve_path(p1: Point, p2: Point) -> str:
    """SVG path description of a connector from p1 to p2.

    Pure and total: defined for any two finite points, including p1 == p2.

    Example:
        >>> curve_path(Point(120, 20), Point(180, 20))
        'M 120 20 Q 135 20 150 20 T 180 20'
    """
    x1, y1 = p1
    x2, y2 = p2
    dx = x2 - x1
    dy = y2 - y1
    mx = x1 + dx / 2
    my = y1 + dy / 2
    qx = x1 + control_offset(p1, p2)
    f = format_number
    return f"M {f(x1)} {f(y1)} Q {f(qx)} {f(y1)} {f(mx)} {f(my)} T {f(x2)} {f(y2)}"


def parse_path_endpoints(d: str | None) -> tuple[Point, Point] | None:
    """Recover the start and end points of a path built by curve_path.

    Returns None for anything that is not a ``M ... T x y`` path.
    """
    if not d:
        return None
    tokens = d.split()
    if len(tokens) < 6 or tokens[0] != "M" or tokens[-3] != "T":
        return None
    try:
        start = Point(float(tokens[1]), float(tokens[2]))
        end = Point(float(tokens[-2]), float(tokens[-1]))
    except ValueError:
        return None
    return start, end

"""Coordinate primitives shared by the model and the renderer.

All coordinates are canvas pixels with the origin at the top-left corner of
the canvas.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """Immutable 2D point.

    Attributes:
        x: X coordinate
        y: Y coordinate

    Example:
        >>> Point(10, 20) + Point(5, 5)
        Point(x=15, y=25)
        >>> x, y = Point(3, 4)
        >>> (x, y)
        (3, 4)
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @property
    def is_finite(self) -> bool:
        """True if both coordinates are finite numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def of(cls, value: Point | tuple[float, float] | list[float]) -> Point:
        """Coerce a pair-like value to a Point.

        Example:
            >>> Point.of([1, 2])
            Point(x=1, y=2)
        """
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(x, y)


@dataclass(frozen=True)
class Size:
    """Measured width and height of a node's rendered body."""

    width: float
    height: float

    def __iter__(self) -> Iterator[float]:
        yield self.width
        yield self.height

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.width) and math.isfinite(self.height)

    @classmethod
    def of(cls, value: Size | tuple[float, float] | list[float]) -> Size:
        if isinstance(value, Size):
            return value
        width, height = value
        return cls(width, height)


ORIGIN = Point(0, 0)

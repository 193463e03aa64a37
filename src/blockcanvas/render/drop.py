"""Palette drop placement with grid snapping."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from blockcanvas.coordinates import ORIGIN, Point
from blockcanvas.intents.types import CreateNode

logger = logging.getLogger(__name__)


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def snap(value: float, unit: float, extent: float) -> float:
    """Snap one coordinate to the nearest multiple of *unit* within [0, extent).

    Example:
        >>> snap(133, 40, 600), snap(-5, 40, 600), snap(1000, 40, 600)
        (120, 0, 560)
    """
    steps = _round_half_away(value / unit)
    last = max(math.ceil(extent / unit) - 1, 0)
    steps = min(max(steps, 0), last)
    return int(steps) * unit


def place(pointer: Point, unit: float, extent: Point) -> Point:
    """Snap a canvas-relative pointer position onto the grid.

    Both coordinates become exact multiples of *unit* clamped to
    ``[0, extent)``.

    Example:
        >>> place(Point(133, 47), 40, Point(600, 400))
        Point(x=120, y=40)
    """
    return Point(snap(pointer.x, unit, extent.x), snap(pointer.y, unit, extent.y))


class DropPlacer:
    """Turns palette drops into CreateNode intents.

    Args:
        unit: Grid unit in pixels
        extent: Canvas size in pixels
        emit: Receives the CreateNode intent
    """

    def __init__(self, unit: float, extent: Point, emit: Callable[[CreateNode], None] | None = None) -> None:
        self.unit = unit
        self.extent = extent
        self.emit = emit

    def drop(self, kind: str, client_offset: Point | None, canvas_origin: Point = ORIGIN) -> CreateNode | None:
        """Handle a drop of a palette item.

        Args:
            kind: Block kind of the dropped palette item
            client_offset: Pointer position reported by the gesture library,
                or None if it could not report one
            canvas_origin: Client position of the canvas's top-left corner

        Returns:
            The emitted intent, or None if the drop was cancelled
        """
        if client_offset is None or not client_offset.is_finite or not canvas_origin.is_finite:
            logger.debug("Drop of %r cancelled: pointer offset unavailable", kind)
            return None
        position = place(client_offset - canvas_origin, self.unit, self.extent)
        intent = CreateNode(kind=kind, position=position)
        if self.emit is not None:
            self.emit(intent)
        return intent

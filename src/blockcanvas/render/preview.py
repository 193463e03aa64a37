"""Live connector preview for an in-progress connection gesture.

The "preview" layer holds a single dashed connector and a cursor circle.
It is always present and hidden between gestures. Pointer moves write the
path attribute directly instead of going through a reconciliation pass, so
dragging never touches the model or the node and edge layers.

Gesture lifecycle::

    IDLE -> DRAGGING -> CONNECTED   (dropped over a compatible port)
                     -> CANCELLED   (dropped elsewhere, or escape)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element

from blockcanvas.coordinates import Point
from blockcanvas.intents.types import Connect
from blockcanvas.model import PortRef, Source, Target
from blockcanvas.render.geometry import curve_path
from blockcanvas.render.ports import resolve_port
from blockcanvas.render.surface import append, classed, format_number
from blockcanvas.schema import PortSide, has_port

if TYPE_CHECKING:
    from blockcanvas.render.context import RenderContext

logger = logging.getLogger(__name__)

PREVIEW_CURSOR_RADIUS = 6


class GestureState(Enum):
    """State of the connection gesture."""

    IDLE = "idle"
    DRAGGING = "dragging"
    CONNECTED = "connected"
    CANCELLED = "cancelled"


class DragPreview:
    """Drives the preview connector from logical pointer events.

    Args:
        ctx: Render context used to resolve the origin port's anchor
        emit: Receives the Connect intent when a gesture completes
    """

    def __init__(self, ctx: RenderContext, emit: Callable[[Connect], None] | None = None) -> None:
        self.ctx = ctx
        self.emit = emit
        self.state = GestureState.IDLE
        self.origin: PortRef | None = None
        self.pointer: Point | None = None
        self._group: Element | None = None
        self._path: Element | None = None
        self._cursor: Element | None = None

    @property
    def attached(self) -> bool:
        return self._group is not None

    @property
    def dragging(self) -> bool:
        return self.state is GestureState.DRAGGING

    def attach(self, group: Element) -> None:
        """Populate the preview layer. Safe to call again after a reconfigure."""
        for child in list(group):
            group.remove(child)
        self._group = group
        self._path = append(group, "path", {"class": "curve", "d": ""})
        self._cursor = append(group, "circle", {"r": format_number(PREVIEW_CURSOR_RADIUS), "cx": "0", "cy": "0"})
        self._hide()

    def start(self, port: PortRef, pointer: Point) -> bool:
        """Pointer-down on a port.

        Returns:
            True if a drag started (the port's node exists and the preview
            layer is attached)
        """
        if not self.attached or port.node_id not in self.ctx.nodes:
            return False
        self.state = GestureState.DRAGGING
        self.origin = port
        classed(self._group, "hidden", False)
        self.move(pointer)
        return True

    def move(self, pointer: Point) -> None:
        """Pointer-move: redraw the preview to the current pointer position."""
        if not self.dragging or self.origin is None:
            return
        if not pointer.is_finite:
            return
        self.pointer = pointer
        anchor = resolve_port(self.ctx, self.origin.node_id, self.origin.port, self.origin.side)
        if self.origin.side is PortSide.OUTPUT:
            d = curve_path(anchor, pointer)
        else:
            d = curve_path(pointer, anchor)
        self._path.set("d", d)
        self._cursor.set("cx", format_number(pointer.x))
        self._cursor.set("cy", format_number(pointer.y))

    def drop(self, pointer: Point, over: PortRef | None = None) -> Connect | None:
        """Pointer-up, optionally over a port.

        Emits a Connect intent (normalised to output -> input) when *over*
        is compatible with the origin port; otherwise the gesture is
        cancelled without side effects.
        """
        if not self.dragging or self.origin is None:
            return None
        self.pointer = pointer

        if over is None or not self.is_compatible(over):
            self._finish(GestureState.CANCELLED)
            return None

        output, input_ = (self.origin, over) if self.origin.side is PortSide.OUTPUT else (over, self.origin)
        intent = Connect(
            source=Source(output.node_id, output.port),
            target=Target(input_.node_id, input_.port),
        )
        self._finish(GestureState.CONNECTED)
        if self.emit is not None:
            self.emit(intent)
        return intent

    def cancel(self) -> None:
        """Escape: abandon the gesture."""
        if self.dragging:
            self._finish(GestureState.CANCELLED)

    def is_compatible(self, over: PortRef) -> bool:
        """True if a gesture from the origin may end on *over*.

        The target must be on the opposite side, on a different node that
        exists, and be a port its kind declares.
        """
        origin = self.origin
        if origin is None or over.side is not origin.side.opposite:
            return False
        if over.node_id == origin.node_id:
            return False
        node = self.ctx.nodes.get(over.node_id)
        if node is None:
            return False
        return has_port(self.ctx.schema, node.kind, over.side, over.port)

    def _finish(self, state: GestureState) -> None:
        logger.debug("Connection gesture from %s ended: %s", self.origin, state.value)
        self.state = state
        self.origin = None
        self._hide()

    def _hide(self) -> None:
        if self._group is not None:
            classed(self._group, "hidden", True)

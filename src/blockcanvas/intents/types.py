"""Intent types emitted by the canvas toward the external state container."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from blockcanvas.coordinates import Point
from blockcanvas.model import Source, Target


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseIntent:
    """Base class for all intents.

    Attributes:
        timestamp: Unix timestamp when the intent was created.
    """

    timestamp: float = field(default_factory=_now, compare=False)


@dataclass(frozen=True)
class CreateNode(BaseIntent):
    """Emitted when a palette item is dropped on the canvas.

    Attributes:
        kind: Block kind of the dropped palette item.
        position: Snapped top-left corner in canvas pixels.
    """

    kind: str = ""
    position: Point = Point(0, 0)


@dataclass(frozen=True)
class Connect(BaseIntent):
    """Emitted when a connection gesture ends over a compatible port.

    Always normalised to output -> input, whichever end the gesture
    started from.

    Attributes:
        source: Output port the edge starts from.
        target: Input port the edge ends at.
    """

    source: Source = Source(0, 0)
    target: Target = Target(0, 0)


@dataclass(frozen=True)
class UpdateParam(BaseIntent):
    """Emitted when a parameter widget reports a new value.

    Attributes:
        node_id: Node owning the parameter.
        param: Parameter name.
        value: New value as entered.
    """

    node_id: int = 0
    param: str = ""
    value: str = ""


Intent = CreateNode | Connect | UpdateParam

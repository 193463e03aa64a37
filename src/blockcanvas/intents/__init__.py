"""Intents: mutation requests the canvas sends to the state container."""

from blockcanvas.intents.dispatcher import IntentDispatcher
from blockcanvas.intents.processor import (
    CallbackProcessor,
    IntentProcessor,
    TypedIntentProcessor,
)
from blockcanvas.intents.types import (
    BaseIntent,
    Connect,
    CreateNode,
    Intent,
    UpdateParam,
)

__all__ = [
    # Intent types
    "BaseIntent",
    "Connect",
    "CreateNode",
    "Intent",
    "UpdateParam",
    # Processor interfaces
    "CallbackProcessor",
    "IntentProcessor",
    "TypedIntentProcessor",
    # Dispatcher
    "IntentDispatcher",
]

"""Intent processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blockcanvas.intents.types import Connect, CreateNode, Intent, UpdateParam


# Mapping from intent class name to handler method name.
_INTENT_METHOD_MAP: dict[str, str] = {
    "CreateNode": "on_create_node",
    "Connect": "on_connect",
    "UpdateParam": "on_update_param",
}


class IntentProcessor:
    """Base class for intent consumers.

    Subclass and override ``on_intent`` to receive all intents,
    or use ``TypedIntentProcessor`` for per-type dispatch.
    """

    def on_intent(self, intent: Intent) -> None:
        """Called for every intent. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the canvas is closed. Override to flush buffers."""


class TypedIntentProcessor(IntentProcessor):
    """Dispatches ``on_intent`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific intent types.
    Unhandled intent types are silently ignored.
    """

    def on_intent(self, intent: Intent) -> None:
        method_name = _INTENT_METHOD_MAP.get(type(intent).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(intent)

    def on_create_node(self, intent: CreateNode) -> None: ...
    def on_connect(self, intent: Connect) -> None: ...
    def on_update_param(self, intent: UpdateParam) -> None: ...


class CallbackProcessor(IntentProcessor):
    """Forwards every intent to a plain callable (e.g. a store's dispatch)."""

    def __init__(self, callback) -> None:
        self._callback = callback

    def on_intent(self, intent: Intent) -> None:
        self._callback(intent)

    def __repr__(self) -> str:
        return f"CallbackProcessor({self._callback!r})"

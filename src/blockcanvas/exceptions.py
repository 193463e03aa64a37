"""Exceptions for blockcanvas configuration, schema and model loading.

Rendering itself never raises: stale geometry, dangling edges, a missing
surface and unresolvable drops all degrade gracefully. These exceptions are
reserved for mistakes made when building a canvas.
"""

from __future__ import annotations


class BlockCanvasError(Exception):
    """Base class for all blockcanvas errors."""


class CanvasConfigError(BlockCanvasError):
    """Invalid structural canvas configuration.

    Raised when a CanvasConfig is built with a non-positive grid unit or
    non-positive canvas dimensions.

    Attributes:
        field: Name of the offending configuration field
        value: The rejected value
        message: Human-readable error message
    """

    def __init__(self, field: str, value: object, message: str | None = None) -> None:
        self.field = field
        self.value = value
        self.message = message or f"Invalid canvas {field}: {value!r}"
        super().__init__(self.message)


class ModelError(BlockCanvasError):
    """Malformed graph snapshot (duplicate ids or unreadable data)."""


class SchemaError(BlockCanvasError):
    """Malformed block schema declaration.

    Attributes:
        kind: The block kind whose declaration is invalid (None for the
            schema as a whole)
        message: Human-readable error message
    """

    def __init__(self, message: str, *, kind: str | None = None) -> None:
        self.kind = kind
        self.message = message if kind is None else f"Block kind '{kind}': {message}"
        super().__init__(self.message)


class SurfaceNotAttachedError(BlockCanvasError):
    """Output was requested from a canvas that has no render surface."""

    def __init__(self, message: str = "No render surface attached to the canvas") -> None:
        self.message = message
        super().__init__(message)

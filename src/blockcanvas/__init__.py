"""Blockcanvas - Keyed SVG rendering of block-and-wire diagrams."""

from blockcanvas.canvas import Canvas
from blockcanvas.config import CanvasConfig, LayoutMetrics
from blockcanvas.coordinates import ORIGIN, Point, Size
from blockcanvas.debug import CanvasDebugger, IssueReport, find_issues, validate_canvas
from blockcanvas.exceptions import (
    BlockCanvasError,
    CanvasConfigError,
    ModelError,
    SchemaError,
    SurfaceNotAttachedError,
)
from blockcanvas.intents import (
    CallbackProcessor,
    Connect,
    CreateNode,
    Intent,
    IntentDispatcher,
    IntentProcessor,
    TypedIntentProcessor,
    UpdateParam,
)
from blockcanvas.model import Edge, GraphModel, Node, PortRef, Source, Target
from blockcanvas.render import LayoutEstimator, SvgSurface, curve_path
from blockcanvas.schema import BlockSchema, PortSide, load_schema

__all__ = [
    # Canvas
    "Canvas",
    "CanvasConfig",
    "LayoutMetrics",
    # Model
    "Edge",
    "GraphModel",
    "Node",
    "PortRef",
    "Source",
    "Target",
    "ORIGIN",
    "Point",
    "Size",
    # Schema
    "BlockSchema",
    "PortSide",
    "load_schema",
    # Rendering
    "LayoutEstimator",
    "SvgSurface",
    "curve_path",
    # Intents
    "CallbackProcessor",
    "Connect",
    "CreateNode",
    "Intent",
    "IntentDispatcher",
    "IntentProcessor",
    "TypedIntentProcessor",
    "UpdateParam",
    # Debug
    "CanvasDebugger",
    "IssueReport",
    "find_issues",
    "validate_canvas",
    # Exceptions
    "BlockCanvasError",
    "CanvasConfigError",
    "ModelError",
    "SchemaError",
    "SurfaceNotAttachedError",
]

"""Rendering synchronization between a graph model and an SVG surface.

Public API:
    from blockcanvas.render import curve_path, resolve_port, place
"""

from blockcanvas.render.context import RenderContext
from blockcanvas.render.drop import DropPlacer, place, snap
from blockcanvas.render.edges import EdgeReconciler
from blockcanvas.render.estimator import LayoutEstimator
from blockcanvas.render.geometry import control_offset, curve_path, parse_path_endpoints
from blockcanvas.render.nodes import NodeHandle, NodeReconciler
from blockcanvas.render.params import ParamView, render_block_content
from blockcanvas.render.ports import resolve_port, source_position, target_position
from blockcanvas.render.preview import DragPreview, GestureState
from blockcanvas.render.reconcile import KeyedReconciler, ReconcileResult
from blockcanvas.render.surface import SvgSurface

__all__ = [
    "DragPreview",
    "DropPlacer",
    "EdgeReconciler",
    "GestureState",
    "KeyedReconciler",
    "LayoutEstimator",
    "NodeHandle",
    "NodeReconciler",
    "ParamView",
    "ReconcileResult",
    "RenderContext",
    "SvgSurface",
    "control_offset",
    "curve_path",
    "parse_path_endpoints",
    "place",
    "render_block_content",
    "resolve_port",
    "snap",
    "source_position",
    "target_position",
]

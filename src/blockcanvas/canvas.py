"""Canvas: drives one render surface from a stream of graph snapshots.

Usage:
    canvas = Canvas(CanvasConfig(unit=40, dimensions=(15, 10), schema=schema))
    canvas.attach(SvgSurface(40, canvas.config.extent))
    canvas.dispatcher.add(CallbackProcessor(store.dispatch))

    canvas.update(store.state)      # after every state change
    canvas.drop_block("add", Point(133, 47))
    svg = canvas.to_svg()

A pass runs the node reconciler first, measures freshly rendered content,
and only then runs the edge reconciler, because connector anchors depend on
the measured sizes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blockcanvas.coordinates import ORIGIN, Point
from blockcanvas.exceptions import SurfaceNotAttachedError
from blockcanvas.intents.dispatcher import IntentDispatcher
from blockcanvas.intents.types import UpdateParam
from blockcanvas.model import GraphModel, PortRef
from blockcanvas.render.context import RenderContext
from blockcanvas.render.drop import DropPlacer
from blockcanvas.render.edges import EdgeReconciler
from blockcanvas.render.estimator import LayoutEstimator
from blockcanvas.render.nodes import NodeReconciler
from blockcanvas.render.params import ParamView, render_block_content
from blockcanvas.render.preview import DragPreview

if TYPE_CHECKING:
    from blockcanvas.config import CanvasConfig
    from blockcanvas.intents.processor import IntentProcessor
    from blockcanvas.intents.types import Connect, CreateNode, Intent
    from blockcanvas.model import Node
    from blockcanvas.render.reconcile import ReconcileResult
    from blockcanvas.render.surface import SvgSurface

logger = logging.getLogger(__name__)


class Canvas:
    """One live canvas: render context, reconcilers, gestures and intents.

    Args:
        config: Structural configuration and collaborators
        surface: Render surface; passes are no-ops until one is attached
        model: Initial graph snapshot
        processors: Intent processors to register
        strict: Propagate intent processor failures instead of logging them
    """

    def __init__(
        self,
        config: CanvasConfig,
        *,
        surface: SvgSurface | None = None,
        model: GraphModel | None = None,
        processors: list[IntentProcessor] | None = None,
        strict: bool = False,
    ) -> None:
        self.dispatcher = IntentDispatcher(processors, strict=strict)
        self._config = config
        self._updating = False
        self._queued: GraphModel | None = None
        self._param_views: dict[int, list[ParamView]] = {}
        self._build(config, model or GraphModel(), surface=None)
        if surface is not None:
            self.attach(surface)

    def _build(self, config: CanvasConfig, model: GraphModel, surface: SvgSurface | None) -> None:
        self.context = RenderContext(config=config, model=model, surface=surface)
        self.context.layout_oracle = self._oracle_for(config)
        self.nodes = NodeReconciler(self.context)
        self.edges = EdgeReconciler(self.context)
        self.preview = DragPreview(self.context, emit=self.emit)
        self.placer = DropPlacer(config.unit, config.extent, emit=self.emit)
        self._param_views.clear()

    @staticmethod
    def _oracle_for(config: CanvasConfig):
        if config.layout_oracle is not None:
            return config.layout_oracle
        return LayoutEstimator(config.schema, config.metrics)

    # -------------------------------------------------------------------------
    # Configuration and attachment
    # -------------------------------------------------------------------------

    @property
    def config(self) -> CanvasConfig:
        return self._config

    @property
    def model(self) -> GraphModel:
        return self.context.model

    @property
    def surface(self) -> SvgSurface | None:
        return self.context.surface

    @property
    def attached(self) -> bool:
        return self.context.attached

    def attach(self, surface: SvgSurface) -> None:
        """Attach the render surface and bring it up to date with the model."""
        self.context.surface = surface
        self.preview.attach(surface.layer("preview"))
        self._sync()

    def configure(self, config: CanvasConfig) -> None:
        """Swap the configuration.

        A structural change (unit, dimensions, schema, metrics) rebuilds the
        render context and re-renders from scratch; otherwise only the
        collaborators are replaced.
        """
        previous = self._config
        self._config = config
        if config.structural_key() == previous.structural_key():
            self.context.config = config
            self.context.layout_oracle = self._oracle_for(config)
            return

        surface = self.context.surface
        model = self.context.model
        if surface is not None:
            surface.clear()
            surface.resize(config.unit, config.extent)
        self._build(config, model, surface=surface)
        if surface is not None:
            self.preview.attach(surface.layer("preview"))
            self._sync()

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    def update(self, model: GraphModel) -> None:
        """Synchronise the surface with a new graph snapshot.

        Not reentrant: a call made while a pass is running (for instance by
        an intent processor feeding the store back into the canvas) is
        coalesced and applied as soon as the current pass completes.
        """
        if self._updating:
            logger.debug("Update requested during a pass; queued")
            self._queued = model
            return

        self._updating = True
        try:
            current: GraphModel | None = model
            while current is not None:
                self._queued = None
                self._run_pass(current)
                current = self._queued
        finally:
            self._updating = False

    def _sync(self) -> None:
        self.update(self.context.model)

    def _run_pass(self, model: GraphModel) -> None:
        previous = self.context.model
        self.context.model = model

        result = self.nodes.update()
        if result is not None:
            self._render_content(result, previous)
            self.nodes.refresh_geometry(self.context.measure_pending())
            self.edges.update()

        on_change = self._config.on_change
        if on_change is not None and model != previous:
            on_change(model.nodes, model.edges)

    def _render_content(self, result: ReconcileResult[int], previous: GraphModel) -> None:
        for node_id in result.exited:
            self._param_views.pop(node_id, None)

        stale = list(result.entered)
        for node_id in result.updated:
            old = previous.nodes.get(node_id)
            new = self.context.nodes[node_id]
            if old is None or old.params != new.params or old.kind != new.kind:
                stale.append(node_id)

        for node_id in stale:
            self._render_node_content(self.context.nodes[node_id])
            if node_id not in result.entered:
                self.context.schedule_measurement(node_id)

    def _render_node_content(self, node: Node) -> None:
        handle = self.nodes.handles[node.id]
        renderer = self._config.content_renderer or render_block_content
        on_update = self._config.param_update or self._report_param_update
        views = renderer(handle.content, node, self.context.schema, self.context.metrics, on_update)
        self._param_views[node.id] = list(views) if views else []

    def invalidate_content(self, node_id: int) -> None:
        """Mark a node's content as changed so it is measured again.

        Called by an external content renderer after it redraws a node.
        Takes effect on the next ``refresh_layout`` or ``update``.
        """
        if node_id in self.context.nodes:
            self.context.schedule_measurement(node_id)

    def refresh_layout(self) -> set[int]:
        """Re-query the layout oracle for nodes still waiting for a size.

        Connectors are re-synchronised only if some size actually changed.

        Returns:
            Ids whose measured size changed
        """
        if self._updating or not self.attached:
            return set()
        changed = self.context.measure_pending()
        if changed:
            self.nodes.refresh_geometry(changed)
            self.edges.update()
        return changed

    # -------------------------------------------------------------------------
    # Intents and gestures
    # -------------------------------------------------------------------------

    def emit(self, intent: Intent) -> None:
        """Send an intent to every registered processor."""
        self.dispatcher.emit(intent)

    def _report_param_update(self, node: Node, param: str, value: str) -> None:
        self.emit(UpdateParam(node_id=node.id, param=param, value=value))

    def param_views(self, node_id: int) -> list[ParamView]:
        """Parameter rows rendered for a node by the content renderer."""
        return list(self._param_views.get(node_id, ()))

    def change_param(self, node_id: int, param: str, value: str) -> bool:
        """Report an edit made in a node's parameter widget.

        Returns:
            True if the edit was reported
        """
        for view in self._param_views.get(node_id, ()):
            if view.param == param:
                return view.change(value)
        return False

    def start_connection(self, port: PortRef, pointer: Point) -> bool:
        return self.preview.start(port, pointer)

    def move_pointer(self, pointer: Point) -> None:
        self.preview.move(pointer)

    def drop_connection(self, pointer: Point, over: PortRef | None = None) -> Connect | None:
        return self.preview.drop(pointer, over)

    def cancel_connection(self) -> None:
        self.preview.cancel()

    def drop_block(self, kind: str, client_offset: Point | None, canvas_origin: Point = ORIGIN) -> CreateNode | None:
        """Place a palette item dropped at a client position."""
        return self.placer.drop(kind, client_offset, canvas_origin)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def to_svg(self, *, pretty: bool = True) -> str:
        """Serialise the attached surface.

        Raises:
            SurfaceNotAttachedError: If no surface has been attached
        """
        if self.surface is None:
            raise SurfaceNotAttachedError()
        return self.surface.to_string(pretty=pretty)

    def close(self) -> None:
        """Shut down intent processors."""
        self.dispatcher.shutdown()

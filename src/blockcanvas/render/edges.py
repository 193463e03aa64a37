"""Edge reconciliation.

Each edge is a ``g.edge`` in the "edges" layer tagged with its endpoints and
holding two stacked ``path.curve`` strokes (a wide outer stroke under a
narrower inner one, for an outline effect).
"""

from __future__ import annotations

import logging
from operator import attrgetter
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element

from blockcanvas.render.geometry import curve_path
from blockcanvas.render.ports import source_position, target_position
from blockcanvas.render.reconcile import KeyedReconciler, ReconcileResult
from blockcanvas.render.surface import append, format_number, select_all

if TYPE_CHECKING:
    from blockcanvas.coordinates import Point
    from blockcanvas.model import Edge
    from blockcanvas.render.context import RenderContext

logger = logging.getLogger(__name__)


def set_edge_position(element: Element, source: Point, target: Point) -> None:
    """Point both strokes of a connector at new anchors."""
    d = curve_path(source, target)
    for path in select_all(element, "path", "curve"):
        path.set("d", d)


class EdgeReconciler:
    """Keyed diff of the edge set against the "edges" layer.

    Edges referencing a node that is not in the model are left out of the
    pass entirely, so any element previously rendered for them is removed.
    """

    def __init__(self, ctx: RenderContext) -> None:
        self.ctx = ctx
        self._reconciler: KeyedReconciler[int, Edge, Element] = KeyedReconciler(
            key=attrgetter("id"),
            enter=self._enter,
            update=self._update,
            exit=self._exit,
        )

    @property
    def handles(self) -> dict[int, Element]:
        return self._reconciler.handles

    def update(self) -> ReconcileResult[int] | None:
        """Run one pass. Returns None while no surface is attached."""
        if not self.ctx.attached:
            logger.debug("Edge pass skipped: no surface attached")
            return None
        return self._reconciler.reconcile(self._renderable())

    def clear(self) -> None:
        self._reconciler.clear()

    def _renderable(self) -> list[Edge]:
        nodes = self.ctx.nodes
        edges = []
        for edge in self.ctx.edges.values():
            if edge.source.id not in nodes or edge.target.id not in nodes:
                logger.debug(
                    "Skipping edge %s: dangling reference %s -> %s",
                    edge.id,
                    edge.source.id,
                    edge.target.id,
                )
                continue
            edges.append(edge)
        return edges

    def _decorate(self, element: Element, edge: Edge) -> None:
        decorate = self.ctx.config.decorate_edges
        if decorate is not None:
            decorate(element, edge)

    # -------------------------------------------------------------------------
    # enter / update / exit
    # -------------------------------------------------------------------------

    def _enter(self, edge: Edge) -> Element:
        metrics = self.ctx.metrics
        element = append(
            self.ctx.surface.layer("edges"),
            "g",
            {
                "class": "edge",
                "data-id": str(edge.id),
                "data-source": str(edge.source.id),
                "data-target": str(edge.target.id),
                "data-output": str(edge.source.output),
                "data-input": str(edge.target.input),
            },
        )
        d = curve_path(source_position(self.ctx, edge.source), target_position(self.ctx, edge.target))
        append(
            element,
            "path",
            {
                "class": "outer curve",
                "stroke-width": format_number(metrics.outer_stroke_width),
                "stroke": metrics.outer_stroke,
                "fill": "none",
                "d": d,
            },
        )
        append(
            element,
            "path",
            {
                "class": "inner curve",
                "stroke-width": format_number(metrics.inner_stroke_width),
                "stroke": metrics.inner_stroke,
                "fill": "none",
                "d": d,
            },
        )
        self._decorate(element, edge)
        return element

    def _update(self, element: Element, edge: Edge) -> None:
        element.set("data-source", str(edge.source.id))
        element.set("data-output", str(edge.source.output))
        element.set("data-target", str(edge.target.id))
        element.set("data-input", str(edge.target.input))
        set_edge_position(
            element,
            source_position(self.ctx, edge.source),
            target_position(self.ctx, edge.target),
        )
        self._decorate(element, edge)

    def _exit(self, element: Element, edge_id: int) -> None:
        layer = self.ctx.surface.layer("edges")
        if element in list(layer):
            layer.remove(element)

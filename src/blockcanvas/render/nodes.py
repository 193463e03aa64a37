"""Node reconciliation.

Owns the lifecycle of each node's render group in the "nodes" layer:

    g.node[data-id] (translated to the node position)
      g.frame
        rect.body
        g.inputs  > circle.port[data-input]
        g.outputs > circle.port[data-output]
      g.content   (container handed to the content renderer)

Port markers stay hidden until the node's content has been measured, since
output ports sit on the measured right edge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element

from blockcanvas.render.ports import port_offset_y
from blockcanvas.render.reconcile import KeyedReconciler, ReconcileResult
from blockcanvas.render.surface import append, classed, format_number, to_translate
from blockcanvas.schema import PortSide, get_block

if TYPE_CHECKING:
    from collections.abc import Iterable

    from blockcanvas.model import Node
    from blockcanvas.render.context import RenderContext

logger = logging.getLogger(__name__)


@dataclass
class NodeHandle:
    """Render elements of one node."""

    group: Element
    frame: Element
    content: Element


class NodeReconciler:
    """Keyed diff of the node set against the "nodes" layer."""

    def __init__(self, ctx: RenderContext) -> None:
        self.ctx = ctx
        self._reconciler: KeyedReconciler[int, Node, NodeHandle] = KeyedReconciler(
            key=attrgetter("id"),
            enter=self._enter,
            update=self._update,
            exit=self._exit,
        )

    @property
    def handles(self) -> dict[int, NodeHandle]:
        return self._reconciler.handles

    def containers(self) -> list[tuple[int, Element]]:
        """(node id, content container) for every rendered node."""
        return [(node_id, handle.content) for node_id, handle in sorted(self.handles.items())]

    def update(self) -> ReconcileResult[int] | None:
        """Run one pass. Returns None while no surface is attached."""
        if not self.ctx.attached:
            logger.debug("Node pass skipped: no surface attached")
            return None
        return self._reconciler.reconcile(self.ctx.nodes.values())

    def refresh_geometry(self, node_ids: Iterable[int]) -> None:
        """Apply newly measured sizes to the frame and port markers."""
        for node_id in node_ids:
            handle = self.handles.get(node_id)
            node = self.ctx.nodes.get(node_id)
            if handle is None or node is None:
                continue
            self._apply_size(handle, node)

    def clear(self) -> None:
        self._reconciler.clear()

    # -------------------------------------------------------------------------
    # enter / update / exit
    # -------------------------------------------------------------------------

    def _enter(self, node: Node) -> NodeHandle:
        layer = self.ctx.surface.layer("nodes")
        group = append(
            layer,
            "g",
            {"class": "node", "data-id": str(node.id), "data-kind": node.kind},
            transform=to_translate(node.position),
        )
        frame = append(group, "g", {"class": "frame"})
        append(frame, "rect", {"class": "body", "rx": "4", "fill": "white", "stroke": "#444444"})
        self._build_ports(frame, node.kind)

        content = append(group, "g", {"class": "content"})
        handle = NodeHandle(group=group, frame=frame, content=content)
        self.ctx.schedule_measurement(node.id)
        return handle

    def _update(self, handle: NodeHandle, node: Node) -> None:
        handle.group.set("transform", to_translate(node.position))
        if handle.group.get("data-kind") != node.kind:
            logger.debug("Node %s changed kind to %r; rebuilding ports", node.id, node.kind)
            handle.group.set("data-kind", node.kind)
            for ports in handle.frame.findall("g"):
                handle.frame.remove(ports)
            self._build_ports(handle.frame, node.kind)
            self._apply_size(handle, node)

    def _exit(self, handle: NodeHandle, node_id: int) -> None:
        layer = self.ctx.surface.layer("nodes")
        if handle.group in list(layer):
            layer.remove(handle.group)
        self.ctx.forget(node_id)

    def _build_ports(self, frame: Element, kind: str) -> None:
        block = get_block(self.ctx.schema, kind)
        metrics = self.ctx.metrics
        for side in (PortSide.INPUT, PortSide.OUTPUT):
            ports = append(frame, "g", {"class": f"{side.value}s"})
            for index, name in enumerate(block.ports(side)):
                append(
                    ports,
                    "circle",
                    {
                        "class": "port hidden",
                        f"data-{side.value}": name,
                        "cx": "0",
                        "cy": format_number(port_offset_y(index, metrics)),
                        "r": format_number(metrics.port_radius),
                    },
                )

    def _apply_size(self, handle: NodeHandle, node: Node) -> None:
        size = self.ctx.content_dimensions.get(node.id)
        if size is None:
            return
        body = handle.frame.find("rect")
        if body is not None:
            body.set("width", format_number(size.width))
            body.set("height", format_number(size.height))
        for side in (PortSide.INPUT, PortSide.OUTPUT):
            ports = handle.frame.find(f"g[@class='{side.value}s']")
            if ports is None:
                continue
            x = size.width if side is PortSide.OUTPUT else 0
            for circle in ports:
                circle.set("cx", format_number(x))
                classed(circle, "hidden", False)

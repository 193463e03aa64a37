"""Port anchor resolution.

Couples a node's position, its kind's port layout and its measured content
size into the absolute coordinate a connector attaches to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blockcanvas.coordinates import ORIGIN, Point
from blockcanvas.schema import PortSide, port_index

if TYPE_CHECKING:
    from blockcanvas.config import LayoutMetrics
    from blockcanvas.model import Source, Target
    from blockcanvas.render.context import RenderContext


def port_offset_y(index: int, metrics: LayoutMetrics) -> float:
    """Vertical offset of the index-th port below a node's top edge."""
    return metrics.header_height + metrics.port_spacing * index


def resolve_port(ctx: RenderContext, node_id: int, port: int | str, side: PortSide) -> Point:
    """Absolute anchor of a port.

    Input ports sit on the node's left edge, output ports on its right edge
    (at the measured width). Until the node has been measured the anchor is
    the node's raw position; an absent node anchors at the origin. The
    result is always finite.

    Args:
        ctx: Render context holding the model, schema and size cache
        node_id: Node owning the port
        port: Port index, or a port name declared by the node's kind
        side: PortSide.INPUT or PortSide.OUTPUT
    """
    node = ctx.nodes.get(node_id)
    if node is None:
        return ORIGIN
    position = node.position if node.position.is_finite else ORIGIN

    size = ctx.content_dimensions.get(node_id)
    if size is None:
        return position

    index = port_index(ctx.schema, node.kind, side, port)
    x = size.width if side is PortSide.OUTPUT else 0
    return position + Point(x, port_offset_y(index, ctx.metrics))


def source_position(ctx: RenderContext, source: Source) -> Point:
    return resolve_port(ctx, source.id, source.output, PortSide.OUTPUT)


def target_position(ctx: RenderContext, target: Target) -> Point:
    return resolve_port(ctx, target.id, target.input, PortSide.INPUT)

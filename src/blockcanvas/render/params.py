"""Default block content: a title and one labelled text input per parameter.

The canvas only owns the per-node content container; whatever draws into
it is a replaceable collaborator. This module is the collaborator used when
none is configured.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element

from blockcanvas.coordinates import Point
from blockcanvas.render.surface import XHTML_NS, append, format_number, to_translate
from blockcanvas.schema import BlockSchema, get_block, param_index

if TYPE_CHECKING:
    from blockcanvas.config import LayoutMetrics
    from blockcanvas.model import Node

ParamUpdate = Callable[["Node", str, str], None]


def param_offset_y(index: int, block: BlockSchema, metrics: LayoutMetrics) -> float:
    """Top of the index-th parameter row, below the last port row."""
    return metrics.header_height + block.port_rows * metrics.port_spacing + index * metrics.param_height


class ParamView:
    """One parameter row bound to a node's current value.

    Args:
        node: Node owning the parameter
        param: Parameter name
        schema: Block kind declarations
        metrics: Pixel metrics for row placement
        on_update: Receives (node, param, value) on change; None disables edits
    """

    def __init__(
        self,
        node: Node,
        param: str,
        schema: Mapping[str, BlockSchema],
        metrics: LayoutMetrics,
        on_update: ParamUpdate | None = None,
    ) -> None:
        self.node = node
        self.param = param
        self.schema = schema
        self.metrics = metrics
        self.on_update = on_update

    @property
    def value(self) -> str:
        """Current value as text, or the empty string if the node has none."""
        value = self.node.params.get(self.param)
        return "" if value is None else str(value)

    @property
    def offset_y(self) -> float:
        index = param_index(self.schema, self.node.kind, self.param)
        block = get_block(self.schema, self.node.kind)
        return param_offset_y(index or 0, block, self.metrics)

    def render(self, container: Element) -> Element:
        """Append the row (label plus text input) to *container*."""
        m = self.metrics
        row = append(
            container,
            "g",
            {
                "class": "param",
                "data-id": str(self.node.id),
                "data-input": self.param,
                "data-value": self.value,
                "transform": to_translate(Point(0, self.offset_y)),
            },
        )
        label = append(
            row,
            "text",
            {
                "stroke": "none",
                "transform": to_translate(Point(m.node_margin_x, 0)),
                "x": "0",
                "font-size": format_number(m.font_size),
                "dominant-baseline": "middle",
            },
        )
        label.text = self.param
        box = append(
            row,
            "foreignObject",
            {
                "x": format_number(m.node_margin_x),
                "y": format_number(m.param_input_margin),
                "width": format_number(m.param_width),
                "height": format_number(m.param_height),
            },
        )
        append(box, "input", {"xmlns": XHTML_NS, "type": "text", "size": "4", "value": self.value})
        return row

    def change(self, value: str) -> bool:
        """Report a new value.

        The update callback is invoked only when one is configured and the
        parameter is declared for the node's kind.

        Returns:
            True if the update was reported
        """
        if self.on_update is None:
            return False
        if param_index(self.schema, self.node.kind, self.param) is None:
            return False
        self.on_update(self.node, self.param, value)
        return True


def render_block_content(
    container: Element,
    node: Node,
    schema: Mapping[str, BlockSchema],
    metrics: LayoutMetrics,
    on_update: ParamUpdate | None = None,
) -> list[ParamView]:
    """Draw a node's title and parameter rows into its content container.

    Anything previously drawn in the container is replaced.

    Returns:
        The parameter views, in declaration order
    """
    for child in list(container):
        container.remove(child)

    block = get_block(schema, node.kind)
    title = append(
        container,
        "text",
        {
            "class": "title",
            "x": format_number(metrics.node_margin_x),
            "y": format_number(metrics.font_size),
            "font-size": format_number(metrics.font_size),
        },
    )
    title.text = block.label or node.kind

    views = [ParamView(node, param, schema, metrics, on_update) for param in block.params]
    for view in views:
        view.render(container)
    return views

"""Python-side size estimation for block content.

Without a browser there is nothing to measure, so the default layout oracle
estimates each node's body size from its kind's declaration using the same
metrics the content renderer lays rows out with.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from blockcanvas.coordinates import Size

if TYPE_CHECKING:
    from blockcanvas.config import LayoutMetrics
    from blockcanvas.model import Node
    from blockcanvas.schema import BlockSchema


class LayoutEstimator:
    """Estimates node body sizes to stand in for DOM measurement.

    Callable as a layout oracle: ``estimator(node) -> Size | None``. Unknown
    kinds return None and stay unmeasured.
    """

    def __init__(self, schema: Mapping[str, BlockSchema], metrics: LayoutMetrics) -> None:
        self.schema = schema
        self.metrics = metrics

    def __call__(self, node: Node) -> Size | None:
        block = self.schema.get(node.kind)
        if block is None:
            return None
        return Size(self.estimate_width(node, block), self.estimate_height(block))

    def estimate_width(self, node: Node, block: BlockSchema) -> float:
        m = self.metrics
        label = block.label or node.kind
        widest = len(label) * m.char_width
        for param in block.params:
            widest = max(widest, len(param) * m.char_width, m.param_width)
        return max(m.min_width, widest + 2 * m.node_margin_x)

    def estimate_height(self, block: BlockSchema) -> float:
        m = self.metrics
        return (
            m.header_height
            + block.port_rows * m.port_spacing
            + len(block.params) * m.param_height
            + m.bottom_padding
        )

"""Shared mutable state of one live canvas."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from blockcanvas.coordinates import Size
from blockcanvas.model import Edge, GraphModel, Node

if TYPE_CHECKING:
    from blockcanvas.config import CanvasConfig, LayoutMetrics, LayoutOracle
    from blockcanvas.render.surface import SvgSurface
    from blockcanvas.schema import BlockSchema

logger = logging.getLogger(__name__)


@dataclass
class RenderContext:
    """Everything a reconciliation pass reads and writes.

    One instance per live canvas. It is rebuilt only when the structural
    configuration (unit, dimensions, schema, metrics) changes; model updates
    replace ``model`` in place.

    Attributes:
        config: The structural configuration this context was built from
        model: Latest graph snapshot
        surface: Render surface, or None until attached
        content_dimensions: Measured node body sizes by node id
        pending_measurements: Node ids still waiting for a measurement
        layout_oracle: ``node -> Size | None`` used to fill the cache
    """

    config: CanvasConfig
    model: GraphModel = field(default_factory=GraphModel)
    surface: SvgSurface | None = None
    content_dimensions: dict[int, Size] = field(default_factory=dict)
    pending_measurements: set[int] = field(default_factory=set)
    layout_oracle: LayoutOracle | None = None

    @property
    def unit(self) -> float:
        return self.config.unit

    @property
    def schema(self) -> Mapping[str, BlockSchema]:
        return self.config.schema

    @property
    def metrics(self) -> LayoutMetrics:
        return self.config.metrics

    @property
    def nodes(self) -> Mapping[int, Node]:
        return self.model.nodes

    @property
    def edges(self) -> Mapping[int, Edge]:
        return self.model.edges

    @property
    def attached(self) -> bool:
        return self.surface is not None

    def schedule_measurement(self, node_id: int) -> None:
        self.pending_measurements.add(node_id)

    def forget(self, node_id: int) -> None:
        """Drop all cached geometry for a removed node."""
        self.content_dimensions.pop(node_id, None)
        self.pending_measurements.discard(node_id)

    def measure_pending(self) -> set[int]:
        """Query the layout oracle for every pending node.

        Sizes that come back are cached and the node leaves the pending set;
        absent sizes stay pending for a later call. An oracle that raises is
        treated as absent.

        Returns:
            Ids whose cached size changed
        """
        oracle = self.layout_oracle
        changed: set[int] = set()
        if oracle is None:
            return changed

        for node_id in sorted(self.pending_measurements):
            node = self.nodes.get(node_id)
            if node is None:
                self.pending_measurements.discard(node_id)
                continue
            try:
                size = oracle(node)
            except Exception:
                logger.warning("Layout oracle failed for node %s", node_id, exc_info=True)
                continue
            if size is None:
                continue
            size = Size.of(size)
            if not size.is_finite:
                logger.warning("Layout oracle returned non-finite size %s for node %s", size, node_id)
                continue
            self.pending_measurements.discard(node_id)
            if self.content_dimensions.get(node_id) != size:
                self.content_dimensions[node_id] = size
                changed.add(node_id)
        return changed

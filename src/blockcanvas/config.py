"""Canvas configuration.

``CanvasConfig`` carries the structural settings of one live canvas (grid
unit, dimensions, schema, layout metrics) plus the optional collaborators
the canvas calls out to. Changing a structural field rebuilds the render
context; the collaborators can be swapped freely.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from blockcanvas.coordinates import Point, Size
from blockcanvas.exceptions import CanvasConfigError
from blockcanvas.schema import BlockSchema

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from blockcanvas.model import Edge, Node

    LayoutOracle = Callable[[Node], Size | None]
    EdgeDecorator = Callable[[Element, Edge], None]
    ParamUpdate = Callable[[Node, str, str], None]
    ContentRenderer = Callable[..., None]


@dataclass(frozen=True)
class LayoutMetrics:
    """Fixed pixel metrics of a rendered block.

    Port anchors sit ``header_height + port_spacing * index`` below the
    node's top edge. Parameter rows start below the last port row.
    """

    # Ports
    header_height: float = 20
    port_spacing: float = 24
    port_radius: float = 6

    # Parameter rows
    node_margin_x: float = 12
    param_height: float = 24
    param_width: float = 72
    param_input_margin: float = 4
    font_size: float = 12

    # Estimation
    min_width: float = 120
    char_width: float = 7
    bottom_padding: float = 8

    # Connectors
    outer_stroke_width: float = 8
    inner_stroke_width: float = 6
    outer_stroke: str = "dimgrey"
    inner_stroke: str = "lightgrey"


@dataclass(frozen=True)
class CanvasConfig:
    """Configuration of a single canvas.

    Attributes:
        unit: Grid unit in pixels
        dimensions: Canvas size in grid units (columns, rows)
        schema: Block kind declarations
        on_change: Called with (nodes, edges) after a pass over a new model
        metrics: Pixel metrics used for ports and parameter rows
        layout_oracle: ``node -> Size | None``; defaults to a LayoutEstimator
        decorate_edges: Called with (element, edge) on every edge enter/update
        content_renderer: Fills a node's content container; defaults to
            ``render_block_content``
        param_update: Receives parameter edits from the content renderer;
            defaults to emitting an UpdateParam intent
    """

    unit: float
    dimensions: tuple[int, int]
    schema: Mapping[str, BlockSchema] = field(default_factory=dict)
    on_change: Callable[[Mapping[int, Any], Mapping[int, Any]], None] | None = None
    metrics: LayoutMetrics = field(default_factory=LayoutMetrics)
    layout_oracle: LayoutOracle | None = None
    decorate_edges: EdgeDecorator | None = None
    content_renderer: ContentRenderer | None = None
    param_update: ParamUpdate | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.unit, (int, float)) or not math.isfinite(self.unit) or self.unit <= 0:
            raise CanvasConfigError("unit", self.unit, f"Grid unit must be a positive number, got {self.unit!r}")
        try:
            columns, rows = self.dimensions
        except (TypeError, ValueError):
            raise CanvasConfigError("dimensions", self.dimensions) from None
        if columns <= 0 or rows <= 0:
            raise CanvasConfigError(
                "dimensions",
                self.dimensions,
                f"Canvas dimensions must be positive, got {columns}x{rows}",
            )
        object.__setattr__(self, "dimensions", (columns, rows))

    @property
    def extent(self) -> Point:
        """Canvas size in pixels."""
        columns, rows = self.dimensions
        return Point(self.unit * columns, self.unit * rows)

    def structural_key(self) -> tuple[Any, ...]:
        """Fields whose change requires a fresh render context."""
        return (self.unit, self.dimensions, dict(self.schema), self.metrics)

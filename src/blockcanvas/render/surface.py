"""SVG render surface.

The surface is a persistent ``xml.etree.ElementTree`` tree with three layer
groups ("edges", "nodes", "preview") that the reconcilers mutate in place.
Elements are never rebuilt wholesale, so a handle obtained from a
reconciler stays valid for as long as its id persists in the model.
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from collections.abc import Iterator

from blockcanvas.coordinates import Point

SVG_NS = "http://www.w3.org/2000/svg"
XHTML_NS = "http://www.w3.org/1999/xhtml"

LAYERS = ("edges", "nodes", "preview")

BACKGROUND_COLOR = "#ffffff"
BORDER_COLOR = "#444444"

SVG_STYLE = f"""
g.node > foreignObject {{ overflow: visible }}
g.node > g.frame circle.port {{ cursor: grab }}
g.node > g.frame circle.port.hidden {{ display: none }}
g.node > g.frame > g.outputs > circle.port.dragging {{ cursor: grabbing }}

g.edge.hidden {{ display: none }}
g.edge > path.curve {{
	stroke: gray;
	stroke-width: 6px;
	fill: none;
}}

g.preview.hidden {{ display: none }}
g.preview > path.curve {{
	stroke: gray;
	stroke-width: 6px;
	fill: none;
	stroke-dasharray: 8 6;
}}
g.preview > circle {{
	fill: {BACKGROUND_COLOR};
	stroke: {BORDER_COLOR};
	stroke-width: 4px;
}}
"""


# =============================================================================
# Element helpers
# =============================================================================


def format_number(value: float) -> str:
    """Format a coordinate for an SVG attribute.

    Integral values print without a fractional part.

    Example:
        >>> format_number(120.0), format_number(2.5), format_number(-0.0)
        ('120', '2.5', '0')
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def to_translate(point: Point) -> str:
    """SVG transform attribute for a translation."""
    return f"translate({format_number(point.x)}, {format_number(point.y)})"


def append(parent: ET.Element, tag: str, attrs: dict[str, str] | None = None, **extra: str) -> ET.Element:
    """Append a child element and return it."""
    attributes = dict(attrs or {})
    attributes.update(extra)
    return ET.SubElement(parent, tag, attributes)


def classes(element: ET.Element) -> list[str]:
    return element.get("class", "").split()


def has_class(element: ET.Element, name: str) -> bool:
    return name in classes(element)


def classed(element: ET.Element, names: str, value: bool = True) -> ET.Element:
    """Add or remove space-separated class names on an element."""
    current = classes(element)
    for name in names.split():
        if value and name not in current:
            current.append(name)
        elif not value and name in current:
            current.remove(name)
    if current:
        element.set("class", " ".join(current))
    elif "class" in element.attrib:
        del element.attrib["class"]
    return element


def select_all(parent: ET.Element, tag: str, class_name: str | None = None) -> Iterator[ET.Element]:
    """Descendants of *parent* with *tag* (and optionally a class)."""
    for element in parent.iter(tag):
        if element is parent:
            continue
        if class_name is None or has_class(element, class_name):
            yield element


# =============================================================================
# Surface
# =============================================================================


class SvgSurface:
    """Vector canvas with persistent layer groups.

    Args:
        unit: Grid unit in pixels, used for the dotted background
        extent: Canvas size in pixels

    Example:
        >>> surface = SvgSurface(40, Point(600, 400))
        >>> [g.get("class") for g in surface.root.findall("g")]
        ['edges', 'nodes', 'preview']
    """

    def __init__(self, unit: float, extent: Point) -> None:
        self.unit = unit
        self.extent = extent
        self.root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": format_number(extent.x),
                "height": format_number(extent.y),
                "style": self._background_style(unit),
            },
        )
        style = append(self.root, "style")
        style.text = SVG_STYLE
        self._layers = {name: append(self.root, "g", {"class": name}) for name in LAYERS}

    @staticmethod
    def _background_style(unit: float) -> str:
        u = format_number(unit)
        half = format_number(unit / 2)
        return (
            "background-image: radial-gradient(circle, #000000 1px, rgba(0, 0, 0, 0) 1px); "
            f"background-size: {u}px {u}px; "
            f"background-position-x: -{half}px; "
            f"background-position-y: -{half}px"
        )

    def layer(self, name: str) -> ET.Element:
        """One of the persistent layer groups: "edges", "nodes" or "preview"."""
        return self._layers[name]

    def resize(self, unit: float, extent: Point) -> None:
        """Apply a new grid unit and canvas size to the root element."""
        self.unit = unit
        self.extent = extent
        self.root.set("width", format_number(extent.x))
        self.root.set("height", format_number(extent.y))
        self.root.set("style", self._background_style(unit))

    def clear(self) -> None:
        """Empty every layer (used when the canvas is reconfigured)."""
        for name, group in self._layers.items():
            for child in list(group):
                group.remove(child)

    def find(self, layer: str, element_id: int) -> ET.Element | None:
        """Top-level element of a layer with the given ``data-id``."""
        key = str(element_id)
        for child in self._layers[layer]:
            if child.get("data-id") == key:
                return child
        return None

    def to_string(self, *, pretty: bool = True) -> str:
        """Serialise the surface as an SVG document."""
        root = self.root
        if pretty:
            root = copy.deepcopy(self.root)
            ET.indent(root)
        return ET.tostring(root, encoding="unicode") + "\n"

    def write(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_string())

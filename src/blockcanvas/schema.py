"""Block kind declarations.

A schema maps each block kind to its ordered input ports, output ports and
parameter names. Port order determines the vertical layout of a node's
ports; parameter order determines the layout of its parameter rows.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from blockcanvas.exceptions import SchemaError

logger = logging.getLogger(__name__)


class PortSide(Enum):
    """Which side of a node a port sits on.

    Values:
        INPUT: Left edge, receives connections.
        OUTPUT: Right edge, originates connections.
    """

    INPUT = "input"
    OUTPUT = "output"

    @property
    def opposite(self) -> PortSide:
        return PortSide.OUTPUT if self is PortSide.INPUT else PortSide.INPUT


@dataclass(frozen=True)
class BlockSchema:
    """Declaration of a single block kind.

    Attributes:
        inputs: Ordered input port names
        outputs: Ordered output port names
        params: Ordered parameter names
        label: Display title (defaults to the kind name)
    """

    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    params: tuple[str, ...] = ()
    label: str | None = None

    def ports(self, side: PortSide) -> tuple[str, ...]:
        """Ordered port names on one side."""
        return self.inputs if side is PortSide.INPUT else self.outputs

    @property
    def port_rows(self) -> int:
        """Number of port rows (the taller of the two sides)."""
        return max(len(self.inputs), len(self.outputs))


Schema = Mapping[str, BlockSchema]

_EMPTY = BlockSchema()


def get_block(schema: Schema, kind: str) -> BlockSchema:
    """Look up a kind, degrading to an empty declaration if it is unknown."""
    block = schema.get(kind)
    if block is None:
        logger.debug("Unknown block kind %r, rendering without ports or params", kind)
        return _EMPTY
    return block


def port_index(schema: Schema, kind: str, side: PortSide, port: int | str) -> int:
    """Resolve a port reference to its index within the side's declared order.

    Integer references are taken as-is. Names are looked up in the schema;
    an unknown name resolves to 0 so geometry stays finite.
    """
    if isinstance(port, int):
        return port
    names = get_block(schema, kind).ports(side)
    try:
        return names.index(port)
    except ValueError:
        logger.warning("Block kind %r has no %s port named %r", kind, side.value, port)
        return 0


def param_index(schema: Schema, kind: str, param: str) -> int | None:
    """Index of a parameter within its kind's declared order, or None."""
    params = get_block(schema, kind).params
    return params.index(param) if param in params else None


def has_port(schema: Schema, kind: str, side: PortSide, port: int | str) -> bool:
    """True if the kind declares the given port on that side."""
    names = get_block(schema, kind).ports(side)
    if isinstance(port, int):
        return 0 <= port < len(names)
    return port in names


def _as_names(kind: str, field: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not all(isinstance(v, str) for v in value):
        raise SchemaError(f"'{field}' must be a list of names, got {value!r}", kind=kind)
    names = tuple(value)
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise SchemaError(f"duplicate {field}: {', '.join(duplicates)}", kind=kind)
    return names


def load_schema(data: Mapping[str, Any]) -> dict[str, BlockSchema]:
    """Build a schema from plain data.

    Args:
        data: Mapping of kind -> {"inputs": [...], "outputs": [...],
            "params": [...], "label": str}. BlockSchema values pass through.

    Returns:
        Dict of kind -> BlockSchema

    Raises:
        SchemaError: If a declaration is malformed

    Example:
        >>> schema = load_schema({"add": {"inputs": ["a", "b"], "outputs": ["sum"]}})
        >>> schema["add"].inputs
        ('a', 'b')
    """
    if not isinstance(data, Mapping):
        raise SchemaError(f"schema must be a mapping of kinds, got {type(data).__name__}")

    schema: dict[str, BlockSchema] = {}
    for kind, decl in data.items():
        if isinstance(decl, BlockSchema):
            schema[kind] = decl
            continue
        if not isinstance(decl, Mapping):
            raise SchemaError(f"declaration must be a mapping, got {type(decl).__name__}", kind=kind)
        unknown = set(decl) - {"inputs", "outputs", "params", "label"}
        if unknown:
            raise SchemaError(f"unknown fields: {', '.join(sorted(unknown))}", kind=kind)
        schema[kind] = BlockSchema(
            inputs=_as_names(kind, "inputs", decl.get("inputs")),
            outputs=_as_names(kind, "outputs", decl.get("outputs")),
            params=_as_names(kind, "params", decl.get("params")),
            label=decl.get("label"),
        )
    return schema


def dump_schema(schema: Schema) -> dict[str, dict[str, Any]]:
    """Inverse of load_schema, for JSON output."""
    result: dict[str, dict[str, Any]] = {}
    for kind, block in schema.items():
        entry: dict[str, Any] = {
            "inputs": list(block.inputs),
            "outputs": list(block.outputs),
            "params": list(block.params),
        }
        if block.label is not None:
            entry["label"] = block.label
        result[kind] = entry
    return result

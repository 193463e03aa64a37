"""Project-level configuration from pyproject.toml.

Reads the [tool.blockcanvas] section to provide default canvas settings
for the CLI.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

DEFAULT_UNIT = 40
DEFAULT_DIMENSIONS = (20, 15)


@dataclass(frozen=True)
class BlockCanvasConfig:
    """Configuration from [tool.blockcanvas] in pyproject.toml."""

    unit: float = DEFAULT_UNIT
    dimensions: tuple[int, int] = DEFAULT_DIMENSIONS


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> BlockCanvasConfig:
    """Load [tool.blockcanvas] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.blockcanvas] section.
    """
    path = find_pyproject(start)
    if path is None:
        return BlockCanvasConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return BlockCanvasConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("blockcanvas", {})
    if not section:
        return BlockCanvasConfig()

    dimensions = section.get("dimensions", DEFAULT_DIMENSIONS)
    return BlockCanvasConfig(
        unit=section.get("unit", DEFAULT_UNIT),
        dimensions=(int(dimensions[0]), int(dimensions[1])),
    )

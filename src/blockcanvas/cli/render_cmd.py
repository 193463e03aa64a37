"""Document CLI commands: render, inspect, check."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from blockcanvas.canvas import Canvas
from blockcanvas.cli._config import load_config
from blockcanvas.cli._format import format_point, print_json, print_lines, print_table
from blockcanvas.config import CanvasConfig
from blockcanvas.debug import CanvasDebugger
from blockcanvas.exceptions import BlockCanvasError
from blockcanvas.model import GraphModel
from blockcanvas.render.ports import source_position, target_position
from blockcanvas.render.surface import SvgSurface
from blockcanvas.schema import load_schema


def _read_document(path: str) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        print(f"Error: Could not read '{path}': {e}")
        raise typer.Exit(1) from e
    except json.JSONDecodeError as e:
        print(f"Error: '{path}' is not valid JSON: {e}")
        raise typer.Exit(1) from e

    if not isinstance(data, dict):
        print(f"Error: '{path}' must contain a JSON object")
        raise typer.Exit(1)
    return data


def load_canvas(
    path: str,
    unit: float | None = None,
    width: int | None = None,
    height: int | None = None,
) -> Canvas:
    """Build and render a Canvas from a JSON document.

    Settings resolve in order: command-line flags, the document's own
    ``unit``/``dimensions``, then [tool.blockcanvas] in pyproject.toml.
    """
    data = _read_document(path)
    defaults = load_config(Path(path).parent)

    doc_dimensions = data.get("dimensions") or defaults.dimensions
    columns = width if width is not None else doc_dimensions[0]
    rows = height if height is not None else doc_dimensions[1]

    try:
        config = CanvasConfig(
            unit=unit if unit is not None else data.get("unit", defaults.unit),
            dimensions=(columns, rows),
            schema=load_schema(data.get("schema", {})),
        )
        model = GraphModel.from_dict(data)
    except BlockCanvasError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e

    canvas = Canvas(config, model=model)
    canvas.attach(SvgSurface(config.unit, config.extent))
    return canvas


def register_commands(app: typer.Typer) -> None:
    """Register `render`, `inspect` and `check` as top-level commands on the app."""

    @app.command("render")
    def render_cmd(
        document: Annotated[str, typer.Argument(help="Canvas document (JSON)")],
        out: Annotated[str | None, typer.Option("--out", "-o", help="Write SVG to file")] = None,
        unit: Annotated[float | None, typer.Option("--unit", help="Grid unit in pixels")] = None,
        width: Annotated[int | None, typer.Option("--width", help="Canvas width in grid units")] = None,
        height: Annotated[int | None, typer.Option("--height", help="Canvas height in grid units")] = None,
    ):
        """Render a canvas document to SVG."""
        canvas = load_canvas(document, unit, width, height)
        svg = canvas.to_svg()

        if out:
            with open(out, "w", encoding="utf-8") as f:
                f.write(svg)
            print(f"Wrote {len(canvas.model.nodes)} nodes, {len(canvas.edges.handles)} edges to {out}")
        else:
            print(svg, end="")

    @app.command("inspect")
    def inspect_cmd(
        document: Annotated[str, typer.Argument(help="Canvas document (JSON)")],
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Show nodes, edges and resolved port anchors."""
        canvas = load_canvas(document)
        ctx = canvas.context
        nodes = sorted(ctx.nodes.values(), key=lambda n: n.id)
        edges = sorted(ctx.edges.values(), key=lambda e: e.id)

        if as_json:
            data = {
                "unit": canvas.config.unit,
                "dimensions": list(canvas.config.dimensions),
                "nodes": [
                    {
                        "id": n.id,
                        "kind": n.kind,
                        "position": list(n.position),
                        "size": list(ctx.content_dimensions[n.id]) if n.id in ctx.content_dimensions else None,
                    }
                    for n in nodes
                ],
                "edges": [
                    {
                        "id": e.id,
                        "source": e.source.id,
                        "target": e.target.id,
                        "rendered": e.id in canvas.edges.handles,
                        "start": list(source_position(ctx, e.source)),
                        "end": list(target_position(ctx, e.target)),
                    }
                    for e in edges
                ],
            }
            print_json("inspect", data, output)
            return

        print(f"\nCanvas: {len(nodes)} nodes | {len(edges)} edges | unit {canvas.config.unit:g}\n")

        headers = ["Id", "Kind", "Position", "Size"]
        rows = [
            [str(n.id), n.kind, format_point(n.position), format_point(ctx.content_dimensions.get(n.id))]
            for n in nodes
        ]
        print_lines(print_table(headers, rows))

        if edges:
            print()
            headers = ["Edge", "From", "To", "Start", "End"]
            rows = [
                [
                    str(e.id),
                    f"{e.source.id}.{e.source.output}",
                    f"{e.target.id}.{e.target.input}",
                    format_point(source_position(ctx, e.source)) if e.id in canvas.edges.handles else "—",
                    format_point(target_position(ctx, e.target)) if e.id in canvas.edges.handles else "—",
                ]
                for e in edges
            ]
            print_lines(print_table(headers, rows))

    @app.command("check")
    def check_cmd(
        document: Annotated[str, typer.Argument(help="Canvas document (JSON)")],
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    ):
        """Validate a canvas document; exit 1 if issues are found."""
        canvas = load_canvas(document)
        debugger = CanvasDebugger(canvas)
        report = debugger.find_issues()
        validation = debugger.validate()

        if as_json:
            data = report.to_dict()
            data["warnings"] = validation.warnings
            print_json("check", data)
        else:
            sections = [
                ("Dangling edges", report.dangling_edges),
                ("Self-loops", report.self_loops),
                ("Invalid ports", report.invalid_ports),
                ("Misplaced connectors", report.misplaced_connectors),
                ("Orphan elements", report.orphan_elements),
                ("Warnings", validation.warnings),
            ]
            for title, items in sections:
                if items:
                    print(f"\n  {title} ({len(items)}):")
                    for item in items:
                        print(f"    - {item}")
            if not report.has_issues:
                print("\n  No issues found.")

        if report.has_issues:
            raise typer.Exit(1)

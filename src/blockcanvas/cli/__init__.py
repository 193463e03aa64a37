"""Blockcanvas CLI: render and inspect canvas documents.

Entry point for the `blockcanvas` command. Requires ``pip install blockcanvas[cli]``.

Commands:
    render   Render a canvas document to SVG
    inspect  Show nodes, edges and resolved port anchors
    check    Run the canvas validator and exit 1 on issues
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install blockcanvas[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from blockcanvas.cli.render_cmd import register_commands

    app = typer.Typer(
        name="blockcanvas",
        help="Render and debug block-diagram canvases.",
        no_args_is_help=True,
    )
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()

"""Typer based command line entry points for xlflow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import LayoutConfig, load_layout, resolve_theme
from .errors import ExcelError
from .frames import document_from_frame, read_csv
from .render import save
from .utils.log import get_logger, set_level

app = typer.Typer(help="Build styled Excel workbooks from tabular data.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Set logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")
    set_level(level_value)


@app.command("export")
def export(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Source CSV file"),
    out: Path = typer.Option(..., "--out", "-o", help="Output .xlsx path"),
    layout: Optional[Path] = typer.Option(None, "--layout", help="Layout YAML with columns and styles"),
    theme: Optional[str] = typer.Option(None, "--theme", help="Theme preset: modern, minimal or classic"),
    sheet: Optional[str] = typer.Option(None, "--sheet", help="Sheet name (default: layout or Sheet1)"),
) -> None:
    """Export a CSV table to a styled workbook."""

    logger = get_logger("cli")
    try:
        layout_config: Optional[LayoutConfig] = load_layout(layout) if layout else None
        frame = read_csv(source)
        document = document_from_frame(
            frame,
            sheet_name=sheet,
            theme=resolve_theme(theme) if theme else None,
            layout=layout_config,
        )
        written = save(document, out)
    except (ExcelError, ValueError) as exc:
        logger.error("Export failed", extra={"source": str(source), "error": str(exc)})
        typer.secho(f"Export failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    rows = sum(len(item.rows) for item in document.sheets)
    typer.echo(f"Rows exported: {rows}")
    typer.echo(f"Output: {written}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

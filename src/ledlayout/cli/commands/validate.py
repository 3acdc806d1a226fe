"""Validate command for checking layout documents.

This module provides the `validate` command that imports a layout JSON
document and reports structural errors and warnings.
"""

from pathlib import Path
from typing import Annotated

import typer

from ledlayout.application.document import LayoutImportError, load_layout
from ledlayout.domain.services import validate_layout
from ledlayout.infrastructure import ValidationReportFormatter


def display_import_error(error: LayoutImportError) -> None:
    """Display a layout import error on stderr.

    Args:
        error: The LayoutImportError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "missing_keys":
        keys = ", ".join(d.get("key", "?") for d in error.details)
        typer.echo(f"  Missing required keys: {keys}", err=True)
    elif error.error_type == "validation" and error.details:
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def load_or_exit(layout_file: Path):
    """Load a layout, printing the error and exiting 1 on failure."""
    try:
        return load_layout(layout_file)
    except LayoutImportError as e:
        display_import_error(e)
        raise typer.Exit(code=1)


def validate_command(
    layout_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON layout file to validate"),
    ],
) -> None:
    """Validate a layout file.

    Checks the layout for:
    - JSON syntax and document structure
    - Duplicate cabinet ids and unknown cabinet types
    - Overlapping, off-grid and isolated cabinets

    Exit codes:
        0 - Layout is valid with no warnings
        1 - Layout has errors
        2 - Layout is valid but has warnings

    Example:
        ledlayout validate wall.json
    """
    typer.echo(f"Validating {layout_file}...")
    typer.echo()

    layout = load_or_exit(layout_file)
    report = validate_layout(layout)

    for text, is_error in ValidationReportFormatter().format(report):
        typer.echo(text, err=is_error)

    raise typer.Exit(code=report.exit_code)

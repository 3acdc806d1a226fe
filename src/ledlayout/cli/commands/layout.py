"""Commands that read a layout and print or rewrite it.

- normalize: repair a document and print or save it
- summary: extent, controller load, routes and feeds
- labels: cabinet id to grid label table
- auto-route / auto-power: run the automatic assignment
"""

from pathlib import Path
from typing import Annotated

import typer

from ledlayout.application import apply_command, dump_layout, save_layout, summarize_layout
from ledlayout.application.commands import AutoPower, AutoRoute
from ledlayout.domain.entities import LayoutData
from ledlayout.infrastructure import GridLabelFormatter, LayoutSummaryFormatter

from .validate import load_or_exit

LayoutArgument = Annotated[Path, typer.Argument(help="Path to the JSON layout file")]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Write the result here instead of stdout"),
]


def _emit(layout: LayoutData, output: Path | None) -> None:
    if output is None:
        typer.echo(dump_layout(layout))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    save_layout(layout, output)
    typer.echo(f"Layout saved to: {output}")


def normalize_command(layout_file: LayoutArgument, output: OutputOption = None) -> None:
    """Normalize a layout file and print or save the result."""
    _emit(load_or_exit(layout_file), output)


def summary_command(layout_file: LayoutArgument) -> None:
    """Show extent, controller load, data routes and power feeds."""
    layout = load_or_exit(layout_file)
    typer.echo(LayoutSummaryFormatter().format(summarize_layout(layout)))


def labels_command(layout_file: LayoutArgument) -> None:
    """Show the grid label of every cabinet."""
    layout = load_or_exit(layout_file)
    typer.echo(GridLabelFormatter().format(layout))


def auto_route_command(layout_file: LayoutArgument, output: OutputOption = None) -> None:
    """Replace the data routes with an automatic column-based assignment."""
    layout = apply_command(load_or_exit(layout_file), AutoRoute())
    _emit(layout, output)


def auto_power_command(layout_file: LayoutArgument, output: OutputOption = None) -> None:
    """Replace the power feeds with an automatic assignment."""
    layout = apply_command(load_or_exit(layout_file), AutoPower())
    _emit(layout, output)

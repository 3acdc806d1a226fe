"""Typer CLI for LED cabinet layouts."""

import typer

from ledlayout.cli.commands import (
    auto_power_command,
    auto_route_command,
    labels_command,
    normalize_command,
    summary_command,
    validate_command,
)

app = typer.Typer(
    name="ledlayout",
    help="Inspect, validate and auto-assign LED cabinet wall layouts.",
)

app.command(name="validate")(validate_command)
app.command(name="normalize")(normalize_command)
app.command(name="summary")(summary_command)
app.command(name="labels")(labels_command)
app.command(name="auto-route")(auto_route_command)
app.command(name="auto-power")(auto_power_command)


if __name__ == "__main__":
    app()

"""CLI command implementations for the ledlayout application.

This package contains the subcommands of the ledlayout CLI, including:
- validate: Validate a layout file
- normalize, summary, labels: Inspect and repair a layout
- auto-route, auto-power: Automatic data and power assignment
"""

from ledlayout.cli.commands.layout import (
    auto_power_command,
    auto_route_command,
    labels_command,
    normalize_command,
    summary_command,
)
from ledlayout.cli.commands.validate import validate_command

__all__ = [
    "auto_power_command",
    "auto_route_command",
    "labels_command",
    "normalize_command",
    "summary_command",
    "validate_command",
]

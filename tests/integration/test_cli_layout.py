"""Integration tests for the ledlayout CLI.

These tests verify the commands work end-to-end, including:
- Valid layouts pass validation with exit code 0
- Warnings-only layouts exit with code 2, errors with code 1
- Missing files, malformed JSON and missing keys are reported
- normalize, auto-route and auto-power print or save documents
- summary and labels print their reports
"""

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from ledlayout.application import load_layout
from ledlayout.cli.main import app


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def write_layout(tmp_path: Path):
    """Write a document to a temporary file and return its path."""

    def writer(document: Any, name: str = "layout.json") -> Path:
        path = tmp_path / name
        text = document if isinstance(document, str) else json.dumps(document)
        path.write_text(text, encoding="utf-8")
        return path

    return writer


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_layout(self, runner: CliRunner, write_layout, layout_document) -> None:
        path = write_layout(layout_document)
        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 0
        assert f"Validating {path}" in result.output
        assert "Validation passed. Layout is valid." in result.output

    def test_warnings_exit_code(self, runner: CliRunner, write_layout, layout_document) -> None:
        """Cabinets far apart are isolated, which is only a warning."""
        layout_document["cabinets"][1]["x_mm"] = 3200
        result = runner.invoke(app, ["validate", str(write_layout(layout_document))])

        assert result.exit_code == 2
        assert "Warnings:" in result.output
        assert "[ISOLATED_CABINET] Cabinet C1 has no adjacent neighbors" in result.output
        assert "Validation passed with 2 warning(s)" in result.output

    def test_errors_exit_code(self, runner: CliRunner, write_layout, layout_document) -> None:
        layout_document["cabinets"][1]["x_mm"] = 320
        result = runner.invoke(app, ["validate", str(write_layout(layout_document))])

        assert result.exit_code == 1
        assert "Errors:" in result.output
        assert "Cabinets C1 and C2 overlap" in result.output
        assert "Validation failed" in result.output

    def test_file_not_found(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", str(tmp_path / "nonexistent.json")])

        assert result.exit_code == 1
        assert "Errors:" in result.output
        assert "File not found" in result.output

    def test_invalid_json_syntax(self, runner: CliRunner, write_layout) -> None:
        path = write_layout('{"schemaVersion": 2,\n  "project": {,\n}')
        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output
        assert "Line 2" in result.output

    def test_missing_keys(self, runner: CliRunner, write_layout) -> None:
        result = runner.invoke(app, ["validate", str(write_layout({"project": {}}))])

        assert result.exit_code == 1
        assert "Missing required keys: schemaVersion, cabinets" in result.output


class TestNormalizeCommand:
    """Tests for the normalize command."""

    def test_prints_document(self, runner: CliRunner, write_layout, layout_document) -> None:
        result = runner.invoke(app, ["normalize", str(write_layout(layout_document))])

        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["schemaVersion"] == 2
        assert [c["id"] for c in document["cabinets"]] == ["C1", "C2"]
        assert document["project"]["controller"] == "A100"

    def test_duplicate_ids_renamed(
        self, runner: CliRunner, write_layout, layout_document, tmp_path: Path
    ) -> None:
        layout_document["cabinets"][1]["id"] = "C1"
        output = tmp_path / "renamed.json"
        result = runner.invoke(
            app, ["normalize", str(write_layout(layout_document)), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert load_layout(output).cabinet_ids == ["C1", "C02"]

    def test_output_file(
        self, runner: CliRunner, write_layout, layout_document, tmp_path: Path
    ) -> None:
        output = tmp_path / "out" / "normalized.json"
        result = runner.invoke(
            app, ["normalize", str(write_layout(layout_document)), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert f"Layout saved to: {output}" in result.output
        assert load_layout(output).project.name == "Main Stage"

    def test_bad_input_exits(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["normalize", str(tmp_path / "missing.json")])
        assert result.exit_code == 1


class TestReportCommands:
    """Tests for summary and labels."""

    def test_summary(self, runner: CliRunner, write_layout, layout_document) -> None:
        result = runner.invoke(app, ["summary", str(write_layout(layout_document))])

        assert result.exit_code == 0
        assert "LAYOUT SUMMARY: Main Stage" in result.output
        assert "Model: A100 (2 ports)" in result.output
        assert "No data routes." in result.output

    def test_labels(self, runner: CliRunner, write_layout, layout_document) -> None:
        result = runner.invoke(app, ["labels", str(write_layout(layout_document))])

        assert result.exit_code == 0
        rows = [line.split() for line in result.output.splitlines()[2:]]
        assert rows == [["C1", "A1", "640x640"], ["C2", "B1", "640x640"]]


class TestAutoCommands:
    """Tests for auto-route and auto-power."""

    def test_auto_route(self, runner: CliRunner, write_layout, layout_document) -> None:
        result = runner.invoke(app, ["auto-route", str(write_layout(layout_document))])

        assert result.exit_code == 0
        routes = json.loads(result.output)["project"]["dataRoutes"]
        assert routes == [
            {"id": "route-1", "port": 1, "cabinetIds": ["C1"]},
            {"id": "route-2", "port": 2, "cabinetIds": ["C2"]},
        ]

    def test_auto_power_to_file(
        self, runner: CliRunner, write_layout, layout_document, tmp_path: Path
    ) -> None:
        output = tmp_path / "powered.json"
        result = runner.invoke(
            app, ["auto-power", str(write_layout(layout_document)), "--output", str(output)]
        )

        assert result.exit_code == 0
        feeds = load_layout(output).project.power_feeds
        assert [(f.id, f.assigned_cabinet_ids) for f in feeds] == [("feed-1", ("C1", "C2"))]

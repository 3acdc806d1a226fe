"""Plain-text formatters for layout reports."""

from __future__ import annotations

from ledlayout.application.summary import LayoutSummary
from ledlayout.domain.entities import LayoutData
from ledlayout.domain.services import ValidationReport, grid_label_map
from ledlayout.domain.services.labels import UNKNOWN_LABEL


def _mm(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.1f}"


class LayoutSummaryFormatter:
    """Formats a layout summary as a text report."""

    def format(self, summary: LayoutSummary) -> str:
        bounds = summary.bounds
        lines = [
            f"LAYOUT SUMMARY: {summary.name}",
            "=" * 60,
            f"Mode: {summary.mode}",
            f"Cabinets: {summary.cabinet_count}",
            f"Extent: {_mm(bounds.width)} x {_mm(bounds.height)} mm "
            f"({bounds.width_px} x {bounds.height_px} px)",
            "",
        ]
        lines.extend(self._format_controller(summary))
        lines.append("")
        lines.extend(self._format_routes(summary))
        lines.append("")
        lines.extend(self._format_feeds(summary))

        if summary.error_count or summary.warning_count:
            lines.append("")
            lines.append(
                f"Validation: {summary.error_count} error(s), "
                f"{summary.warning_count} warning(s)"
            )
        return "\n".join(lines)

    def _format_controller(self, summary: LayoutSummary) -> list[str]:
        lines = [
            "CONTROLLER",
            "-" * 60,
            f"Model: {summary.controller.value} ({summary.controller.port_count} ports)",
            f"Pixel load: {summary.pixel_load:,} / {summary.pixel_limit:,}",
        ]
        if summary.controller_over_limit:
            lines.append("Status: OVER LIMIT")
            if summary.suggested_controller is not None:
                lines.append(f"Suggested upgrade: {summary.suggested_controller.value}")
        else:
            lines.append("Status: OK")
        return lines

    def _format_routes(self, summary: LayoutSummary) -> list[str]:
        lines = ["DATA ROUTES", "-" * 60]
        if not summary.routes:
            lines.append("No data routes.")
            return lines
        for route in summary.routes:
            flag = "  OVER CAPACITY" if route.over_capacity else ""
            lines.append(f"Port {route.port} ({route.id}): {route.load_px:,} px{flag}")
            chain = " -> ".join(route.labels) if route.labels else "(empty)"
            lines.append(f"  {chain}")
            if route.mapping_numbers:
                numbers = ", ".join(n or "-" for n in route.mapping_numbers)
                lines.append(f"  Mapping numbers: {numbers}")
        return lines

    def _format_feeds(self, summary: LayoutSummary) -> list[str]:
        lines = ["POWER FEEDS", "-" * 60]
        if not summary.feeds:
            lines.append("No power feeds.")
            return lines
        for feed in summary.feeds:
            limit = f" / {feed.limit_w:.0f}" if feed.limit_w is not None else ""
            flag = "  OVERLOADED" if feed.overloaded else ""
            lines.append(f"{feed.label} ({feed.id}): {feed.load_w} W{limit}{flag}")
            cabinets = ", ".join(feed.cabinet_ids) if feed.cabinet_ids else "(none)"
            lines.append(f"  Cabinets: {cabinets}")
        return lines


class GridLabelFormatter:
    """Formats the cabinet id to grid label table."""

    def format(self, layout: LayoutData) -> str:
        if not layout.cabinets:
            return "No cabinets in layout."

        labels = grid_label_map(layout)
        lines = [
            f"{'Cabinet':<12} {'Label':<8} {'Type'}",
            "-" * 40,
        ]
        for cabinet in layout.cabinets:
            label = labels.get(cabinet.id, UNKNOWN_LABEL)
            lines.append(f"{cabinet.id:<12} {label:<8} {cabinet.type_id}")
        return "\n".join(lines)


class ValidationReportFormatter:
    """Formats validation issues grouped by severity.

    Returns a list of (text, is_error) pairs so callers can route errors
    to stderr.
    """

    def format(self, report: ValidationReport) -> list[tuple[str, bool]]:
        lines: list[tuple[str, bool]] = []
        if report.errors:
            lines.append(("Errors:", True))
            for issue in report.errors:
                lines.append((f"  [{issue.code.value}] {issue.message}", True))
        if report.warnings:
            lines.append(("Warnings:", False))
            for issue in report.warnings:
                lines.append((f"  [{issue.code.value}] {issue.message}", False))

        if report.errors:
            lines.append(
                (
                    f"Validation failed: {len(report.errors)} error(s), "
                    f"{len(report.warnings)} warning(s)",
                    True,
                )
            )
        elif report.warnings:
            lines.append((f"Validation passed with {len(report.warnings)} warning(s)", False))
        else:
            lines.append(("Validation passed. Layout is valid.", False))
        return lines

"""Layout validation.

Each check is a small object with a ``name`` and a ``check(layout)``
method returning issues. ``validate_layout`` runs them in a fixed order
and concatenates the results. Validation never mutates the layout.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from ..entities import LayoutData
from .geometry import cabinet_bounds, type_index

__all__ = [
    "ADJACENCY_TOLERANCE_MM",
    "DEFAULT_CHECKS",
    "DuplicateIdCheck",
    "IsolatedCabinetCheck",
    "Issue",
    "IssueCode",
    "LayoutCheck",
    "MissingTypeCheck",
    "OutOfGridCheck",
    "OverlapCheck",
    "Severity",
    "ValidationReport",
    "validate",
    "validate_layout",
]

ADJACENCY_TOLERANCE_MM = 1.0


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    DUPLICATE_ID = "DUPLICATE_ID"
    MISSING_TYPE = "MISSING_TYPE"
    OVERLAP = "OVERLAP"
    OUT_OF_GRID = "OUT_OF_GRID"
    ISOLATED_CABINET = "ISOLATED_CABINET"


@dataclass(frozen=True)
class Issue:
    """A structural defect found in a layout.

    Attributes:
        code: Which check raised it.
        severity: ERROR or WARNING.
        cabinet_ids: Implicated cabinets; the first one is selected when
            the issue is clicked.
        message: Human-readable description.
    """

    code: IssueCode
    severity: Severity
    cabinet_ids: tuple[str, ...]
    message: str


@runtime_checkable
class LayoutCheck(Protocol):
    """Protocol for layout checks."""

    @property
    def name(self) -> str:
        ...

    def check(self, layout: LayoutData) -> list[Issue]:
        ...


class DuplicateIdCheck:
    name = "duplicate_id"

    def check(self, layout: LayoutData) -> list[Issue]:
        counts = Counter(c.id for c in layout.cabinets)
        return [
            Issue(
                IssueCode.DUPLICATE_ID,
                Severity.ERROR,
                (cabinet_id,),
                f"Duplicate cabinet ID: {cabinet_id}",
            )
            for cabinet_id, count in counts.items()
            if count > 1
        ]


class MissingTypeCheck:
    name = "missing_type"

    def check(self, layout: LayoutData) -> list[Issue]:
        known = type_index(layout.cabinet_types)
        return [
            Issue(
                IssueCode.MISSING_TYPE,
                Severity.ERROR,
                (c.id,),
                f"Cabinet {c.id} has unknown type: {c.type_id}",
            )
            for c in layout.cabinets
            if c.type_id not in known
        ]


class OverlapCheck:
    """Flags every pair of cabinets whose footprints share positive area."""

    name = "overlap"

    def check(self, layout: LayoutData) -> list[Issue]:
        bounds = [cabinet_bounds(c, layout.cabinet_types) for c in layout.cabinets]
        issues: list[Issue] = []
        for i, first in enumerate(layout.cabinets):
            if bounds[i] is None:
                continue
            for j in range(i + 1, len(layout.cabinets)):
                other = bounds[j]
                if other is None or not bounds[i].overlaps(other):
                    continue
                second = layout.cabinets[j]
                issues.append(
                    Issue(
                        IssueCode.OVERLAP,
                        Severity.ERROR,
                        (first.id, second.id),
                        f"Cabinets {first.id} and {second.id} overlap",
                    )
                )
        return issues


class OutOfGridCheck:
    name = "out_of_grid"

    def check(self, layout: LayoutData) -> list[Issue]:
        grid = layout.project.grid
        if not grid.enabled or grid.step_mm <= 0:
            return []
        step = grid.step_mm
        step_label = f"{step:g}"
        return [
            Issue(
                IssueCode.OUT_OF_GRID,
                Severity.WARNING,
                (c.id,),
                f"Cabinet {c.id} is not aligned to grid ({step_label}mm)",
            )
            for c in layout.cabinets
            if c.x_mm % step != 0 or c.y_mm % step != 0
        ]


class IsolatedCabinetCheck:
    """Flags cabinets that touch no other cabinet, edge or corner."""

    name = "isolated_cabinet"

    def __init__(self, tolerance: float = ADJACENCY_TOLERANCE_MM) -> None:
        self.tolerance = tolerance

    def check(self, layout: LayoutData) -> list[Issue]:
        if len(layout.cabinets) <= 1:
            return []
        bounds = [cabinet_bounds(c, layout.cabinet_types) for c in layout.cabinets]
        issues: list[Issue] = []
        for i, cabinet in enumerate(layout.cabinets):
            own = bounds[i]
            if own is None:
                continue
            has_neighbor = any(
                other is not None and own.touches(other, self.tolerance)
                for j, other in enumerate(bounds)
                if j != i
            )
            if not has_neighbor:
                issues.append(
                    Issue(
                        IssueCode.ISOLATED_CABINET,
                        Severity.WARNING,
                        (cabinet.id,),
                        f"Cabinet {cabinet.id} has no adjacent neighbors",
                    )
                )
        return issues


DEFAULT_CHECKS: tuple[LayoutCheck, ...] = (
    DuplicateIdCheck(),
    MissingTypeCheck(),
    OverlapCheck(),
    OutOfGridCheck(),
    IsolatedCabinetCheck(),
)


def validate(
    layout: LayoutData, checks: Sequence[LayoutCheck] = DEFAULT_CHECKS
) -> list[Issue]:
    """Run the checks in order and concatenate their issues."""
    issues: list[Issue] = []
    for check in checks:
        issues.extend(check.check(layout))
    return issues


@dataclass
class ValidationReport:
    """Issues from one validation run, split by severity.

    Attributes:
        issues: All issues in check order.
    """

    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """Check if the layout has no blocking errors."""
        return not self.errors

    @property
    def exit_code(self) -> int:
        """Get the CLI exit code based on validation status.

        Returns:
            0 if clean
            1 if there are errors
            2 if there are only warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def by_code(self, code: IssueCode) -> list[Issue]:
        return [i for i in self.issues if i.code == code]


def validate_layout(
    layout: LayoutData, checks: Sequence[LayoutCheck] = DEFAULT_CHECKS
) -> ValidationReport:
    """Validate a layout and wrap the result in a report."""
    return ValidationReport(issues=validate(layout, checks))

"""Pytest configuration and shared fixtures for layout tests."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import pytest

from ledlayout.domain import (
    Cabinet,
    CabinetType,
    ControllerModel,
    LayoutData,
    Project,
)


# =============================================================================
# Layout builders
# =============================================================================

SQUARE = CabinetType("640x640", 640, 640)
WIDE = CabinetType("960x640", 960, 640)


def grid_cabinets(
    columns: int, rows: int, size: float = 640, type_id: str = "640x640"
) -> tuple[Cabinet, ...]:
    """Cabinets on a regular grid, numbered C1.. column by column from the bottom."""
    cabinets = []
    n = 1
    for col in range(columns):
        for row in range(rows):
            cabinets.append(Cabinet(f"C{n}", type_id, x_mm=col * size, y_mm=row * size))
            n += 1
    return tuple(cabinets)


@pytest.fixture
def make_layout() -> Callable[..., LayoutData]:
    """Factory for small layouts.

    Keyword arguments other than ``cabinets`` and ``cabinet_types`` are
    applied to the project.
    """

    def factory(
        cabinets: tuple[Cabinet, ...] = (),
        cabinet_types: tuple[CabinetType, ...] = (SQUARE, WIDE),
        **project: Any,
    ) -> LayoutData:
        return LayoutData(
            project=replace(Project(), **project),
            cabinet_types=cabinet_types,
            cabinets=tuple(cabinets),
        )

    return factory


@pytest.fixture
def pair_layout(make_layout) -> LayoutData:
    """Two 640x640 cabinets side by side on a two-port controller."""
    return make_layout(
        (
            Cabinet("C1", "640x640", x_mm=0, y_mm=0),
            Cabinet("C2", "640x640", x_mm=640, y_mm=0),
        ),
        controller=ControllerModel.A100,
    )


@pytest.fixture
def square_layout(make_layout) -> LayoutData:
    """A 2x2 block: C1 bottom-left, C2 top-left, C3 bottom-right, C4 top-right."""
    return make_layout(grid_cabinets(2, 2))


@pytest.fixture
def layout_document() -> dict[str, Any]:
    """A complete, valid layout JSON document."""
    return {
        "schemaVersion": 2,
        "project": {
            "name": "Main Stage",
            "client": "ACME",
            "mode": "indoor",
            "pitch_mm": 2.5,
            "pitch_is_gob": True,
            "controller": "A100",
            "controllerPlacement": "external",
            "grid": {"enabled": True, "step_mm": 160},
            "dataRoutes": [],
            "powerFeeds": [],
        },
        "cabinetTypes": [{"typeId": "640x640", "width_mm": 640, "height_mm": 640}],
        "cabinets": [
            {"id": "C1", "typeId": "640x640", "x_mm": 0, "y_mm": 0, "rot_deg": 0},
            {"id": "C2", "typeId": "640x640", "x_mm": 640, "y_mm": 0, "rot_deg": 0},
        ],
    }

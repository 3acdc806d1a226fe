"""Layout normalization.

``normalize`` repairs a possibly partial or legacy layout into a fully
consistent one. It never raises: reference-integrity defects are fixed
in place and logged. Running it twice gives the same result as running
it once.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from ..entities import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_GRID_STEP_MM,
    Cabinet,
    CabinetType,
    DataRoute,
    LayoutData,
    PowerFeed,
    Project,
)
from ..modes import coerce_mode, coerce_mode_pitch, coerce_module_size, get_mode_definition
from ..value_objects import ControllerPlacement, ProjectMode, Rotation
from .controller import resolve_controller_cabinet_id
from .geometry import infer_cabinet_type
from .routing import normalize_route_endpoints

logger = logging.getLogger(__name__)

__all__ = [
    "default_layout",
    "default_project",
    "generate_cabinet_id",
    "normalize",
    "repair_routes",
]


def generate_cabinet_id(existing_ids: Iterable[str]) -> str:
    """Next free ``Cnn`` id, counting up from one past the cabinet count."""
    existing = set(existing_ids)
    counter = len(existing) + 1
    while f"C{counter:02d}" in existing:
        counter += 1
    return f"C{counter:02d}"


def _resolve_catalog(
    types: tuple[CabinetType, ...], cabinets: tuple[Cabinet, ...], mode: ProjectMode
) -> tuple[CabinetType, ...]:
    catalog: list[CabinetType] = []
    seen: set[str] = set()
    for cabinet_type in types:
        if cabinet_type.type_id in seen:
            logger.debug(f"Dropping duplicate cabinet type {cabinet_type.type_id!r}")
            continue
        seen.add(cabinet_type.type_id)
        catalog.append(cabinet_type)

    if not catalog:
        catalog = list(get_mode_definition(mode).cabinet_types)
        seen = {t.type_id for t in catalog}

    for cabinet in cabinets:
        if cabinet.type_id in seen:
            continue
        inferred = infer_cabinet_type(cabinet.type_id) or infer_cabinet_type(
            cabinet.id, type_id=cabinet.type_id
        )
        if inferred is None:
            continue
        inferred = replace(inferred, type_id=cabinet.type_id)
        logger.info(
            f"Inferred cabinet type {inferred.type_id!r} as "
            f"{inferred.width_mm:g}x{inferred.height_mm:g} mm"
        )
        seen.add(inferred.type_id)
        catalog.append(inferred)
    return tuple(catalog)


def _unique_cabinets(cabinets: tuple[Cabinet, ...]) -> tuple[Cabinet, ...]:
    taken = {c.id for c in cabinets if c.id}
    seen: set[str] = set()
    result: list[Cabinet] = []
    for cabinet in cabinets:
        if cabinet.id and cabinet.id not in seen:
            seen.add(cabinet.id)
            result.append(cabinet)
            continue
        new_id = generate_cabinet_id(taken)
        taken.add(new_id)
        seen.add(new_id)
        logger.warning(f"Cabinet id {cabinet.id!r} is empty or duplicated; renamed to {new_id}")
        result.append(replace(cabinet, id=new_id))
    return tuple(result)


def repair_routes(
    routes: tuple[DataRoute, ...], card_counts: dict[str, int], port_count: int
) -> tuple[DataRoute, ...]:
    """Move routes onto free ports within [1, port_count] and fix their endpoints.

    Routes that find no free port are dropped.
    """
    repaired: list[DataRoute] = []
    used: set[int] = set()
    for route in routes:
        port = route.port
        if port < 1 or port > port_count or port in used:
            free = next((p for p in range(1, port_count + 1) if p not in used), None)
            if free is None:
                logger.warning(f"Dropping data route {route.id!r}: no free controller port")
                continue
            logger.debug(f"Moving data route {route.id!r} from port {port} to {free}")
            port = free
        used.add(port)
        cabinet_ids = normalize_route_endpoints(route.cabinet_ids, card_counts)
        repaired.append(replace(route, port=port, cabinet_ids=cabinet_ids))
    return tuple(repaired)


def _repair_feeds(
    feeds: tuple[PowerFeed, ...], cabinet_ids: set[str]
) -> tuple[PowerFeed, ...]:
    repaired: list[PowerFeed] = []
    for feed in feeds:
        assigned: list[str] = []
        for cabinet_id in feed.assigned_cabinet_ids:
            if cabinet_id in cabinet_ids and cabinet_id not in assigned:
                assigned.append(cabinet_id)
        repaired.append(replace(feed, assigned_cabinet_ids=tuple(assigned)))
    return tuple(repaired)


def _resolve_placement(layout: LayoutData) -> tuple[ControllerPlacement, str | None]:
    project = layout.project
    if project.controller_placement != ControllerPlacement.CABINET:
        return ControllerPlacement.EXTERNAL, None
    cabinet_id = resolve_controller_cabinet_id(layout)
    if cabinet_id is None and project.mode != ProjectMode.OUTDOOR:
        return ControllerPlacement.EXTERNAL, None
    # Outdoor controllers stay cabinet-mounted even before any cabinet exists
    return ControllerPlacement.CABINET, cabinet_id


def normalize(layout: LayoutData) -> LayoutData:
    """Repair and complete a layout.

    Args:
        layout: Layout as read from a document or produced by edits.

    Returns:
        A layout where every invariant holds: unique ids, a complete
        catalog, mode-valid pitch and module size, consistent routes and
        feeds, a resolvable controller cabinet and an up-to-date schema
        version.
    """
    project = layout.project
    mode = coerce_mode(project.mode)
    pitch = coerce_mode_pitch(mode, project.pitch_mm, project.pitch_is_gob)
    grid = project.grid
    if grid.step_mm <= 0:
        grid = replace(grid, step_mm=DEFAULT_GRID_STEP_MM)
    overview = replace(
        project.overview,
        module_size=coerce_module_size(mode, project.overview.module_size),
    )

    cabinets = _unique_cabinets(layout.cabinets)
    if mode == ProjectMode.OUTDOOR:
        cabinets = tuple(
            c if c.rot_deg == Rotation.R0 else replace(c, rot_deg=Rotation.R0)
            for c in cabinets
        )
    catalog = _resolve_catalog(layout.cabinet_types, cabinets, mode)

    card_counts = {c.id: c.receiver_card_count for c in cabinets}
    project = replace(
        project,
        mode=mode,
        pitch_mm=pitch.pitch_mm,
        pitch_is_gob=pitch.pitch_is_gob,
        grid=grid,
        overview=overview,
        data_routes=repair_routes(project.data_routes, card_counts, project.port_count),
        power_feeds=_repair_feeds(project.power_feeds, set(card_counts)),
    )
    result = LayoutData(
        schema_version=max(layout.schema_version, CURRENT_SCHEMA_VERSION),
        project=project,
        cabinet_types=catalog,
        cabinets=cabinets,
    )

    placement, controller_cabinet_id = _resolve_placement(result)
    return replace(
        result,
        project=replace(
            result.project,
            controller_placement=placement,
            controller_cabinet_id=controller_cabinet_id,
        ),
    )


def default_project(mode: ProjectMode = ProjectMode.INDOOR, **overrides) -> Project:
    """A fresh project for the mode, with optional field overrides."""
    definition = get_mode_definition(mode)
    project = Project(
        mode=definition.mode,
        pitch_mm=definition.default_pitch.pitch_mm,
        pitch_is_gob=definition.default_pitch.pitch_is_gob,
        controller_placement=definition.default_controller_placement,
    )
    project = replace(
        project,
        overview=replace(project.overview, module_size=definition.default_module_size),
    )
    return replace(project, **overrides) if overrides else project


def default_layout(mode: ProjectMode = ProjectMode.INDOOR, **project_overrides) -> LayoutData:
    """A normalized empty layout for the mode."""
    return normalize(
        LayoutData(
            project=default_project(mode, **project_overrides),
            cabinet_types=get_mode_definition(mode).cabinet_types,
        )
    )

"""Editing commands and the layout reducer.

Every user-facing edit is a command value. ``apply_command`` is a pure
function returning the next layout; it never touches history. Commands
naming an entity that does not exist leave the layout unchanged. Partial
updates naming an unknown field raise ``UnknownFieldError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Mapping

from ledlayout.domain import (
    Cabinet,
    CabinetType,
    DataRoute,
    LayoutData,
    PowerFeed,
    assignment_pairs,
)
from ledlayout.domain.modes import (
    coerce_mode,
    coerce_mode_pitch,
    coerce_module_size,
    get_mode_definition,
)
from ledlayout.domain.services import (
    auto_power,
    auto_route,
    cabinet_bounds,
    card_count_route_updates,
    default_layout,
    generate_cabinet_id,
    normalize,
    repair_routes,
    toggle_endpoint,
)
from ledlayout.domain.services.routing import endpoint_cabinet_id
from ledlayout.domain.value_objects import (
    ControllerModel,
    ControllerPlacement,
    LabelsMode,
    MappingNumbersMode,
    ModuleOrientation,
    PageOrientation,
    PageSize,
    ProjectMode,
    Rotation,
)

from .document.coercion import to_card_count, to_rotation

logger = logging.getLogger(__name__)


class UnknownFieldError(ValueError):
    """A partial update named a field the entity does not have."""

    def __init__(self, entity: str, names: list[str]) -> None:
        self.entity = entity
        self.names = names
        super().__init__(f"Unknown {entity} field(s): {', '.join(sorted(names))}")


# --- Commands ---------------------------------------------------------------


@dataclass(frozen=True)
class AddCabinetType:
    cabinet_type: CabinetType


@dataclass(frozen=True)
class DeleteCabinetType:
    type_id: str


@dataclass(frozen=True)
class AddCabinet:
    cabinet: Cabinet


@dataclass(frozen=True)
class UpdateCabinet:
    """Partial cabinet update; a ``receiver_card_count`` change also rewrites routes."""

    cabinet_id: str
    updates: Mapping[str, Any]


@dataclass(frozen=True)
class DeleteCabinet:
    """Remove a cabinet and every reference to it."""

    cabinet_id: str


@dataclass(frozen=True)
class DuplicateCabinet:
    """Copy a cabinet one footprint width to the right.

    Attributes:
        cabinet_id: Source cabinet.
        new_id: Id for the copy; the next free ``Cnn`` id when None.
    """

    cabinet_id: str
    new_id: str | None = None


@dataclass(frozen=True)
class RotateCabinets:
    """Rotate one cabinet in place, or several as a block about their center."""

    cabinet_ids: tuple[str, ...]


@dataclass(frozen=True)
class AddDataRoute:
    route: DataRoute


@dataclass(frozen=True)
class UpdateDataRoute:
    route_id: str
    updates: Mapping[str, Any]


@dataclass(frozen=True)
class DeleteDataRoute:
    route_id: str


@dataclass(frozen=True)
class ClearDataRoutes:
    pass


@dataclass(frozen=True)
class AddPowerFeed:
    feed: PowerFeed


@dataclass(frozen=True)
class UpdatePowerFeed:
    feed_id: str
    updates: Mapping[str, Any]


@dataclass(frozen=True)
class DeletePowerFeed:
    feed_id: str


@dataclass(frozen=True)
class ClearPowerFeeds:
    pass


@dataclass(frozen=True)
class ToggleRouteEndpoint:
    route_id: str
    endpoint_id: str


@dataclass(frozen=True)
class TogglePowerFeedCabinet:
    feed_id: str
    cabinet_id: str


@dataclass(frozen=True)
class UpdateProject:
    """Partial project update.

    A ``mode`` change resets the design like ``SetProjectMode``; a controller
    change moves routes onto the ports the new model has.
    """

    updates: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateOverviewSettings:
    """Partial overview update.

    A mapping given for ``mapping_numbers`` is merged into the current
    mapping number settings rather than replacing them.
    """

    updates: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateExportSettings:
    updates: Mapping[str, Any]


@dataclass(frozen=True)
class SetProjectMode:
    """Switch mode, resetting the design but keeping project name and client."""

    mode: ProjectMode


@dataclass(frozen=True)
class SetReceiverCardCount:
    """Change a cabinet's card count and rewrite every route referencing it.

    Counts outside 0..2 are clamped.
    """

    cabinet_id: str
    count: int


@dataclass(frozen=True)
class AutoRoute:
    pass


@dataclass(frozen=True)
class AutoPower:
    pass


@dataclass(frozen=True)
class SetLayout:
    """Replace the whole document, normalizing it first."""

    layout: LayoutData = field(default_factory=LayoutData)


Command = (
    AddCabinetType
    | DeleteCabinetType
    | AddCabinet
    | UpdateCabinet
    | DeleteCabinet
    | DuplicateCabinet
    | RotateCabinets
    | AddDataRoute
    | UpdateDataRoute
    | DeleteDataRoute
    | ClearDataRoutes
    | AddPowerFeed
    | UpdatePowerFeed
    | DeletePowerFeed
    | ClearPowerFeeds
    | ToggleRouteEndpoint
    | TogglePowerFeedCabinet
    | UpdateProject
    | UpdateOverviewSettings
    | UpdateExportSettings
    | SetProjectMode
    | SetReceiverCardCount
    | AutoRoute
    | AutoPower
    | SetLayout
)


# --- Partial updates ----------------------------------------------------------


def _to_rotation(value: Any) -> Rotation:
    return Rotation(to_rotation(value))


def _to_tuple(value: Any) -> tuple:
    return tuple(value)


_CABINET_CONVERTERS: dict[str, Callable[[Any], Any]] = {"rot_deg": _to_rotation}
_ROUTE_CONVERTERS: dict[str, Callable[[Any], Any]] = {"cabinet_ids": _to_tuple}
_FEED_CONVERTERS: dict[str, Callable[[Any], Any]] = {"assigned_cabinet_ids": _to_tuple}
_PROJECT_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "mode": coerce_mode,
    "controller": ControllerModel,
    "controller_placement": ControllerPlacement,
    "data_routes": _to_tuple,
    "power_feeds": _to_tuple,
}
_OVERVIEW_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "labels_mode": LabelsMode,
    "module_orientation": ModuleOrientation,
}
_MAPPING_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "mode": MappingNumbersMode,
    "labels": _to_tuple,
    "per_chain": assignment_pairs,
    "per_endpoint": assignment_pairs,
}
_EXPORT_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "page_size": PageSize,
    "orientation": PageOrientation,
}


def _apply_updates(
    entity: Any,
    updates: Mapping[str, Any],
    converters: Mapping[str, Callable[[Any], Any]],
) -> Any:
    known = {f.name for f in fields(entity)}
    unknown = [name for name in updates if name not in known]
    if unknown:
        raise UnknownFieldError(type(entity).__name__, unknown)
    changes = {
        name: converters[name](value) if name in converters and value is not None else value
        for name, value in updates.items()
    }
    return replace(entity, **changes)


def _with_project(layout: LayoutData, **changes: Any) -> LayoutData:
    return replace(layout, project=replace(layout.project, **changes))


def _is_outdoor(layout: LayoutData) -> bool:
    return layout.project.mode == ProjectMode.OUTDOOR


# --- Handlers -----------------------------------------------------------------


def _add_cabinet_type(layout: LayoutData, command: AddCabinetType) -> LayoutData:
    if not get_mode_definition(layout.project.mode).allows_custom_types:
        logger.debug("Cabinet catalog is fixed in this mode; ignoring new type")
        return layout
    if layout.find_type(command.cabinet_type.type_id) is not None:
        return layout
    return replace(layout, cabinet_types=layout.cabinet_types + (command.cabinet_type,))


def _delete_cabinet_type(layout: LayoutData, command: DeleteCabinetType) -> LayoutData:
    if not get_mode_definition(layout.project.mode).allows_custom_types:
        return layout
    return replace(
        layout,
        cabinet_types=tuple(t for t in layout.cabinet_types if t.type_id != command.type_id),
    )


def _add_cabinet(layout: LayoutData, command: AddCabinet) -> LayoutData:
    cabinet = command.cabinet
    if _is_outdoor(layout) and cabinet.rot_deg != Rotation.R0:
        cabinet = replace(cabinet, rot_deg=Rotation.R0)
    return replace(layout, cabinets=layout.cabinets + (cabinet,))


def _update_cabinet(layout: LayoutData, command: UpdateCabinet) -> LayoutData:
    if layout.find_cabinet(command.cabinet_id) is None:
        return layout
    updates = dict(command.updates)
    if "receiver_card_count" in updates:
        count = updates.pop("receiver_card_count")
        layout = _set_receiver_card_count(layout, SetReceiverCardCount(command.cabinet_id, count))
    cabinets = []
    for cabinet in layout.cabinets:
        if cabinet.id == command.cabinet_id:
            cabinet = _apply_updates(cabinet, updates, _CABINET_CONVERTERS)
            if _is_outdoor(layout):
                cabinet = replace(cabinet, rot_deg=Rotation.R0)
        cabinets.append(cabinet)
    return replace(layout, cabinets=tuple(cabinets))


def _delete_cabinet(layout: LayoutData, command: DeleteCabinet) -> LayoutData:
    target = command.cabinet_id
    if layout.find_cabinet(target) is None:
        return layout
    project = layout.project

    routes = tuple(
        replace(r, cabinet_ids=tuple(e for e in r.cabinet_ids if endpoint_cabinet_id(e) != target))
        for r in project.data_routes
    )
    feeds = tuple(
        replace(f, assigned_cabinet_ids=tuple(c for c in f.assigned_cabinet_ids if c != target))
        for f in project.power_feeds
    )
    changes: dict[str, Any] = {"data_routes": routes, "power_feeds": feeds}
    if (
        project.controller_placement == ControllerPlacement.CABINET
        and project.controller_cabinet_id == target
    ):
        changes["controller_placement"] = (
            ControllerPlacement.CABINET if _is_outdoor(layout) else ControllerPlacement.EXTERNAL
        )
        changes["controller_cabinet_id"] = None

    return replace(
        layout,
        cabinets=tuple(c for c in layout.cabinets if c.id != target),
        project=replace(project, **changes),
    )


def _duplicate_cabinet(layout: LayoutData, command: DuplicateCabinet) -> LayoutData:
    source = layout.find_cabinet(command.cabinet_id)
    if source is None:
        return layout
    new_id = command.new_id or generate_cabinet_id(layout.cabinet_ids)
    bounds = cabinet_bounds(source, layout.cabinet_types)
    width = bounds.width if bounds is not None else 100.0
    copy = replace(source, id=new_id, x_mm=source.x_mm + width)
    return replace(layout, cabinets=layout.cabinets + (copy,))


def _footprint(layout: LayoutData, cabinet: Cabinet, rotation: Rotation) -> tuple[float, float]:
    bounds = cabinet_bounds(replace(cabinet, rot_deg=rotation), layout.cabinet_types)
    if bounds is None:
        return 100.0, 100.0
    return bounds.width, bounds.height


def _rotate_cabinets(layout: LayoutData, command: RotateCabinets) -> LayoutData:
    if not get_mode_definition(layout.project.mode).allows_rotation:
        return layout
    wanted = list(dict.fromkeys(command.cabinet_ids))
    selected = [c for c in (layout.find_cabinet(i) for i in wanted) if c is not None]
    if not selected:
        return layout

    updates: dict[str, dict[str, Any]] = {}
    if len(selected) == 1:
        cabinet = selected[0]
        updates[cabinet.id] = {"rot_deg": cabinet.rot_deg.next()}
    else:
        step = layout.project.grid.step_mm

        def snap(value: float) -> float:
            return round(value / step) * step if step > 0 else value

        boxes = []
        for cabinet in selected:
            width, height = _footprint(layout, cabinet, cabinet.rot_deg)
            boxes.append((cabinet, width, height))
        min_x = min(c.x_mm for c, _, _ in boxes)
        min_y = min(c.y_mm for c, _, _ in boxes)
        max_x = max(c.x_mm + w for c, w, _ in boxes)
        max_y = max(c.y_mm + h for c, _, h in boxes)
        group_x = (min_x + max_x) / 2
        group_y = (min_y + max_y) / 2

        for cabinet, width, height in boxes:
            rotation = cabinet.rot_deg.next()
            new_width, new_height = _footprint(layout, cabinet, rotation)
            rel_x = cabinet.x_mm + width / 2 - group_x
            rel_y = cabinet.y_mm + height / 2 - group_y
            # Quarter turn counter-clockwise about the group center
            center_x = group_x - rel_y
            center_y = group_y + rel_x
            updates[cabinet.id] = {
                "rot_deg": rotation,
                "x_mm": snap(center_x - new_width / 2),
                "y_mm": snap(center_y - new_height / 2),
            }

    return replace(
        layout,
        cabinets=tuple(
            replace(c, **updates[c.id]) if c.id in updates else c for c in layout.cabinets
        ),
    )


def _add_data_route(layout: LayoutData, command: AddDataRoute) -> LayoutData:
    return _with_project(layout, data_routes=layout.project.data_routes + (command.route,))


def _update_data_route(layout: LayoutData, command: UpdateDataRoute) -> LayoutData:
    if layout.find_route(command.route_id) is None:
        return layout
    routes = tuple(
        _apply_updates(r, command.updates, _ROUTE_CONVERTERS) if r.id == command.route_id else r
        for r in layout.project.data_routes
    )
    return _with_project(layout, data_routes=routes)


def _delete_data_route(layout: LayoutData, command: DeleteDataRoute) -> LayoutData:
    if layout.find_route(command.route_id) is None:
        return layout
    routes = tuple(r for r in layout.project.data_routes if r.id != command.route_id)
    return _with_project(layout, data_routes=routes)


def _clear_data_routes(layout: LayoutData, command: ClearDataRoutes) -> LayoutData:
    return _with_project(layout, data_routes=())


def _add_power_feed(layout: LayoutData, command: AddPowerFeed) -> LayoutData:
    return _with_project(layout, power_feeds=layout.project.power_feeds + (command.feed,))


def _update_power_feed(layout: LayoutData, command: UpdatePowerFeed) -> LayoutData:
    if layout.find_feed(command.feed_id) is None:
        return layout
    feeds = tuple(
        _apply_updates(f, command.updates, _FEED_CONVERTERS) if f.id == command.feed_id else f
        for f in layout.project.power_feeds
    )
    return _with_project(layout, power_feeds=feeds)


def _delete_power_feed(layout: LayoutData, command: DeletePowerFeed) -> LayoutData:
    if layout.find_feed(command.feed_id) is None:
        return layout
    feeds = tuple(f for f in layout.project.power_feeds if f.id != command.feed_id)
    return _with_project(layout, power_feeds=feeds)


def _clear_power_feeds(layout: LayoutData, command: ClearPowerFeeds) -> LayoutData:
    return _with_project(layout, power_feeds=())


def _toggle_route_endpoint(layout: LayoutData, command: ToggleRouteEndpoint) -> LayoutData:
    if layout.find_route(command.route_id) is None:
        return layout
    routes = tuple(
        replace(r, cabinet_ids=toggle_endpoint(r.cabinet_ids, command.endpoint_id))
        if r.id == command.route_id
        else r
        for r in layout.project.data_routes
    )
    return _with_project(layout, data_routes=routes)


def _toggle_power_feed_cabinet(
    layout: LayoutData, command: TogglePowerFeedCabinet
) -> LayoutData:
    if layout.find_feed(command.feed_id) is None:
        return layout
    feeds = tuple(
        replace(f, assigned_cabinet_ids=toggle_endpoint(f.assigned_cabinet_ids, command.cabinet_id))
        if f.id == command.feed_id
        else f
        for f in layout.project.power_feeds
    )
    return _with_project(layout, power_feeds=feeds)


def _update_project(layout: LayoutData, command: UpdateProject) -> LayoutData:
    updates = dict(command.updates)
    mode = updates.pop("mode", None)
    if mode is not None:
        layout = _set_project_mode(layout, SetProjectMode(mode))
    project = _apply_updates(layout.project, updates, _PROJECT_CONVERTERS)
    pitch = coerce_mode_pitch(project.mode, project.pitch_mm, project.pitch_is_gob)
    project = replace(project, pitch_mm=pitch.pitch_mm, pitch_is_gob=pitch.pitch_is_gob)
    if project.controller != layout.project.controller:
        card_counts = {c.id: c.receiver_card_count for c in layout.cabinets}
        project = replace(
            project,
            data_routes=repair_routes(project.data_routes, card_counts, project.port_count),
        )
    return replace(layout, project=project)


def _update_overview(layout: LayoutData, command: UpdateOverviewSettings) -> LayoutData:
    overview = layout.project.overview
    updates = dict(command.updates)
    mapping = updates.get("mapping_numbers")
    if isinstance(mapping, Mapping):
        updates["mapping_numbers"] = _apply_updates(
            overview.mapping_numbers, mapping, _MAPPING_CONVERTERS
        )
    overview = _apply_updates(overview, updates, _OVERVIEW_CONVERTERS)
    overview = replace(
        overview, module_size=coerce_module_size(layout.project.mode, overview.module_size)
    )
    return _with_project(layout, overview=overview)


def _update_export_settings(layout: LayoutData, command: UpdateExportSettings) -> LayoutData:
    settings = _apply_updates(layout.project.export_settings, command.updates, _EXPORT_CONVERTERS)
    return _with_project(layout, export_settings=settings)


def _set_project_mode(layout: LayoutData, command: SetProjectMode) -> LayoutData:
    mode = coerce_mode(command.mode)
    if mode == layout.project.mode:
        return layout
    logger.info(f"Switching project mode to {mode.value}; design reset")
    return default_layout(mode, name=layout.project.name, client=layout.project.client)


def _set_receiver_card_count(layout: LayoutData, command: SetReceiverCardCount) -> LayoutData:
    if layout.find_cabinet(command.cabinet_id) is None:
        return layout
    count = to_card_count(command.count)
    route_updates = {
        u.route_id: u.cabinet_ids
        for u in card_count_route_updates(
            layout.project.data_routes, command.cabinet_id, count
        )
    }
    cabinets = tuple(
        replace(c, receiver_card_count=count) if c.id == command.cabinet_id else c
        for c in layout.cabinets
    )
    routes = tuple(
        replace(r, cabinet_ids=route_updates[r.id]) if r.id in route_updates else r
        for r in layout.project.data_routes
    )
    return replace(layout, cabinets=cabinets, project=replace(layout.project, data_routes=routes))


def _auto_route(layout: LayoutData, command: AutoRoute) -> LayoutData:
    return _with_project(layout, data_routes=auto_route(layout))


def _auto_power(layout: LayoutData, command: AutoPower) -> LayoutData:
    return _with_project(layout, power_feeds=auto_power(layout))


def _set_layout(layout: LayoutData, command: SetLayout) -> LayoutData:
    return normalize(command.layout)


_HANDLERS: dict[type, Callable[[LayoutData, Any], LayoutData]] = {
    AddCabinetType: _add_cabinet_type,
    DeleteCabinetType: _delete_cabinet_type,
    AddCabinet: _add_cabinet,
    UpdateCabinet: _update_cabinet,
    DeleteCabinet: _delete_cabinet,
    DuplicateCabinet: _duplicate_cabinet,
    RotateCabinets: _rotate_cabinets,
    AddDataRoute: _add_data_route,
    UpdateDataRoute: _update_data_route,
    DeleteDataRoute: _delete_data_route,
    ClearDataRoutes: _clear_data_routes,
    AddPowerFeed: _add_power_feed,
    UpdatePowerFeed: _update_power_feed,
    DeletePowerFeed: _delete_power_feed,
    ClearPowerFeeds: _clear_power_feeds,
    ToggleRouteEndpoint: _toggle_route_endpoint,
    TogglePowerFeedCabinet: _toggle_power_feed_cabinet,
    UpdateProject: _update_project,
    UpdateOverviewSettings: _update_overview,
    UpdateExportSettings: _update_export_settings,
    SetProjectMode: _set_project_mode,
    SetReceiverCardCount: _set_receiver_card_count,
    AutoRoute: _auto_route,
    AutoPower: _auto_power,
    SetLayout: _set_layout,
}


def apply_command(layout: LayoutData, command: Command) -> LayoutData:
    """Apply one command and return the resulting layout.

    Args:
        layout: Current layout. It is never modified.
        command: The edit to apply.

    Returns:
        The next layout, or ``layout`` itself when the command is a no-op.

    Raises:
        UnknownFieldError: If a partial update names an unknown field.
        TypeError: If ``command`` is not a known command type.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unknown command: {type(command).__name__}")
    return handler(layout, command)

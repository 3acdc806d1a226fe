"""Conversion from parsed document schemas to domain entities."""

from __future__ import annotations

import logging

from ledlayout.domain.entities import (
    Cabinet,
    CabinetType,
    DataRoute,
    ExportSettings,
    GridSettings,
    LayoutData,
    MappingNumbersSettings,
    OverviewSettings,
    PowerFeed,
    Project,
    assignment_pairs,
)
from ledlayout.domain.modes import get_mode_definition
from ledlayout.domain.value_objects import (
    ControllerModel,
    ControllerPlacement,
    LabelsMode,
    MappingNumbersMode,
    ModuleOrientation,
    PageOrientation,
    PageSize,
    ProjectMode,
    ReceiverCardOverride,
    Rotation,
)

from .schemas import (
    CabinetSchema,
    CabinetTypeSchema,
    DataRouteSchema,
    LayoutDocument,
    OverviewSchema,
    PowerFeedSchema,
    ProjectSchema,
)

logger = logging.getLogger(__name__)


def cabinet_type_from_schema(schema: CabinetTypeSchema) -> CabinetType | None:
    """Build a catalog entry, or None when a dimension is not positive."""
    if schema.width_mm <= 0 or schema.height_mm <= 0:
        logger.warning(
            f"Dropping cabinet type {schema.type_id!r}: dimensions must be positive"
        )
        return None
    return CabinetType(schema.type_id, schema.width_mm, schema.height_mm)


def receiver_card_override_from_schema(schema: CabinetSchema) -> ReceiverCardOverride:
    if not schema.has_override_key:
        return ReceiverCardOverride.default()
    value = schema.receiver_card_override
    if value is None:
        return ReceiverCardOverride.hidden()
    if not value.strip():
        return ReceiverCardOverride.default()
    return ReceiverCardOverride.custom(value)


def cabinet_from_schema(schema: CabinetSchema) -> Cabinet:
    override = receiver_card_override_from_schema(schema)
    count = schema.receiver_card_count
    if count is None:
        count = 0 if override.is_hidden else 1
    return Cabinet(
        id=schema.id,
        type_id=schema.type_id,
        x_mm=schema.x_mm,
        y_mm=schema.y_mm,
        rot_deg=Rotation(schema.rot_deg),
        port=schema.port,
        chain_index=schema.chain_index,
        receiver_card_override=override,
        receiver_card_count=count,
        grid_label_override=schema.grid_label_override,
    )


def overview_from_schema(schema: OverviewSchema) -> OverviewSettings:
    mapping = schema.mapping_numbers
    return OverviewSettings(
        show_receiver_cards=schema.show_receiver_cards,
        receiver_card_model=schema.receiver_card_model,
        labels_mode=LabelsMode(schema.labels_mode),
        show_pixels=schema.show_pixels,
        show_data_routes=schema.show_data_routes,
        show_power_routes=schema.show_power_routes,
        show_module_grid=schema.show_module_grid,
        module_size=schema.module_size,
        module_orientation=ModuleOrientation(schema.module_orientation),
        mapping_numbers=MappingNumbersSettings(
            show=mapping.show,
            mode=MappingNumbersMode(mapping.mode),
            restart_per_card=mapping.restart_per_card,
            labels=tuple(mapping.labels),
            per_chain=assignment_pairs(mapping.manual_assignments.per_chain),
            per_endpoint=assignment_pairs(mapping.manual_assignments.per_endpoint),
        ),
    )


def data_route_from_schema(schema: DataRouteSchema) -> DataRoute:
    return DataRoute(id=schema.id, port=schema.port, cabinet_ids=tuple(schema.cabinet_ids))


def power_feed_from_schema(schema: PowerFeedSchema) -> PowerFeed:
    return PowerFeed(
        id=schema.id,
        label=schema.label,
        connector=schema.connector,
        breaker=schema.breaker,
        consumption_w=schema.consumption_w,
        load_override_w=schema.load_override_w,
        assigned_cabinet_ids=tuple(schema.assigned_cabinet_ids),
    )


def project_from_schema(schema: ProjectSchema) -> Project:
    """Build the project, filling mode-dependent gaps from the mode table.

    A missing pitch takes the mode default. A pitch without a GOB flag is
    read as the plain variant. A missing placement takes the mode default.
    """
    mode = ProjectMode(schema.mode)
    definition = get_mode_definition(mode)
    if schema.pitch_mm is None:
        pitch_mm = definition.default_pitch.pitch_mm
        pitch_is_gob = definition.default_pitch.pitch_is_gob
    else:
        pitch_mm = schema.pitch_mm
        pitch_is_gob = bool(schema.pitch_is_gob)
    placement = (
        ControllerPlacement(schema.controller_placement)
        if schema.controller_placement
        else definition.default_controller_placement
    )
    export = schema.export_settings
    return Project(
        name=schema.name,
        client=schema.client,
        units=schema.units,
        mode=mode,
        pitch_mm=pitch_mm,
        pitch_is_gob=pitch_is_gob,
        controller=ControllerModel(schema.controller),
        controller_placement=placement,
        controller_cabinet_id=schema.controller_cabinet_id,
        grid=GridSettings(enabled=schema.grid.enabled, step_mm=schema.grid.step_mm),
        overview=overview_from_schema(schema.overview),
        data_routes=tuple(data_route_from_schema(r) for r in schema.data_routes),
        power_feeds=tuple(power_feed_from_schema(f) for f in schema.power_feeds),
        export_settings=ExportSettings(
            page_size=PageSize(export.page_size),
            orientation=PageOrientation(export.orientation),
            title=export.title,
            client_name=export.client_name,
        ),
    )


def layout_from_document(document: LayoutDocument) -> LayoutData:
    """Convert a parsed document to a (not yet normalized) layout."""
    types = tuple(
        t for t in (cabinet_type_from_schema(s) for s in document.cabinet_types) if t is not None
    )
    return LayoutData(
        schema_version=document.schema_version,
        project=project_from_schema(document.project),
        cabinet_types=types,
        cabinets=tuple(cabinet_from_schema(c) for c in document.cabinets),
    )

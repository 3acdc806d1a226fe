"""Serialization of layouts to the JSON document format.

Keys follow the document format: camelCase for structural keys and
``*_mm`` snake case for physical measurements. A cabinet whose receiver
card override is the project default carries no ``receiverCardOverride``
key at all; a hidden card is written as ``null``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ledlayout.domain.entities import (
    Cabinet,
    CabinetType,
    DataRoute,
    LayoutData,
    OverviewSettings,
    PowerFeed,
    Project,
)
from ledlayout.domain.value_objects import ReceiverCardKind

logger = logging.getLogger(__name__)


def _number(value: float) -> int | float:
    """Write integral floats as ints so files stay tidy."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _cabinet_type_to_dict(cabinet_type: CabinetType) -> dict[str, Any]:
    return {
        "typeId": cabinet_type.type_id,
        "width_mm": _number(cabinet_type.width_mm),
        "height_mm": _number(cabinet_type.height_mm),
    }


def _cabinet_to_dict(cabinet: Cabinet) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": cabinet.id,
        "typeId": cabinet.type_id,
        "x_mm": _number(cabinet.x_mm),
        "y_mm": _number(cabinet.y_mm),
        "rot_deg": cabinet.rot_deg.value,
    }
    if cabinet.port is not None:
        data["port"] = cabinet.port
    if cabinet.chain_index is not None:
        data["chainIndex"] = cabinet.chain_index
    override = cabinet.receiver_card_override
    if override.kind == ReceiverCardKind.HIDDEN:
        data["receiverCardOverride"] = None
    elif override.kind == ReceiverCardKind.CUSTOM:
        data["receiverCardOverride"] = override.model
    data["receiverCardCount"] = cabinet.receiver_card_count
    if cabinet.grid_label_override:
        data["gridLabelOverride"] = cabinet.grid_label_override
    return data


def _overview_to_dict(overview: OverviewSettings) -> dict[str, Any]:
    mapping = overview.mapping_numbers
    return {
        "showReceiverCards": overview.show_receiver_cards,
        "receiverCardModel": overview.receiver_card_model,
        "labelsMode": overview.labels_mode.value,
        "showPixels": overview.show_pixels,
        "showDataRoutes": overview.show_data_routes,
        "showPowerRoutes": overview.show_power_routes,
        "showModuleGrid": overview.show_module_grid,
        "moduleSize": overview.module_size,
        "moduleOrientation": overview.module_orientation.value,
        "mappingNumbers": {
            "show": mapping.show,
            "mode": mapping.mode.value,
            "restartPerCard": mapping.restart_per_card,
            "labels": [_number(v) for v in mapping.labels],
            "manualAssignments": {
                "perChain": dict(mapping.per_chain),
                "perEndpoint": dict(mapping.per_endpoint),
            },
        },
    }


def _route_to_dict(route: DataRoute) -> dict[str, Any]:
    return {"id": route.id, "port": route.port, "cabinetIds": list(route.cabinet_ids)}


def _feed_to_dict(feed: PowerFeed) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": feed.id,
        "label": feed.label,
        "connector": feed.connector,
        "consumptionW": _number(feed.consumption_w),
        "assignedCabinetIds": list(feed.assigned_cabinet_ids),
    }
    if feed.breaker is not None:
        data["breaker"] = feed.breaker
    if feed.load_override_w is not None:
        data["loadOverrideW"] = _number(feed.load_override_w)
    return data


def _project_to_dict(project: Project) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": project.name,
        "client": project.client,
        "units": project.units,
        "mode": project.mode.value,
        "pitch_mm": _number(project.pitch_mm),
        "pitch_is_gob": project.pitch_is_gob,
        "controller": project.controller.value,
        "controllerPlacement": project.controller_placement.value,
    }
    if project.controller_cabinet_id is not None:
        data["controllerCabinetId"] = project.controller_cabinet_id
    data.update(
        {
            "grid": {
                "enabled": project.grid.enabled,
                "step_mm": _number(project.grid.step_mm),
            },
            "overview": _overview_to_dict(project.overview),
            "dataRoutes": [_route_to_dict(r) for r in project.data_routes],
            "powerFeeds": [_feed_to_dict(f) for f in project.power_feeds],
            "exportSettings": {
                "pageSize": project.export_settings.page_size.value,
                "orientation": project.export_settings.orientation.value,
                "title": project.export_settings.title,
                "clientName": project.export_settings.client_name,
            },
        }
    )
    return data


def layout_to_dict(layout: LayoutData) -> dict[str, Any]:
    """Convert a layout to a JSON-ready dictionary."""
    return {
        "schemaVersion": layout.schema_version,
        "project": _project_to_dict(layout.project),
        "cabinetTypes": [_cabinet_type_to_dict(t) for t in layout.cabinet_types],
        "cabinets": [_cabinet_to_dict(c) for c in layout.cabinets],
    }


def dump_layout(layout: LayoutData, indent: int | None = 2) -> str:
    """Serialize a layout to a JSON string."""
    return json.dumps(layout_to_dict(layout), indent=indent)


def save_layout(layout: LayoutData, path: Path, indent: int | None = 2) -> None:
    """Write a layout to a JSON file.

    Args:
        layout: Layout to write.
        path: Destination file; parent directories must exist.
        indent: JSON indentation, None for compact output.
    """
    path.write_text(dump_layout(layout, indent=indent), encoding="utf-8")
    logger.info(f"Saved layout to {path}")

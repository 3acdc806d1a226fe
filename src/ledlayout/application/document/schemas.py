"""Pydantic schemas mirroring the layout JSON document.

The schemas are deliberately lenient: unknown keys are ignored, list
items that are not objects are dropped and every leaf has a ``before``
validator that turns a bad value into a fallback. Structural repairs
(duplicate ids, dangling references) are left to normalization.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledlayout.domain.entities import CURRENT_SCHEMA_VERSION, DEFAULT_GRID_STEP_MM
from ledlayout.domain.value_objects import DEFAULT_RECEIVER_CARD_MODEL

from .coercion import (
    object_or_empty,
    objects_only,
    string_map,
    strings_only,
    to_bool,
    to_choice,
    to_float,
    to_int,
    to_optional_float,
    to_optional_int,
    to_rotation,
    to_str,
)

REQUIRED_KEYS: tuple[str, ...] = ("schemaVersion", "project", "cabinets")


class _DocumentModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CabinetTypeSchema(_DocumentModel):
    """Catalog entry. Non-positive dimensions are dropped by the adapter."""

    type_id: str = Field(default="", alias="typeId")
    width_mm: float = 0.0
    height_mm: float = 0.0

    @field_validator("type_id", mode="before")
    @classmethod
    def coerce_type_id(cls, v: Any) -> str:
        return to_str(v)

    @field_validator("width_mm", "height_mm", mode="before")
    @classmethod
    def coerce_dimension(cls, v: Any) -> float:
        return to_float(v)


class CabinetSchema(_DocumentModel):
    """A placed cabinet.

    ``receiverCardOverride`` is tri-state: absent means the project model,
    ``null`` hides the card and a string names a custom model. Whether the
    key was present is read from ``model_fields_set``.
    """

    id: str = ""
    type_id: str = Field(default="", alias="typeId")
    x_mm: float = 0.0
    y_mm: float = 0.0
    rot_deg: int = 0
    port: int | None = None
    chain_index: int | None = Field(default=None, alias="chainIndex")
    receiver_card_override: str | None = Field(default=None, alias="receiverCardOverride")
    receiver_card_count: int | None = Field(default=None, alias="receiverCardCount")
    grid_label_override: str | None = Field(default=None, alias="gridLabelOverride")

    @field_validator("id", "type_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> str:
        return to_str(v).strip()

    @field_validator("x_mm", "y_mm", mode="before")
    @classmethod
    def coerce_position(cls, v: Any) -> float:
        return to_float(v)

    @field_validator("rot_deg", mode="before")
    @classmethod
    def coerce_rotation(cls, v: Any) -> int:
        return to_rotation(v)

    @field_validator("port", "chain_index", mode="before")
    @classmethod
    def coerce_hint(cls, v: Any) -> int | None:
        return to_optional_int(v)

    @field_validator("receiver_card_override", mode="before")
    @classmethod
    def coerce_override(cls, v: Any) -> str | None:
        if v is None or isinstance(v, str):
            return v
        # Anything else is treated like a blank string, i.e. the default model
        return ""

    @field_validator("receiver_card_count", mode="before")
    @classmethod
    def coerce_card_count(cls, v: Any) -> int | None:
        count = to_optional_int(v)
        return count if count in (0, 1, 2) else None

    @field_validator("grid_label_override", mode="before")
    @classmethod
    def coerce_label(cls, v: Any) -> str | None:
        text = to_str(v).strip()
        return text or None

    @property
    def has_override_key(self) -> bool:
        return "receiver_card_override" in self.model_fields_set


class GridSchema(_DocumentModel):
    enabled: bool = True
    step_mm: float = DEFAULT_GRID_STEP_MM

    @field_validator("enabled", mode="before")
    @classmethod
    def coerce_enabled(cls, v: Any) -> bool:
        return to_bool(v, True)

    @field_validator("step_mm", mode="before")
    @classmethod
    def coerce_step(cls, v: Any) -> float:
        return to_float(v, DEFAULT_GRID_STEP_MM)


class ManualAssignmentsSchema(_DocumentModel):
    per_chain: dict[str, str] = Field(default_factory=dict, alias="perChain")
    per_endpoint: dict[str, str] = Field(default_factory=dict, alias="perEndpoint")

    @field_validator("per_chain", "per_endpoint", mode="before")
    @classmethod
    def coerce_map(cls, v: Any) -> dict[str, str]:
        return string_map(v)


class MappingNumbersSchema(_DocumentModel):
    show: bool = False
    mode: str = "auto"
    restart_per_card: bool = Field(default=False, alias="restartPerCard")
    labels: list[float] = Field(default_factory=list)
    manual_assignments: ManualAssignmentsSchema = Field(
        default_factory=ManualAssignmentsSchema, alias="manualAssignments"
    )

    @field_validator("show", mode="before")
    @classmethod
    def coerce_show(cls, v: Any) -> bool:
        return to_bool(v, False)

    @field_validator("restart_per_card", mode="before")
    @classmethod
    def coerce_restart(cls, v: Any) -> bool:
        return to_bool(v, False)

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, v: Any) -> str:
        return to_choice(v, ("auto", "manual"), "auto")

    @field_validator("labels", mode="before")
    @classmethod
    def coerce_labels(cls, v: Any) -> list[float]:
        if not isinstance(v, list):
            return []
        return [
            item
            for item in v
            if isinstance(item, (int, float)) and not isinstance(item, bool)
            and to_optional_float(item) is not None
        ]

    @field_validator("manual_assignments", mode="before")
    @classmethod
    def coerce_assignments(cls, v: Any) -> dict[str, Any]:
        return object_or_empty(v)


class OverviewSchema(_DocumentModel):
    show_receiver_cards: bool = Field(default=True, alias="showReceiverCards")
    receiver_card_model: str = Field(
        default=DEFAULT_RECEIVER_CARD_MODEL, alias="receiverCardModel"
    )
    labels_mode: str = Field(default="grid", alias="labelsMode")
    show_pixels: bool = Field(default=True, alias="showPixels")
    show_data_routes: bool = Field(default=True, alias="showDataRoutes")
    show_power_routes: bool = Field(default=True, alias="showPowerRoutes")
    show_module_grid: bool = Field(default=False, alias="showModuleGrid")
    module_size: str = Field(default="320x160", alias="moduleSize")
    module_orientation: str = Field(default="portrait", alias="moduleOrientation")
    mapping_numbers: MappingNumbersSchema = Field(
        default_factory=MappingNumbersSchema, alias="mappingNumbers"
    )

    @field_validator(
        "show_receiver_cards",
        "show_pixels",
        "show_data_routes",
        "show_power_routes",
        mode="before",
    )
    @classmethod
    def coerce_on_flags(cls, v: Any) -> bool:
        return to_bool(v, True)

    @field_validator("show_module_grid", mode="before")
    @classmethod
    def coerce_off_flags(cls, v: Any) -> bool:
        return to_bool(v, False)

    @field_validator("receiver_card_model", mode="before")
    @classmethod
    def coerce_model(cls, v: Any) -> str:
        return to_str(v).strip() or DEFAULT_RECEIVER_CARD_MODEL

    @field_validator("labels_mode", mode="before")
    @classmethod
    def coerce_labels_mode(cls, v: Any) -> str:
        return to_choice(v, ("internal", "grid"), "grid")

    @field_validator("module_size", mode="before")
    @classmethod
    def coerce_module_size(cls, v: Any) -> str:
        return to_str(v, "320x160")

    @field_validator("module_orientation", mode="before")
    @classmethod
    def coerce_orientation(cls, v: Any) -> str:
        return to_choice(v, ("portrait", "landscape"), "portrait")

    @field_validator("mapping_numbers", mode="before")
    @classmethod
    def coerce_mapping(cls, v: Any) -> dict[str, Any]:
        return object_or_empty(v)


class ExportSettingsSchema(_DocumentModel):
    page_size: str = Field(default="A4", alias="pageSize")
    orientation: str = "portrait"
    title: str = ""
    client_name: str = Field(default="", alias="clientName")

    @field_validator("page_size", mode="before")
    @classmethod
    def coerce_page_size(cls, v: Any) -> str:
        return to_choice(v, ("A4", "A3"), "A4")

    @field_validator("orientation", mode="before")
    @classmethod
    def coerce_orientation(cls, v: Any) -> str:
        return to_choice(v, ("portrait", "landscape"), "portrait")

    @field_validator("title", "client_name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return to_str(v)


class DataRouteSchema(_DocumentModel):
    id: str = ""
    port: int = 0
    cabinet_ids: list[str] = Field(default_factory=list, alias="cabinetIds")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return to_str(v)

    @field_validator("port", mode="before")
    @classmethod
    def coerce_port(cls, v: Any) -> int:
        return to_int(v, 0)

    @field_validator("cabinet_ids", mode="before")
    @classmethod
    def coerce_endpoints(cls, v: Any) -> list[str]:
        return strings_only(v)


class PowerFeedSchema(_DocumentModel):
    id: str = ""
    label: str = "220V @20A"
    connector: str = "NAC3FX-W"
    breaker: str | None = None
    consumption_w: float = Field(default=0.0, alias="consumptionW")
    load_override_w: float | None = Field(default=None, alias="loadOverrideW")
    assigned_cabinet_ids: list[str] = Field(default_factory=list, alias="assignedCabinetIds")

    @field_validator("id", "label", "connector", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return to_str(v)

    @field_validator("breaker", mode="before")
    @classmethod
    def coerce_breaker(cls, v: Any) -> str | None:
        return to_str(v).strip() or None

    @field_validator("consumption_w", mode="before")
    @classmethod
    def coerce_consumption(cls, v: Any) -> float:
        return to_float(v)

    @field_validator("load_override_w", mode="before")
    @classmethod
    def coerce_override(cls, v: Any) -> float | None:
        return to_optional_float(v)

    @field_validator("assigned_cabinet_ids", mode="before")
    @classmethod
    def coerce_assigned(cls, v: Any) -> list[str]:
        return strings_only(v)


class ProjectSchema(_DocumentModel):
    name: str = "New Layout"
    client: str = ""
    units: str = "mm"
    mode: str = "indoor"
    pitch_mm: float | None = None
    pitch_is_gob: bool | None = None
    controller: str = "A200"
    controller_placement: str | None = Field(default=None, alias="controllerPlacement")
    controller_cabinet_id: str | None = Field(default=None, alias="controllerCabinetId")
    grid: GridSchema = Field(default_factory=GridSchema)
    overview: OverviewSchema = Field(default_factory=OverviewSchema)
    data_routes: list[DataRouteSchema] = Field(default_factory=list, alias="dataRoutes")
    power_feeds: list[PowerFeedSchema] = Field(default_factory=list, alias="powerFeeds")
    export_settings: ExportSettingsSchema = Field(
        default_factory=ExportSettingsSchema, alias="exportSettings"
    )

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return to_str(v, "New Layout")

    @field_validator("client", mode="before")
    @classmethod
    def coerce_client(cls, v: Any) -> str:
        return to_str(v)

    @field_validator("units", mode="before")
    @classmethod
    def coerce_units(cls, v: Any) -> str:
        # Millimeters are the only supported unit
        return "mm"

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, v: Any) -> str:
        return to_choice(v, ("indoor", "outdoor"), "indoor")

    @field_validator("pitch_mm", mode="before")
    @classmethod
    def coerce_pitch(cls, v: Any) -> float | None:
        return to_optional_float(v)

    @field_validator("pitch_is_gob", mode="before")
    @classmethod
    def coerce_gob(cls, v: Any) -> bool | None:
        return v if isinstance(v, bool) else None

    @field_validator("controller", mode="before")
    @classmethod
    def coerce_controller(cls, v: Any) -> str:
        return to_choice(v, ("A100", "A200", "X8E"), "A200")

    @field_validator("controller_placement", mode="before")
    @classmethod
    def coerce_placement(cls, v: Any) -> str | None:
        return v if v in ("cabinet", "external") else None

    @field_validator("controller_cabinet_id", mode="before")
    @classmethod
    def coerce_controller_cabinet(cls, v: Any) -> str | None:
        return to_str(v).strip() or None

    @field_validator("grid", "overview", "export_settings", mode="before")
    @classmethod
    def coerce_nested(cls, v: Any) -> dict[str, Any]:
        return object_or_empty(v)

    @field_validator("data_routes", "power_feeds", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[dict[str, Any]]:
        return objects_only(v)


class LayoutDocument(_DocumentModel):
    """Root of the layout JSON document."""

    schema_version: int = Field(default=1, alias="schemaVersion")
    project: ProjectSchema = Field(default_factory=ProjectSchema)
    cabinet_types: list[CabinetTypeSchema] = Field(default_factory=list, alias="cabinetTypes")
    cabinets: list[CabinetSchema] = Field(default_factory=list)

    @field_validator("schema_version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> int:
        return max(to_int(v, 1), 1)

    @field_validator("project", mode="before")
    @classmethod
    def coerce_project(cls, v: Any) -> dict[str, Any]:
        return object_or_empty(v)

    @field_validator("cabinet_types", "cabinets", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[dict[str, Any]]:
        return objects_only(v)


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "REQUIRED_KEYS",
    "CabinetSchema",
    "CabinetTypeSchema",
    "DataRouteSchema",
    "ExportSettingsSchema",
    "GridSchema",
    "LayoutDocument",
    "ManualAssignmentsSchema",
    "MappingNumbersSchema",
    "OverviewSchema",
    "PowerFeedSchema",
    "ProjectSchema",
]

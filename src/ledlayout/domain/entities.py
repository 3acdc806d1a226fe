"""Domain entities for LED cabinet layouts.

Every entity is a frozen dataclass and every collection a tuple, so a
``LayoutData`` value is an immutable snapshot of the whole document. Edits
produce new values with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .value_objects import (
    DEFAULT_RECEIVER_CARD_MODEL,
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

CURRENT_SCHEMA_VERSION = 2

DEFAULT_GRID_STEP_MM = 160.0


@dataclass(frozen=True)
class CabinetType:
    """Catalog entry describing an unrotated cabinet footprint in millimeters."""

    type_id: str
    width_mm: float
    height_mm: float

    def __post_init__(self) -> None:
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError("Cabinet type dimensions must be positive")


@dataclass(frozen=True)
class Cabinet:
    """A placed instance of a cabinet type.

    Attributes:
        id: Unique key within the layout.
        type_id: Key into the layout's cabinet type catalog.
        x_mm: Lower-left corner X in the Y-up plane.
        y_mm: Lower-left corner Y in the Y-up plane.
        rot_deg: Rotation of the footprint.
        port: Advisory manual routing hint.
        chain_index: Advisory manual routing hint.
        receiver_card_override: Which receiver card model the cabinet shows.
        receiver_card_count: Number of addressable receiver cards (0, 1 or 2).
        grid_label_override: Label shown instead of the computed grid label.
    """

    id: str
    type_id: str
    x_mm: float = 0.0
    y_mm: float = 0.0
    rot_deg: Rotation = Rotation.R0
    port: int | None = None
    chain_index: int | None = None
    receiver_card_override: ReceiverCardOverride = ReceiverCardOverride()
    receiver_card_count: int = 1
    grid_label_override: str | None = None

    def __post_init__(self) -> None:
        if self.receiver_card_count not in (0, 1, 2):
            raise ValueError(
                f"Receiver card count must be 0, 1 or 2, got {self.receiver_card_count}"
            )


@dataclass(frozen=True)
class GridSettings:
    """Snap-to-grid settings."""

    enabled: bool = True
    step_mm: float = DEFAULT_GRID_STEP_MM


@dataclass(frozen=True)
class MappingNumbersSettings:
    """Data-group numbering shown next to receiver cards.

    Attributes:
        show: Whether numbers are displayed at all.
        mode: AUTO numbers chains in port order, MANUAL uses the assignments.
        restart_per_card: Restart the auto sequence per receiver card index.
        labels: Caller-chosen numbers used before the default odd sequence.
        per_chain: Manual labels as (data route id, label) pairs.
        per_endpoint: Manual labels as (endpoint id, label) pairs.
    """

    show: bool = False
    mode: MappingNumbersMode = MappingNumbersMode.AUTO
    restart_per_card: bool = False
    labels: tuple[float, ...] = ()
    per_chain: tuple[tuple[str, str], ...] = ()
    per_endpoint: tuple[tuple[str, str], ...] = ()

    def chain_label(self, route_id: str) -> str | None:
        return dict(self.per_chain).get(route_id)

    def endpoint_label(self, endpoint_id: str) -> str | None:
        return dict(self.per_endpoint).get(endpoint_id)


def assignment_pairs(value: Mapping[str, Any] | Any) -> tuple[tuple[str, str], ...]:
    """Manual assignments as ordered (key, label) pairs.

    Accepts a mapping or an iterable of pairs; later keys replace earlier ones.
    """
    items = value.items() if isinstance(value, Mapping) else value
    return tuple((str(k), str(v)) for k, v in dict(items).items())


@dataclass(frozen=True)
class OverviewSettings:
    """Overview display and behavior toggles."""

    show_receiver_cards: bool = True
    receiver_card_model: str = DEFAULT_RECEIVER_CARD_MODEL
    labels_mode: LabelsMode = LabelsMode.GRID
    show_pixels: bool = True
    show_data_routes: bool = True
    show_power_routes: bool = True
    show_module_grid: bool = False
    module_size: str = "320x160"
    module_orientation: ModuleOrientation = ModuleOrientation.PORTRAIT
    mapping_numbers: MappingNumbersSettings = MappingNumbersSettings()


@dataclass(frozen=True)
class ExportSettings:
    """Document export options consumed by the PDF/SVG collaborators."""

    page_size: PageSize = PageSize.A4
    orientation: PageOrientation = PageOrientation.PORTRAIT
    title: str = ""
    client_name: str = ""


@dataclass(frozen=True)
class DataRoute:
    """A daisy chain of receiver card endpoints fed by one controller port.

    ``cabinet_ids`` holds endpoint ids in chain order; see
    ``services.routing.format_endpoint`` for the encoding.
    """

    id: str
    port: int
    cabinet_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class PowerFeed:
    """A breaker circuit supplying a set of cabinets."""

    id: str
    label: str = "220V @20A"
    connector: str = "NAC3FX-W"
    breaker: str | None = "220V 20A"
    consumption_w: float = 0.0
    load_override_w: float | None = None
    assigned_cabinet_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Project:
    """Project-wide settings, routes and feeds."""

    name: str = "New Layout"
    client: str = ""
    units: str = "mm"
    mode: ProjectMode = ProjectMode.INDOOR
    pitch_mm: float = 2.5
    pitch_is_gob: bool = True
    controller: ControllerModel = ControllerModel.A200
    controller_placement: ControllerPlacement = ControllerPlacement.EXTERNAL
    controller_cabinet_id: str | None = None
    grid: GridSettings = GridSettings()
    overview: OverviewSettings = OverviewSettings()
    data_routes: tuple[DataRoute, ...] = ()
    power_feeds: tuple[PowerFeed, ...] = ()
    export_settings: ExportSettings = ExportSettings()

    @property
    def port_count(self) -> int:
        return self.controller.port_count


@dataclass(frozen=True)
class LayoutData:
    """Root document: project settings, the type catalog and placed cabinets."""

    schema_version: int = CURRENT_SCHEMA_VERSION
    project: Project = Project()
    cabinet_types: tuple[CabinetType, ...] = ()
    cabinets: tuple[Cabinet, ...] = ()

    def find_cabinet(self, cabinet_id: str) -> Cabinet | None:
        """Return the first cabinet with this id, if any."""
        return next((c for c in self.cabinets if c.id == cabinet_id), None)

    def find_type(self, type_id: str) -> CabinetType | None:
        return next((t for t in self.cabinet_types if t.type_id == type_id), None)

    def find_route(self, route_id: str) -> DataRoute | None:
        return next((r for r in self.project.data_routes if r.id == route_id), None)

    def find_feed(self, feed_id: str) -> PowerFeed | None:
        return next((f for f in self.project.power_feeds if f.id == feed_id), None)

    @property
    def cabinet_ids(self) -> list[str]:
        return [c.id for c in self.cabinets]

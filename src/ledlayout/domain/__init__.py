"""Domain layer - layout model and the pure layout engine."""

from .entities import (
    CURRENT_SCHEMA_VERSION,
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
from .modes import MODE_DEFINITIONS, ModeDefinition, PitchOption, get_mode_definition
from .value_objects import (
    ControllerModel,
    ControllerPlacement,
    Endpoint,
    LabelsMode,
    ProjectMode,
    ReceiverCardKind,
    ReceiverCardOverride,
    Rect,
    Rotation,
)

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "Cabinet",
    "CabinetType",
    "ControllerModel",
    "ControllerPlacement",
    "DataRoute",
    "Endpoint",
    "ExportSettings",
    "GridSettings",
    "LabelsMode",
    "LayoutData",
    "MODE_DEFINITIONS",
    "MappingNumbersSettings",
    "ModeDefinition",
    "OverviewSettings",
    "PitchOption",
    "PowerFeed",
    "Project",
    "ProjectMode",
    "ReceiverCardKind",
    "ReceiverCardOverride",
    "Rect",
    "Rotation",
    "assignment_pairs",
    "get_mode_definition",
]

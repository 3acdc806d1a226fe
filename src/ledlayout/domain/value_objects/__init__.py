"""Value objects for the layout domain.

All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

from ._geometry import LayoutBounds, Rect, Rotation
from ._project import (
    ControllerModel,
    ControllerPlacement,
    LabelsMode,
    MappingNumbersMode,
    ModuleOrientation,
    PageOrientation,
    PageSize,
    ProjectMode,
)
from ._receivers import (
    DEFAULT_RECEIVER_CARD_MODEL,
    Endpoint,
    ReceiverCardKind,
    ReceiverCardOverride,
)

__all__ = [
    "ControllerModel",
    "ControllerPlacement",
    "DEFAULT_RECEIVER_CARD_MODEL",
    "Endpoint",
    "LabelsMode",
    "LayoutBounds",
    "MappingNumbersMode",
    "ModuleOrientation",
    "PageOrientation",
    "PageSize",
    "ProjectMode",
    "ReceiverCardKind",
    "ReceiverCardOverride",
    "Rect",
    "Rotation",
]

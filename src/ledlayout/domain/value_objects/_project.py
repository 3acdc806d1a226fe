"""Project-level enums for LED wall layouts.

These use (str, Enum) so values serialize straight into the JSON document.
"""

from __future__ import annotations

from enum import Enum


class ProjectMode(str, Enum):
    """Installation environment driving pitch, catalog and placement policy."""

    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class ControllerModel(str, Enum):
    """Sending controller models and their output port counts."""

    A100 = "A100"
    A200 = "A200"
    X8E = "X8E"

    @property
    def port_count(self) -> int:
        return _CONTROLLER_PORTS[self]


_CONTROLLER_PORTS: dict[ControllerModel, int] = {
    ControllerModel.A100: 2,
    ControllerModel.A200: 4,
    ControllerModel.X8E: 8,
}


class ControllerPlacement(str, Enum):
    """Where the controller is mounted.

    - CABINET: inside one of the placed cabinets (``controllerCabinetId``)
    - EXTERNAL: outside the display array
    """

    CABINET = "cabinet"
    EXTERNAL = "external"


class LabelsMode(str, Enum):
    """How cabinets are labeled in the overview."""

    INTERNAL = "internal"
    GRID = "grid"


class ModuleOrientation(str, Enum):
    """Orientation of LED modules inside a cabinet."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class MappingNumbersMode(str, Enum):
    """Source of the data-group numbers shown per receiver card."""

    AUTO = "auto"
    MANUAL = "manual"


class PageSize(str, Enum):
    A4 = "A4"
    A3 = "A3"


class PageOrientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

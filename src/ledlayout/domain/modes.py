"""Mode policy table.

Indoor and outdoor projects differ in the cabinet catalog they start
from, the pixel pitches and module sizes the hardware comes in, where the
controller is mounted by default and how much power a square meter of
display draws.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .entities import CabinetType
from .value_objects import ControllerPlacement, ProjectMode

PITCH_MATCH_TOLERANCE = 0.0001

# The nominal P1.56 product has a true pitch of 1.568627 mm (255 px / 400 mm)
P156_NOMINAL_MM = 1.56
P156_EFFECTIVE_MM = 1.568627
EFFECTIVE_PITCH_TOLERANCE = 0.001


@dataclass(frozen=True)
class PitchOption:
    """A pixel pitch the hardware is available in."""

    pitch_mm: float
    pitch_is_gob: bool
    label: str


@dataclass(frozen=True)
class ModeDefinition:
    """Policy for one project mode.

    Attributes:
        mode: The mode this definition applies to.
        label: Display name.
        cabinet_types: Catalog used when a document supplies none.
        pitch_options: Pitches a project in this mode may use.
        default_pitch: Pitch used when the requested one is not offered.
        module_sizes: LED module sizes ("WIDTHxHEIGHT" in mm).
        default_module_size: Module size used when the requested one is not offered.
        default_controller_placement: Placement for new projects.
        allows_rotation: Whether cabinets may be rotated.
        allows_custom_types: Whether the catalog may be edited.
        power_density_w_m2: Heuristic draw per square meter of display.
    """

    mode: ProjectMode
    label: str
    cabinet_types: tuple[CabinetType, ...]
    pitch_options: tuple[PitchOption, ...]
    default_pitch: PitchOption
    module_sizes: tuple[str, ...]
    default_module_size: str
    default_controller_placement: ControllerPlacement
    allows_rotation: bool
    allows_custom_types: bool
    power_density_w_m2: float


INDOOR_CABINET_TYPES: tuple[CabinetType, ...] = (
    CabinetType("STD_1120x640", 1120, 640),
    CabinetType("STD_960x640", 960, 640),
    CabinetType("STD_480x640", 480, 640),
    CabinetType("STD_1280x640", 1280, 640),
    CabinetType("STD_640x640", 640, 640),
)

OUTDOOR_CABINET_TYPES: tuple[CabinetType, ...] = (
    CabinetType("OUT_960x320", 960, 320),
    CabinetType("OUT_960x640", 960, 640),
    CabinetType("OUT_960x960", 960, 960),
    CabinetType("OUT_960x1280", 960, 1280),
    CabinetType("OUT_1280x320", 1280, 320),
    CabinetType("OUT_1280x640", 1280, 640),
    CabinetType("OUT_1280x960", 1280, 960),
    CabinetType("OUT_1280x1280", 1280, 1280),
    CabinetType("OUT_1600x640", 1600, 640),
    CabinetType("OUT_1600x960", 1600, 960),
)


def _pitch_pairs(*pitches: float) -> tuple[PitchOption, ...]:
    options: list[PitchOption] = []
    for pitch in pitches:
        options.append(PitchOption(pitch, False, f"P {pitch:g}"))
        options.append(PitchOption(pitch, True, f"P {pitch:g} GOB"))
    return tuple(options)


INDOOR_PITCH_OPTIONS = _pitch_pairs(1.25, 1.56, 1.86, 2.5, 4, 5)

OUTDOOR_PITCH_OPTIONS: tuple[PitchOption, ...] = (
    PitchOption(4, False, "P 4"),
    PitchOption(5, False, "P 5"),
    PitchOption(6.67, False, "P 6.67"),
    PitchOption(8, False, "P 8"),
    PitchOption(10, False, "P 10"),
)

MODE_DEFINITIONS: dict[ProjectMode, ModeDefinition] = {
    ProjectMode.INDOOR: ModeDefinition(
        mode=ProjectMode.INDOOR,
        label="Indoor",
        cabinet_types=INDOOR_CABINET_TYPES,
        pitch_options=INDOOR_PITCH_OPTIONS,
        default_pitch=PitchOption(2.5, True, "P 2.5 GOB"),
        module_sizes=("320x160", "160x160"),
        default_module_size="320x160",
        default_controller_placement=ControllerPlacement.EXTERNAL,
        allows_rotation=True,
        allows_custom_types=True,
        power_density_w_m2=550.0,
    ),
    ProjectMode.OUTDOOR: ModeDefinition(
        mode=ProjectMode.OUTDOOR,
        label="Outdoor",
        cabinet_types=OUTDOOR_CABINET_TYPES,
        pitch_options=OUTDOOR_PITCH_OPTIONS,
        default_pitch=PitchOption(6.67, False, "P 6.67"),
        module_sizes=("320x320",),
        default_module_size="320x320",
        default_controller_placement=ControllerPlacement.CABINET,
        allows_rotation=False,
        allows_custom_types=False,
        power_density_w_m2=700.0,
    ),
}


def coerce_mode(value: Any) -> ProjectMode:
    """Map any value to a known mode, defaulting to indoor."""
    if isinstance(value, ProjectMode):
        return value
    return ProjectMode.OUTDOOR if value == ProjectMode.OUTDOOR.value else ProjectMode.INDOOR


def get_mode_definition(mode: ProjectMode | str) -> ModeDefinition:
    return MODE_DEFINITIONS[coerce_mode(mode)]


def coerce_mode_pitch(
    mode: ProjectMode, pitch_mm: float, pitch_is_gob: bool
) -> PitchOption:
    """Return the offered pitch matching the request, or the mode default."""
    definition = get_mode_definition(mode)
    for option in definition.pitch_options:
        if (
            abs(option.pitch_mm - pitch_mm) < PITCH_MATCH_TOLERANCE
            and option.pitch_is_gob == pitch_is_gob
        ):
            return option
    return definition.default_pitch


def coerce_module_size(mode: ProjectMode, module_size: Any) -> str:
    definition = get_mode_definition(mode)
    if module_size in definition.module_sizes:
        return module_size
    return definition.default_module_size


def effective_pitch_mm(pitch_mm: float) -> float:
    """Pitch used for pixel math, correcting the rounded P1.56 label."""
    if pitch_mm <= 0:
        return pitch_mm
    if abs(pitch_mm - P156_NOMINAL_MM) <= EFFECTIVE_PITCH_TOLERANCE:
        return P156_EFFECTIVE_MM
    return pitch_mm

"""Controller capacity and placement helpers.

A sending controller drives a fixed number of ports, each carrying up to
``PER_PORT_MAX_PX`` pixels, and caps the total pixel load (and, for some
models, the canvas size) it can map.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..entities import Cabinet, CabinetType, DataRoute, LayoutData
from ..modes import effective_pitch_mm
from ..value_objects import ControllerModel, ControllerPlacement, ProjectMode
from .geometry import cabinet_bounds, layout_bounds, placed_cabinets
from .routing import parse_endpoint

logger = logging.getLogger(__name__)

PER_PORT_MAX_PX = 650_000


@dataclass(frozen=True)
class ControllerLimits:
    """Pixel limits of a controller model.

    Attributes:
        total_max_px: Maximum pixels across all ports.
        max_width_px: Maximum canvas width, None when uncapped.
        max_height_px: Maximum canvas height, None when uncapped.
    """

    total_max_px: int
    max_width_px: int | None = None
    max_height_px: int | None = None


CONTROLLER_LIMITS: dict[ControllerModel, ControllerLimits] = {
    ControllerModel.A100: ControllerLimits(total_max_px=1_300_000),
    ControllerModel.A200: ControllerLimits(
        total_max_px=2_300_000, max_width_px=4096, max_height_px=2560
    ),
    ControllerModel.X8E: ControllerLimits(
        total_max_px=ControllerModel.X8E.port_count * PER_PORT_MAX_PX
    ),
}

UPGRADE_ORDER: tuple[ControllerModel, ...] = (
    ControllerModel.A100,
    ControllerModel.A200,
    ControllerModel.X8E,
)


def get_controller_limits(controller: ControllerModel) -> ControllerLimits:
    return CONTROLLER_LIMITS[controller]


def cabinet_pixel_area(cabinet: Cabinet, types: tuple[CabinetType, ...], pitch_mm: float) -> int:
    """Pixel count of a cabinet at the given pitch, 0 for an unknown type."""
    bounds = cabinet_bounds(cabinet, types)
    pitch = effective_pitch_mm(pitch_mm)
    if bounds is None or pitch <= 0:
        return 0
    return round(bounds.width / pitch) * round(bounds.height / pitch)


def route_load_px(route: DataRoute, layout: LayoutData) -> float:
    """Pixels carried by a route.

    Each endpoint carries its cabinet's pixel area, split evenly between
    the cards of a dual-card cabinet.
    """
    by_id: dict[str, Cabinet] = {}
    for cabinet in layout.cabinets:
        by_id.setdefault(cabinet.id, cabinet)

    total = 0.0
    for endpoint_id in route.cabinet_ids:
        cabinet = by_id.get(parse_endpoint(endpoint_id).cabinet_id)
        if cabinet is None or cabinet.receiver_card_count == 0:
            continue
        area = cabinet_pixel_area(cabinet, layout.cabinet_types, layout.project.pitch_mm)
        total += area / cabinet.receiver_card_count
    return total


def is_route_over_capacity(route: DataRoute, layout: LayoutData) -> bool:
    return route_load_px(route, layout) > PER_PORT_MAX_PX


def layout_pixel_load(layout: LayoutData) -> int:
    """Total pixels across all cabinets of known type."""
    return sum(
        cabinet_pixel_area(c, layout.cabinet_types, layout.project.pitch_mm)
        for c in layout.cabinets
    )


def is_layout_over_controller_limits(
    layout: LayoutData, controller: ControllerModel | None = None
) -> bool:
    """Check the layout against a controller's pixel and canvas limits.

    Args:
        layout: Layout to check.
        controller: Model to check against; defaults to the project's.

    Returns:
        True when the total load or the canvas size exceeds the limits.
    """
    limits = CONTROLLER_LIMITS[controller or layout.project.controller]
    if layout_pixel_load(layout) > limits.total_max_px:
        return True
    bounds = layout_bounds(layout)
    if limits.max_width_px is not None and bounds.width_px > limits.max_width_px:
        return True
    if limits.max_height_px is not None and bounds.height_px > limits.max_height_px:
        return True
    return False


def suggest_controller_upgrade(layout: LayoutData) -> ControllerModel | None:
    """Smallest controller that fits the layout and hosts every used port.

    Returns None when the current controller already fits or nothing does.
    """
    if not is_layout_over_controller_limits(layout):
        return None
    highest_port = max((r.port for r in layout.project.data_routes), default=0)
    for model in UPGRADE_ORDER:
        if model.port_count < highest_port:
            continue
        if not is_layout_over_controller_limits(layout, model):
            return model
    return None


def default_outdoor_lv_box_cabinet_id(layout: LayoutData) -> str | None:
    """Cabinet hosting the low-voltage box: highest top edge, then rightmost."""
    candidates = placed_cabinets(layout)
    if not candidates:
        return None
    best = max(candidates, key=lambda p: (p.bounds.y2, p.bounds.x2))
    return best.id


def resolve_controller_cabinet_id(layout: LayoutData) -> str | None:
    """Cabinet the controller is mounted in, if any.

    An explicit id wins when it names an existing cabinet. Outdoor projects
    fall back to the low-voltage box cabinet; indoor ones have no default.
    """
    project = layout.project
    if project.controller_placement != ControllerPlacement.CABINET:
        return None
    requested = project.controller_cabinet_id
    if requested and layout.find_cabinet(requested) is not None:
        return requested
    if project.mode == ProjectMode.OUTDOOR:
        fallback = default_outdoor_lv_box_cabinet_id(layout)
        logger.debug(f"Controller cabinet {requested!r} not found; using LV box {fallback!r}")
        return fallback
    return None

"""Derived read models for a layout.

A ``LayoutSummary`` collects everything the CLI and the API report about a
layout in one pass: its extent, the controller load against the model's
limits, every data route with its labelled endpoints and every power feed
with its estimated load.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ledlayout.domain.entities import LayoutData
from ledlayout.domain.services import (
    PER_PORT_MAX_PX,
    endpoint_label,
    feed_load_report,
    get_controller_limits,
    grid_label_map,
    is_layout_over_controller_limits,
    layout_bounds,
    layout_pixel_load,
    mapping_number_labels,
    route_load_px,
    suggest_controller_upgrade,
    validate_layout,
)
from ledlayout.domain.value_objects import ControllerModel, LayoutBounds


@dataclass(frozen=True)
class RouteSummary:
    """A data route with display labels and its pixel load."""

    id: str
    port: int
    endpoints: tuple[str, ...]
    labels: tuple[str, ...]
    load_px: int
    over_capacity: bool
    mapping_numbers: tuple[str | None, ...] = ()


@dataclass(frozen=True)
class FeedSummary:
    """A power feed with its estimated load and breaker limit."""

    id: str
    label: str
    breaker: str | None
    cabinet_ids: tuple[str, ...]
    load_w: int
    limit_w: float | None
    overloaded: bool


@dataclass(frozen=True)
class LayoutSummary:
    """Everything reported about a layout.

    Attributes:
        name: Project name.
        mode: Project mode value.
        cabinet_count: Number of placed cabinets.
        bounds: Overall extent in mm and pixels.
        controller: Controller model.
        pixel_load: Total pixels across the layout.
        pixel_limit: Total pixel limit of the controller.
        controller_over_limit: Whether load or canvas exceeds the limits.
        suggested_controller: Smallest model that fits, when the current
            one does not.
        routes: Data routes in document order.
        feeds: Power feeds in document order.
        error_count: Validation errors.
        warning_count: Validation warnings.
        grid_labels: Cabinet id to grid label.
    """

    name: str
    mode: str
    cabinet_count: int
    bounds: LayoutBounds
    controller: ControllerModel
    pixel_load: int
    pixel_limit: int
    controller_over_limit: bool
    suggested_controller: ControllerModel | None
    routes: tuple[RouteSummary, ...] = ()
    feeds: tuple[FeedSummary, ...] = ()
    error_count: int = 0
    warning_count: int = 0
    grid_labels: dict[str, str] = field(default_factory=dict)


def summarize_layout(layout: LayoutData) -> LayoutSummary:
    """Build the summary of a (normalized) layout."""
    project = layout.project
    numbers = mapping_number_labels(layout) if project.overview.mapping_numbers.show else {}

    routes = []
    for route in project.data_routes:
        load = round(route_load_px(route, layout))
        routes.append(
            RouteSummary(
                id=route.id,
                port=route.port,
                endpoints=route.cabinet_ids,
                labels=tuple(endpoint_label(layout, e) for e in route.cabinet_ids),
                load_px=load,
                over_capacity=load > PER_PORT_MAX_PX,
                mapping_numbers=tuple(numbers.get(e) for e in route.cabinet_ids)
                if numbers
                else (),
            )
        )

    feeds = tuple(
        FeedSummary(
            id=item.feed.id,
            label=item.feed.label,
            breaker=item.feed.breaker,
            cabinet_ids=item.feed.assigned_cabinet_ids,
            load_w=item.load_w,
            limit_w=item.limit_w,
            overloaded=item.overloaded,
        )
        for item in feed_load_report(layout)
    )

    report = validate_layout(layout)
    return LayoutSummary(
        name=project.name,
        mode=project.mode.value,
        cabinet_count=len(layout.cabinets),
        bounds=layout_bounds(layout),
        controller=project.controller,
        pixel_load=layout_pixel_load(layout),
        pixel_limit=get_controller_limits(project.controller).total_max_px,
        controller_over_limit=is_layout_over_controller_limits(layout),
        suggested_controller=suggest_controller_upgrade(layout),
        routes=tuple(routes),
        feeds=feeds,
        error_count=len(report.errors),
        warning_count=len(report.warnings),
        grid_labels=grid_label_map(layout),
    )

"""Domain services for LED cabinet layouts.

This package provides the pure functions of the layout engine:
- Footprints, extents and column clustering
- Normalization of partial or legacy layouts
- Structural validation
- Grid labels and mapping numbers
- Data route and power feed assignment
- Power load and controller capacity estimates
"""

from .controller import (
    CONTROLLER_LIMITS,
    PER_PORT_MAX_PX,
    ControllerLimits,
    default_outdoor_lv_box_cabinet_id,
    get_controller_limits,
    is_layout_over_controller_limits,
    is_route_over_capacity,
    layout_pixel_load,
    resolve_controller_cabinet_id,
    route_load_px,
    suggest_controller_upgrade,
)
from .geometry import (
    COLUMN_TOLERANCE_MM,
    Column,
    PlacedCabinet,
    cabinet_bounds,
    cluster_columns,
    infer_cabinet_type,
    layout_bounds,
    placed_cabinets,
)
from .labels import (
    cabinet_label,
    column_letter,
    endpoint_label,
    grid_label,
    grid_label_map,
    receiver_card_label,
)
from .mapping_numbers import mapping_number_labels
from .normalization import (
    default_layout,
    default_project,
    generate_cabinet_id,
    normalize,
    repair_routes,
)
from .power import (
    BREAKER_LIMITS,
    FeedLoad,
    breaker_safe_max_w,
    cabinet_area_m2,
    feed_load_report,
    is_overloaded,
    load_w,
)
from .routing import (
    RouteUpdate,
    RoutingKind,
    RoutingMode,
    auto_power,
    auto_route,
    card_count_route_updates,
    format_endpoint,
    parse_endpoint,
    toggle_endpoint,
)
from .validation import (
    Issue,
    IssueCode,
    LayoutCheck,
    Severity,
    ValidationReport,
    validate,
    validate_layout,
)

__all__ = [
    "BREAKER_LIMITS",
    "COLUMN_TOLERANCE_MM",
    "CONTROLLER_LIMITS",
    "Column",
    "ControllerLimits",
    "FeedLoad",
    "Issue",
    "IssueCode",
    "LayoutCheck",
    "PER_PORT_MAX_PX",
    "PlacedCabinet",
    "RouteUpdate",
    "RoutingKind",
    "RoutingMode",
    "Severity",
    "ValidationReport",
    "auto_power",
    "auto_route",
    "breaker_safe_max_w",
    "cabinet_area_m2",
    "cabinet_bounds",
    "cabinet_label",
    "card_count_route_updates",
    "cluster_columns",
    "column_letter",
    "default_layout",
    "default_outdoor_lv_box_cabinet_id",
    "default_project",
    "endpoint_label",
    "feed_load_report",
    "format_endpoint",
    "generate_cabinet_id",
    "get_controller_limits",
    "grid_label",
    "grid_label_map",
    "infer_cabinet_type",
    "is_layout_over_controller_limits",
    "is_overloaded",
    "is_route_over_capacity",
    "layout_bounds",
    "layout_pixel_load",
    "load_w",
    "mapping_number_labels",
    "normalize",
    "parse_endpoint",
    "placed_cabinets",
    "receiver_card_label",
    "repair_routes",
    "resolve_controller_cabinet_id",
    "route_load_px",
    "suggest_controller_upgrade",
    "toggle_endpoint",
    "validate",
    "validate_layout",
]

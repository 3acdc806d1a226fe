"""Heuristic power load estimates for power feeds.

Loads are footprint area times a per-mode power density. They are
planning approximations, not electrical certification figures.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..entities import Cabinet, CabinetType, LayoutData, PowerFeed
from ..modes import get_mode_definition
from ..value_objects import ProjectMode
from .geometry import cabinet_bounds


@dataclass(frozen=True)
class BreakerLimit:
    """Rated and safe continuous wattage for a breaker."""

    max_w: float
    safe_w: float


BREAKER_LIMITS: dict[str, BreakerLimit] = {
    "220V 20A": BreakerLimit(max_w=3520, safe_w=2816),
    "110V 15A": BreakerLimit(max_w=1650, safe_w=1320),
}


def cabinet_area_m2(cabinet: Cabinet, types: tuple[CabinetType, ...]) -> float:
    """Footprint area in square meters, 0 for an unknown type."""
    bounds = cabinet_bounds(cabinet, types)
    if bounds is None:
        return 0.0
    return bounds.area / 1_000_000


def load_w(
    feed: PowerFeed,
    cabinets: tuple[Cabinet, ...],
    types: tuple[CabinetType, ...],
    mode: ProjectMode = ProjectMode.INDOOR,
) -> int:
    """Estimated load of a feed in watts.

    A finite ``load_override_w`` is returned as is (rounded). Otherwise the
    assigned cabinets' areas are summed and multiplied by the mode's power
    density. Unknown cabinet ids contribute nothing.
    """
    if feed.load_override_w is not None and math.isfinite(feed.load_override_w):
        return round(feed.load_override_w)

    density = get_mode_definition(mode).power_density_w_m2
    by_id: dict[str, Cabinet] = {}
    for cabinet in cabinets:
        by_id.setdefault(cabinet.id, cabinet)

    total = 0.0
    for cabinet_id in feed.assigned_cabinet_ids:
        cabinet = by_id.get(cabinet_id)
        if cabinet is not None:
            total += cabinet_area_m2(cabinet, types) * density
    return round(total)


def breaker_safe_max_w(breaker: str | None) -> float | None:
    """Safe wattage for a known breaker key, else None."""
    if not breaker:
        return None
    limit = BREAKER_LIMITS.get(breaker)
    return limit.safe_w if limit else None


def is_overloaded(
    feed: PowerFeed,
    cabinets: tuple[Cabinet, ...],
    types: tuple[CabinetType, ...],
    mode: ProjectMode = ProjectMode.INDOOR,
) -> bool:
    """True when the feed's breaker is known and its load exceeds the safe limit."""
    limit = breaker_safe_max_w(feed.breaker)
    if limit is None:
        return False
    return load_w(feed, cabinets, types, mode) > limit


@dataclass(frozen=True)
class FeedLoad:
    """Load summary for one feed."""

    feed: PowerFeed
    load_w: int
    limit_w: float | None
    overloaded: bool


def feed_load_report(layout: LayoutData) -> list[FeedLoad]:
    mode = layout.project.mode
    report: list[FeedLoad] = []
    for feed in layout.project.power_feeds:
        load = load_w(feed, layout.cabinets, layout.cabinet_types, mode)
        limit = breaker_safe_max_w(feed.breaker)
        report.append(
            FeedLoad(
                feed=feed,
                load_w=load,
                limit_w=limit,
                overloaded=limit is not None and load > limit,
            )
        )
    return report

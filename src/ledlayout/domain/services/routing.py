"""Data route and power feed assignment.

Route endpoints are strings: a bare cabinet id for a single-card cabinet,
or ``"<cabinetId>:a"`` / ``"<cabinetId>:b"`` for the two cards of a
dual-card cabinet. Build and split them only through ``format_endpoint``
and ``parse_endpoint``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Sequence

from ..entities import DataRoute, LayoutData, PowerFeed
from ..value_objects import Endpoint
from .geometry import Column, cluster_columns

logger = logging.getLogger(__name__)

__all__ = [
    "CARD_LETTERS",
    "DEFAULT_FEED_BREAKER",
    "DEFAULT_FEED_CONNECTOR",
    "DEFAULT_FEED_LABEL",
    "RouteUpdate",
    "RoutingKind",
    "RoutingMode",
    "auto_power",
    "auto_route",
    "card_count_route_updates",
    "default_power_feed",
    "endpoint_cabinet_id",
    "format_endpoint",
    "normalize_route_endpoints",
    "parse_endpoint",
    "route_ids_for_cabinet",
    "toggle_endpoint",
]

CARD_LETTERS = ("a", "b")
ENDPOINT_SEPARATOR = ":"

DEFAULT_FEED_LABEL = "220V @20A"
DEFAULT_FEED_BREAKER = "220V 20A"
DEFAULT_FEED_CONNECTOR = "NAC3FX-W"


def format_endpoint(cabinet_id: str, card_index: int | None = None) -> str:
    """Encode an endpoint id.

    Args:
        cabinet_id: The cabinet the endpoint belongs to.
        card_index: None for the cabinet as a whole, 0 or 1 for a card.

    Returns:
        The endpoint id as stored in ``DataRoute.cabinet_ids``.
    """
    if card_index is None:
        return cabinet_id
    if card_index not in (0, 1):
        raise ValueError(f"Card index must be 0 or 1, got {card_index}")
    return f"{cabinet_id}{ENDPOINT_SEPARATOR}{CARD_LETTERS[card_index]}"


def parse_endpoint(endpoint_id: str) -> Endpoint:
    """Decode an endpoint id.

    Only a trailing ``:a`` or ``:b`` is treated as a card suffix; any other
    string, including ids that contain colons, is a bare cabinet id.
    """
    head, sep, letter = endpoint_id.rpartition(ENDPOINT_SEPARATOR)
    if sep and head and letter in CARD_LETTERS:
        return Endpoint(head, CARD_LETTERS.index(letter))
    return Endpoint(endpoint_id)


def endpoint_cabinet_id(endpoint_id: str) -> str:
    return parse_endpoint(endpoint_id).cabinet_id


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return tuple(result)


def _rewrite_for_count(
    cabinet_ids: Sequence[str], cabinet_id: str, count: int
) -> tuple[str, ...]:
    rewritten: list[str] = []
    for endpoint_id in cabinet_ids:
        endpoint = parse_endpoint(endpoint_id)
        if endpoint.cabinet_id != cabinet_id:
            rewritten.append(endpoint_id)
        elif count == 0:
            continue
        elif count == 1:
            rewritten.append(format_endpoint(cabinet_id))
        else:
            card = endpoint.card_index if endpoint.card_index is not None else 0
            rewritten.append(format_endpoint(cabinet_id, card))
    return _dedupe(rewritten)


@dataclass(frozen=True)
class RouteUpdate:
    """New endpoint list for one route."""

    route_id: str
    cabinet_ids: tuple[str, ...]


def card_count_route_updates(
    routes: Iterable[DataRoute], cabinet_id: str, count: int
) -> list[RouteUpdate]:
    """Compute every route rewrite caused by changing a cabinet's card count.

    The whole set is computed before anything is applied so the caller can
    apply it and commit once.

    Args:
        routes: Current data routes.
        cabinet_id: Cabinet whose card count changes.
        count: New card count (0, 1 or 2).

    Returns:
        One update per route whose endpoint list actually changes.
    """
    if count not in (0, 1, 2):
        raise ValueError(f"Receiver card count must be 0, 1 or 2, got {count}")
    updates: list[RouteUpdate] = []
    for route in routes:
        rewritten = _rewrite_for_count(route.cabinet_ids, cabinet_id, count)
        if rewritten != route.cabinet_ids:
            updates.append(RouteUpdate(route.id, rewritten))
    return updates


def normalize_route_endpoints(
    cabinet_ids: Sequence[str], card_counts: dict[str, int]
) -> tuple[str, ...]:
    """Drop dangling endpoints and align the rest with each cabinet's card count."""
    result: list[str] = []
    for endpoint_id in cabinet_ids:
        endpoint = parse_endpoint(endpoint_id)
        count = card_counts.get(endpoint.cabinet_id)
        if count is None or count == 0:
            continue
        if count == 1:
            result.append(format_endpoint(endpoint.cabinet_id))
        else:
            card = endpoint.card_index if endpoint.card_index is not None else 0
            result.append(format_endpoint(endpoint.cabinet_id, card))
    return _dedupe(result)


def route_ids_for_cabinet(routes: Iterable[DataRoute], cabinet_id: str) -> list[str]:
    """Ids of routes holding any endpoint of the cabinet."""
    return [
        route.id
        for route in routes
        if any(endpoint_cabinet_id(e) == cabinet_id for e in route.cabinet_ids)
    ]


def toggle_endpoint(sequence: Sequence[str], endpoint_id: str) -> tuple[str, ...]:
    """Append the endpoint when absent, remove it when present."""
    if endpoint_id in sequence:
        return tuple(e for e in sequence if e != endpoint_id)
    return tuple(sequence) + (endpoint_id,)


def _chunks(columns: list[Column], parts: int) -> list[list[Column]]:
    size = math.ceil(len(columns) / parts)
    return [columns[i * size : (i + 1) * size] for i in range(parts)]


def auto_route(layout: LayoutData) -> tuple[DataRoute, ...]:
    """Build serpentine data routes over the controller's ports.

    Columns are split into contiguous chunks, one per port. Within a chunk
    every second column is walked bottom to top so the chain snakes. Routes
    replace any existing ones.

    Args:
        layout: Layout to route.

    Returns:
        New routes ``route-1`` .. ``route-n``; chunks with no endpoints are
        skipped.
    """
    columns = cluster_columns(_without_cardless(layout))
    if not columns:
        return ()

    ports = min(layout.project.port_count, len(columns))
    routes: list[DataRoute] = []
    for port_index, chunk in enumerate(_chunks(columns, ports)):
        endpoints: list[str] = []
        for offset, column in enumerate(chunk):
            reversed_column = offset % 2 == 1
            members = list(reversed(column.members)) if reversed_column else column.members
            card_order = (0, 1) if reversed_column else (1, 0)
            for member in members:
                count = member.cabinet.receiver_card_count
                if count == 1:
                    endpoints.append(format_endpoint(member.id))
                else:
                    endpoints.extend(format_endpoint(member.id, i) for i in card_order)
        if endpoints:
            port = port_index + 1
            routes.append(DataRoute(id=f"route-{port}", port=port, cabinet_ids=tuple(endpoints)))

    logger.debug(
        f"Auto-routed {len(columns)} columns over {len(routes)} of "
        f"{layout.project.port_count} ports"
    )
    return tuple(routes)


def _without_cardless(layout: LayoutData) -> LayoutData:
    cabinets = tuple(c for c in layout.cabinets if c.receiver_card_count > 0)
    if len(cabinets) == len(layout.cabinets):
        return layout
    return replace(layout, cabinets=cabinets)


def default_power_feed(feed_id: str = "feed-1") -> PowerFeed:
    return PowerFeed(
        id=feed_id,
        label=DEFAULT_FEED_LABEL,
        connector=DEFAULT_FEED_CONNECTOR,
        breaker=DEFAULT_FEED_BREAKER,
    )


def auto_power(layout: LayoutData) -> tuple[PowerFeed, ...]:
    """Spread columns of cabinets over the existing power feeds.

    Columns go to feeds in contiguous left-to-right chunks. When the
    project has no feeds a single default feed is created. Every feed's
    assignment is replaced; feeds beyond the column count end up empty.
    """
    feeds = list(layout.project.power_feeds) or [default_power_feed()]
    columns = cluster_columns(layout)

    assignments: list[tuple[str, ...]] = [() for _ in feeds]
    if columns:
        for index, chunk in enumerate(_chunks(columns, len(feeds))):
            assignments[index] = tuple(
                member.id for column in chunk for member in column.members
            )

    logger.debug(f"Auto-powered {len(columns)} columns over {len(feeds)} feeds")
    return tuple(
        replace(feed, assigned_cabinet_ids=cabinet_ids)
        for feed, cabinet_ids in zip(feeds, assignments)
    )


class RoutingKind(str, Enum):
    DATA = "data"
    POWER = "power"


@dataclass(frozen=True)
class RoutingMode:
    """Manual routing interaction state.

    Inactive, or targeting one data route or one power feed. While active,
    clicking a cabinet toggles its membership in the target.
    """

    kind: RoutingKind | None = None
    target_id: str | None = None

    @classmethod
    def none(cls) -> "RoutingMode":
        return cls()

    @classmethod
    def data(cls, route_id: str) -> "RoutingMode":
        return cls(RoutingKind.DATA, route_id)

    @classmethod
    def power(cls, feed_id: str) -> "RoutingMode":
        return cls(RoutingKind.POWER, feed_id)

    @property
    def is_active(self) -> bool:
        return self.kind is not None

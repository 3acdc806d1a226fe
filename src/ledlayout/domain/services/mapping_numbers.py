"""Mapping numbers: the data group index printed next to each receiver card.

Auto mode numbers chains in port order. Manual mode reads the per-chain
and per-endpoint assignments stored in the overview settings.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

from ..entities import DataRoute, LayoutData
from ..value_objects import MappingNumbersMode
from .routing import parse_endpoint


def _sorted_routes(routes: Sequence[DataRoute]) -> list[DataRoute]:
    return sorted(routes, key=lambda r: (r.port, r.id))


def label_sequence(count: int, labels: Sequence[float] = ()) -> list[int | float]:
    """Caller-chosen labels first, then the odd sequence 1, 3, 5, ... by position."""
    chosen = [v for v in labels if isinstance(v, (int, float)) and math.isfinite(v)]
    sequence: list[int | float] = chosen[:count]
    for index in range(len(sequence), count):
        sequence.append(1 + index * 2)
    return sequence


def route_card_group(route: DataRoute) -> int:
    """Most frequent card index in the route; bare ids count as card 0."""
    counts = Counter(
        parse_endpoint(e).card_index or 0 for e in route.cabinet_ids
    )
    if not counts:
        return 0
    return min(counts, key=lambda key: (-counts[key], key))


def find_route_id_for_endpoint(
    routes: Sequence[DataRoute], endpoint_id: str
) -> str | None:
    target = parse_endpoint(endpoint_id)
    for route in routes:
        if any(parse_endpoint(e) == target for e in route.cabinet_ids):
            return route.id
    return None


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _assign(routes: list[DataRoute], labels: Sequence[float], result: dict[str, str]) -> None:
    sequence = label_sequence(len(routes), labels)
    for route, number in zip(routes, sequence):
        text = _format_number(number)
        for endpoint_id in route.cabinet_ids:
            result[endpoint_id] = text


def mapping_number_labels(layout: LayoutData) -> dict[str, str]:
    """Map endpoint ids to their mapping number label.

    Args:
        layout: Layout whose data routes are numbered.

    Returns:
        Endpoint id to label. Endpoints without a number are absent.
    """
    settings = layout.project.overview.mapping_numbers
    routes = layout.project.data_routes
    result: dict[str, str] = {}

    if settings.mode == MappingNumbersMode.MANUAL:
        for route in routes:
            for endpoint_id in route.cabinet_ids:
                value = settings.endpoint_label(endpoint_id)
                if value is None:
                    value = settings.chain_label(route.id)
                text = str(value).strip() if value is not None else ""
                if text:
                    result[endpoint_id] = text
        for endpoint_id, value in settings.per_endpoint:
            text = str(value).strip() if value is not None else ""
            if text and endpoint_id not in result:
                result[endpoint_id] = text
        return result

    active = _sorted_routes([r for r in routes if r.cabinet_ids])
    if not active:
        return result

    if settings.restart_per_card:
        groups: dict[int, list[DataRoute]] = {}
        for route in active:
            groups.setdefault(route_card_group(route), []).append(route)
        for key in sorted(groups):
            _assign(groups[key], settings.labels, result)
        return result

    _assign(active, settings.labels, result)
    return result

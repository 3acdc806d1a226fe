"""Cabinet labels shown on the overview and in exports.

Grid labels are spreadsheet-style: a column letter followed by a row
number. Columns come from ``cluster_columns`` and rows count down from
the top of each column, matching the mechanical-design drawings the
layout is exported toward.
"""

from __future__ import annotations

from ..entities import Cabinet, CabinetType, LayoutData
from ..value_objects import DEFAULT_RECEIVER_CARD_MODEL, LabelsMode, ReceiverCardKind
from .geometry import cluster_columns
from .routing import CARD_LETTERS, parse_endpoint

UNKNOWN_LABEL = "?"


def column_letter(index: int) -> str:
    """Convert a zero-based column index to letters (0 -> A, 25 -> Z, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    letters = ""
    n = index + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def grid_label_map(layout: LayoutData) -> dict[str, str]:
    """Label every cabinet with resolvable bounds.

    Non-blank ``grid_label_override`` values win over computed labels.
    """
    labels: dict[str, str] = {}
    for col_index, column in enumerate(cluster_columns(layout)):
        letters = column_letter(col_index)
        for row_index, member in enumerate(column.members):
            labels.setdefault(member.id, f"{letters}{row_index + 1}")

    for cabinet in layout.cabinets:
        override = (cabinet.grid_label_override or "").strip()
        if override and cabinet.id in labels:
            labels[cabinet.id] = override
    return labels


def grid_label(
    cabinet: Cabinet,
    cabinets: tuple[Cabinet, ...] | list[Cabinet],
    types: tuple[CabinetType, ...] | list[CabinetType],
) -> str:
    """Compute one cabinet's grid label against the given cabinets.

    Args:
        cabinet: Cabinet to label.
        cabinets: All cabinets of the layout, the target included.
        types: Cabinet type catalog.

    Returns:
        A label like "B3", the override when set, or "?" when the cabinet
        has no resolvable bounds.
    """
    layout = LayoutData(cabinet_types=tuple(types), cabinets=tuple(cabinets))
    return grid_label_map(layout).get(cabinet.id, UNKNOWN_LABEL)


def cabinet_label(layout: LayoutData, cabinet: Cabinet) -> str:
    """Label for display according to the overview labels mode."""
    if layout.project.overview.labels_mode == LabelsMode.INTERNAL:
        return cabinet.id
    return grid_label_map(layout).get(cabinet.id, UNKNOWN_LABEL)


def endpoint_label(layout: LayoutData, endpoint_id: str) -> str:
    """Cabinet label plus the card letter for dual-card cabinets."""
    endpoint = parse_endpoint(endpoint_id)
    cabinet = layout.find_cabinet(endpoint.cabinet_id)
    if cabinet is None:
        return endpoint_id
    label = cabinet_label(layout, cabinet)
    if cabinet.receiver_card_count == 2 and endpoint.card_index is not None:
        return f"{label}{CARD_LETTERS[endpoint.card_index]}"
    return label


def receiver_card_label(layout: LayoutData, cabinet: Cabinet) -> str | None:
    """Receiver card model shown for a cabinet, or None when no card is shown."""
    if not layout.project.overview.show_receiver_cards:
        return None
    if cabinet.receiver_card_count == 0:
        return None
    override = cabinet.receiver_card_override
    if override.kind == ReceiverCardKind.HIDDEN:
        return None
    if override.kind == ReceiverCardKind.CUSTOM:
        return override.model
    model = (layout.project.overview.receiver_card_model or "").strip()
    return model or DEFAULT_RECEIVER_CARD_MODEL

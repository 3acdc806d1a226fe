"""Geometry services for cabinet footprints and column clustering.

``cabinet_bounds`` is the single place where a cabinet's rotated
footprint is derived; every other service goes through it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from ..entities import Cabinet, CabinetType, LayoutData
from ..modes import effective_pitch_mm
from ..value_objects import LayoutBounds, Rect

__all__ = [
    "COLUMN_TOLERANCE_MM",
    "Column",
    "PlacedCabinet",
    "cabinet_bounds",
    "cluster_columns",
    "infer_cabinet_type",
    "layout_bounds",
    "placed_cabinets",
    "type_index",
]

# Cabinets whose centers are closer than this on X share a column
COLUMN_TOLERANCE_MM = 100.0

_SIZE_PATTERN = re.compile(r"(\d+)\s*x\s*(\d+)", re.IGNORECASE)


def type_index(types: Iterable[CabinetType]) -> dict[str, CabinetType]:
    index: dict[str, CabinetType] = {}
    for cabinet_type in types:
        index.setdefault(cabinet_type.type_id, cabinet_type)
    return index


def cabinet_bounds(cabinet: Cabinet, types: Iterable[CabinetType]) -> Rect | None:
    """Return the cabinet's footprint rectangle, or None for an unknown type.

    Width and height swap for 90 and 270 degree rotations.
    """
    cabinet_type = type_index(types).get(cabinet.type_id)
    if cabinet_type is None:
        return None
    return _bounds_for(cabinet, cabinet_type)


def _bounds_for(cabinet: Cabinet, cabinet_type: CabinetType) -> Rect:
    if cabinet.rot_deg.swaps_axes:
        width, height = cabinet_type.height_mm, cabinet_type.width_mm
    else:
        width, height = cabinet_type.width_mm, cabinet_type.height_mm
    return Rect(x=cabinet.x_mm, y=cabinet.y_mm, width=width, height=height)


def infer_cabinet_type(text: str, type_id: str | None = None) -> CabinetType | None:
    """Infer a footprint from a ``WIDTHxHEIGHT`` pattern embedded in text.

    Args:
        text: String to search, e.g. "STD_640x480" or "legacy-960X640-b".
        type_id: Id for the synthesized entry; defaults to ``text``.

    Returns:
        A CabinetType, or None when no positive size is embedded.

    Examples:
        >>> infer_cabinet_type("STD_640x480")
        CabinetType(type_id='STD_640x480', width_mm=640, height_mm=480)
    """
    match = _SIZE_PATTERN.search(text or "")
    if not match:
        return None
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        return None
    return CabinetType(type_id=type_id or text, width_mm=width, height_mm=height)


@dataclass(frozen=True)
class PlacedCabinet:
    """A cabinet paired with its resolved footprint."""

    cabinet: Cabinet
    bounds: Rect

    @property
    def id(self) -> str:
        return self.cabinet.id


def placed_cabinets(layout: LayoutData) -> list[PlacedCabinet]:
    """Cabinets with resolvable footprints, in document order."""
    index = type_index(layout.cabinet_types)
    placed: list[PlacedCabinet] = []
    for cabinet in layout.cabinets:
        cabinet_type = index.get(cabinet.type_id)
        if cabinet_type is not None:
            placed.append(PlacedCabinet(cabinet, _bounds_for(cabinet, cabinet_type)))
    return placed


def layout_bounds(layout: LayoutData) -> LayoutBounds:
    """Overall extent across all cabinets, plus its size in pixels.

    Cabinets of unknown type are ignored. An empty layout has zero bounds.
    """
    rects = [item.bounds for item in placed_cabinets(layout)]
    if not rects:
        return LayoutBounds()

    min_x = min(r.x for r in rects)
    min_y = min(r.y for r in rects)
    max_x = max(r.x2 for r in rects)
    max_y = max(r.y2 for r in rects)

    pitch = effective_pitch_mm(layout.project.pitch_mm)
    if pitch > 0:
        width_px = round((max_x - min_x) / pitch)
        height_px = round((max_y - min_y) / pitch)
    else:
        width_px = height_px = 0

    return LayoutBounds(
        min_x=min_x,
        min_y=min_y,
        max_x=max_x,
        max_y=max_y,
        width_px=width_px,
        height_px=height_px,
    )


@dataclass
class Column:
    """Cabinets sharing a column, ordered top to bottom once clustered."""

    reference_x: float
    members: list[PlacedCabinet] = field(default_factory=list)

    @property
    def cabinet_ids(self) -> list[str]:
        return [m.id for m in self.members]


def cluster_columns(
    layout: LayoutData, tolerance: float = COLUMN_TOLERANCE_MM
) -> list[Column]:
    """Group cabinets into columns by the X coordinate of their centers.

    Cabinets are visited in document order. Each one joins the first
    column whose reference X (the center of its first member) lies within
    ``tolerance``; otherwise it starts a new column. Columns come back
    sorted left to right and their members top to bottom (descending
    center Y, the Y axis points up).

    Args:
        layout: Layout to cluster.
        tolerance: Maximum center distance, exclusive, for sharing a column.

    Returns:
        Columns ordered left to right.
    """
    columns: list[Column] = []
    for item in placed_cabinets(layout):
        center_x = item.bounds.center_x
        column = next(
            (c for c in columns if abs(c.reference_x - center_x) < tolerance), None
        )
        if column is None:
            column = Column(reference_x=center_x)
            columns.append(column)
        column.members.append(item)

    columns.sort(key=lambda c: c.reference_x)
    for column in columns:
        column.members.sort(key=lambda m: -m.bounds.center_y)
    return columns

"""Geometry value objects in the Y-up millimeter plane."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Rotation(int, Enum):
    """Allowed cabinet rotations in degrees."""

    R0 = 0
    R90 = 90
    R180 = 180
    R270 = 270

    @property
    def swaps_axes(self) -> bool:
        """Whether the footprint width and height trade places."""
        return self in (Rotation.R90, Rotation.R270)

    def next(self) -> "Rotation":
        """The rotation a quarter turn further."""
        return Rotation((self.value + 90) % 360)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with its lower-left corner at (x, y)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def area(self) -> float:
        """Area in square millimeters."""
        return self.width * self.height

    def overlaps(self, other: "Rect") -> bool:
        """Check for an intersection with positive area.

        Rectangles that only share an edge or a corner do not overlap.
        """
        return (
            self.x < other.x2
            and self.x2 > other.x
            and self.y < other.y2
            and self.y2 > other.y
        )

    def touches(self, other: "Rect", tolerance: float = 0.0) -> bool:
        """Check whether the rectangles meet, edge or corner, within tolerance."""
        return (
            self.x <= other.x2 + tolerance
            and other.x <= self.x2 + tolerance
            and self.y <= other.y2 + tolerance
            and other.y <= self.y2 + tolerance
        )


@dataclass(frozen=True)
class LayoutBounds:
    """Overall extent of a layout in millimeters and pixels."""

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    width_px: int = 0
    height_px: int = 0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

"""Lenient value coercion for layout documents.

Documents come from older versions, hand edits and other tools. A bad
leaf value falls back to a default instead of failing the whole import.
"""

from __future__ import annotations

import math
from typing import Any


def to_float(value: Any, default: float = 0.0) -> float:
    """Finite float from a number or numeric string, else ``default``.

    Examples:
        >>> to_float("12.5")
        12.5
        >>> to_float("wide", default=3.0)
        3.0
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


def to_optional_float(value: Any) -> float | None:
    if value is None:
        return None
    number = to_float(value, default=math.nan)
    return None if math.isnan(number) else number


def to_int(value: Any, default: int = 0) -> int:
    number = to_float(value, default=math.nan)
    return default if math.isnan(number) else int(round(number))


def to_optional_int(value: Any) -> int | None:
    if value is None:
        return None
    number = to_float(value, default=math.nan)
    return None if math.isnan(number) else int(round(number))


def to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    return default


def to_str(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:g}" if isinstance(value, float) else str(value)
    return default


def to_choice(value: Any, choices: tuple[str, ...], default: str) -> str:
    """``value`` when it is one of ``choices``, else ``default``."""
    return value if isinstance(value, str) and value in choices else default


def to_rotation(value: Any) -> int:
    """Snap to the nearest quarter turn in [0, 360); non-numbers become 0."""
    degrees = to_float(value, default=0.0)
    return int(round(degrees / 90.0)) * 90 % 360


def to_card_count(value: Any) -> int:
    """Receiver card count clamped to 0..2; non-numbers become 1."""
    return min(max(to_int(value, default=1), 0), 2)


def objects_only(value: Any) -> list[dict[str, Any]]:
    """List items that are JSON objects; anything else becomes an empty list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def strings_only(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def object_or_empty(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def string_map(value: Any) -> dict[str, str]:
    """Object of string-ish values; blank and non-scalar values are dropped."""
    result: dict[str, str] = {}
    for key, item in object_or_empty(value).items():
        text = to_str(item).strip()
        if text:
            result[str(key)] = text
    return result

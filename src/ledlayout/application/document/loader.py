"""Layout document loader with comprehensive error handling.

This module loads layout JSON documents from files, strings or
dictionaries. It reports missing files, JSON syntax errors, documents
missing their required top-level keys and schema failures as a single
``LayoutImportError`` with clear, actionable messages. Everything it
returns has been normalized.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ledlayout.domain.entities import LayoutData
from ledlayout.domain.services import normalize

from .adapter import layout_from_document
from .schemas import REQUIRED_KEYS, LayoutDocument

logger = logging.getLogger(__name__)


class LayoutImportError(Exception):
    """Exception raised when a layout document cannot be imported.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, json_parse,
            missing_keys, validation)
        path: Path to the document (if applicable)
        details: Additional error details (line/column for JSON, missing
            keys, validation errors)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("project", "dataRoutes", 0, "port"))
        'project.dataRoutes[0].port'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(error: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": _format_json_path(err["loc"]),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def load_layout_from_dict(data: Any, path: Path | None = None) -> LayoutData:
    """Import a layout from already-parsed JSON data.

    Args:
        data: Parsed JSON value; must be an object.
        path: Source file, used in error messages only.

    Returns:
        The normalized layout.

    Raises:
        LayoutImportError: If the data is not an object, lacks a required
            top-level key or fails schema validation.
    """
    where = f" in {path}" if path else ""
    if not isinstance(data, dict):
        raise LayoutImportError(
            message=f"Layout document{where} must be a JSON object",
            error_type="validation",
            path=path,
        )

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise LayoutImportError(
            message=f"Invalid layout file{where}: missing {', '.join(missing)}",
            error_type="missing_keys",
            path=path,
            details=[{"key": key} for key in missing],
        )

    try:
        document = LayoutDocument.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        lines = [f"Layout validation failed{where}:"]
        lines.extend(f"  - {d['path']}: {d['message']}" for d in details)
        raise LayoutImportError(
            message="\n".join(lines),
            error_type="validation",
            path=path,
            details=details,
        ) from e

    return normalize(layout_from_document(document))


def load_layout_from_string(text: str, path: Path | None = None) -> LayoutData:
    """Import a layout from a JSON string.

    Raises:
        LayoutImportError: On malformed JSON or an invalid document.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        where = f" in {path}" if path else ""
        raise LayoutImportError(
            message=f"Invalid JSON{where} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e
    return load_layout_from_dict(data, path=path)


def load_layout(path: Path) -> LayoutData:
    """Import a layout from a JSON file.

    Args:
        path: Path to the layout document.

    Returns:
        The normalized layout.

    Raises:
        LayoutImportError: If the file is missing or unreadable, or its
            content is not a valid layout document.

    Example:
        >>> try:
        ...     layout = load_layout(Path("wall.json"))
        ... except LayoutImportError as e:
        ...     print(f"Error: {e}")
    """
    if not path.exists():
        raise LayoutImportError(
            message=f"Layout file not found: {path}",
            error_type="file_not_found",
            path=path,
        )
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LayoutImportError(
            message=f"Error reading layout file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    layout = load_layout_from_string(content, path=path)
    logger.debug(f"Loaded layout {path} with {len(layout.cabinets)} cabinets")
    return layout

"""Share-link codec: a layout as an unpadded base64url query parameter."""

from __future__ import annotations

import base64
import binascii
import json
import logging

from ledlayout.application.document import (
    LayoutImportError,
    layout_to_dict,
    load_layout_from_dict,
)
from ledlayout.domain.entities import LayoutData

logger = logging.getLogger(__name__)


def encode_layout_to_url_param(layout: LayoutData) -> str:
    """Encode a layout as compact UTF-8 JSON in base64url without padding."""
    text = json.dumps(layout_to_dict(layout), separators=(",", ":"), ensure_ascii=False)
    encoded = base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def decode_layout_from_url_param(param: str) -> LayoutData | None:
    """Decode a share-link parameter back into a normalized layout.

    Returns:
        The layout, or None when the parameter is not valid base64url,
        not UTF-8 JSON or not a layout document.
    """
    padded = param + "=" * (-len(param) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
        return load_layout_from_dict(data)
    except (binascii.Error, UnicodeError, ValueError, LayoutImportError) as e:
        logger.debug(f"Ignoring undecodable layout parameter: {e}")
        return None

"""Layout document I/O: schemas, loading and serialization."""

from .adapter import layout_from_document
from .loader import (
    LayoutImportError,
    load_layout,
    load_layout_from_dict,
    load_layout_from_string,
)
from .schemas import REQUIRED_KEYS, LayoutDocument
from .serializer import dump_layout, layout_to_dict, save_layout

__all__ = [
    "LayoutDocument",
    "LayoutImportError",
    "REQUIRED_KEYS",
    "dump_layout",
    "layout_from_document",
    "layout_to_dict",
    "load_layout",
    "load_layout_from_dict",
    "load_layout_from_string",
    "save_layout",
]

"""Application layer - editing commands, history, session and document I/O."""

from .commands import UnknownFieldError, apply_command
from .document import (
    LayoutImportError,
    dump_layout,
    layout_to_dict,
    load_layout,
    load_layout_from_dict,
    load_layout_from_string,
    save_layout,
)
from .history import MAX_HISTORY, HistoryManager
from .session import EditorSession
from .summary import LayoutSummary, summarize_layout

__all__ = [
    "EditorSession",
    "HistoryManager",
    "LayoutImportError",
    "LayoutSummary",
    "MAX_HISTORY",
    "UnknownFieldError",
    "apply_command",
    "dump_layout",
    "layout_to_dict",
    "load_layout",
    "load_layout_from_dict",
    "load_layout_from_string",
    "save_layout",
    "summarize_layout",
]

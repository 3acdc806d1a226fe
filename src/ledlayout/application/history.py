"""Linear undo/redo history of full layout snapshots."""

from __future__ import annotations

import logging

from ledlayout.domain import LayoutData

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


class HistoryManager:
    """Snapshot log with a cursor.

    ``commit`` drops any redo tail past the cursor and appends a snapshot.
    ``undo`` and ``redo`` move the cursor and return the snapshot under it;
    at either end they are no-ops. The log keeps at most ``max_size``
    snapshots, dropping the oldest.

    Snapshots are immutable ``LayoutData`` values, so no copying is needed.
    """

    def __init__(self, initial: LayoutData, max_size: int = MAX_HISTORY) -> None:
        if max_size < 1:
            raise ValueError("History must keep at least one snapshot")
        self.max_size = max_size
        self._snapshots: list[LayoutData] = [initial]
        self._index = 0

    @property
    def current(self) -> LayoutData:
        return self._snapshots[self._index]

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def commit(self, layout: LayoutData) -> None:
        """Record a snapshot as the newest history entry."""
        del self._snapshots[self._index + 1 :]
        self._snapshots.append(layout)
        overflow = len(self._snapshots) - self.max_size
        if overflow > 0:
            del self._snapshots[:overflow]
        self._index = len(self._snapshots) - 1
        logger.debug(f"History commit: {self._index + 1} snapshot(s)")

    def undo(self) -> LayoutData:
        if self.can_undo:
            self._index -= 1
        return self.current

    def redo(self) -> LayoutData:
        if self.can_redo:
            self._index += 1
        return self.current

    def reset(self, layout: LayoutData) -> None:
        """Discard all history and start over from ``layout``."""
        self._snapshots = [layout]
        self._index = 0

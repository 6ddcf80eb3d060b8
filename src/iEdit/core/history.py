"""Linear undo/redo history over immutable document snapshots."""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class EditHistory(Generic[T]):
    """Array-backed snapshot list with a cursor.

    Entries before the cursor are undo targets and entries after it are redo
    targets.  :meth:`push` always truncates the redo tail, so the history never
    branches.  When ``limit`` is set the oldest snapshots are dropped once the
    list grows beyond it.
    """

    def __init__(self, root: T, *, limit: int | None = None) -> None:
        if limit is not None and limit < 1:
            raise ValueError("limit must be at least 1")
        self._entries: list[T] = [root]
        self._index = 0
        self._limit = limit

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def current(self) -> T:
        return self._entries[self._index]

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._entries)

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def snapshots(self) -> tuple[T, ...]:
        return tuple(self._entries)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def push(self, snapshot: T) -> T:
        """Append *snapshot* after the cursor, discarding any redo targets."""

        del self._entries[self._index + 1 :]
        self._entries.append(snapshot)
        if self._limit is not None and len(self._entries) > self._limit:
            overflow = len(self._entries) - self._limit
            del self._entries[:overflow]
            _LOGGER.debug("History limit reached; dropped %d oldest snapshot(s)", overflow)
        self._index = len(self._entries) - 1
        return snapshot

    def undo(self) -> T | None:
        """Step back one snapshot and return it, or ``None`` at the root."""

        if not self.can_undo():
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> T | None:
        """Step forward one snapshot and return it, or ``None`` at the tip."""

        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def reset(self, root: T) -> None:
        """Drop every snapshot and start over from *root*."""

        self._entries = [root]
        self._index = 0

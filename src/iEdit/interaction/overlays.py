"""Selection, drag and property edits for text and sticker overlays."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.document import EditDocument, make_sticker_overlay, make_text_overlay
from ..core.geometry import clamp_percent, percent_delta

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """The one overlay currently selected in the session."""

    kind: str
    id: str


@dataclass(frozen=True)
class OverlayDragState:
    selection: Selection
    start_pointer: tuple[float, float]
    start_position: tuple[float, float]
    start_document: EditDocument


class OverlayInteractionController:
    """Edit overlays on the working document and decide when to commit.

    ``document_provider`` returns the session's working document.
    ``on_update`` replaces it without touching history, ``on_commit`` replaces
    it and records a history entry.
    """

    def __init__(
        self,
        *,
        document_provider: Callable[[], EditDocument],
        on_update: Callable[[EditDocument], None],
        on_commit: Callable[[EditDocument], None],
        on_selection_changed: Callable[[Selection | None], None] | None = None,
    ) -> None:
        self._document_provider = document_provider
        self._on_update = on_update
        self._on_commit = on_commit
        self._on_selection_changed = on_selection_changed
        self._container_size = (0.0, 0.0)
        self._selection: Selection | None = None
        self._drag: OverlayDragState | None = None
        self._pending = False

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def selection(self) -> Selection | None:
        return self._selection

    def select(self, overlay_id: str | None) -> Selection | None:
        """Select *overlay_id*, or clear the selection with ``None``."""

        if overlay_id is None:
            selection = None
        else:
            kind = self._document_provider().overlay_kind(overlay_id)
            selection = Selection(kind, overlay_id)
        self._set_selection(selection)
        return selection

    def validate_selection(self) -> None:
        """Drop the selection when its overlay no longer exists."""

        if self._selection is None:
            return
        document = self._document_provider()
        known = {item.id for item in document.texts} | {item.id for item in document.stickers}
        if self._selection.id not in known:
            self._set_selection(None)

    def _set_selection(self, selection: Selection | None) -> None:
        if selection == self._selection:
            return
        self._selection = selection
        if self._on_selection_changed is not None:
            self._on_selection_changed(selection)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def add_text(self, **fields: Any) -> str:
        overlay = make_text_overlay(**fields)
        self._commit(self._document_provider().with_text(overlay))
        self._set_selection(Selection("text", overlay.id))
        return overlay.id

    def add_sticker(self, preset_id: str, **fields: Any) -> str:
        overlay = make_sticker_overlay(preset_id, **fields)
        self._commit(self._document_provider().with_sticker(overlay))
        self._set_selection(Selection("sticker", overlay.id))
        return overlay.id

    def update_overlay(self, overlay_id: str, *, commit: bool = True, **fields: Any) -> EditDocument:
        """Merge *fields* into the overlay.

        With ``commit=False`` the edit only lands in the working document and
        :meth:`commit_pending` records it later, so a slider drag becomes one
        history entry.
        """

        document = self._document_provider().with_overlay_fields(overlay_id, **fields)
        if commit:
            self._commit(document)
        else:
            self._pending = True
            self._on_update(document)
        return document

    def has_pending(self) -> bool:
        return self._pending

    def commit_pending(self) -> bool:
        """Record batched edits as one history entry."""

        if not self._pending:
            return False
        self._commit(self._document_provider())
        return True

    def discard_pending(self) -> None:
        self._pending = False

    def delete_overlay(self, overlay_id: str) -> None:
        document = self._document_provider().without_overlay(overlay_id)
        if self._selection is not None and self._selection.id == overlay_id:
            self._set_selection(None)
        self._commit(document)

    def _commit(self, document: EditDocument) -> None:
        self._pending = False
        self._on_commit(document)

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------
    def set_container_size(self, width: float, height: float) -> None:
        """Record the on-screen size of the output canvas overlays sit on."""

        self._container_size = (float(width), float(height))

    def is_dragging(self) -> bool:
        return self._drag is not None

    def pointer_down(self, pos: tuple[float, float], overlay_id: str) -> bool:
        """Select *overlay_id* and start dragging it."""

        if self._drag is not None:
            return False
        document = self._document_provider()
        overlay = document.find_overlay(overlay_id)
        selection = Selection(document.overlay_kind(overlay_id), overlay_id)
        self._set_selection(selection)
        self._drag = OverlayDragState(
            selection,
            (float(pos[0]), float(pos[1])),
            (overlay.x, overlay.y),
            document,
        )
        return True

    def pointer_move(self, pos: tuple[float, float]) -> bool:
        drag = self._drag
        if drag is None:
            return False
        width, height = self._container_size
        dx, dy = percent_delta(
            pos[0] - drag.start_pointer[0],
            pos[1] - drag.start_pointer[1],
            width,
            height,
        )
        x = clamp_percent(drag.start_position[0] + dx)
        y = clamp_percent(drag.start_position[1] + dy)
        document = self._document_provider().with_overlay_fields(drag.selection.id, x=x, y=y)
        self._on_update(document)
        return True

    def pointer_up(self, pos: tuple[float, float] | None = None, *, inside: bool = True) -> bool:
        """Finish the drag; returns ``True`` when a move was committed."""

        drag = self._drag
        if drag is None:
            return False
        if not inside:
            self.cancel()
            return False
        if pos is not None:
            self.pointer_move(pos)
        self._drag = None
        document = self._document_provider()
        overlay = document.find_overlay(drag.selection.id)
        if (overlay.x, overlay.y) == drag.start_position:
            return False
        _LOGGER.debug("Overlay %s moved to (%.2f, %.2f)", overlay.id, overlay.x, overlay.y)
        self._commit(document)
        return True

    def cancel(self) -> None:
        """Abort a drag and put the overlay back where it started."""

        drag = self._drag
        if drag is None:
            return
        self._drag = None
        self._on_update(drag.start_document)


__all__ = ["OverlayDragState", "OverlayInteractionController", "Selection"]

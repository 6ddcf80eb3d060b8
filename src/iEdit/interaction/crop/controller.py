"""Pointer state machine driving the crop rectangle."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ...core.geometry import CropRect, centered_rect, percent_delta
from .model import CropSessionModel
from .strategies import InteractionStrategy, MoveStrategy, ResizeStrategy
from .utils import CropDragState, CropHandle

_LOGGER = logging.getLogger(__name__)


class CropInteractionController:
    """Translate pointer events on the crop overlay into rectangle updates.

    The controller is either idle or dragging one handle.  While dragging, each
    move recomputes the rectangle from the gesture's start rectangle plus the
    total pointer delta, so rounding never accumulates.  ``on_crop_changed``
    fires for every live update and ``on_commit`` once per completed gesture
    that actually changed the rectangle.
    """

    def __init__(
        self,
        model: CropSessionModel,
        *,
        on_crop_changed: Callable[[CropRect], None] | None = None,
        on_commit: Callable[[CropRect], None] | None = None,
    ) -> None:
        self._model = model
        self._on_crop_changed = on_crop_changed
        self._on_commit = on_commit
        self._container_size = (0.0, 0.0)
        self._drag: CropDragState | None = None
        self._strategy: InteractionStrategy | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def model(self) -> CropSessionModel:
        return self._model

    @property
    def drag_state(self) -> CropDragState | None:
        return self._drag

    def is_dragging(self) -> bool:
        return self._drag is not None

    def current_rect(self) -> CropRect:
        return self._model.get_rect()

    def set_container_size(self, width: float, height: float) -> None:
        """Record the on-screen size of the image the crop box is drawn over."""

        self._container_size = (float(width), float(height))

    def sync(self, rect: CropRect | None) -> None:
        """Adopt *rect* from the document, abandoning any drag in flight."""

        self._drag = None
        self._strategy = None
        if rect is None:
            rect = centered_rect(self._model.percent_aspect())
        self._model.set_rect(rect)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def pointer_down(self, pos: tuple[float, float], handle: CropHandle | str) -> bool:
        """Start dragging *handle* at container position *pos*."""

        if self._drag is not None:
            return False
        handle = CropHandle(handle)
        start_rect = self._model.create_snapshot()
        self._drag = CropDragState(handle, (float(pos[0]), float(pos[1])), start_rect)
        if handle is CropHandle.MOVE:
            self._strategy = MoveStrategy(
                model=self._model,
                start_rect=start_rect,
                on_crop_changed=self._emit_changed,
            )
        else:
            self._strategy = ResizeStrategy(
                handle=handle,
                model=self._model,
                start_rect=start_rect,
                on_crop_changed=self._emit_changed,
            )
        return True

    def pointer_move(self, pos: tuple[float, float]) -> CropRect | None:
        """Update the rectangle for the pointer at *pos*; ``None`` when idle."""

        if self._drag is None or self._strategy is None:
            return None
        width, height = self._container_size
        dx, dy = percent_delta(
            pos[0] - self._drag.start_pointer[0],
            pos[1] - self._drag.start_pointer[1],
            width,
            height,
        )
        self._strategy.on_drag(dx, dy)
        return self._model.get_rect()

    def pointer_up(
        self,
        pos: tuple[float, float] | None = None,
        *,
        inside: bool = True,
    ) -> CropRect | None:
        """Finish the gesture and return the committed rectangle, if any.

        Releasing outside the container cancels the gesture.
        """

        if self._drag is None:
            return None
        if not inside:
            self.cancel()
            return None
        if pos is not None:
            self.pointer_move(pos)
        drag = self._drag
        if self._strategy is not None:
            self._strategy.on_end()
        self._drag = None
        self._strategy = None

        if not self._model.has_changed(drag.start_rect):
            return None
        rect = self._model.get_rect()
        _LOGGER.debug("Crop %s drag committed: %s", drag.handle.value, rect.as_tuple())
        if self._on_commit is not None:
            self._on_commit(rect)
        return rect

    def cancel(self) -> None:
        """Abort the drag and restore the rectangle it started from."""

        if self._drag is None:
            return
        start_rect = self._drag.start_rect
        if self._strategy is not None:
            self._strategy.on_end()
        self._drag = None
        self._strategy = None
        if self._model.has_changed(start_rect):
            self._model.restore_snapshot(start_rect)
            self._emit_changed()

    # ------------------------------------------------------------------
    # Aspect ratio
    # ------------------------------------------------------------------
    def set_aspect_ratio(self, ratio: float | None) -> CropRect | None:
        """Lock to *ratio* and return the reshaped rectangle when it changed."""

        if self._drag is not None:
            self.cancel()
        if not self._model.set_aspect_ratio(ratio):
            return None
        self._emit_changed()
        return self._model.get_rect()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _emit_changed(self) -> None:
        if self._on_crop_changed is not None:
            self._on_crop_changed(self._model.get_rect())

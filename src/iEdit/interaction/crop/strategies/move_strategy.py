"""
Move strategy for dragging the whole crop box.
"""

from __future__ import annotations

from collections.abc import Callable

from ....core.geometry import CropRect, translate_rect
from ..model import CropSessionModel
from .abstract import InteractionStrategy


class MoveStrategy(InteractionStrategy):
    """Translate the crop box without resizing it."""

    def __init__(
        self,
        *,
        model: CropSessionModel,
        start_rect: CropRect,
        on_crop_changed: Callable[[], None],
    ) -> None:
        self._model = model
        self._start_rect = start_rect
        self._on_crop_changed = on_crop_changed

    def on_drag(self, dx: float, dy: float) -> None:
        snapshot = self._model.create_snapshot()
        self._model.set_rect(translate_rect(self._start_rect, dx, dy))
        if self._model.has_changed(snapshot):
            self._on_crop_changed()

    def on_end(self) -> None:
        # Nothing to finalise; the controller decides whether to commit.
        pass

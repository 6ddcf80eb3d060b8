"""
Resize strategy for crop box edge/corner dragging.
"""

from __future__ import annotations

from collections.abc import Callable

from ....core.geometry import CropRect, resize_edges
from ..model import CropSessionModel
from ..utils import CropHandle, aspect_anchor
from .abstract import InteractionStrategy


class ResizeStrategy(InteractionStrategy):
    """Strategy for resizing crop box via edge/corner dragging."""

    def __init__(
        self,
        *,
        handle: CropHandle,
        model: CropSessionModel,
        start_rect: CropRect,
        on_crop_changed: Callable[[], None],
    ) -> None:
        """Initialize resize strategy.

        Parameters
        ----------
        handle:
            The crop handle being dragged.
        model:
            Crop session model.
        start_rect:
            Rectangle captured when the drag started.
        on_crop_changed:
            Callback when crop values change.
        """
        self._handle = handle
        self._model = model
        self._start_rect = start_rect
        self._on_crop_changed = on_crop_changed

    def on_drag(self, dx: float, dy: float) -> None:
        """Handle resize drag movement."""
        snapshot = self._model.create_snapshot()
        min_size = self._model.min_size
        handle = self._handle

        rect = resize_edges(
            self._start_rect,
            dx,
            dy,
            left=handle.moves_left,
            right=handle.moves_right,
            top=handle.moves_top,
            bottom=handle.moves_bottom,
            min_width=min_size,
            min_height=min_size,
        )
        self._model.set_rect(rect)

        if self._model.aspect_ratio is not None:
            anchor_x, anchor_y, derive = aspect_anchor(handle)
            self._model.apply_aspect(anchor_x=anchor_x, anchor_y=anchor_y, derive=derive)

        if self._model.has_changed(snapshot):
            self._on_crop_changed()

    def on_end(self) -> None:
        """Handle end of resize interaction."""
        # No special cleanup needed

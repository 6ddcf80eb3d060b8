"""
Crop session model for state management.

This module keeps the live crop rectangle, the minimum size and the optional
aspect lock without any direct pointer handling.
"""

from __future__ import annotations

from ...config import MIN_CROP_SIZE
from ...core.geometry import (
    CropRect,
    clamp_rect,
    feasible_ratio,
    full_rect,
    percent_ratio,
    reconcile_aspect,
)


class CropSessionModel:
    """Manages the working crop rectangle and its constraints."""

    def __init__(
        self,
        rect: CropRect | None = None,
        *,
        min_size: float = MIN_CROP_SIZE,
        aspect_ratio: float | None = None,
        container_aspect: float = 1.0,
    ) -> None:
        """Initialize the crop session model.

        Parameters
        ----------
        rect:
            Starting rectangle in percent of the source; defaults to the full frame.
        min_size:
            Minimum width and height in percent.
        aspect_ratio:
            Pixel width/height ratio the rectangle is locked to, or ``None``.
        container_aspect:
            Width/height of the source image the percentages refer to.
        """
        self._min_size = float(min_size)
        self._container_aspect = container_aspect if container_aspect > 0 else 1.0
        self._aspect_ratio = aspect_ratio
        self._rect = clamp_rect(rect or full_rect(), min_width=self._min_size, min_height=self._min_size)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def min_size(self) -> float:
        return self._min_size

    @property
    def aspect_ratio(self) -> float | None:
        """Pixel ratio the rectangle is locked to, or ``None`` for free-form."""

        return self._aspect_ratio

    @property
    def container_aspect(self) -> float:
        return self._container_aspect

    def percent_aspect(self) -> float | None:
        """Return the lock ratio in percent units, limited to the reachable range."""

        if self._aspect_ratio is None:
            return None
        return feasible_ratio(
            percent_ratio(self._aspect_ratio, self._container_aspect),
            min_width=self._min_size,
            min_height=self._min_size,
        )

    def get_rect(self) -> CropRect:
        """Return the current crop rectangle."""
        return self._rect

    def set_rect(self, rect: CropRect) -> None:
        """Replace the rectangle, clamping it into the valid bounds."""
        self._rect = clamp_rect(rect, min_width=self._min_size, min_height=self._min_size)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def create_snapshot(self) -> CropRect:
        """Return the current rectangle for later restoration."""
        return self._rect

    def restore_snapshot(self, snapshot: CropRect) -> None:
        """Restore the crop rectangle from snapshot."""
        self.set_rect(snapshot)

    def has_changed(self, snapshot: CropRect) -> bool:
        """Return True when the current crop differs from snapshot."""
        return not self._rect.is_close(snapshot)

    # ------------------------------------------------------------------
    # Aspect lock
    # ------------------------------------------------------------------
    def set_aspect_ratio(self, ratio: float | None) -> bool:
        """Lock the rectangle to *ratio* and reshape it about its centre.

        Returns
        -------
        bool:
            True if the rectangle changed, False otherwise.
        """
        self._aspect_ratio = ratio if ratio is None or ratio > 0 else None
        snapshot = self.create_snapshot()
        self.apply_aspect(anchor_x="center", anchor_y="center", derive=None)
        return self.has_changed(snapshot)

    def apply_aspect(
        self,
        *,
        anchor_x: str,
        anchor_y: str,
        derive: str | None,
    ) -> None:
        """Reconcile the current rectangle with the active lock, if any."""
        ratio = self.percent_aspect()
        if ratio is None:
            return
        self._rect = reconcile_aspect(
            self._rect,
            ratio,
            anchor_x=anchor_x,
            anchor_y=anchor_y,
            derive=derive,
            min_width=self._min_size,
            min_height=self._min_size,
        )

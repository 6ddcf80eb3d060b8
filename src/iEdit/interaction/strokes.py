"""Freehand stroke capture for the draw tool."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from ..config import (
    BRUSH_SIZE_RANGE,
    DEFAULT_BRUSH_COLOR,
    DEFAULT_BRUSH_SIZE,
    STROKE_EPSILON,
)
from ..core.document import Point, Stroke, new_overlay_id, normalize_color
from ..core.geometry import clamp, percent_point

_LOGGER = logging.getLogger(__name__)


class StrokeCaptureController:
    """Collect pointer samples into a :class:`Stroke`.

    Points are stored in percent of the output canvas.  Samples closer than
    ``epsilon`` to the previous point are dropped.  A path with fewer than two
    points is discarded on release.
    """

    def __init__(
        self,
        *,
        on_commit: Callable[[Stroke], None],
        on_path_changed: Callable[[tuple[Point, ...]], None] | None = None,
        epsilon: float = STROKE_EPSILON,
    ) -> None:
        self._on_commit = on_commit
        self._on_path_changed = on_path_changed
        self._epsilon = max(0.0, float(epsilon))
        self._active = False
        self._container_size = (0.0, 0.0)
        self._brush_color = DEFAULT_BRUSH_COLOR
        self._brush_size = DEFAULT_BRUSH_SIZE
        self._path: list[Point] | None = None

    # ------------------------------------------------------------------
    # Tool state
    # ------------------------------------------------------------------
    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = bool(active)
        if not self._active:
            self.cancel()

    @property
    def brush_color(self) -> str:
        return self._brush_color

    def set_brush_color(self, color: str) -> str:
        self._brush_color = normalize_color(color)
        return self._brush_color

    @property
    def brush_size(self) -> int:
        return self._brush_size

    def set_brush_size(self, size: float) -> int:
        self._brush_size = int(clamp(round(float(size)), *BRUSH_SIZE_RANGE))
        return self._brush_size

    def set_container_size(self, width: float, height: float) -> None:
        self._container_size = (float(width), float(height))

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def is_drawing(self) -> bool:
        return self._path is not None

    @property
    def current_path(self) -> tuple[Point, ...]:
        return tuple(self._path or ())

    def pointer_down(self, pos: tuple[float, float]) -> bool:
        if not self._active or self._path is not None:
            return False
        self._path = [self._to_percent(pos)]
        self._notify()
        return True

    def pointer_move(self, pos: tuple[float, float]) -> bool:
        if self._path is None:
            return False
        point = self._to_percent(pos)
        last = self._path[-1]
        if math.hypot(point[0] - last[0], point[1] - last[1]) < self._epsilon:
            return False
        self._path.append(point)
        self._notify()
        return True

    def pointer_up(self, pos: tuple[float, float] | None = None) -> Stroke | None:
        """Finish the path and commit it when it has at least two points."""

        if self._path is None:
            return None
        if pos is not None:
            self.pointer_move(pos)
        points = tuple(self._path)
        self._path = None
        self._notify()
        if len(points) < 2:
            _LOGGER.debug("Discarded stroke with %d point(s)", len(points))
            return None
        stroke = Stroke(
            id=new_overlay_id(),
            points=points,
            color=self._brush_color,
            brush_size=self._brush_size,
        )
        self._on_commit(stroke)
        return stroke

    def cancel(self) -> None:
        if self._path is None:
            return
        self._path = None
        self._notify()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _to_percent(self, pos: tuple[float, float]) -> Point:
        width, height = self._container_size
        return percent_point(pos[0], pos[1], width, height)

    def _notify(self) -> None:
        if self._on_path_changed is not None:
            self._on_path_changed(self.current_path)


__all__ = ["StrokeCaptureController"]

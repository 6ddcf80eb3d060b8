"""Pure geometry helpers for percent-space crop and canvas math.

Every rectangle handled here lives in a ``[0, 100] x [0, 100]`` space that is
independent of the on-screen zoom.  The helpers never raise for out-of-range
input; they clamp instead so interactive gestures can recover locally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config import MIN_CROP_SIZE

FULL_EXTENT = 100.0
_EPSILON = 1e-9


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Return *value* limited to the inclusive ``[minimum, maximum]`` range."""

    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def clamp_percent(value: float) -> float:
    """Clamp *value* into the ``[0, 100]`` percent range."""

    return clamp(float(value), 0.0, FULL_EXTENT)


@dataclass(frozen=True)
class CropRect:
    """Axis aligned rectangle in percent of the source image."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width * 0.5, self.y + self.height * 0.5)

    @property
    def aspect(self) -> float:
        """Width/height in percent units."""

        return self.width / self.height if self.height > 0 else 0.0

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def to_pixels(self, image_width: int, image_height: int) -> tuple[float, float, float, float]:
        """Return ``(left, top, width, height)`` in source pixels."""

        scale_x = image_width / FULL_EXTENT
        scale_y = image_height / FULL_EXTENT
        return (
            self.x * scale_x,
            self.y * scale_y,
            self.width * scale_x,
            self.height * scale_y,
        )

    def is_close(self, other: "CropRect | None", tolerance: float = 1e-6) -> bool:
        if other is None:
            return False
        return all(
            abs(a - b) <= tolerance for a, b in zip(self.as_tuple(), other.as_tuple(), strict=True)
        )

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> "CropRect":
        return cls(left, top, right - left, bottom - top)


def full_rect() -> CropRect:
    """Return the rectangle that covers the whole source."""

    return CropRect(0.0, 0.0, FULL_EXTENT, FULL_EXTENT)


def _place(start: float, size: float) -> float:
    """Shift *start* so ``[start, start + size]`` sits inside ``[0, 100]``."""

    return clamp(start, 0.0, max(0.0, FULL_EXTENT - size))


def clamp_rect(
    rect: CropRect,
    *,
    min_width: float = MIN_CROP_SIZE,
    min_height: float = MIN_CROP_SIZE,
) -> CropRect:
    """Return *rect* resized and shifted so it satisfies the crop invariants."""

    width = clamp(rect.width, min(min_width, FULL_EXTENT), FULL_EXTENT)
    height = clamp(rect.height, min(min_height, FULL_EXTENT), FULL_EXTENT)
    return CropRect(_place(rect.x, width), _place(rect.y, height), width, height)


def translate_rect(rect: CropRect, dx: float, dy: float) -> CropRect:
    """Move *rect* by ``(dx, dy)`` without resizing, clamped to the bounds."""

    return CropRect(
        _place(rect.x + dx, rect.width),
        _place(rect.y + dy, rect.height),
        rect.width,
        rect.height,
    )


def resize_edges(
    rect: CropRect,
    dx: float,
    dy: float,
    *,
    left: bool = False,
    right: bool = False,
    top: bool = False,
    bottom: bool = False,
    min_width: float = MIN_CROP_SIZE,
    min_height: float = MIN_CROP_SIZE,
) -> CropRect:
    """Move the flagged edges of *rect* by the pointer delta.

    Each moving edge is clamped to the container and kept at least
    ``min_width``/``min_height`` away from the opposite edge.
    """

    x0, y0, x1, y1 = rect.x, rect.y, rect.right, rect.bottom
    if left:
        x0 = clamp(x0 + dx, 0.0, x1 - min_width)
    if right:
        x1 = clamp(x1 + dx, x0 + min_width, FULL_EXTENT)
    if top:
        y0 = clamp(y0 + dy, 0.0, y1 - min_height)
    if bottom:
        y1 = clamp(y1 + dy, y0 + min_height, FULL_EXTENT)
    return CropRect.from_edges(max(0.0, x0), max(0.0, y0), min(FULL_EXTENT, x1), min(FULL_EXTENT, y1))


def percent_ratio(pixel_ratio: float, container_aspect: float = 1.0) -> float:
    """Convert a pixel width/height ratio into percent-space units.

    ``container_aspect`` is the width/height of the image the percentages
    refer to.  A square container leaves the ratio unchanged.
    """

    if container_aspect <= 0:
        container_aspect = 1.0
    return pixel_ratio / container_aspect


def feasible_ratio(
    ratio: float,
    *,
    min_width: float = MIN_CROP_SIZE,
    min_height: float = MIN_CROP_SIZE,
) -> float:
    """Limit a percent-space *ratio* to what fits the frame at minimum size.

    A rectangle narrower than ``min_width / 100`` or wider than
    ``100 / min_height`` cannot satisfy both the ratio and the minimum size, so
    the minimum size wins and the ratio is pulled to the nearest reachable value.
    """

    low = max(min_width, 1e-6) / FULL_EXTENT
    high = FULL_EXTENT / max(min_height, 1e-6)
    return clamp(ratio, low, high)


def reconcile_aspect(
    rect: CropRect,
    ratio: float,
    *,
    anchor_x: str = "left",
    anchor_y: str = "top",
    derive: str | None = None,
    min_width: float = MIN_CROP_SIZE,
    min_height: float = MIN_CROP_SIZE,
) -> CropRect:
    """Reshape *rect* so that ``width / height == ratio`` (percent units).

    ``derive`` selects which side follows the other: ``"height"`` derives the
    height from the width, ``"width"`` the reverse.  Without it the live ratio
    decides: wider than *ratio* shrinks the width, otherwise the height.
    ``anchor_x``/``anchor_y`` name the edge (``"left"``, ``"right"``,
    ``"top"``, ``"bottom"``) or ``"center"`` that stays put.
    """

    if ratio <= 0 or rect.width <= 0 or rect.height <= 0:
        return rect
    ratio = feasible_ratio(ratio, min_width=min_width, min_height=min_height)

    width, height = rect.width, rect.height
    if derive == "height":
        height = width / ratio
    elif derive == "width":
        width = height * ratio
    elif width / height > ratio:
        width = height * ratio
    else:
        height = width / ratio

    shrink = min(1.0, FULL_EXTENT / width, FULL_EXTENT / height)
    width *= shrink
    height *= shrink
    grow = max(1.0, min_width / width, min_height / height)
    if grow > 1.0:
        grow = min(grow, FULL_EXTENT / width, FULL_EXTENT / height)
        width *= grow
        height *= grow

    if anchor_x == "right":
        x = rect.right - width
    elif anchor_x == "center":
        x = rect.center[0] - width * 0.5
    else:
        x = rect.x
    if anchor_y == "bottom":
        y = rect.bottom - height
    elif anchor_y == "center":
        y = rect.center[1] - height * 0.5
    else:
        y = rect.y
    return CropRect(_place(x, width), _place(y, height), width, height)


def centered_rect(ratio: float | None, coverage: float = 0.8) -> CropRect:
    """Return a centred rectangle covering *coverage* of the larger side."""

    extent = clamp(coverage * FULL_EXTENT, MIN_CROP_SIZE, FULL_EXTENT)
    if ratio is None or ratio <= 0:
        width = height = extent
    elif ratio >= 1.0:
        width, height = extent, extent / ratio
    else:
        width, height = extent * ratio, extent
    return CropRect((FULL_EXTENT - width) * 0.5, (FULL_EXTENT - height) * 0.5, width, height)


def percent_delta(
    dx_px: float,
    dy_px: float,
    container_width: float,
    container_height: float,
) -> tuple[float, float]:
    """Convert a pointer delta in container pixels into percent units."""

    if container_width <= 0 or container_height <= 0:
        return (0.0, 0.0)
    return (dx_px / container_width * FULL_EXTENT, dy_px / container_height * FULL_EXTENT)


def percent_point(
    px: float,
    py: float,
    container_width: float,
    container_height: float,
) -> tuple[float, float]:
    """Convert a container-relative pointer position into clamped percent."""

    dx, dy = percent_delta(px, py, container_width, container_height)
    return (clamp_percent(dx), clamp_percent(dy))


def scale_point(point: tuple[float, float], width: float, height: float) -> tuple[float, float]:
    """Map a percent point onto a canvas of ``width`` x ``height`` pixels."""

    return (point[0] / FULL_EXTENT * width, point[1] / FULL_EXTENT * height)


def normalize_rotation(degrees: float) -> float:
    """Return *degrees* wrapped into ``[0, 360)``."""

    value = math.fmod(float(degrees), 360.0)
    if value < 0:
        value += 360.0
    if abs(value - 360.0) < _EPSILON:
        value = 0.0
    if abs(value - round(value)) < _EPSILON:
        value = float(round(value))
    return value


def quarter_turns(degrees: float) -> int | None:
    """Return the number of clockwise quarter turns, or ``None`` for free angles."""

    value = normalize_rotation(degrees)
    steps = value / 90.0
    if abs(steps - round(steps)) > _EPSILON:
        return None
    return int(round(steps)) % 4


def swaps_dimensions(degrees: float) -> bool:
    """Return ``True`` when a rotation by *degrees* swaps width and height."""

    return quarter_turns(degrees) in (1, 3)


def rotated_size(width: float, height: float, degrees: float) -> tuple[float, float]:
    """Return the canvas size for a ``width`` x ``height`` frame rotated by *degrees*."""

    if swaps_dimensions(degrees):
        return (height, width)
    return (width, height)


def fit_within(width: float, height: float, max_edge: float) -> tuple[int, int]:
    """Downscale ``width`` x ``height`` so neither edge exceeds *max_edge*."""

    width = max(1.0, float(width))
    height = max(1.0, float(height))
    scale = min(1.0, max_edge / width, max_edge / height)
    return (max(1, int(round(width * scale))), max(1, int(round(height * scale))))

"""Handle definitions and drag state for the crop tool."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from PySide6.QtCore import Qt

from ...core.geometry import CropRect


class CropHandle(str, Enum):
    """Pointer targets on the crop rectangle."""

    MOVE = "move"
    TOP = "n"
    BOTTOM = "s"
    RIGHT = "e"
    LEFT = "w"
    TOP_RIGHT = "ne"
    TOP_LEFT = "nw"
    BOTTOM_RIGHT = "se"
    BOTTOM_LEFT = "sw"

    @property
    def moves_left(self) -> bool:
        return self in (CropHandle.LEFT, CropHandle.TOP_LEFT, CropHandle.BOTTOM_LEFT)

    @property
    def moves_right(self) -> bool:
        return self in (CropHandle.RIGHT, CropHandle.TOP_RIGHT, CropHandle.BOTTOM_RIGHT)

    @property
    def moves_top(self) -> bool:
        return self in (CropHandle.TOP, CropHandle.TOP_LEFT, CropHandle.TOP_RIGHT)

    @property
    def moves_bottom(self) -> bool:
        return self in (CropHandle.BOTTOM, CropHandle.BOTTOM_LEFT, CropHandle.BOTTOM_RIGHT)

    @property
    def is_corner(self) -> bool:
        return len(self.value) == 2

    @property
    def is_edge(self) -> bool:
        return len(self.value) == 1


def aspect_anchor(handle: CropHandle) -> tuple[str, str, str | None]:
    """Return ``(anchor_x, anchor_y, derive)`` used to lock *handle* to a ratio.

    Corners keep the opposite corner fixed and shrink whichever side overshoots.
    Edges keep the opposite edge fixed, derive the perpendicular side from the
    dragged one and stay centred on the other axis.  The derived side follows
    the dragged one in both directions, so widening from an edge also grows the
    height.  Only the ratio is held, and the frame bounds cap the growth.
    """

    if handle in (CropHandle.LEFT, CropHandle.RIGHT):
        return ("right" if handle.moves_left else "left", "center", "height")
    if handle in (CropHandle.TOP, CropHandle.BOTTOM):
        return ("center", "bottom" if handle.moves_top else "top", "width")
    anchor_x = "right" if handle.moves_left else "left"
    anchor_y = "bottom" if handle.moves_top else "top"
    return (anchor_x, anchor_y, None)


def cursor_for_handle(handle: CropHandle | None) -> Qt.CursorShape:
    """Return the cursor a host should show while hovering *handle*."""

    if handle is None:
        return Qt.CursorShape.ArrowCursor
    if handle is CropHandle.MOVE:
        return Qt.CursorShape.SizeAllCursor
    if handle in (CropHandle.TOP, CropHandle.BOTTOM):
        return Qt.CursorShape.SizeVerCursor
    if handle in (CropHandle.LEFT, CropHandle.RIGHT):
        return Qt.CursorShape.SizeHorCursor
    if handle in (CropHandle.TOP_LEFT, CropHandle.BOTTOM_RIGHT):
        return Qt.CursorShape.SizeFDiagCursor
    return Qt.CursorShape.SizeBDiagCursor


@dataclass(frozen=True)
class CropDragState:
    """Geometry captured when a crop drag starts."""

    handle: CropHandle
    start_pointer: tuple[float, float]
    start_rect: CropRect

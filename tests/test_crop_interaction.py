"""Tests for the crop pointer state machine."""

import random

import pytest

from iEdit.core.geometry import CropRect
from iEdit.interaction.crop import (
    CropHandle,
    CropInteractionController,
    CropSessionModel,
    cursor_for_handle,
)

ALL_HANDLES = list(CropHandle)
TOLERANCE = 1e-6


def _assert_valid(rect: CropRect, min_size: float = 10.0) -> None:
    assert rect.x >= -TOLERANCE
    assert rect.y >= -TOLERANCE
    assert rect.right <= 100.0 + TOLERANCE
    assert rect.bottom <= 100.0 + TOLERANCE
    assert rect.width >= min_size - TOLERANCE
    assert rect.height >= min_size - TOLERANCE


def _make_controller(**model_kwargs):
    commits = []
    changes = []
    model = CropSessionModel(CropRect(10.0, 10.0, 80.0, 80.0), **model_kwargs)
    controller = CropInteractionController(
        model,
        on_crop_changed=changes.append,
        on_commit=commits.append,
    )
    controller.set_container_size(200.0, 100.0)
    return controller, commits, changes


def test_move_translates_and_clamps():
    controller, commits, _ = _make_controller()
    assert controller.pointer_down((0.0, 0.0), CropHandle.MOVE)
    rect = controller.pointer_move((40.0, -30.0))

    assert rect.as_tuple() == pytest.approx((20.0, 0.0, 80.0, 80.0))
    committed = controller.pointer_up()
    assert committed == rect
    assert commits == [rect]
    assert not controller.is_dragging()


def test_drag_uses_total_delta_from_start():
    stepped, _, _ = _make_controller()
    stepped.pointer_down((0.0, 0.0), "se")
    stepped.pointer_move((-20.0, -5.0))
    stepped.pointer_move((-40.0, -10.0))

    direct, _, _ = _make_controller()
    direct.pointer_down((0.0, 0.0), "se")
    direct.pointer_move((-40.0, -10.0))

    assert stepped.current_rect().as_tuple() == pytest.approx(direct.current_rect().as_tuple())
    assert stepped.current_rect().as_tuple() == pytest.approx((10.0, 10.0, 60.0, 70.0))


def test_release_without_change_does_not_commit():
    controller, commits, _ = _make_controller()
    controller.pointer_down((50.0, 50.0), CropHandle.RIGHT)
    controller.pointer_move((60.0, 50.0))
    controller.pointer_move((50.0, 50.0))
    assert controller.pointer_up() is None
    assert commits == []


def test_release_outside_cancels():
    controller, commits, changes = _make_controller()
    controller.pointer_down((0.0, 0.0), CropHandle.TOP_LEFT)
    controller.pointer_move((30.0, 30.0))
    assert controller.current_rect() != CropRect(10.0, 10.0, 80.0, 80.0)

    assert controller.pointer_up((30.0, 30.0), inside=False) is None
    assert controller.current_rect().as_tuple() == pytest.approx((10.0, 10.0, 80.0, 80.0))
    assert commits == []
    assert changes[-1].as_tuple() == pytest.approx((10.0, 10.0, 80.0, 80.0))


def test_only_one_drag_at_a_time():
    controller, _, _ = _make_controller()
    assert controller.pointer_down((0.0, 0.0), CropHandle.MOVE)
    assert not controller.pointer_down((0.0, 0.0), CropHandle.LEFT)
    assert controller.drag_state.handle is CropHandle.MOVE


def test_random_drags_keep_rect_in_bounds():
    rng = random.Random(1234)
    controller, _, _ = _make_controller()
    for _ in range(200):
        handle = rng.choice(ALL_HANDLES)
        start = (rng.uniform(-50, 250), rng.uniform(-50, 150))
        controller.pointer_down(start, handle)
        for _ in range(5):
            controller.pointer_move((rng.uniform(-400, 400), rng.uniform(-400, 400)))
            _assert_valid(controller.current_rect())
        controller.pointer_up()
        _assert_valid(controller.current_rect())


@pytest.mark.parametrize("handle", [h for h in CropHandle if h is not CropHandle.MOVE])
@pytest.mark.parametrize(
    ("ratio", "container_aspect"),
    [(1.0, 1.0), (16 / 9, 1.0), (1.0, 1.25), (4 / 5, 1.25)],
)
def test_aspect_lock_holds_for_every_handle(handle, ratio, container_aspect):
    rng = random.Random(f"{handle.value}-{ratio}-{container_aspect}")
    controller, _, _ = _make_controller(aspect_ratio=ratio, container_aspect=container_aspect)
    controller.model.set_aspect_ratio(ratio)
    for _ in range(25):
        controller.pointer_down((100.0, 50.0), handle)
        controller.pointer_move((rng.uniform(-300, 300), rng.uniform(-200, 200)))
        controller.pointer_up()
        rect = controller.current_rect()
        _assert_valid(rect)
        pixel_ratio = (rect.width * container_aspect) / rect.height
        assert pixel_ratio == pytest.approx(ratio, rel=1e-6)


def test_set_aspect_ratio_reshapes_about_centre():
    model = CropSessionModel(CropRect(10.0, 10.0, 80.0, 80.0))
    assert model.set_aspect_ratio(2.0)
    assert model.get_rect().as_tuple() == pytest.approx((10.0, 30.0, 80.0, 40.0))
    assert not model.set_aspect_ratio(2.0)


def test_unreachable_lock_keeps_minimum_size():
    controller, _, _ = _make_controller(container_aspect=0.1)
    controller.set_aspect_ratio(16 / 9)
    rect = controller.current_rect()
    _assert_valid(rect)
    assert rect.width / rect.height == pytest.approx(10.0)

    controller.pointer_down((0.0, 0.0), "se")
    controller.pointer_move((-60.0, -40.0))
    rect = controller.current_rect()
    _assert_valid(rect)
    assert rect.width / rect.height == pytest.approx(10.0)


def test_snapshot_round_trip():
    model = CropSessionModel()
    snapshot = model.create_snapshot()
    model.set_rect(CropRect(5.0, 5.0, 50.0, 50.0))
    assert model.has_changed(snapshot)
    model.restore_snapshot(snapshot)
    assert not model.has_changed(snapshot)


def test_cursor_for_handle():
    from PySide6.QtCore import Qt

    assert cursor_for_handle(CropHandle.MOVE) == Qt.CursorShape.SizeAllCursor
    assert cursor_for_handle(CropHandle.TOP) == Qt.CursorShape.SizeVerCursor
    assert cursor_for_handle(CropHandle.BOTTOM_RIGHT) == Qt.CursorShape.SizeFDiagCursor
    assert cursor_for_handle(None) == Qt.CursorShape.ArrowCursor

"""Tests for the percent-space geometry helpers."""

import pytest

from iEdit.core.geometry import (
    CropRect,
    clamp_rect,
    feasible_ratio,
    fit_within,
    normalize_rotation,
    percent_delta,
    percent_ratio,
    quarter_turns,
    reconcile_aspect,
    resize_edges,
    rotated_size,
    translate_rect,
)


def test_clamp_rect_shifts_into_bounds():
    rect = clamp_rect(CropRect(95.0, 95.0, 20.0, 20.0))
    assert rect.as_tuple() == pytest.approx((80.0, 80.0, 20.0, 20.0))


def test_clamp_rect_enforces_minimum_size():
    rect = clamp_rect(CropRect(50.0, 50.0, 2.0, 3.0))
    assert rect.width == pytest.approx(10.0)
    assert rect.height == pytest.approx(10.0)


def test_translate_rect_keeps_size():
    rect = translate_rect(CropRect(10.0, 10.0, 80.0, 80.0), 50.0, -50.0)
    assert rect.as_tuple() == pytest.approx((20.0, 0.0, 80.0, 80.0))


def test_resize_edges_clamps_to_container():
    rect = resize_edges(CropRect(10.0, 10.0, 80.0, 80.0), 50.0, 0.0, right=True)
    assert rect.as_tuple() == pytest.approx((10.0, 10.0, 90.0, 80.0))


def test_resize_edges_respects_minimum_width():
    rect = resize_edges(CropRect(10.0, 10.0, 80.0, 80.0), 85.0, 0.0, left=True)
    assert rect.x == pytest.approx(80.0)
    assert rect.width == pytest.approx(10.0)


def test_reconcile_aspect_shrinks_overshooting_side():
    rect = reconcile_aspect(CropRect(0.0, 0.0, 80.0, 40.0), 1.0)
    assert rect.as_tuple() == pytest.approx((0.0, 0.0, 40.0, 40.0))


def test_reconcile_aspect_anchors_opposite_corner():
    rect = reconcile_aspect(
        CropRect(20.0, 20.0, 60.0, 30.0),
        1.0,
        anchor_x="right",
        anchor_y="bottom",
    )
    assert rect.right == pytest.approx(80.0)
    assert rect.bottom == pytest.approx(50.0)
    assert rect.width == pytest.approx(rect.height)


def test_reconcile_aspect_keeps_minimum_size_for_extreme_ratio():
    rect = reconcile_aspect(CropRect(10.0, 10.0, 80.0, 80.0), 17.8)
    assert rect.width == pytest.approx(100.0)
    assert rect.height == pytest.approx(10.0)
    assert feasible_ratio(17.8) == pytest.approx(10.0)
    assert feasible_ratio(0.01) == pytest.approx(0.1)
    assert feasible_ratio(1.5) == pytest.approx(1.5)


def test_percent_ratio_accounts_for_container_aspect():
    assert percent_ratio(16 / 9, 16 / 9) == pytest.approx(1.0)
    assert percent_ratio(1.0, 1.25) == pytest.approx(0.8)


def test_percent_delta_uses_container_size():
    assert percent_delta(50.0, 25.0, 200.0, 100.0) == pytest.approx((25.0, 25.0))
    assert percent_delta(50.0, 25.0, 0.0, 100.0) == (0.0, 0.0)


@pytest.mark.parametrize(
    ("degrees", "expected"),
    [(-90, 270.0), (360, 0.0), (450, 90.0), (0, 0.0)],
)
def test_normalize_rotation(degrees, expected):
    assert normalize_rotation(degrees) == pytest.approx(expected)


def test_quarter_turns_and_rotated_size():
    assert quarter_turns(270) == 3
    assert quarter_turns(45) is None
    assert rotated_size(800, 640, 90) == (640, 800)
    assert rotated_size(800, 640, 180) == (800, 640)


def test_fit_within_keeps_aspect():
    assert fit_within(8000, 4000, 4096) == (4096, 2048)
    assert fit_within(640, 800, 4096) == (640, 800)

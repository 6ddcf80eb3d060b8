"""Tests for the immutable edit document."""

import pytest

from iEdit.core.document import (
    EditDocument,
    default_document,
    make_sticker_overlay,
    make_text_overlay,
    normalize_color,
)
from iEdit.core.geometry import CropRect
from iEdit.errors import OverlayNotFoundError, UnknownPresetError


def test_default_document_uses_initial_crop():
    document = default_document(CropRect(10.0, 10.0, 80.0, 80.0))
    assert document.crop == CropRect(10.0, 10.0, 80.0, 80.0)
    assert document.rotation == 0.0
    assert document.filter_id == "original"
    assert document.adjustments.is_identity()


def test_rotation_is_normalised():
    assert EditDocument().with_rotation(450).rotation == 90.0
    assert EditDocument().rotated_by(-90).rotation == 270.0


def test_crop_is_clamped():
    document = EditDocument().with_crop(CropRect(95.0, -5.0, 5.0, 200.0))
    assert document.crop is not None
    assert document.crop.as_tuple() == pytest.approx((90.0, 0.0, 10.0, 100.0))


def test_text_overlay_defaults():
    overlay = make_text_overlay()
    assert overlay.text == "New Text"
    assert overlay.font_size == 24
    assert overlay.font_family == "sans"
    assert overlay.color == "#FFFFFF"
    assert (overlay.x, overlay.y) == (50.0, 50.0)


def test_sticker_overlay_from_preset():
    badge = make_sticker_overlay("pr")
    assert badge.kind == "badge"
    assert badge.label == "PR!"
    emoji = make_sticker_overlay("fire")
    assert emoji.kind == "emoji"
    assert emoji.glyph == "\U0001F525"
    with pytest.raises(UnknownPresetError):
        make_sticker_overlay("unicorn")


def test_overlay_fields_are_validated():
    text = make_text_overlay()
    sticker = make_sticker_overlay("star")
    document = EditDocument().with_text(text).with_sticker(sticker)

    document = document.with_overlay_fields(text.id, font_size=100, x=-5, color="#abc")
    updated = document.find_overlay(text.id)
    assert updated.font_size == 72
    assert updated.x == 0.0
    assert updated.color == "#AABBCC"

    document = document.with_overlay_fields(sticker.id, scale=5, rotation=-45)
    updated = document.find_overlay(sticker.id)
    assert updated.scale == 2.0
    assert updated.rotation == 315.0

    with pytest.raises(ValueError):
        document.with_overlay_fields(sticker.id, text="nope")


def test_missing_overlay_raises():
    with pytest.raises(OverlayNotFoundError):
        EditDocument().without_overlay("missing")
    with pytest.raises(KeyError):
        EditDocument().with_overlay_fields("missing", x=1)


def test_untouched_fields_are_shared():
    document = EditDocument().with_text(make_text_overlay())
    rotated = document.with_rotation(90)
    assert rotated.texts is document.texts
    assert document.rotation == 0.0


def test_normalize_color():
    assert normalize_color("#fff") == "#FFFFFF"
    assert normalize_color("c9a227") == "#C9A227"
    with pytest.raises(ValueError):
        normalize_color("red")

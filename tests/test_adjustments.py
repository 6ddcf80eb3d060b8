"""Tests for the adjustment vector, presets and the preview descriptor."""

import pytest

from iEdit.core.adjustments import (
    FILTER_PRESETS,
    AdjustmentVector,
    get_preset,
    preview_descriptor,
)
from iEdit.core.document import EditDocument, apply_preset, set_adjustment
from iEdit.errors import UnknownPresetError


def test_preset_table_ids():
    assert [preset.id for preset in FILTER_PRESETS] == [
        "original",
        "bright",
        "contrast",
        "warm",
        "cool",
        "bw",
        "vintage",
        "dramatic",
        "fade",
    ]


def test_bw_then_contrast_marks_custom():
    document = apply_preset(EditDocument(), "bw")
    assert document.filter_id == "bw"
    assert document.adjustments == AdjustmentVector(0, 10, -100, 0)

    document = set_adjustment(document, "contrast", 20)
    assert document.filter_id == "custom"
    assert document.adjustments.as_dict() == {
        "brightness": 0,
        "contrast": 20,
        "saturation": -100,
        "exposure": 0,
    }


def test_adjustment_values_are_clamped():
    vector = AdjustmentVector().with_channel("brightness", 250)
    assert vector.brightness == 100
    assert AdjustmentVector(exposure=-300).exposure == -100


def test_unknown_channel_raises():
    with pytest.raises(ValueError):
        AdjustmentVector().with_channel("hue", 10)


def test_unknown_preset_raises_key_error():
    with pytest.raises(UnknownPresetError):
        get_preset("sepia")
    with pytest.raises(KeyError):
        EditDocument().with_preset("sepia")


def test_preview_descriptor_formula():
    descriptor = preview_descriptor(AdjustmentVector(50, 20, -40, 100))
    assert descriptor.brightness == pytest.approx(1.5 * 2.0)
    assert descriptor.contrast == pytest.approx(1.2)
    assert descriptor.saturation == pytest.approx(0.6)


def test_preview_descriptor_floors_at_zero():
    descriptor = preview_descriptor(AdjustmentVector(-100, -100, -100, 0))
    assert descriptor.brightness == 0.0
    assert descriptor.contrast == 0.0
    assert descriptor.saturation == 0.0


def test_preview_descriptor_is_pure():
    vector = AdjustmentVector(15, 5, 0, 10)
    assert preview_descriptor(vector) == preview_descriptor(vector)
    assert preview_descriptor(AdjustmentVector()).is_identity()
    assert preview_descriptor(AdjustmentVector()).css() == "brightness(1) contrast(1) saturate(1)"

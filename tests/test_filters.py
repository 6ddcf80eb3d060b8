"""Tests for the shared pixel adjustment executor."""

import numpy as np
import pytest
from PIL import Image

from iEdit.core.adjustments import AdjustmentVector, preview_descriptor
from iEdit.core.filters import apply_adjustments
from iEdit.core.filters.numpy_executor import apply_to_buffer


def test_identity_returns_unchanged_copy():
    image = Image.new("RGB", (4, 4), (10, 120, 250))
    result = apply_adjustments(image, AdjustmentVector())
    assert result is not image
    assert list(result.getdata()) == list(image.getdata())


def test_input_is_not_modified():
    image = Image.new("RGB", (4, 4), (100, 100, 100))
    apply_adjustments(image, AdjustmentVector(brightness=100))
    assert image.getpixel((0, 0)) == (100, 100, 100)


def test_brightness_scales_channels():
    image = Image.new("RGB", (2, 2), (100, 50, 10))
    result = apply_adjustments(image, AdjustmentVector(brightness=100))
    assert result.getpixel((0, 0)) == (200, 100, 20)


def test_full_desaturation_produces_grey():
    image = Image.new("RGB", (2, 2), (200, 50, 100))
    r, g, b = apply_adjustments(image, AdjustmentVector(saturation=-100)).getpixel((1, 1))
    assert r == g == b


def test_zero_contrast_flattens_to_mid_grey():
    image = Image.new("RGB", (2, 2), (0, 255, 30))
    result = apply_adjustments(image, AdjustmentVector(contrast=-100))
    assert set(result.getpixel((0, 0))) == {128}


def test_alpha_passes_through():
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[..., :3] = 60
    pixels[..., 3] = 77
    result = apply_to_buffer(pixels, preview_descriptor(AdjustmentVector(brightness=50)))
    assert (result[..., 3] == 77).all()
    assert (result[..., 0] == 90).all()
    assert (pixels[..., 0] == 60).all()


def test_rejects_non_uint8_buffers():
    with pytest.raises(TypeError):
        apply_to_buffer(np.zeros((2, 2, 3), dtype=np.float32), preview_descriptor(AdjustmentVector()))
    with pytest.raises(ValueError):
        apply_to_buffer(np.zeros((2, 2), dtype=np.uint8), preview_descriptor(AdjustmentVector()))

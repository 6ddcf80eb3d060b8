"""Tests for flattening and encoding an edit document."""

import io

import pytest
from PIL import Image

from iEdit.core.adjustments import AdjustmentVector
from iEdit.core.compositor import encode_jpeg, export_document, output_size, render_document
from iEdit.core.document import (
    EditDocument,
    Stroke,
    default_document,
    make_sticker_overlay,
    make_text_overlay,
)
from iEdit.core.geometry import CropRect
from iEdit.core.source import SourceImage
from iEdit.errors import EncodeError, ExportError, NoCropError, NoImageError

FULL = CropRect(0.0, 0.0, 100.0, 100.0)


def _black_source(width=400, height=200):
    return SourceImage.from_image(Image.new("RGB", (width, height), (0, 0, 0)))


def test_rotated_output_swaps_crop_dimensions(landscape_source):
    document = default_document(CropRect(10.0, 10.0, 80.0, 80.0)).with_rotation(90)
    assert output_size(landscape_source, document) == (640, 800)
    assert render_document(landscape_source, document).size == (640, 800)


def test_output_is_downscaled_to_max_edge(landscape_source):
    document = default_document(CropRect(10.0, 10.0, 80.0, 80.0)).with_rotation(270)
    assert output_size(landscape_source, document, max_edge=400) == (320, 400)


def test_missing_crop_raises(landscape_source):
    with pytest.raises(NoCropError):
        export_document(landscape_source, EditDocument())


def test_missing_source_raises():
    with pytest.raises(NoImageError):
        export_document(None, default_document(FULL))
    assert issubclass(NoImageError, ExportError)


def test_export_produces_decodable_jpeg(landscape_source):
    document = default_document(CropRect(10.0, 10.0, 80.0, 80.0)).with_rotation(90)
    data = export_document(landscape_source, document)
    with Image.open(io.BytesIO(data)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.size == (640, 800)


def test_quarter_turn_is_clockwise(split_source):
    image = render_document(split_source, default_document(FULL).with_rotation(90))
    assert image.size == (100, 200)
    top = image.getpixel((50, 20))
    bottom = image.getpixel((50, 180))
    assert top[0] > 200 and top[2] < 50
    assert bottom[2] > 200 and bottom[0] < 50


def test_adjustments_are_applied(landscape_source):
    document = EditDocument(
        crop=FULL,
        adjustments=AdjustmentVector(brightness=50),
    )
    image = render_document(landscape_source, document, max_edge=100)
    assert image.getpixel((10, 10)) == (192, 192, 192)


def test_strokes_are_drawn():
    stroke = Stroke("s1", ((0.0, 50.0), (100.0, 50.0)), "#FFFFFF", 4)
    document = default_document(FULL).with_stroke(stroke)
    image = render_document(_black_source(), document)
    assert image.getpixel((200, 100)) == (255, 255, 255)
    assert image.getpixel((200, 10)) == (0, 0, 0)


def test_text_overlay_is_drawn():
    document = default_document(FULL).with_text(make_text_overlay(text="PR", font_size=48))
    image = render_document(_black_source(), document)
    assert image.getbbox() is not None


def test_badge_sticker_uses_badge_colour():
    document = default_document(FULL).with_sticker(make_sticker_overlay("beast", scale=2.0))
    image = render_document(_black_source(), document)
    colours = {colour for _, colour in image.getcolors(maxcolors=1 << 20)}
    assert (0xC9, 0xA2, 0x27) in colours


def test_overlays_can_be_skipped():
    document = default_document(FULL).with_text(make_text_overlay(text="PR", font_size=48))
    image = render_document(_black_source(), document, include_overlays=False)
    assert image.getbbox() is None


def test_encoder_failure_raises(monkeypatch):
    def _broken_save(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(Image.Image, "save", _broken_save)
    with pytest.raises(EncodeError):
        encode_jpeg(Image.new("RGB", (4, 4)))

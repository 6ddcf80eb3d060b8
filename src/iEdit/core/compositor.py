"""Flatten an edit document onto its source image and encode the result.

The render order matches what the editor shows: crop, resample, colour
adjustments, rotation, then strokes, text and stickers in commit order.
Overlay coordinates are percentages of the rendered canvas, so the same
document renders identically at preview and export size.
"""

from __future__ import annotations

import io
import logging
import math

from PIL import Image, ImageDraw, ImageFilter

from ..config import (
    BADGE_BACKGROUND,
    BADGE_FOREGROUND,
    JPEG_QUALITY,
    MAX_OUTPUT_EDGE,
    REFERENCE_PREVIEW_WIDTH,
    STICKER_BASE_SIZE,
)
from ..errors import EncodeError, NoCropError, NoImageError
from .document import EditDocument, StickerOverlay, Stroke, TextOverlay
from .filters import apply_adjustments
from .fonts import EMOJI_BITMAP_SIZE, load_emoji_font, load_font
from .geometry import FULL_EXTENT, fit_within, quarter_turns, rotated_size, scale_point
from .source import SourceImage

_LOGGER = logging.getLogger(__name__)

_SHADOW_OFFSET = (2, 2)
_SHADOW_ALPHA = 0.5
_SHADOW_BLUR_FACTOR = 0.1
_BADGE_RADIUS = 4

# Clockwise quarter turns mapped onto Pillow's counter-clockwise transposes.
_QUARTER_TRANSPOSE = {
    1: Image.Transpose.ROTATE_270,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,
}


def _require_source(source: SourceImage | None) -> SourceImage:
    if source is None or source.image is None or source.width <= 0 or source.height <= 0:
        raise NoImageError("No source image to export")
    return source


def output_size(
    source: SourceImage,
    document: EditDocument,
    *,
    max_edge: int = MAX_OUTPUT_EDGE,
) -> tuple[int, int]:
    """Return the ``(width, height)`` of the rendered canvas."""

    source = _require_source(source)
    if document.crop is None:
        raise NoCropError("The document has no crop region")
    _, _, crop_w, crop_h = document.crop.to_pixels(source.width, source.height)
    width, height = rotated_size(crop_w, crop_h, document.rotation)
    return fit_within(width, height, max_edge)


# ----------------------------------------------------------------------
# Base raster
# ----------------------------------------------------------------------
def _rotate(image: Image.Image, degrees: float) -> Image.Image:
    turns = quarter_turns(degrees)
    if turns == 0:
        return image
    if turns is not None:
        return image.transpose(_QUARTER_TRANSPOSE[turns])
    # Free angles rotate about the centre inside the same canvas.
    return image.rotate(
        -degrees,
        resample=Image.Resampling.BICUBIC,
        expand=False,
        fillcolor=(0, 0, 0),
    )


def _render_base(source: SourceImage, document: EditDocument, size: tuple[int, int]) -> Image.Image:
    assert document.crop is not None
    left, top, crop_w, crop_h = document.crop.to_pixels(source.width, source.height)
    width, height = size
    frame = (height, width) if quarter_turns(document.rotation) in (1, 3) else (width, height)
    base = source.image.resize(
        frame,
        Image.Resampling.LANCZOS,
        box=(left, top, left + crop_w, top + crop_h),
    )
    base = apply_adjustments(base, document.adjustments)
    return _rotate(base, document.rotation)


# ----------------------------------------------------------------------
# Overlays
# ----------------------------------------------------------------------
def _paste_centered(canvas: Image.Image, layer: Image.Image, center: tuple[float, float]) -> tuple[int, int]:
    position = (
        int(round(center[0] - layer.width / 2.0)),
        int(round(center[1] - layer.height / 2.0)),
    )
    canvas.paste(layer, position, layer)
    return position


def _prepare_layer(layer: Image.Image, rotation: float) -> Image.Image:
    if rotation:
        return layer.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
    return layer


def _draw_stroke(draw: ImageDraw.ImageDraw, stroke: Stroke, width: int, height: int) -> None:
    if len(stroke.points) < 2:
        return
    line_width = max(1, int(round(stroke.brush_size * width / FULL_EXTENT)))
    points = [scale_point(point, width, height) for point in stroke.points]
    draw.line(points, fill=stroke.color, width=line_width, joint="curve")
    if line_width > 2:
        radius = line_width / 2.0
        for x, y in (points[0], points[-1]):
            draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=stroke.color)


def _glyph_layer(text: str, font, fill: str, *, embedded_color: bool = False) -> Image.Image:
    left, top, right, bottom = font.getbbox(text)
    layer = Image.new("RGBA", (max(1, int(math.ceil(right - left))), max(1, int(math.ceil(bottom - top)))), (0, 0, 0, 0))
    ImageDraw.Draw(layer).text((-left, -top), text, font=font, fill=fill, embedded_color=embedded_color)
    return layer


def _drop_shadow(layer: Image.Image, blur: float) -> Image.Image:
    alpha = layer.getchannel("A").point(lambda value: int(value * _SHADOW_ALPHA))
    margin = int(math.ceil(blur * 2)) + 1
    shadow = Image.new("RGBA", (layer.width + margin * 2, layer.height + margin * 2), (0, 0, 0, 0))
    mask = Image.new("L", shadow.size, 0)
    mask.paste(alpha, (margin, margin))
    shadow.putalpha(mask)
    if blur > 0:
        shadow = shadow.filter(ImageFilter.GaussianBlur(blur / 2.0))
    return shadow


def _draw_text(canvas: Image.Image, overlay: TextOverlay, scale: float) -> None:
    if not overlay.text:
        return
    font_px = max(1, int(round(overlay.font_size * scale)))
    font = load_font(overlay.font_family, font_px)
    layer = _prepare_layer(_glyph_layer(overlay.text, font, overlay.color), overlay.rotation)
    center = scale_point((overlay.x, overlay.y), canvas.width, canvas.height)
    shadow = _drop_shadow(layer, font_px * _SHADOW_BLUR_FACTOR)
    _paste_centered(canvas, shadow, (center[0] + _SHADOW_OFFSET[0], center[1] + _SHADOW_OFFSET[1]))
    _paste_centered(canvas, layer, center)


def _badge_layer(label: str, size: float) -> Image.Image:
    font = load_font("sans", max(1, int(round(size * 0.4))))
    text = _glyph_layer(label, font, BADGE_FOREGROUND)
    padding = size * 0.2
    width = max(1, int(round(text.width + padding * 2)))
    height = max(1, int(round(size * 0.6)))
    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    ImageDraw.Draw(layer).rounded_rectangle(
        (0, 0, width - 1, height - 1),
        radius=min(_BADGE_RADIUS, height // 2),
        fill=BADGE_BACKGROUND,
    )
    layer.alpha_composite(text, ((width - text.width) // 2, max(0, (height - text.height) // 2)))
    return layer


def _emoji_layer(glyph: str, size: float) -> Image.Image:
    target = max(1, int(round(size)))
    font = load_emoji_font()
    if font is None:
        return _glyph_layer(glyph, load_font("sans", target), "#FFFFFF")
    layer = _glyph_layer(glyph, font, "#FFFFFF", embedded_color=True)
    factor = target / float(EMOJI_BITMAP_SIZE)
    resized = (max(1, int(round(layer.width * factor))), max(1, int(round(layer.height * factor))))
    return layer.resize(resized, Image.Resampling.LANCZOS)


def _draw_sticker(canvas: Image.Image, overlay: StickerOverlay, scale: float) -> None:
    size = STICKER_BASE_SIZE * overlay.scale * scale
    if overlay.kind == "badge" and overlay.label:
        layer = _badge_layer(overlay.label, size)
    elif overlay.glyph:
        layer = _emoji_layer(overlay.glyph, size)
    else:
        return
    layer = _prepare_layer(layer, overlay.rotation)
    _paste_centered(canvas, layer, scale_point((overlay.x, overlay.y), canvas.width, canvas.height))


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def render_document(
    source: SourceImage | None,
    document: EditDocument,
    *,
    max_edge: int = MAX_OUTPUT_EDGE,
    reference_width: float = REFERENCE_PREVIEW_WIDTH,
    include_overlays: bool = True,
) -> Image.Image:
    """Return the flattened RGB raster for *document*.

    Raises
    ------
    NoImageError
        When *source* is missing.
    NoCropError
        When the document has no crop region.
    """

    source = _require_source(source)
    size = output_size(source, document, max_edge=max_edge)
    canvas = _render_base(source, document, size)
    if canvas.mode != "RGB":
        canvas = canvas.convert("RGB")
    if not include_overlays:
        return canvas

    width, height = canvas.size
    if document.strokes:
        draw = ImageDraw.Draw(canvas)
        for stroke in document.strokes:
            _draw_stroke(draw, stroke, width, height)

    scale = width / float(reference_width)
    for text in document.texts:
        _draw_text(canvas, text, scale)
    for sticker in document.stickers:
        _draw_sticker(canvas, sticker, scale)
    return canvas


def encode_jpeg(image: Image.Image, *, quality: int = JPEG_QUALITY) -> bytes:
    """Encode *image* as JPEG bytes."""

    buffer = io.BytesIO()
    try:
        rgb = image if image.mode == "RGB" else image.convert("RGB")
        rgb.save(buffer, format="JPEG", quality=int(quality))
    except (OSError, ValueError) as exc:
        raise EncodeError(f"JPEG encoding failed: {exc}") from exc
    data = buffer.getvalue()
    if not data:
        raise EncodeError("JPEG encoder produced no data")
    return data


def export_document(
    source: SourceImage | None,
    document: EditDocument,
    *,
    max_edge: int = MAX_OUTPUT_EDGE,
    quality: int = JPEG_QUALITY,
    reference_width: float = REFERENCE_PREVIEW_WIDTH,
) -> bytes:
    """Render *document* and return the encoded JPEG bytes."""

    image = render_document(source, document, max_edge=max_edge, reference_width=reference_width)
    data = encode_jpeg(image, quality=quality)
    _LOGGER.info("Exported %dx%d JPEG (%d bytes)", image.width, image.height, len(data))
    return data


__all__ = ["encode_jpeg", "export_document", "output_size", "render_document"]

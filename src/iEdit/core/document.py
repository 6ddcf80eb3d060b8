"""Immutable edit document and its overlay value types.

Every mutation returns a new :class:`EditDocument`; untouched fields (and the
tuples of overlays inside them) are shared with the previous value, which keeps
History snapshots cheap and free of aliasing bugs.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from ..config import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_TEXT,
    DEFAULT_TEXT_COLOR,
    FONT_SIZE_RANGE,
    STICKER_SCALE_RANGE,
)
from ..errors import OverlayNotFoundError, UnknownPresetError
from .adjustments import (
    CUSTOM_FILTER_ID,
    ORIGINAL_FILTER_ID,
    AdjustmentVector,
    get_preset,
)
from .geometry import CropRect, clamp, clamp_percent, clamp_rect, normalize_rotation

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

Point = tuple[float, float]


def new_overlay_id() -> str:
    """Return a short random identifier for overlays and strokes."""

    return uuid.uuid4().hex[:8]


def normalize_color(value: str) -> str:
    """Return *value* as an upper-case ``#RRGGBB`` string."""

    match = _HEX_COLOR.match(str(value).strip())
    if match is None:
        raise ValueError(f"Invalid colour: {value!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


@dataclass(frozen=True)
class TextOverlay:
    id: str
    text: str = DEFAULT_TEXT
    x: float = 50.0
    y: float = 50.0
    font_size: int = DEFAULT_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    color: str = DEFAULT_TEXT_COLOR
    rotation: float = 0.0


@dataclass(frozen=True)
class StickerPreset:
    """Entry of the sticker picker: a text badge or a single emoji glyph."""

    id: str
    kind: str
    label: str | None = None
    glyph: str | None = None


STICKER_PRESETS: tuple[StickerPreset, ...] = (
    StickerPreset("pr", "badge", label="PR!"),
    StickerPreset("beast", "badge", label="BEAST MODE"),
    StickerPreset("fire", "emoji", glyph="\U0001F525"),
    StickerPreset("flex", "emoji", glyph="\U0001F4AA"),
    StickerPreset("trophy", "emoji", glyph="\U0001F3C6"),
    StickerPreset("star", "emoji", glyph="⭐"),
    StickerPreset("lightning", "emoji", glyph="⚡"),
    StickerPreset("heart", "emoji", glyph="❤️"),
)

_STICKERS_BY_ID = {preset.id: preset for preset in STICKER_PRESETS}


def get_sticker_preset(preset_id: str) -> StickerPreset:
    try:
        return _STICKERS_BY_ID[preset_id]
    except KeyError:
        raise UnknownPresetError(f"Unknown sticker preset: {preset_id!r}") from None


@dataclass(frozen=True)
class StickerOverlay:
    id: str
    kind: str
    label: str | None = None
    glyph: str | None = None
    x: float = 50.0
    y: float = 50.0
    scale: float = 1.0
    rotation: float = 0.0


@dataclass(frozen=True)
class Stroke:
    """A committed freehand poly-line; immutable once created."""

    id: str
    points: tuple[Point, ...]
    color: str
    brush_size: float


TEXT_FIELDS = frozenset({"text", "x", "y", "font_size", "font_family", "color", "rotation"})
STICKER_FIELDS = frozenset({"x", "y", "scale", "rotation"})


def _sanitize_fields(kind: str, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and clamp overlay property edits."""

    allowed = TEXT_FIELDS if kind == "text" else STICKER_FIELDS
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unsupported {kind} overlay fields: {sorted(unknown)}")

    cleaned: dict[str, Any] = {}
    for key, value in fields.items():
        if key in ("x", "y"):
            cleaned[key] = clamp_percent(value)
        elif key == "rotation":
            cleaned[key] = normalize_rotation(value)
        elif key == "font_size":
            cleaned[key] = int(clamp(round(float(value)), *FONT_SIZE_RANGE))
        elif key == "scale":
            cleaned[key] = clamp(float(value), *STICKER_SCALE_RANGE)
        elif key == "color":
            cleaned[key] = normalize_color(value)
        else:
            cleaned[key] = str(value)
    return cleaned


@dataclass(frozen=True)
class EditDocument:
    """Versioned description of every edit applied to one image."""

    rotation: float = 0.0
    filter_id: str = ORIGINAL_FILTER_ID
    adjustments: AdjustmentVector = field(default_factory=AdjustmentVector)
    crop: CropRect | None = None
    texts: tuple[TextOverlay, ...] = ()
    stickers: tuple[StickerOverlay, ...] = ()
    strokes: tuple[Stroke, ...] = ()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def with_rotation(self, degrees: float) -> "EditDocument":
        return replace(self, rotation=normalize_rotation(degrees))

    def rotated_by(self, delta: float) -> "EditDocument":
        return self.with_rotation(self.rotation + delta)

    def with_crop(self, crop: CropRect | None, *, min_size: float | None = None) -> "EditDocument":
        if crop is not None:
            if min_size is None:
                crop = clamp_rect(crop)
            else:
                crop = clamp_rect(crop, min_width=min_size, min_height=min_size)
        return replace(self, crop=crop)

    # ------------------------------------------------------------------
    # Colour
    # ------------------------------------------------------------------
    def with_preset(self, preset_id: str) -> "EditDocument":
        """Return a copy using the preset's vector and ``filter_id``."""

        preset = get_preset(preset_id)
        return replace(self, filter_id=preset.id, adjustments=preset.adjustments)

    def with_adjustment(self, channel: str, value: float) -> "EditDocument":
        """Return a copy with one hand-tuned channel; marks the filter custom."""

        return replace(
            self,
            filter_id=CUSTOM_FILTER_ID,
            adjustments=self.adjustments.with_channel(channel, value),
        )

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------
    def overlay_kind(self, overlay_id: str) -> str:
        """Return ``"text"`` or ``"sticker"`` for *overlay_id*."""

        if any(item.id == overlay_id for item in self.texts):
            return "text"
        if any(item.id == overlay_id for item in self.stickers):
            return "sticker"
        raise OverlayNotFoundError(f"No overlay with id {overlay_id!r}")

    def find_overlay(self, overlay_id: str) -> TextOverlay | StickerOverlay:
        for item in self.texts:
            if item.id == overlay_id:
                return item
        for item in self.stickers:
            if item.id == overlay_id:
                return item
        raise OverlayNotFoundError(f"No overlay with id {overlay_id!r}")

    def with_text(self, overlay: TextOverlay) -> "EditDocument":
        return replace(self, texts=self.texts + (overlay,))

    def with_sticker(self, overlay: StickerOverlay) -> "EditDocument":
        return replace(self, stickers=self.stickers + (overlay,))

    def with_overlay_fields(self, overlay_id: str, **fields: Any) -> "EditDocument":
        """Merge validated *fields* into the overlay named *overlay_id*."""

        kind = self.overlay_kind(overlay_id)
        cleaned = _sanitize_fields(kind, fields)
        if kind == "text":
            texts = tuple(
                replace(item, **cleaned) if item.id == overlay_id else item for item in self.texts
            )
            return replace(self, texts=texts)
        stickers = tuple(
            replace(item, **cleaned) if item.id == overlay_id else item for item in self.stickers
        )
        return replace(self, stickers=stickers)

    def without_overlay(self, overlay_id: str) -> "EditDocument":
        kind = self.overlay_kind(overlay_id)
        if kind == "text":
            return replace(self, texts=tuple(t for t in self.texts if t.id != overlay_id))
        return replace(self, stickers=tuple(s for s in self.stickers if s.id != overlay_id))

    # ------------------------------------------------------------------
    # Strokes
    # ------------------------------------------------------------------
    def with_stroke(self, stroke: Stroke) -> "EditDocument":
        return replace(self, strokes=self.strokes + (stroke,))

    def without_strokes(self) -> "EditDocument":
        return replace(self, strokes=())


def apply_preset(document: EditDocument, preset_id: str) -> EditDocument:
    """Return *document* with the preset vector and ``filter_id`` applied."""

    return document.with_preset(preset_id)


def set_adjustment(document: EditDocument, channel: str, value: float) -> EditDocument:
    """Return *document* with one channel hand-tuned and the filter marked custom."""

    return document.with_adjustment(channel, value)


def make_text_overlay(**fields: Any) -> TextOverlay:
    """Return a new text overlay with defaults centred on the canvas."""

    return TextOverlay(id=new_overlay_id(), **_sanitize_fields("text", fields))


def make_sticker_overlay(preset_id: str, **fields: Any) -> StickerOverlay:
    """Return a new sticker overlay built from the sticker preset table."""

    preset = get_sticker_preset(preset_id)
    return StickerOverlay(
        id=new_overlay_id(),
        kind=preset.kind,
        label=preset.label,
        glyph=preset.glyph,
        **_sanitize_fields("sticker", fields),
    )


def default_document(initial_crop: CropRect | None = None) -> EditDocument:
    """Return the all-defaults document, optionally seeded with a crop."""

    document = EditDocument()
    if initial_crop is not None:
        document = document.with_crop(initial_crop)
    return document


__all__ = [
    "EditDocument",
    "STICKER_PRESETS",
    "StickerOverlay",
    "StickerPreset",
    "Stroke",
    "TextOverlay",
    "apply_preset",
    "default_document",
    "get_sticker_preset",
    "make_sticker_overlay",
    "make_text_overlay",
    "new_overlay_id",
    "normalize_color",
    "set_adjustment",
]

"""Configuration constants and the per-session editor configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

# Adjustment sliders share one signed integer range.
ADJUSTMENT_MIN = -100
ADJUSTMENT_MAX = 100

# Crop rectangles are expressed in percent of the source image.
MIN_CROP_SIZE = 10.0
INITIAL_CROP = (10.0, 10.0, 80.0, 80.0)

# Text and sticker sizes are authored against a preview of this width.
REFERENCE_PREVIEW_WIDTH = 400.0
STICKER_BASE_SIZE = 40.0

FONT_SIZE_RANGE = (12, 72)
STICKER_SCALE_RANGE = (0.5, 2.0)
BRUSH_SIZE_RANGE = (2, 20)

DEFAULT_TEXT = "New Text"
DEFAULT_FONT_SIZE = 24
DEFAULT_FONT_FAMILY = "sans"
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_BRUSH_SIZE = 5
DEFAULT_BRUSH_COLOR = "#FFFFFF"

COLOR_PALETTE = (
    "#FFFFFF",
    "#000000",
    "#C9A227",
    "#D4AF37",
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#FF8C42",
    "#6B0F1A",
)

# Badge sticker colours.
BADGE_BACKGROUND = "#C9A227"
BADGE_FOREGROUND = "#1A1A2E"

# Export limits.
MAX_OUTPUT_EDGE = 4096
JPEG_QUALITY = 92
MAX_INPUT_BYTES = 5 * 1024 * 1024
SUPPORTED_INPUT_FORMATS = frozenset({"JPEG", "PNG", "WEBP", "GIF", "BMP", "TIFF", "MPO"})
DOWNLOAD_TIMEOUT = 15.0

HISTORY_LIMIT = 100
STROKE_EPSILON = 0.1


@dataclass(frozen=True)
class CropPreset:
    """Named aspect ratio offered by the crop tool.

    ``ratio`` is a pixel width/height ratio; ``None`` means free-form.  When
    ``match_source`` is set the ratio is taken from the source image instead.
    """

    id: str
    label: str
    ratio: float | None = None
    match_source: bool = False

    def resolve(self, source_aspect: float) -> float | None:
        """Return the effective pixel ratio for a source of *source_aspect*."""

        if self.match_source:
            return source_aspect if source_aspect > 0 else None
        return self.ratio


STANDARD_CROP_PRESETS = (
    CropPreset("freeform", "Free"),
    CropPreset("square", "1:1", 1.0),
    CropPreset("4:3", "4:3", 4.0 / 3.0),
    CropPreset("16:9", "16:9", 16.0 / 9.0),
)

SOCIAL_CROP_PRESETS = (
    CropPreset("original", "Original", match_source=True),
    CropPreset("square", "1:1", 1.0),
    CropPreset("4:5", "4:5", 4.0 / 5.0),
    CropPreset("16:9", "16:9", 16.0 / 9.0),
)


@dataclass(frozen=True)
class EditorConfig:
    """Options a host passes when it opens an editing session.

    A fixed ``aspect_ratio`` locks the crop tool to that ratio and disables the
    user selectable ``crop_presets``.
    """

    aspect_ratio: float | None = None
    crop_presets: tuple[CropPreset, ...] = field(default=STANDARD_CROP_PRESETS)
    max_output_edge: int = MAX_OUTPUT_EDGE
    jpeg_quality: int = JPEG_QUALITY
    reference_preview_width: float = REFERENCE_PREVIEW_WIDTH
    min_crop_size: float = MIN_CROP_SIZE
    initial_crop: tuple[float, float, float, float] = INITIAL_CROP
    history_limit: int | None = HISTORY_LIMIT
    stroke_epsilon: float = STROKE_EPSILON

    def __post_init__(self) -> None:
        if self.aspect_ratio is not None and self.aspect_ratio <= 0:
            raise ValueError("aspect_ratio must be positive")
        if self.max_output_edge <= 0:
            raise ValueError("max_output_edge must be positive")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be within 1-100")
        if not 0 < self.min_crop_size <= 100:
            raise ValueError("min_crop_size must be within (0, 100]")

    @property
    def presets_enabled(self) -> bool:
        """Return ``True`` when the user may pick a crop preset."""

        return self.aspect_ratio is None


__all__ = [
    "CropPreset",
    "EditorConfig",
    "SOCIAL_CROP_PRESETS",
    "STANDARD_CROP_PRESETS",
]

"""Font lookup for text overlays and sticker glyphs."""

from __future__ import annotations

import logging
from functools import lru_cache

from PIL import ImageFont

_LOGGER = logging.getLogger(__name__)

# Bold faces tried in order for each overlay font family.  Pillow resolves bare
# file names against the platform font directories.
FONT_FAMILIES: dict[str, tuple[str, ...]] = {
    "sans": ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf", "LiberationSans-Bold.ttf"),
    "display": ("Impact.ttf", "impact.ttf", "Anton-Regular.ttf", "DejaVuSans-Bold.ttf"),
    "mono": ("DejaVuSansMono-Bold.ttf", "courbd.ttf", "LiberationMono-Bold.ttf"),
    "serif": ("DejaVuSerif-Bold.ttf", "timesbd.ttf", "LiberationSerif-Bold.ttf"),
}

# Colour emoji fonts only ship a single bitmap strike.
EMOJI_FONTS = ("NotoColorEmoji.ttf", "Apple Color Emoji.ttc", "seguiemj.ttf")
EMOJI_BITMAP_SIZE = 109

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@lru_cache(maxsize=64)
def load_font(family: str, size: int) -> Font:
    """Return a bold font of *family* at *size* pixels.

    Unknown families use ``sans``; when no candidate face is installed the
    Pillow default font is scaled to *size*.
    """

    size = max(1, int(size))
    candidates = FONT_FAMILIES.get(family, FONT_FAMILIES["sans"])
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    _LOGGER.debug("No TrueType face for %r; using the default font", family)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=1)
def load_emoji_font() -> ImageFont.FreeTypeFont | None:
    """Return a colour emoji font at its native strike, or ``None``."""

    for name in EMOJI_FONTS:
        try:
            return ImageFont.truetype(name, EMOJI_BITMAP_SIZE)
        except OSError:
            continue
    _LOGGER.debug("No colour emoji font installed")
    return None


__all__ = ["EMOJI_BITMAP_SIZE", "FONT_FAMILIES", "load_emoji_font", "load_font"]

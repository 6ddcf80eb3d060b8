"""Pillow-facing entry point for the adjustment pipeline."""

from __future__ import annotations

import numpy as np
from PIL import Image

from ..adjustments import AdjustmentVector, PreviewDescriptor, preview_descriptor
from .numpy_executor import apply_to_buffer

_SUPPORTED_MODES = ("RGB", "RGBA")


def apply_descriptor(image: Image.Image, descriptor: PreviewDescriptor) -> Image.Image:
    """Return a copy of *image* with *descriptor* baked into its pixels."""

    source = image if image.mode in _SUPPORTED_MODES else image.convert("RGBA" if "A" in image.getbands() else "RGB")
    if descriptor.is_identity():
        return source.copy()
    pixels = np.asarray(source, dtype=np.uint8)
    adjusted = apply_to_buffer(pixels, descriptor)
    return Image.fromarray(adjusted)


def apply_adjustments(image: Image.Image, adjustments: AdjustmentVector) -> Image.Image:
    """Return a copy of *image* with *adjustments* applied.

    This is the only colour path in the engine: previews, preset thumbnails and
    the exporter all call it so the exported pixels match what was shown.
    """

    return apply_descriptor(image, preview_descriptor(adjustments))

"""NumPy vectorised executor for the brightness/contrast/saturation pass.

The maths follows the CSS filter functions the web preview uses, applied in
the same order: ``brightness`` scales every channel, ``contrast`` scales
around mid grey and ``saturate`` mixes each channel with Rec. 709 luma.  Each
step clamps to ``[0, 1]`` exactly like a browser does between filter
functions.
"""

from __future__ import annotations

import numpy as np

from ..adjustments import PreviewDescriptor

_LUMA_R = 0.2126
_LUMA_G = 0.7152
_LUMA_B = 0.0722


def saturation_matrix(amount: float) -> np.ndarray:
    """Return the 3x3 ``saturate(amount)`` colour matrix."""

    s = float(max(0.0, amount))
    return np.array(
        [
            [_LUMA_R + (1.0 - _LUMA_R) * s, _LUMA_G - _LUMA_G * s, _LUMA_B - _LUMA_B * s],
            [_LUMA_R - _LUMA_R * s, _LUMA_G + (1.0 - _LUMA_G) * s, _LUMA_B - _LUMA_B * s],
            [_LUMA_R - _LUMA_R * s, _LUMA_G - _LUMA_G * s, _LUMA_B + (1.0 - _LUMA_B) * s],
        ],
        dtype=np.float32,
    )


def transform_rgb(rgb: np.ndarray, descriptor: PreviewDescriptor) -> np.ndarray:
    """Return a new float32 array with *descriptor* applied to ``rgb``.

    ``rgb`` holds normalised ``[0, 1]`` values with the channels on the last
    axis.  The input is never modified.
    """

    out = np.clip(rgb.astype(np.float32, copy=True) * np.float32(descriptor.brightness), 0.0, 1.0)
    contrast = np.float32(descriptor.contrast)
    out = np.clip((out - np.float32(0.5)) * contrast + np.float32(0.5), 0.0, 1.0)
    if abs(descriptor.saturation - 1.0) > 1e-9:
        out = np.clip(out @ saturation_matrix(descriptor.saturation).T, 0.0, 1.0)
    return out.astype(np.float32, copy=False)


def apply_to_buffer(pixels: np.ndarray, descriptor: PreviewDescriptor) -> np.ndarray:
    """Apply *descriptor* to an ``(H, W, 3|4)`` ``uint8`` buffer.

    Returns a new buffer; alpha, when present, passes through untouched.
    """

    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) buffer, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise TypeError(f"Expected a uint8 buffer, got {pixels.dtype}")

    result = pixels.copy()
    if result.size == 0 or descriptor.is_identity():
        return result

    rgb = pixels[..., :3].astype(np.float32) / np.float32(255.0)
    adjusted = transform_rgb(rgb, descriptor)
    result[..., :3] = np.rint(adjusted * np.float32(255.0)).astype(np.uint8)
    return result

"""Pixel executor for the colour adjustment pipeline.

The package keeps the adjustment math in one place so the live preview, the
preset thumbnails and the exporter all render with the same formula:
- numpy_executor: vectorised pixel transform over ``uint8`` buffers
- facade: Pillow-facing entry point used by the rest of the engine
"""

from __future__ import annotations

from .facade import apply_adjustments, apply_descriptor

__all__ = ["apply_adjustments", "apply_descriptor"]

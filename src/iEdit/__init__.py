"""Undoable raster editing engine: crop, rotate, adjust, annotate and export."""

from __future__ import annotations

__version__ = "0.1.0"

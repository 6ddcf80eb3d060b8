"""Background workers that keep rendering off the UI thread."""

from .export_worker import ExportSignals, ExportWorker
from .preset_thumbnail_worker import PresetThumbnailSignals, PresetThumbnailWorker

__all__ = [
    "ExportSignals",
    "ExportWorker",
    "PresetThumbnailSignals",
    "PresetThumbnailWorker",
]

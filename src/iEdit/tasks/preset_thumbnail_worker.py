"""Background worker that renders one thumbnail per filter preset."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PIL import Image
from PySide6.QtCore import QObject, QRunnable, Signal

from ..core.adjustments import FILTER_PRESETS, FilterPreset
from ..core.filters import apply_adjustments
from ..core.source import SourceImage

_LOGGER = logging.getLogger(__name__)

DEFAULT_THUMBNAIL_EDGE = 96


class PresetThumbnailSignals(QObject):
    """Signals emitted by :class:`PresetThumbnailWorker`."""

    ready = Signal(str, object, int)
    """Delivered with the preset id, the Pillow thumbnail and the generation."""

    error = Signal(int, str)
    """Emitted if any unexpected exception aborts the worker."""

    finished = Signal(int)
    """Emitted once the worker has completed, even on failure."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class PresetThumbnailWorker(QRunnable):
    """Downscale the source once and apply every preset to the small copy."""

    def __init__(
        self,
        source: SourceImage,
        *,
        generation: int = 0,
        edge: int = DEFAULT_THUMBNAIL_EDGE,
        presets: Sequence[FilterPreset] = FILTER_PRESETS,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._source = source
        self._generation = int(generation)
        self._edge = max(16, int(edge))
        self._presets = tuple(presets)
        self.signals = PresetThumbnailSignals()

    def run(self) -> None:  # type: ignore[override]
        """Render the preset strip and emit one ``ready`` per preset."""

        try:
            base = self._prepare_base(self._source.image)
            for preset in self._presets:
                thumbnail = apply_adjustments(base, preset.adjustments)
                self.signals.ready.emit(preset.id, thumbnail, self._generation)
        except Exception as exc:  # pragma: no cover - defensive logging path
            _LOGGER.exception("Failed to render preset thumbnails")
            self.signals.error.emit(self._generation, str(exc))
        finally:
            self.signals.finished.emit(self._generation)

    def _prepare_base(self, image: Image.Image) -> Image.Image:
        """Return a small copy of *image* that fits inside the thumbnail edge."""

        base = image.copy()
        base.thumbnail((self._edge, self._edge), Image.Resampling.LANCZOS)
        return base


__all__ = [
    "DEFAULT_THUMBNAIL_EDGE",
    "PresetThumbnailSignals",
    "PresetThumbnailWorker",
]

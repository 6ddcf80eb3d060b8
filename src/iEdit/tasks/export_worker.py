"""Worker that renders and encodes the final JPEG on a background thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ..config import JPEG_QUALITY, MAX_OUTPUT_EDGE, REFERENCE_PREVIEW_WIDTH
from ..core.compositor import export_document
from ..core.document import EditDocument
from ..core.source import SourceImage
from ..errors import ExportError

_LOGGER = logging.getLogger(__name__)


class ExportSignals(QObject):
    """Signals emitted by :class:`ExportWorker`."""

    ready = Signal(object, int)
    """Delivered with the encoded JPEG ``bytes`` and the job identifier."""

    error = Signal(int, str)
    """Emitted when rendering or encoding fails."""

    finished = Signal(int)
    """Emitted once the worker has completed, even on failure."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class ExportWorker(QRunnable):
    """Flatten one document snapshot into JPEG bytes off the GUI thread.

    The worker only sees immutable inputs: the source image and the document
    value captured when the export was requested.
    """

    def __init__(
        self,
        source: SourceImage | None,
        document: EditDocument,
        *,
        job_id: int = 0,
        max_edge: int = MAX_OUTPUT_EDGE,
        quality: int = JPEG_QUALITY,
        reference_width: float = REFERENCE_PREVIEW_WIDTH,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._source = source
        self._document = document
        self._job_id = int(job_id)
        self._max_edge = max_edge
        self._quality = quality
        self._reference_width = reference_width
        self.signals = ExportSignals()

    @property
    def job_id(self) -> int:
        return self._job_id

    def run(self) -> None:  # type: ignore[override]
        """Render, encode and report the result."""

        try:
            data = export_document(
                self._source,
                self._document,
                max_edge=self._max_edge,
                quality=self._quality,
                reference_width=self._reference_width,
            )
        except ExportError as exc:
            _LOGGER.exception("Export job %d failed", self._job_id)
            self.signals.error.emit(self._job_id, str(exc))
        except Exception as exc:  # pragma: no cover - safety net for unexpected Pillow failures
            _LOGGER.exception("Export job %d crashed", self._job_id)
            self.signals.error.emit(self._job_id, str(exc))
        else:
            self.signals.ready.emit(data, self._job_id)
        finally:
            self.signals.finished.emit(self._job_id)


__all__ = ["ExportSignals", "ExportWorker"]

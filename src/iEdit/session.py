"""Editing session: owns the working document, history and controllers."""

from __future__ import annotations

from enum import Enum
from typing import Any

from PIL import Image
from PySide6.QtCore import QObject, QThreadPool, Signal

from .config import EditorConfig
from .core.compositor import export_document, render_document
from .core.document import EditDocument, Stroke, default_document
from .core.geometry import CropRect
from .core.history import EditHistory
from .core.source import SourceImage
from .errors import ExportError, UnknownPresetError
from .interaction.crop import CropHandle, CropInteractionController, CropSessionModel
from .interaction.overlays import OverlayInteractionController, Selection
from .interaction.strokes import StrokeCaptureController
from .tasks.export_worker import ExportWorker
from .utils.logging import get_logger

logger = get_logger(__name__)

PREVIEW_EDGE = 1024


class EditorTool(str, Enum):
    """Tool panels the host can switch between."""

    CROP = "crop"
    ROTATE = "rotate"
    FILTER = "filter"
    ADJUST = "adjust"
    TEXT = "text"
    STICKER = "sticker"
    DRAW = "draw"


class EditorSession(QObject):
    """Coordinate one image edit from load to export.

    Gestures update the *working* document on every pointer event and emit
    ``documentChanged``.  Completed gestures and discrete actions push the
    working document onto the history.  Only one pointer gesture may be in
    flight at a time.
    """

    documentChanged = Signal(object)
    historyChanged = Signal(bool, bool)  # can_undo, can_redo
    selectionChanged = Signal(object)
    strokePathChanged = Signal(object)
    exportReady = Signal(object)
    exportFailed = Signal(str)
    cancelled = Signal()

    def __init__(
        self,
        source: SourceImage | None,
        config: EditorConfig | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._config = config or EditorConfig()
        self._crop_model = CropSessionModel(
            CropRect(*self._config.initial_crop),
            min_size=self._config.min_crop_size,
            container_aspect=source.aspect if source is not None else 1.0,
        )
        if self._config.aspect_ratio is not None:
            self._crop_model.set_aspect_ratio(self._config.aspect_ratio)

        self._root = default_document(self._crop_model.get_rect())
        self._history: EditHistory[EditDocument] = EditHistory(
            self._root, limit=self._config.history_limit
        )
        self._document = self._root
        self._tool = EditorTool.CROP
        self._crop_preset_id: str | None = None
        self._active_gesture: str | None = None
        self._adjustment_pending = False
        self._export_job = 0

        self._crop = CropInteractionController(
            self._crop_model,
            on_crop_changed=self._handle_crop_changed,
            on_commit=self._handle_crop_commit,
        )
        self._overlays = OverlayInteractionController(
            document_provider=lambda: self._document,
            on_update=self._set_working,
            on_commit=self._commit,
            on_selection_changed=self.selectionChanged.emit,
        )
        self._strokes = StrokeCaptureController(
            on_commit=self._handle_stroke_commit,
            on_path_changed=self.strokePathChanged.emit,
            epsilon=self._config.stroke_epsilon,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def source(self) -> SourceImage | None:
        return self._source

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def document(self) -> EditDocument:
        """The working document, including uncommitted gesture state."""

        return self._document

    @property
    def history(self) -> EditHistory[EditDocument]:
        return self._history

    @property
    def tool(self) -> EditorTool:
        return self._tool

    @property
    def selection(self) -> Selection | None:
        return self._overlays.selection

    @property
    def crop_controller(self) -> CropInteractionController:
        return self._crop

    @property
    def overlay_controller(self) -> OverlayInteractionController:
        return self._overlays

    @property
    def stroke_controller(self) -> StrokeCaptureController:
        return self._strokes

    @property
    def crop_preset_id(self) -> str | None:
        return self._crop_preset_id

    @property
    def active_gesture(self) -> str | None:
        return self._active_gesture

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    # ------------------------------------------------------------------
    # Tools and layout
    # ------------------------------------------------------------------
    def set_tool(self, tool: EditorTool | str) -> None:
        tool = EditorTool(tool)
        if tool is self._tool:
            return
        self._abort_gesture()
        self._flush_pending()
        self._tool = tool
        self._strokes.set_active(tool is EditorTool.DRAW)
        logger.debug("Tool switched to %s", tool.value)

    def set_crop_container_size(self, width: float, height: float) -> None:
        """Size of the uncropped source as displayed by the crop tool."""

        self._crop.set_container_size(width, height)

    def set_canvas_size(self, width: float, height: float) -> None:
        """Size of the displayed output canvas that overlays and strokes use."""

        self._overlays.set_container_size(width, height)
        self._strokes.set_container_size(width, height)

    # ------------------------------------------------------------------
    # Pointer routing
    # ------------------------------------------------------------------
    def crop_pointer_down(self, pos: tuple[float, float], handle: CropHandle | str) -> bool:
        if self._active_gesture is not None or self._tool is not EditorTool.CROP:
            return False
        if not self._crop.pointer_down(pos, handle):
            return False
        self._active_gesture = "crop"
        return True

    def overlay_pointer_down(self, pos: tuple[float, float], overlay_id: str) -> bool:
        if self._active_gesture is not None or self._tool in (EditorTool.CROP, EditorTool.DRAW):
            return False
        self._flush_pending()
        if not self._overlays.pointer_down(pos, overlay_id):
            return False
        self._active_gesture = "overlay"
        return True

    def stroke_pointer_down(self, pos: tuple[float, float]) -> bool:
        if self._active_gesture is not None or self._tool is not EditorTool.DRAW:
            return False
        if not self._strokes.pointer_down(pos):
            return False
        self._active_gesture = "stroke"
        return True

    def pointer_move(self, pos: tuple[float, float]) -> None:
        gesture = self._active_gesture
        if gesture == "crop":
            self._crop.pointer_move(pos)
        elif gesture == "overlay":
            self._overlays.pointer_move(pos)
        elif gesture == "stroke":
            self._strokes.pointer_move(pos)

    def pointer_up(self, pos: tuple[float, float] | None = None, *, inside: bool = True) -> None:
        gesture, self._active_gesture = self._active_gesture, None
        if gesture == "crop":
            self._crop.pointer_up(pos, inside=inside)
        elif gesture == "overlay":
            self._overlays.pointer_up(pos, inside=inside)
        elif gesture == "stroke":
            if inside:
                self._strokes.pointer_up(pos)
            else:
                self._strokes.pointer_up()

    def _abort_gesture(self) -> None:
        gesture, self._active_gesture = self._active_gesture, None
        if gesture == "crop":
            self._crop.cancel()
        elif gesture == "overlay":
            self._overlays.cancel()
        elif gesture == "stroke":
            self._strokes.cancel()

    # ------------------------------------------------------------------
    # Geometry and colour actions
    # ------------------------------------------------------------------
    def rotate(self, delta: float = 90.0) -> EditDocument:
        self._abort_gesture()
        self._flush_pending()
        return self._commit(self._document.rotated_by(delta))

    def select_filter(self, preset_id: str) -> EditDocument:
        self._flush_pending()
        return self._commit(self._document.with_preset(preset_id))

    def set_adjustment(self, channel: str, value: float, *, commit: bool = True) -> EditDocument:
        """Set one slider; ``commit=False`` defers the history entry to release."""

        document = self._document.with_adjustment(channel, value)
        if commit:
            return self._commit(document)
        self._adjustment_pending = True
        self._set_working(document)
        return document

    def reset_adjustment(self, channel: str) -> EditDocument:
        return self.set_adjustment(channel, 0)

    def select_crop_preset(self, preset_id: str) -> bool:
        """Lock the crop to a preset ratio; returns ``True`` when it was applied."""

        if not self._config.presets_enabled:
            logger.warning("Crop presets are disabled by a fixed aspect ratio")
            return False
        preset = next((p for p in self._config.crop_presets if p.id == preset_id), None)
        if preset is None:
            raise UnknownPresetError(f"Unknown crop preset: {preset_id!r}")
        self._abort_gesture()
        self._flush_pending()
        self._crop_preset_id = preset.id
        source_aspect = self._source.aspect if self._source is not None else 0.0
        rect = self._crop.set_aspect_ratio(preset.resolve(source_aspect))
        if rect is not None:
            self._commit(self._document.with_crop(rect, min_size=self._config.min_crop_size))
        return True

    def reset(self) -> EditDocument:
        """Return every edit to its default in one undoable step."""

        self._abort_gesture()
        self._flush_pending()
        self._overlays.select(None)
        self._crop_preset_id = None
        self._crop_model.set_aspect_ratio(self._config.aspect_ratio)
        self._crop.sync(self._root.crop)
        return self._commit(self._root)

    # ------------------------------------------------------------------
    # Overlay actions
    # ------------------------------------------------------------------
    def add_text(self, **fields: Any) -> str:
        self._flush_pending()
        return self._overlays.add_text(**fields)

    def add_sticker(self, preset_id: str, **fields: Any) -> str:
        self._flush_pending()
        return self._overlays.add_sticker(preset_id, **fields)

    def update_overlay(self, overlay_id: str, *, commit: bool = True, **fields: Any) -> EditDocument:
        return self._overlays.update_overlay(overlay_id, commit=commit, **fields)

    def delete_overlay(self, overlay_id: str) -> None:
        self._flush_pending()
        self._overlays.delete_overlay(overlay_id)

    def select(self, overlay_id: str | None) -> Selection | None:
        return self._overlays.select(overlay_id)

    def commit_pending(self) -> bool:
        """Record batched slider edits as one history entry."""

        return self._flush_pending()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def set_brush_color(self, color: str) -> str:
        return self._strokes.set_brush_color(color)

    def set_brush_size(self, size: float) -> int:
        return self._strokes.set_brush_size(size)

    def clear_drawing(self) -> bool:
        if not self._document.strokes:
            return False
        self._flush_pending()
        self._commit(self._document.without_strokes())
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def undo(self) -> EditDocument | None:
        """Step back one snapshot.

        A pending slider batch is reverted first and counts as the undone step.
        """

        self._abort_gesture()
        if self._discard_pending():
            logger.debug("Reverted pending edits to snapshot %d", self._history.index)
            self._restore(self._history.current)
            return self._history.current
        document = self._history.undo()
        if document is None:
            self._restore(self._history.current)
            return None
        logger.debug("Undo to snapshot %d", self._history.index)
        self._restore(document)
        return document

    def redo(self) -> EditDocument | None:
        self._abort_gesture()
        self._discard_pending()
        document = self._history.redo()
        if document is None:
            self._restore(self._history.current)
            return None
        logger.debug("Redo to snapshot %d", self._history.index)
        self._restore(document)
        return document

    def cancel(self) -> None:
        """Discard the session's uncommitted work and notify the host."""

        self._abort_gesture()
        self._discard_pending()
        self._crop.sync(self._history.current.crop)
        self._set_working(self._history.current)
        logger.info("Editing session cancelled")
        self.cancelled.emit()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_preview(self, max_edge: int = PREVIEW_EDGE, *, include_overlays: bool = False) -> Image.Image:
        """Render the working document through the export pipeline at preview size."""

        return render_document(
            self._source,
            self._document,
            max_edge=min(max_edge, self._config.max_output_edge),
            reference_width=self._config.reference_preview_width,
            include_overlays=include_overlays,
        )

    def export_bytes(self) -> bytes:
        """Synchronously flatten and encode the working document."""

        self._abort_gesture()
        self._flush_pending()
        try:
            return export_document(
                self._source,
                self._document,
                max_edge=self._config.max_output_edge,
                quality=self._config.jpeg_quality,
                reference_width=self._config.reference_preview_width,
            )
        except ExportError:
            logger.exception("Export failed")
            raise

    def export_async(self, pool: QThreadPool | None = None) -> int:
        """Queue the export on *pool* and return the job id.

        The result arrives through ``exportReady`` or ``exportFailed``.
        """

        self._abort_gesture()
        self._flush_pending()
        self._export_job += 1
        worker = ExportWorker(
            self._source,
            self._document,
            job_id=self._export_job,
            max_edge=self._config.max_output_edge,
            quality=self._config.jpeg_quality,
            reference_width=self._config.reference_preview_width,
        )
        worker.signals.ready.connect(self._handle_export_ready)
        worker.signals.error.connect(self._handle_export_error)
        (pool or QThreadPool.globalInstance()).start(worker)
        return self._export_job

    def _handle_export_ready(self, data: bytes, job_id: int) -> None:
        if job_id != self._export_job:
            return
        self.exportReady.emit(data)

    def _handle_export_error(self, job_id: int, message: str) -> None:
        if job_id != self._export_job:
            return
        self.exportFailed.emit(message)

    # ------------------------------------------------------------------
    # Document plumbing
    # ------------------------------------------------------------------
    def _set_working(self, document: EditDocument) -> None:
        if document == self._document:
            return
        self._document = document
        self.documentChanged.emit(document)

    def _commit(self, document: EditDocument) -> EditDocument:
        self._adjustment_pending = False
        self._overlays.discard_pending()
        self._set_working(document)
        self._history.push(document)
        logger.debug("Committed snapshot %d", self._history.index)
        self._emit_history()
        return document

    def _flush_pending(self) -> bool:
        if not (self._adjustment_pending or self._overlays.has_pending()):
            return False
        self._commit(self._document)
        return True

    def _discard_pending(self) -> bool:
        pending = self._adjustment_pending or self._overlays.has_pending()
        self._adjustment_pending = False
        self._overlays.discard_pending()
        return pending

    def _restore(self, document: EditDocument) -> None:
        self._crop.sync(document.crop)
        self._set_working(document)
        self._overlays.validate_selection()
        self._emit_history()

    def _emit_history(self) -> None:
        self.historyChanged.emit(self._history.can_undo(), self._history.can_redo())

    def _handle_crop_changed(self, rect: CropRect) -> None:
        self._set_working(self._document.with_crop(rect, min_size=self._config.min_crop_size))

    def _handle_crop_commit(self, rect: CropRect) -> None:
        self._commit(self._document.with_crop(rect, min_size=self._config.min_crop_size))

    def _handle_stroke_commit(self, stroke: Stroke) -> None:
        self._commit(self._document.with_stroke(stroke))


__all__ = ["EditorSession", "EditorTool", "PREVIEW_EDGE"]

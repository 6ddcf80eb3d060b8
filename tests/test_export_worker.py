"""Tests for the background export and thumbnail workers."""

import io

from PIL import Image

from iEdit.core.adjustments import FILTER_PRESETS
from iEdit.core.document import EditDocument, default_document
from iEdit.core.geometry import CropRect
from iEdit.tasks import ExportWorker, PresetThumbnailWorker


def test_export_worker_emits_jpeg(qapp, landscape_source):
    document = default_document(CropRect(10.0, 10.0, 80.0, 80.0)).with_rotation(90)
    worker = ExportWorker(landscape_source, document, job_id=7)
    ready, errors, finished = [], [], []
    worker.signals.ready.connect(lambda data, job: ready.append((data, job)))
    worker.signals.error.connect(lambda job, message: errors.append((job, message)))
    worker.signals.finished.connect(finished.append)

    worker.run()

    assert errors == []
    assert finished == [7]
    data, job = ready[0]
    assert job == 7
    with Image.open(io.BytesIO(data)) as decoded:
        assert decoded.size == (640, 800)


def test_export_worker_reports_missing_crop(qapp, landscape_source):
    worker = ExportWorker(landscape_source, EditDocument(), job_id=3)
    ready, errors, finished = [], [], []
    worker.signals.ready.connect(lambda data, job: ready.append(job))
    worker.signals.error.connect(lambda job, message: errors.append((job, message)))
    worker.signals.finished.connect(finished.append)

    worker.run()

    assert ready == []
    assert errors and errors[0][0] == 3
    assert "crop" in errors[0][1]
    assert finished == [3]


def test_preset_thumbnail_worker_renders_every_preset(qapp, landscape_source):
    worker = PresetThumbnailWorker(landscape_source, generation=2, edge=64)
    thumbnails = {}
    finished = []
    worker.signals.ready.connect(lambda preset_id, image, gen: thumbnails.__setitem__(preset_id, image))
    worker.signals.finished.connect(finished.append)

    worker.run()

    assert list(thumbnails) == [preset.id for preset in FILTER_PRESETS]
    assert max(thumbnails["bw"].size) <= 64
    r, g, b = thumbnails["bw"].getpixel((0, 0))
    assert r == g == b
    assert finished == [2]

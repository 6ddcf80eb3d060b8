import os
import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def landscape_source():
    """A 1000x800 mid-grey source image."""
    from iEdit.core.source import SourceImage

    return SourceImage.from_image(Image.new("RGB", (1000, 800), (128, 128, 128)))


@pytest.fixture
def split_source():
    """A 200x100 source: red left half, blue right half."""
    from iEdit.core.source import SourceImage

    image = Image.new("RGB", (200, 100), (0, 0, 255))
    image.paste((255, 0, 0), (0, 0, 100, 100))
    return SourceImage.from_image(image)

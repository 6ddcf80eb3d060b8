"""Immutable source image wrapper and loaders."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import DOWNLOAD_TIMEOUT, MAX_INPUT_BYTES, SUPPORTED_INPUT_FORMATS
from ..errors import SourceImageError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceImage:
    """Decoded input image; loaded once and never mutated.

    ``image`` is an RGB Pillow image with EXIF orientation already applied, so
    ``width``/``height`` are the natural dimensions the user sees.
    """

    image: Image.Image
    width: int
    height: int
    format: str | None = None

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 0.0

    @classmethod
    def from_image(cls, image: Image.Image, *, format: str | None = None) -> "SourceImage":
        """Wrap an already decoded Pillow image."""

        if image.width <= 0 or image.height <= 0:
            raise SourceImageError("Source image has no pixels")
        oriented = ImageOps.exif_transpose(image) or image
        if oriented.mode != "RGB":
            oriented = oriented.convert("RGB")
        else:
            oriented = oriented.copy()
        return cls(oriented, oriented.width, oriented.height, format or image.format)

    @classmethod
    def from_bytes(cls, data: bytes, *, max_bytes: int = MAX_INPUT_BYTES) -> "SourceImage":
        """Decode *data* into a :class:`SourceImage`.

        Raises :class:`SourceImageError` for empty, oversized, undecodable or
        unsupported input.
        """

        if not data:
            raise SourceImageError("Source image data is empty")
        if max_bytes and len(data) > max_bytes:
            raise SourceImageError(
                f"Source image is {len(data)} bytes; the limit is {max_bytes} bytes"
            )
        try:
            with Image.open(io.BytesIO(data)) as handle:
                image_format = handle.format
                if image_format not in SUPPORTED_INPUT_FORMATS:
                    raise SourceImageError(f"Unsupported image format: {image_format}")
                handle.load()
                source = cls.from_image(handle, format=image_format)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise SourceImageError(f"Could not decode source image: {exc}") from exc
        _LOGGER.debug("Decoded %s source image %dx%d", source.format, source.width, source.height)
        return source

    @classmethod
    def from_path(cls, path: Path | str, *, max_bytes: int = MAX_INPUT_BYTES) -> "SourceImage":
        """Read and decode the image stored at *path*."""

        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise SourceImageError(f"Could not read source image {path}: {exc}") from exc
        return cls.from_bytes(data, max_bytes=max_bytes)

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = DOWNLOAD_TIMEOUT,
        max_bytes: int = MAX_INPUT_BYTES,
    ) -> "SourceImage":
        """Download *url* and decode the response body."""

        client = session or requests
        try:
            response = client.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceImageError(f"Could not download source image {url}: {exc}") from exc
        return cls.from_bytes(response.content, max_bytes=max_bytes)

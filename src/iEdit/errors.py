"""Exception hierarchy for the editing engine."""

from __future__ import annotations


class IEditError(Exception):
    """Base class for all errors raised by iEdit."""


class SourceImageError(IEditError):
    """The input image could not be loaded, decoded or accepted."""


class UnknownPresetError(IEditError, KeyError):
    """A filter, sticker or crop preset id is not part of its table."""


class OverlayNotFoundError(IEditError, KeyError):
    """No text or sticker overlay carries the requested id."""


class ExportError(IEditError):
    """Base class for failures surfaced to the host at export time."""


class NoImageError(ExportError):
    """Export was requested without a decoded source image."""


class NoCropError(ExportError):
    """Export was requested for a document without a crop region."""


class EncodeError(ExportError):
    """The raster encoder returned no data."""

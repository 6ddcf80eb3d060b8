"""Colour adjustment vector, preset table and the shared preview descriptor."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping

from ..config import ADJUSTMENT_MAX, ADJUSTMENT_MIN
from ..errors import UnknownPresetError

# The order matches the slider panel and the pixel pipeline so the same tuple
# can be reused when iterating over adjustments or rendering previews.
ADJUSTMENT_CHANNELS = (
    "brightness",
    "contrast",
    "saturation",
    "exposure",
)

CUSTOM_FILTER_ID = "custom"
ORIGINAL_FILTER_ID = "original"


def clamp_adjustment(value: float) -> int:
    """Return *value* rounded and limited to the slider range."""

    numeric = int(round(float(value)))
    return max(ADJUSTMENT_MIN, min(ADJUSTMENT_MAX, numeric))


@dataclass(frozen=True)
class AdjustmentVector:
    """The four slider values, each an integer in ``[-100, 100]``."""

    brightness: int = 0
    contrast: int = 0
    saturation: int = 0
    exposure: int = 0

    def __post_init__(self) -> None:
        for channel in ADJUSTMENT_CHANNELS:
            object.__setattr__(self, channel, clamp_adjustment(getattr(self, channel)))

    def get(self, channel: str) -> int:
        if channel not in ADJUSTMENT_CHANNELS:
            raise ValueError(f"Unknown adjustment channel: {channel!r}")
        return getattr(self, channel)

    def with_channel(self, channel: str, value: float) -> "AdjustmentVector":
        """Return a copy with *channel* set to the clamped *value*."""

        if channel not in ADJUSTMENT_CHANNELS:
            raise ValueError(f"Unknown adjustment channel: {channel!r}")
        return replace(self, **{channel: clamp_adjustment(value)})

    def is_identity(self) -> bool:
        return all(getattr(self, channel) == 0 for channel in ADJUSTMENT_CHANNELS)

    def as_dict(self) -> dict[str, int]:
        return {channel: getattr(self, channel) for channel in ADJUSTMENT_CHANNELS}

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "AdjustmentVector":
        return cls(**{k: clamp_adjustment(v) for k, v in values.items() if k in ADJUSTMENT_CHANNELS})


@dataclass(frozen=True)
class FilterPreset:
    """A named, fixed adjustment vector selectable as a single action."""

    id: str
    name: str
    adjustments: AdjustmentVector


FILTER_PRESETS: tuple[FilterPreset, ...] = (
    FilterPreset("original", "Original", AdjustmentVector(0, 0, 0, 0)),
    FilterPreset("bright", "Bright", AdjustmentVector(15, 5, 0, 10)),
    FilterPreset("contrast", "Contrast", AdjustmentVector(0, 25, 10, 0)),
    FilterPreset("warm", "Warm", AdjustmentVector(5, 0, 20, 5)),
    FilterPreset("cool", "Cool", AdjustmentVector(5, 5, -10, 0)),
    FilterPreset("bw", "B&W", AdjustmentVector(0, 10, -100, 0)),
    FilterPreset("vintage", "Vintage", AdjustmentVector(10, -10, -20, 5)),
    FilterPreset("dramatic", "Dramatic", AdjustmentVector(-5, 40, 30, 0)),
    FilterPreset("fade", "Fade", AdjustmentVector(10, -15, -15, 5)),
)

_PRESETS_BY_ID = {preset.id: preset for preset in FILTER_PRESETS}


def get_preset(preset_id: str) -> FilterPreset:
    """Return the preset registered under *preset_id*."""

    try:
        return _PRESETS_BY_ID[preset_id]
    except KeyError:
        raise UnknownPresetError(f"Unknown filter preset: {preset_id!r}") from None


def preset_adjustments(preset_id: str) -> AdjustmentVector:
    """Return the adjustment vector associated with *preset_id*."""

    return get_preset(preset_id).adjustments


def _factor(value: int) -> float:
    return max(0.0, 1.0 + value / 100.0)


@dataclass(frozen=True)
class PreviewDescriptor:
    """Multiplicative composition derived from an :class:`AdjustmentVector`.

    The same descriptor drives the on-screen preview (via :meth:`css` for web
    hosts or :func:`iEdit.core.filters.apply_adjustments` for raster hosts)
    and the final export, so both render with one formula.
    """

    brightness: float = 1.0
    contrast: float = 1.0
    saturation: float = 1.0

    def is_identity(self, tolerance: float = 1e-9) -> bool:
        return (
            abs(self.brightness - 1.0) <= tolerance
            and abs(self.contrast - 1.0) <= tolerance
            and abs(self.saturation - 1.0) <= tolerance
        )

    def css(self) -> str:
        """Return the equivalent CSS ``filter`` declaration."""

        return (
            f"brightness({self.brightness:g}) "
            f"contrast({self.contrast:g}) "
            f"saturate({self.saturation:g})"
        )


def preview_descriptor(adjustments: AdjustmentVector) -> PreviewDescriptor:
    """Map *adjustments* onto the multiplicative preview descriptor.

    Brightness and exposure combine multiplicatively; contrast and saturation
    are independent factors.  No factor may drop below zero.
    """

    brightness = _factor(adjustments.brightness) * _factor(adjustments.exposure)
    return PreviewDescriptor(
        brightness=max(0.0, brightness),
        contrast=_factor(adjustments.contrast),
        saturation=_factor(adjustments.saturation),
    )


__all__ = [
    "ADJUSTMENT_CHANNELS",
    "AdjustmentVector",
    "CUSTOM_FILTER_ID",
    "FILTER_PRESETS",
    "FilterPreset",
    "ORIGINAL_FILTER_ID",
    "PreviewDescriptor",
    "get_preset",
    "preset_adjustments",
    "preview_descriptor",
]

"""Render parameters for the pixelation engine.

`RenderParameters` is an immutable value: two parameter sets with the same
field values compare equal and hash the same, so they can be used to tag
renders or as cache keys.

Domains
-------
- pixel_size    : int   in [0, 50], 0 means "no pixelation"
- brightness    : float in [0.5, 2.0], multiplicative
- contrast      : float in [0.5, 2.0], multiplicative around mid-grey
- shadow_radius : int   in [0, 30], drop-shadow blur radius in pixels
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from .errors import ParameterError

PIXEL_SIZE_RANGE = (0, 50)
BRIGHTNESS_RANGE = (0.5, 2.0)
CONTRAST_RANGE = (0.5, 2.0)
SHADOW_RADIUS_RANGE = (0, 30)

# Fixed drop-shadow colour: black at 60% opacity.
SHADOW_COLOR = (0, 0, 0)
SHADOW_OPACITY = 0.6

_RANGES = {
    "pixel_size": PIXEL_SIZE_RANGE,
    "brightness": BRIGHTNESS_RANGE,
    "contrast": CONTRAST_RANGE,
    "shadow_radius": SHADOW_RADIUS_RANGE,
}

# Alternative spellings accepted by `from_mapping`.
_ALIASES = {
    "pixelSize": "pixel_size",
    "pixel": "pixel_size",
    "shadow": "shadow_radius",
    "shadowRadius": "shadow_radius",
}


def _clip(value: float, lo: float, hi: float, default: float) -> float:
    # NaN has no position in the domain; infinities clamp to the nearest bound.
    if math.isnan(value):
        return default
    return min(max(value, lo), hi)


@dataclass(frozen=True)
class RenderParameters:
    pixel_size: int = 10
    brightness: float = 1.0
    contrast: float = 1.0
    shadow_radius: int = 0

    @classmethod
    def clamped(
        cls,
        pixel_size: float = 10,
        brightness: float = 1.0,
        contrast: float = 1.0,
        shadow_radius: float = 0,
    ) -> "RenderParameters":
        """Build a parameter set with every field clamped to its domain.

        Integer fields are rounded to the nearest integer after clamping.
        NaN in any field is replaced by that field's default.
        """
        d = DEFAULT_FIELDS
        return cls(
            pixel_size=int(round(_clip(float(pixel_size), *PIXEL_SIZE_RANGE, d["pixel_size"]))),
            brightness=_clip(float(brightness), *BRIGHTNESS_RANGE, d["brightness"]),
            contrast=_clip(float(contrast), *CONTRAST_RANGE, d["contrast"]),
            shadow_radius=int(round(_clip(float(shadow_radius), *SHADOW_RADIUS_RANGE, d["shadow_radius"]))),
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RenderParameters":
        """Build validated parameters from a plain mapping.

        Missing keys take their defaults. Unknown keys and out-of-domain
        values raise `ParameterError`.
        """
        values: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _ALIASES.get(key, key)
            if name not in _RANGES:
                raise ParameterError(f"Unknown render parameter: {key!r}")
            values[name] = value
        try:
            if "pixel_size" in values:
                values["pixel_size"] = int(values["pixel_size"])
            if "shadow_radius" in values:
                values["shadow_radius"] = int(values["shadow_radius"])
            if "brightness" in values:
                values["brightness"] = float(values["brightness"])
            if "contrast" in values:
                values["contrast"] = float(values["contrast"])
        except (TypeError, ValueError) as e:
            raise ParameterError(f"Invalid render parameter value: {e}") from e
        params = cls(**values)
        params.validate()
        return params

    def clamp(self) -> "RenderParameters":
        """Return a copy with every field clamped to its domain."""
        return RenderParameters.clamped(
            self.pixel_size, self.brightness, self.contrast, self.shadow_radius
        )

    def validate(self) -> None:
        """Raise `ParameterError` for the first field outside its domain."""
        for f in fields(self):
            lo, hi = _RANGES[f.name]
            value = getattr(self, f.name)
            if not lo <= value <= hi:
                raise ParameterError(f"{f.name} must be in [{lo}, {hi}], got {value}")

    def replace(self, **changes: Any) -> "RenderParameters":
        return replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def is_identity(self) -> bool:
        """True when rendering reproduces the source unchanged."""
        return (
            self.pixel_size <= 0
            and self.brightness == 1.0
            and self.contrast == 1.0
            and self.shadow_radius <= 0
        )


DEFAULT_PARAMETERS = RenderParameters()
DEFAULT_FIELDS = DEFAULT_PARAMETERS.as_dict()

__all__ = [
    "RenderParameters",
    "DEFAULT_PARAMETERS",
    "PIXEL_SIZE_RANGE",
    "BRIGHTNESS_RANGE",
    "CONTRAST_RANGE",
    "SHADOW_RADIUS_RANGE",
    "SHADOW_COLOR",
    "SHADOW_OPACITY",
]

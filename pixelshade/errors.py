"""Exception types raised by PixelShade."""
from __future__ import annotations


class PixelShadeError(Exception):
    """Base class for all PixelShade errors."""


class ParameterError(PixelShadeError, ValueError):
    """A render parameter is outside its documented domain."""


class SourceNotReadyError(PixelShadeError):
    """The source image handle has not finished decoding."""


class ImageLoadError(PixelShadeError):
    """An image file or buffer could not be decoded."""


__all__ = [
    "PixelShadeError",
    "ParameterError",
    "SourceNotReadyError",
    "ImageLoadError",
]

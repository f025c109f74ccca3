from __future__ import annotations

# Public API re-exported from the implementation modules.
from .errors import ImageLoadError, ParameterError, PixelShadeError, SourceNotReadyError  # noqa: F401
from .filters import apply_filters, apply_tone, composite_over, drop_shadow  # noqa: F401
from .params import DEFAULT_PARAMETERS, RenderParameters  # noqa: F401
from .renderer import OutputImage, render  # noqa: F401
from .scheduler import LatestResult, RenderScheduler  # noqa: F401
from .utils.loader import ImageHandle, SourceImage, decode_bytes, load_image  # noqa: F401
from .utils.pixelate import pixelate, reduced_size  # noqa: F401
from .utils.resize import resize_nearest  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "ImageLoadError",
    "ParameterError",
    "PixelShadeError",
    "SourceNotReadyError",
    "apply_filters",
    "apply_tone",
    "composite_over",
    "drop_shadow",
    "DEFAULT_PARAMETERS",
    "RenderParameters",
    "OutputImage",
    "render",
    "LatestResult",
    "RenderScheduler",
    "ImageHandle",
    "SourceImage",
    "decode_bytes",
    "load_image",
    "pixelate",
    "reduced_size",
    "resize_nearest",
]

"""Utility functions for PixelShade.

Modules:
- loader: Pillow <-> NumPy conversion, `SourceImage` and deferred `ImageHandle`.
- pixelate: Block pixelation via nearest downscale then nearest upscale.
- resize: Nearest-neighbor resizing to an arbitrary size.
"""
from .loader import (
    ImageHandle,
    SourceImage,
    decode_bytes,
    encode_png,
    load_image,
    save_bytes,
)
from .pixelate import downscale_nearest, pixelate, reduced_size
from .resize import fit_within, nearest_indices, resize_nearest

__all__ = [
    "ImageHandle",
    "SourceImage",
    "decode_bytes",
    "encode_png",
    "load_image",
    "save_bytes",
    "downscale_nearest",
    "pixelate",
    "reduced_size",
    "fit_within",
    "nearest_indices",
    "resize_nearest",
]

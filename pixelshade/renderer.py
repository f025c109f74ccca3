"""The pixelation renderer: ``render(source, params) -> OutputImage``.

Pipeline
--------
1. Allocate an output surface of the source's size.
2. ``pixel_size <= 0``: draw the source 1:1.
   Otherwise point-sample the source down to ``ceil(W/p) x ceil(H/p)`` and
   scale it back up to ``W x H`` with nearest-neighbor.
3. Apply the composite filter (contrast, brightness, drop shadow) to that
   final full-size draw.

`render` is pure: it never mutates the source, keeps no state between calls
and allocates every buffer it uses, so it is safe to call from several threads
at once. Identical inputs always produce identical pixels.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from .filters import apply_filters
from .params import DEFAULT_PARAMETERS, RenderParameters
from .utils.loader import ImageHandle, SourceImage, encode_png, save_bytes
from .utils.pixelate import pixelate, reduced_size

Array = np.ndarray

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class OutputImage:
    """Result of one render. `pixels` is a read-only (H, W, 4) uint8 array."""

    pixels: Array
    params: RenderParameters

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_png(self) -> bytes:
        return encode_png(self.pixels)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def save(self, path: Union[str, Path]) -> None:
        save_bytes(self.to_png(), path)


def render(
    source: Union[SourceImage, ImageHandle],
    params: Optional[RenderParameters] = None,
) -> OutputImage:
    """Render `source` with `params` into a new `OutputImage`.

    Parameters
    ----------
    source : SourceImage | ImageHandle
        Decoded source image. An undecoded handle raises
        `SourceNotReadyError`.
    params : RenderParameters | None
        Render parameters; defaults when None. Values are clamped to their
        domains before use, infinities to the nearest bound, and a NaN field
        falls back to its default.

    Returns
    -------
    OutputImage
        Image with the same width and height as the source.
    """
    if isinstance(source, ImageHandle):
        source = source.source
    params = (params or DEFAULT_PARAMETERS).clamp()
    src = source.pixels
    H, W = src.shape[:2]

    if params.pixel_size <= 0:
        logger.debug("Rendering %dx%d at full resolution with %s", W, H, params)
    else:
        w, h = reduced_size(W, H, params.pixel_size)
        logger.debug("Rendering %dx%d via %dx%d with %s", W, H, w, h, params)
    drawn = pixelate(src, params.pixel_size)

    out = apply_filters(drawn, params)
    out.setflags(write=False)
    return OutputImage(pixels=out, params=params)


__all__ = ["OutputImage", "render"]

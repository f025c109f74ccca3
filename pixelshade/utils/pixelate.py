"""Pixelation utilities operating on NumPy arrays.

Pixelation point-samples the image down to one pixel per `pixel_size` block
(nearest-neighbor, never averaging), then scales the reduced image back up to
the original size with nearest-neighbor so every reduced cell becomes a flat
square block.
"""
from __future__ import annotations

import numpy as np

from .resize import resize_nearest

Array = np.ndarray


def reduced_size(width: int, height: int, pixel_size: int) -> tuple[int, int]:
    """Return the (w, h) of the reduced image for a block edge of `pixel_size`.

    Uses ceiling division so a partial block at the right/bottom edge is kept.
    """
    if pixel_size < 1:
        raise ValueError("pixel_size must be >= 1")
    w = max(1, -(-width // pixel_size))
    h = max(1, -(-height // pixel_size))
    return w, h


def downscale_nearest(arr: Array, pixel_size: int) -> Array:
    """Downscale an image by point-sampling one pixel per block.

    Parameters
    ----------
    arr : np.ndarray
        Input array of shape (H, W, C), dtype=uint8.
    pixel_size : int
        Block edge length in source pixels (>=1).

    Returns
    -------
    np.ndarray
        Array of shape (ceil(H/p), ceil(W/p), C).
    """
    H, W = arr.shape[:2]
    w, h = reduced_size(W, H, pixel_size)
    return resize_nearest(arr, h, w)


def pixelate(arr: Array, pixel_size: int) -> Array:
    """Pixelate an image into flat blocks of `pixel_size` source pixels.

    `pixel_size <= 0` returns an unmodified copy.

    Returns
    -------
    np.ndarray
        Pixelated image of the same shape and dtype as the input.
    """
    if not isinstance(arr, np.ndarray) or arr.ndim != 3:
        raise ValueError("arr must be an image with shape (H, W, C)")
    if pixel_size <= 0:
        return arr.copy()

    H, W = arr.shape[:2]
    small = downscale_nearest(arr, pixel_size)
    return resize_nearest(small, H, W)

"""Nearest-neighbor resizing utilities for NumPy arrays.

Provides nearest-neighbor scaling to an arbitrary output size for crisp
pixel-art operations. Every output pixel is a copy of exactly one input
pixel; no averaging or interpolation ever happens.
"""
from __future__ import annotations

import numpy as np

Array = np.ndarray


def nearest_indices(src: int, dst: int) -> Array:
    """Map `dst` output positions onto `src` input positions.

    Output pixel ``i`` samples the input pixel under its centre, i.e.
    ``floor((i + 0.5) * src / dst)``. Integer arithmetic keeps the mapping
    exact for any size pair.
    """
    if src < 1 or dst < 1:
        raise ValueError("src and dst must be >= 1")
    i = np.arange(dst, dtype=np.int64)
    idx = ((2 * i + 1) * src) // (2 * dst)
    return np.clip(idx, 0, src - 1)


def resize_nearest(arr: Array, new_h: int, new_w: int) -> Array:
    """Resize an image to (new_h, new_w) via nearest-neighbor.

    Parameters
    ----------
    arr : np.ndarray
        Input array of shape (H, W, C), dtype=uint8.
    new_h : int
        Target height (>=1).
    new_w : int
        Target width (>=1).

    Returns
    -------
    np.ndarray
        Newly allocated resized image.
    """
    if not isinstance(arr, np.ndarray) or arr.ndim != 3:
        raise ValueError("arr must be an image with shape (H, W, C)")
    if new_h < 1 or new_w < 1:
        raise ValueError("new_h and new_w must be >= 1")

    H, W, _ = arr.shape
    if H == new_h and W == new_w:
        return arr.copy()

    yi = nearest_indices(H, new_h)
    xi = nearest_indices(W, new_w)
    return arr[yi[:, None], xi[None, :], :]


def fit_within(width: int, height: int, max_w: int, max_h: int) -> tuple[int, int]:
    """Largest (w, h) with the same aspect ratio that fits in max_w x max_h.

    Never scales up.
    """
    scale = min(max_w / max(width, 1), max_h / max(height, 1), 1.0)
    return max(1, int(width * scale)), max(1, int(height * scale))

"""Tone and drop-shadow filters for RGBA NumPy arrays.

Exported API
------------
- apply_tone(pixels, contrast, brightness)
- drop_shadow(pixels, radius)
- composite_over(top, bottom)
- apply_filters(pixels, params)

Implementation notes
--------------------
The tone curve works per channel on RGB in the normalized range [0, 1]:
contrast pivots around mid-grey first, brightness scales second, and the
result is clamped and rounded back to 8-bit. The order matters: for
non-identity values brightness-then-contrast gives different pixels.

The drop shadow is the image silhouette (its alpha) blurred with a Gaussian of
standard deviation ``radius / 2``, painted in black at 60% opacity, centred
under the image with no offset and clipped to the image bounds.
"""
from __future__ import annotations

import cv2
import numpy as np

from .params import SHADOW_COLOR, SHADOW_OPACITY, RenderParameters

Array = np.ndarray


def apply_tone(pixels: Array, contrast: float = 1.0, brightness: float = 1.0) -> Array:
    """Apply contrast then brightness to the RGB channels of an RGBA array.

    Parameters
    ----------
    pixels : np.ndarray
        RGBA image (H, W, 4), dtype=uint8.
    contrast : float
        ``v = contrast * (v - 0.5) + 0.5``
    brightness : float
        ``v = v * brightness``

    Returns
    -------
    np.ndarray
        New RGBA array; alpha is copied unchanged.
    """
    out = pixels.copy()
    if contrast == 1.0 and brightness == 1.0:
        return out
    v = pixels[:, :, :3].astype(np.float64) / 255.0
    v = contrast * (v - 0.5) + 0.5
    v = v * brightness
    v = np.clip(v, 0.0, 1.0)
    out[:, :, :3] = np.rint(v * 255.0).astype(np.uint8)
    return out


def shadow_sigma(radius: int) -> float:
    """Gaussian standard deviation for a canvas-style blur radius."""
    return radius / 2.0


def drop_shadow(pixels: Array, radius: int) -> Array:
    """Build the RGBA shadow layer cast by `pixels`.

    Returns an array of the same (H, W, 4) shape: black RGB and an alpha of
    the blurred silhouette scaled by the shadow opacity. Outside the image is
    treated as fully transparent.
    """
    H, W = pixels.shape[:2]
    alpha = pixels[:, :, 3].astype(np.float32) / 255.0
    if radius > 0:
        alpha = cv2.GaussianBlur(
            alpha,
            ksize=(0, 0),
            sigmaX=shadow_sigma(radius),
            sigmaY=shadow_sigma(radius),
            borderType=cv2.BORDER_CONSTANT,
        )
    shadow = np.zeros((H, W, 4), dtype=np.uint8)
    shadow[:, :, :3] = SHADOW_COLOR
    shadow[:, :, 3] = np.rint(np.clip(alpha * SHADOW_OPACITY, 0.0, 1.0) * 255.0).astype(np.uint8)
    return shadow


def composite_over(top: Array, bottom: Array) -> Array:
    """Composite straight-alpha RGBA `top` over `bottom` (source-over)."""
    ta = top[:, :, 3:4].astype(np.float64) / 255.0
    ba = bottom[:, :, 3:4].astype(np.float64) / 255.0
    out_a = ta + ba * (1.0 - ta)
    num = top[:, :, :3] * ta + bottom[:, :, :3] * ba * (1.0 - ta)
    rgb = np.divide(num, out_a, out=np.zeros_like(num), where=out_a > 0)

    out = np.empty_like(top)
    out[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    out[:, :, 3] = np.clip(np.rint(out_a[:, :, 0] * 255.0), 0, 255).astype(np.uint8)
    return out


def apply_filters(pixels: Array, params: RenderParameters) -> Array:
    """Apply the full composite filter (tone, then shadow underneath)."""
    toned = apply_tone(pixels, params.contrast, params.brightness)
    if params.shadow_radius <= 0:
        return toned
    shadow = drop_shadow(toned, params.shadow_radius)
    return composite_over(toned, shadow)


__all__ = ["apply_tone", "drop_shadow", "composite_over", "apply_filters", "shadow_sigma"]

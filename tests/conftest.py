"""Shared image fixtures for the PixelShade tests."""
from __future__ import annotations

import numpy as np
import pytest

from pixelshade.utils.loader import SourceImage


def make_source(rgb: np.ndarray) -> SourceImage:
    return SourceImage.from_array(rgb.astype(np.uint8))


@pytest.fixture
def red_100() -> SourceImage:
    arr = np.zeros((100, 100, 3), dtype=np.uint8)
    arr[:, :, 0] = 255
    return make_source(arr)


@pytest.fixture
def checker_4() -> SourceImage:
    yy, xx = np.mgrid[0:4, 0:4]
    val = np.where((xx + yy) % 2 == 0, 0, 255).astype(np.uint8)
    return make_source(np.stack([val, val, val], axis=2))


@pytest.fixture
def gradient() -> SourceImage:
    """37x53 image where every pixel has a distinct (x, y) colour."""
    h, w = 37, 53
    yy, xx = np.mgrid[0:h, 0:w]
    arr = np.stack([xx * 4, yy * 6, (xx + yy) % 256], axis=2)
    return make_source(arr)


@pytest.fixture
def noise() -> SourceImage:
    rng = np.random.default_rng(1234)
    return make_source(rng.integers(0, 256, size=(41, 29, 3)))


@pytest.fixture
def sprite() -> SourceImage:
    """40x40 transparent canvas with an opaque 10x10 white square in the middle."""
    arr = np.zeros((40, 40, 4), dtype=np.uint8)
    arr[15:25, 15:25] = 255
    return SourceImage.from_array(arr)

"""Image loading and saving utilities using Pillow, with NumPy arrays.

All pixel processing in this project happens on NumPy arrays. These helpers
only convert between Pillow images and read-only `uint8` RGBA arrays for IO,
and provide `ImageHandle`, a source whose decode may still be in progress.
"""
from __future__ import annotations

import io
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import ImageLoadError, SourceNotReadyError

Array = np.ndarray

logger = logging.getLogger(__name__)

# Fixed so that equal pixels always encode to identical bytes.
PNG_COMPRESS_LEVEL = 6


def as_rgba(arr: Array) -> Array:
    """Promote a grey, RGB or RGBA `uint8` array to a new (H, W, 4) RGBA array."""
    if not isinstance(arr, np.ndarray):
        raise TypeError("arr must be a NumPy array")
    if arr.dtype != np.uint8:
        raise TypeError("arr must have dtype=uint8")
    if arr.ndim == 2:
        arr = arr[:, :, None].repeat(3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError("arr must have shape (H, W), (H, W, 3) or (H, W, 4)")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError("image dimensions must be > 0")
    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate([arr, alpha], axis=2)
    return arr.copy()


def _frozen(arr: Array) -> Array:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SourceImage:
    """A fully decoded, immutable RGBA bitmap.

    `pixels` has shape (H, W, 4), dtype=uint8, and is read-only.
    """

    pixels: Array

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray) or arr.dtype != np.uint8:
            raise TypeError("pixels must be a uint8 NumPy array")
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError("pixels must have shape (H, W, 4)")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError("image dimensions must be > 0")
        if arr.flags.writeable:
            object.__setattr__(self, "pixels", _frozen(arr.copy()))

    @classmethod
    def from_array(cls, arr: Array) -> "SourceImage":
        return cls(_frozen(as_rgba(arr)))

    @classmethod
    def from_pil(cls, im: Image.Image) -> "SourceImage":
        return cls(_frozen(np.array(im.convert("RGBA"), dtype=np.uint8)))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


def _decode(src: Union[str, Path, bytes]) -> SourceImage:
    fp = io.BytesIO(src) if isinstance(src, (bytes, bytearray)) else Path(src)
    try:
        with Image.open(fp) as im:
            im.load()
            return SourceImage.from_pil(im)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Could not decode image: {e}") from e


def load_image(path: Union[str, Path]) -> SourceImage:
    """Load an image file into an RGBA `SourceImage`.

    Parameters
    ----------
    path : str | Path
        Path to an image supported by Pillow.

    Returns
    -------
    SourceImage
        Decoded image with shape (H, W, 4), dtype=uint8.
    """
    source = _decode(Path(path))
    logger.debug("Loaded %s (%dx%d)", path, source.width, source.height)
    return source


def decode_bytes(data: bytes) -> SourceImage:
    """Decode an in-memory encoded image into a `SourceImage`."""
    return _decode(bytes(data))


def encode_png(arr: Array) -> bytes:
    """Encode an RGBA (or RGB) `uint8` array as PNG bytes."""
    if not isinstance(arr, np.ndarray) or arr.dtype != np.uint8:
        raise TypeError("arr must be a uint8 NumPy array")
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError("arr must have shape (H, W, 3) or (H, W, 4)")
    im = Image.fromarray(np.ascontiguousarray(arr))
    buf = io.BytesIO()
    im.save(buf, format="PNG", compress_level=PNG_COMPRESS_LEVEL)
    return buf.getvalue()


def save_bytes(data: bytes, path: Union[str, Path]) -> None:
    """Write already-encoded image bytes to `path` unchanged."""
    Path(path).write_bytes(data)


class ImageHandle:
    """A source image that may not have finished decoding yet.

    Callers register work with `when_loaded`; each callback runs exactly once,
    either immediately (already decoded) or right after decode completes.
    `when_failed` callbacks run once with the error if decoding fails.
    """

    def __init__(self, src: Union[str, Path, bytes]) -> None:
        self._src = src
        self._source: Optional[SourceImage] = None
        self._error: Optional[Exception] = None
        self._callbacks: list[Callable[[SourceImage], None]] = []
        self._errbacks: list[Callable[[Exception], None]] = []
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_loaded(self) -> bool:
        return self._source is not None

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    @property
    def source(self) -> SourceImage:
        if self._source is None:
            raise SourceNotReadyError("image has not finished decoding")
        return self._source

    def when_loaded(self, callback: Callable[[SourceImage], None]) -> None:
        with self._lock:
            if self._source is None:
                self._callbacks.append(callback)
                return
            source = self._source
        callback(source)

    def when_failed(self, callback: Callable[[Exception], None]) -> None:
        with self._lock:
            if self._error is None:
                self._errbacks.append(callback)
                return
            error = self._error
        callback(error)

    def decode(self) -> SourceImage:
        """Decode synchronously (no-op if already decoded) and fire callbacks."""
        if self._source is not None:
            return self._source
        try:
            source = _decode(self._src)
        except ImageLoadError as e:
            with self._lock:
                self._error = e
                self._callbacks.clear()
                errbacks, self._errbacks = self._errbacks, []
            for eb in errbacks:
                eb(e)
            raise
        with self._lock:
            self._source = source
            self._errbacks.clear()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb(source)
        return source

    def decode_async(self) -> threading.Thread:
        """Decode on a background thread; errors are kept in `error`."""

        def _run() -> None:
            try:
                self.decode()
            except ImageLoadError as e:
                logger.warning("Decode failed: %s", e)

        self._thread = threading.Thread(target=_run, daemon=True)
        self._thread.start()
        return self._thread

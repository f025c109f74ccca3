"""Tests for image acquisition: SourceImage, ImageHandle and PNG IO."""
import numpy as np
import pytest
from PIL import Image

from pixelshade.errors import ImageLoadError, SourceNotReadyError
from pixelshade.utils.loader import (
    ImageHandle,
    SourceImage,
    decode_bytes,
    encode_png,
    load_image,
    save_bytes,
)


@pytest.fixture
def png_file(tmp_path):
    arr = np.zeros((6, 9, 3), dtype=np.uint8)
    arr[:, :, 1] = 200
    path = tmp_path / "in.png"
    Image.fromarray(arr, mode="RGB").save(path)
    return path


def test_from_array_promotes_to_rgba():
    src = SourceImage.from_array(np.full((2, 3), 7, dtype=np.uint8))
    assert src.size == (3, 2)
    assert src.pixels[0, 0].tolist() == [7, 7, 7, 255]


def test_source_pixels_are_read_only_copies():
    arr = np.zeros((2, 2, 4), dtype=np.uint8)
    src = SourceImage(arr)
    arr[0, 0, 0] = 99
    assert src.pixels[0, 0, 0] == 0
    with pytest.raises(ValueError):
        src.pixels[0, 0, 0] = 1


@pytest.mark.parametrize(
    "arr,exc",
    [
        (np.zeros((0, 4, 4), dtype=np.uint8), ValueError),
        (np.zeros((4, 4, 2), dtype=np.uint8), ValueError),
        (np.zeros((4, 4, 4), dtype=np.float32), TypeError),
    ],
)
def test_source_rejects_bad_arrays(arr, exc):
    with pytest.raises(exc):
        SourceImage(arr)


def test_load_image(png_file):
    src = load_image(png_file)
    assert src.size == (9, 6)
    assert src.pixels[0, 0].tolist() == [0, 200, 0, 255]


def test_load_image_rejects_garbage(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"definitely not an image")
    with pytest.raises(ImageLoadError):
        load_image(bad)


def test_save_bytes_is_byte_for_byte(tmp_path):
    data = encode_png(np.zeros((3, 3, 4), dtype=np.uint8))
    out = tmp_path / "out.png"
    save_bytes(data, out)
    assert out.read_bytes() == data
    assert decode_bytes(data).size == (3, 3)


def test_handle_runs_callback_once_after_decode(png_file):
    handle = ImageHandle(png_file)
    seen = []
    handle.when_loaded(seen.append)
    assert not handle.is_loaded
    assert seen == []
    with pytest.raises(SourceNotReadyError):
        handle.source

    handle.decode()
    handle.decode()
    assert len(seen) == 1
    assert seen[0] is handle.source


def test_handle_runs_callback_immediately_when_loaded(png_file):
    handle = ImageHandle(png_file)
    handle.decode()
    seen = []
    handle.when_loaded(seen.append)
    assert seen == [handle.source]


def test_handle_decode_failure_keeps_error(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")
    handle = ImageHandle(bad)
    seen = []
    handle.when_loaded(seen.append)
    with pytest.raises(ImageLoadError):
        handle.decode()
    assert isinstance(handle.error, ImageLoadError)
    assert seen == []


def test_handle_decode_async(png_file):
    handle = ImageHandle(png_file.read_bytes())
    thread = handle.decode_async()
    thread.join(timeout=5)
    assert handle.is_loaded
    assert handle.source.size == (9, 6)


def test_handle_reports_failure_to_callbacks(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")
    handle = ImageHandle(bad)
    failures = []
    handle.when_failed(failures.append)
    handle.decode_async().join(timeout=5)
    assert len(failures) == 1
    assert failures[0] is handle.error
    # registering after the failure still reports it
    late = []
    handle.when_failed(late.append)
    assert late == [handle.error]


def test_handle_failure_callbacks_skip_successful_decode(png_file):
    handle = ImageHandle(png_file)
    failures = []
    handle.when_failed(failures.append)
    handle.decode()
    assert failures == []

"""Tests for PixelSample and Raster ingestion."""

import logging

import numpy as np
import pytest
from PIL import Image

from ascii_frame.errors import InvalidParameterError, SizeMismatchError
from ascii_frame.pixel import PixelSample
from ascii_frame.raster import ColorFormat, Raster
from tests.conftest import rgba_bytes


def test_from_buffer_rgba():
    buf = rgba_bytes([[(1, 2, 3), (4, 5, 6)], [(7, 8, 9), (10, 11, 12)]])
    r = Raster.from_buffer(buf, 2, 2)
    assert r.size == (2, 2)
    assert r.get_pixel(1, 0).color == (4, 5, 6)
    assert r.get_pixel(0, 1).color == (7, 8, 9)
    assert [p.position for p in r.pixels] == [(0, 0), (1, 0), (0, 1), (1, 1)]


def test_from_buffer_positions_on_wide_raster():
    buf = rgba_bytes([[(i, i, i) for i in range(3)], [(i, i, i) for i in range(3, 6)]])
    r = Raster.from_buffer(buf, 3, 2)
    assert r.pixels[4].position == (1, 1)
    assert r.pixels[4].r == 4
    assert all(0 <= p.x < 3 and 0 <= p.y < 2 for p in r.pixels)


def test_from_buffer_bgr_swaps_channels():
    buf = rgba_bytes([[(10, 20, 30)]])
    r = Raster.from_format(buf, 1, 1, ColorFormat.BGRA8)
    assert r.pixels[0].color == (30, 20, 10)


def test_from_buffer_half_float():
    buf = np.array([1.0, 0.5, 0.0, 1.0], dtype="<f2").tobytes()
    r = Raster.from_buffer(buf, 1, 1, stride=8)
    assert r.pixels[0].color == (255, 128, 0)


def test_size_mismatch_returns_black(caplog):
    with caplog.at_level(logging.WARNING):
        r = Raster.from_buffer(b"\x01" * 10, 2, 2)
    assert r.size == (2, 2)
    assert r.is_valid()
    assert all(p.color == (0, 0, 0) for p in r.pixels)
    assert "mismatch" in caplog.text


def test_size_mismatch_strict():
    with pytest.raises(SizeMismatchError) as ei:
        Raster.from_buffer(b"\x00" * 12, 2, 2, strict=True)
    assert ei.value.expected == 16
    assert ei.value.actual == 12


def test_bad_stride():
    with pytest.raises(InvalidParameterError):
        Raster.from_buffer(b"\x00" * 12, 2, 2, stride=3)


def test_color_format_parse():
    assert ColorFormat.parse("RGBA16F").stride == 8
    assert ColorFormat.parse("bgra8").bgr
    with pytest.raises(InvalidParameterError):
        ColorFormat.parse("yuv")


def test_black():
    r = Raster.black(3, 2)
    assert len(r.pixels) == 6
    assert r.get_pixel(2, 1).position == (2, 1)


def test_get_pixel_out_of_range():
    with pytest.raises(IndexError):
        Raster.black(2, 2).get_pixel(2, 0)


def test_image_bridge():
    img = Image.new("RGB", (3, 2), (9, 8, 7))
    r = Raster.from_image(img)
    assert r.size == (3, 2)
    assert r.pixels[-1].color == (9, 8, 7)
    assert r.to_image().getpixel((2, 1)) == (9, 8, 7)


def test_from_rows_reassigns_positions():
    rows = [[PixelSample(1, 1, 1, 5, 5), PixelSample(2, 2, 2, 9, 9)]]
    r = Raster.from_rows(rows)
    assert [p.position for p in r.pixels] == [(0, 0), (1, 0)]


def test_pixel_quantize():
    p = PixelSample(100, 0, 255).quantize(4)
    assert p.color == (127, 0, 255)
    with pytest.raises(InvalidParameterError):
        p.quantize(0)


def test_pixel_mean():
    assert PixelSample(10, 20, 31).mean == 20

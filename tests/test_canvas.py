"""Tests for the per-frame canvas driver."""

import logging

import pytest
from PIL import Image

from ascii_frame.canvas import Canvas
from ascii_frame.errors import InvalidParameterError
from tests.conftest import rgba_bytes


def test_frame_before_any_buffer(cfg):
    assert Canvas(cfg, (4, 2)).frame() == [[("", "")]]


def test_push_buffer_runs_pipeline(cfg):
    canvas = Canvas(cfg, (4, 2))
    buf = rgba_bytes([[(x * 30, 0, 0) for x in range(8)] for _ in range(4)])
    out = canvas.push_buffer(buf, 8, 4)
    assert out.size == (4, 2)
    assert all(p.glyph is not None for p in out.pixels)
    frame = canvas.frame(use_color=False)
    assert len(frame) == 2
    assert sum(len(text) for _, text in frame[0]) == 4


def test_push_buffer_survives_size_mismatch(cfg, caplog):
    canvas = Canvas(cfg, (3, 3))
    with caplog.at_level(logging.WARNING):
        out = canvas.push_buffer(b"\x00" * 5, 8, 4)
    assert out.size == (3, 3)
    assert all(p.color == (0, 0, 0) for p in out.pixels)


def test_push_empty_frame_keeps_last(cfg):
    canvas = Canvas(cfg, (2, 2))
    first = canvas.push_image(Image.new("RGB", (4, 4), (200, 10, 10)))
    assert canvas.push_buffer(b"", 0, 0) is first


def test_bgra_capture(cfg):
    cfg.update({"capture": {"color_format": "bgra8"}, "pipeline": {"edge_overlay": False}})
    canvas = Canvas(cfg, (1, 1))
    out = canvas.push_buffer(rgba_bytes([[(10, 20, 30)]]), 1, 1)
    assert out.pixels[0].color == (30, 20, 10)


def test_resize(cfg):
    canvas = Canvas(cfg, (4, 2))
    canvas.resize(6, 3)
    out = canvas.push_image(Image.new("RGB", (10, 10)))
    assert out.size == (6, 3)
    with pytest.raises(InvalidParameterError):
        canvas.resize(0, 3)


def test_added_seams_checked_on_resize(cfg):
    cfg.update({"pipeline": {"seams": 6, "seam_mode": "add", "edge_overlay": False}})
    with pytest.raises(InvalidParameterError):
        Canvas(cfg, (10, 4))
    canvas = Canvas(cfg, (20, 4))
    with pytest.raises(InvalidParameterError):
        canvas.resize(10, 4)
    assert canvas.size == (20, 4)
    assert canvas.push_image(Image.new("RGB", (20, 8))).size == (20, 4)

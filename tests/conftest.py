"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from ascii_frame.config import Config
from ascii_frame.raster import Raster


def solid(width, height, color=(0, 0, 0)):
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[...] = color
    return Raster.from_array(arr)


def gray(rows):
    """Raster from rows of gray levels."""
    a = np.array(rows, dtype=np.uint8)
    return Raster.from_array(np.repeat(a[..., None], 3, axis=2))


def rgba_bytes(rows):
    """Flatten rows of (r, g, b) tuples into an RGBA8 buffer."""
    out = bytearray()
    for row in rows:
        for r, g, b in row:
            out += bytes((r, g, b, 255))
    return bytes(out)


CENTER_DOT = [
    [0, 0, 0],
    [0, 255, 0],
    [0, 0, 0],
]


@pytest.fixture
def center_dot():
    return gray(CENTER_DOT)


@pytest.fixture
def noisy():
    rng = np.random.default_rng(7)
    return Raster.from_array(rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8))


@pytest.fixture
def cfg(tmp_path):
    return Config.load(str(tmp_path / "cfg.json"), create_if_missing=False)

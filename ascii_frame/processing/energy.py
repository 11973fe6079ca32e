#!/usr/bin/env python3
# ascii_frame/processing/energy.py
"""
Gradient-magnitude energy from a 3x3 kernel pair.

Pipeline:
  1. luminance(): plain integer mean (r+g+b)//3 per pixel. This is not the
     Rec. 601 weighted luma used by rendering/preview.py.
  2. gradients(): correlate each 3x3 neighbourhood with the x and y kernels.
     Neighbours outside the grid repeat the nearest edge sample ("edge"), so
     flat regions carry zero energy right up to the border. "zero" treats
     them as contributing nothing instead.
  3. magnitude = rint(sqrt(gx^2 + gy^2)), saturated into int32.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from ascii_frame.errors import InvalidParameterError
from ascii_frame.raster import Raster

__all__ = ["Kernel", "EnergyGrid", "luminance", "gradients", "grayscale_energy"]

_INT32_MAX = np.iinfo(np.int32).max

_SOBEL = (
    np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.int64),
    np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.int64),
)
_PREWITT = (
    np.array([[-1, 0, 1], [-1, 0, 1], [-1, 0, 1]], dtype=np.int64),
    np.array([[-1, -1, -1], [0, 0, 0], [1, 1, 1]], dtype=np.int64),
)


class Kernel(Enum):
    SOBEL = "sobel"
    PREWITT = "prewitt"

    def matrices(self) -> Tuple[np.ndarray, np.ndarray]:
        kx, ky = _SOBEL if self is Kernel.SOBEL else _PREWITT
        return kx.copy(), ky.copy()

    @classmethod
    def parse(cls, value) -> "Kernel":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidParameterError(f"unknown kernel: {value!r}") from None


@dataclass
class EnergyGrid:
    """Per-pixel signed integer cost, shape (height, width)."""
    values: np.ndarray

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.int32)
        if self.values.ndim != 2:
            raise InvalidParameterError(f"energy grid must be 2D, got shape {self.values.shape}")

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    def rows(self):
        return self.values.tolist()

    def __getitem__(self, idx):
        return self.values[idx]

    def to_raster(self) -> Raster:
        """Replicate each cell (saturated to 0..255) into R=G=B."""
        gray = np.clip(self.values, 0, 255).astype(np.uint8)
        return Raster.from_array(np.repeat(gray[..., None], 3, axis=2))


def luminance(raster: Raster) -> np.ndarray:
    arr = raster.to_array().astype(np.int32)
    return arr.sum(axis=2) // 3


_BOUNDARIES = {"edge": "edge", "zero": "constant"}


def gradients(
    lum: np.ndarray,
    kernel: Kernel = Kernel.SOBEL,
    boundary: str = "edge",
) -> Tuple[np.ndarray, np.ndarray]:
    if boundary not in _BOUNDARIES:
        raise InvalidParameterError(f"unknown boundary mode: {boundary!r}")
    kx, ky = Kernel.parse(kernel).matrices()
    lum = np.asarray(lum, dtype=np.int64)
    h, w = lum.shape
    if h == 0 or w == 0:
        return np.zeros((h, w), dtype=np.int64), np.zeros((h, w), dtype=np.int64)
    padded = np.pad(lum, 1, mode=_BOUNDARIES[boundary])
    gx = np.zeros((h, w), dtype=np.int64)
    gy = np.zeros((h, w), dtype=np.int64)
    for j in range(3):
        for i in range(3):
            window = padded[j:j + h, i:i + w]
            gx += kx[j, i] * window
            gy += ky[j, i] * window
    return gx, gy


def grayscale_energy(raster: Raster, kernel: Kernel = Kernel.SOBEL, boundary: str = "edge") -> EnergyGrid:
    if not raster.is_valid():
        raise InvalidParameterError("raster pixel count does not match its size")
    gx, gy = gradients(luminance(raster), kernel, boundary)
    mag = np.rint(np.sqrt((gx * gx + gy * gy).astype(np.float64)))
    return EnergyGrid(np.clip(mag, 0, _INT32_MAX).astype(np.int32))

#!/usr/bin/env python3
# ascii_frame/errors.py
"""
Error taxonomy for the frame pipeline.

- SizeMismatchError: raw buffer length disagrees with declared size x stride.
- DimensionMismatchError: two rasters that must be congruent are not.
- InvalidParameterError: bad shade count, scaling mode, seam count, ramp...
"""

from __future__ import annotations

__all__ = [
    "RasterError",
    "SizeMismatchError",
    "DimensionMismatchError",
    "InvalidParameterError",
]


class RasterError(Exception):
    """Base class for every pipeline failure."""


class SizeMismatchError(RasterError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"buffer holds {actual} bytes, expected {expected}")
        self.expected = expected
        self.actual = actual


class DimensionMismatchError(RasterError):
    def __init__(self, a, b):
        super().__init__(f"raster sizes differ: {a[0]}x{a[1]} vs {b[0]}x{b[1]}")
        self.a = a
        self.b = b


class InvalidParameterError(RasterError, ValueError):
    pass

#!/usr/bin/env python3
# ascii_frame/processing/composite.py
"""
Per-pixel compositing of two congruent rasters.

mask_ontop() keeps the base pixel where the two images disagree in mean
luminance by more than `threshold`, and the overlay pixel elsewhere. Fed an
edge map as base and the color frame as overlay, flat regions show the
original colors while strong edges stay visible.
"""

from __future__ import annotations

import numpy as np

from ascii_frame.errors import DimensionMismatchError, InvalidParameterError
from ascii_frame.raster import Raster

__all__ = ["mask_ontop"]


def mask_ontop(base: Raster, overlay: Raster, threshold: int) -> Raster:
    if base.size != overlay.size:
        raise DimensionMismatchError(base.size, overlay.size)
    if not (0 <= threshold <= 255):
        raise InvalidParameterError(f"threshold must be within 0..255, got {threshold}")

    lum_a = base.to_array().astype(np.int32).sum(axis=2) // 3
    lum_b = overlay.to_array().astype(np.int32).sum(axis=2) // 3
    keep_base = (np.abs(lum_a - lum_b) > threshold).ravel().tolist()

    pixels = [
        a if keep else b.with_position(a.x, a.y)
        for a, b, keep in zip(base.pixels, overlay.pixels, keep_base)
    ]
    return Raster(pixels, base.width, base.height)

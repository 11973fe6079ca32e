#!/usr/bin/env python3
# ascii_frame/pixel.py
"""Single color sample with a grid position and an optional display glyph."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ascii_frame.errors import InvalidParameterError

__all__ = ["PixelSample", "clamp_u8"]


def clamp_u8(v: float) -> int:
    """Saturate into 0..255, truncating like an integer cast."""
    if v != v:  # NaN
        return 0
    if v <= 0:
        return 0
    if v >= 255:
        return 255
    return int(v)


@dataclass(frozen=True)
class PixelSample:
    r: int = 0
    g: int = 0
    b: int = 0
    x: int = 0
    y: int = 0
    glyph: Optional[str] = None

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    @property
    def mean(self) -> int:
        """Unweighted integer mean of the three channels."""
        return (self.r + self.g + self.b) // 3

    def with_color(self, r: int, g: int, b: int) -> "PixelSample":
        return replace(self, r=r, g=g, b=b)

    def with_position(self, x: int, y: int) -> "PixelSample":
        return replace(self, x=x, y=y)

    def with_glyph(self, glyph: Optional[str]) -> "PixelSample":
        return replace(self, glyph=glyph)

    def quantize(self, shades: int) -> "PixelSample":
        """Snap each channel onto `shades` evenly spaced levels."""
        if shades < 1:
            raise InvalidParameterError(f"quantize needs at least 1 shade, got {shades}")
        step = 255.0 / shades

        def snap(c: int) -> int:
            return clamp_u8(math.floor(shades * c / 255.0 + 0.5) * step)

        return self.with_color(snap(self.r), snap(self.g), snap(self.b))

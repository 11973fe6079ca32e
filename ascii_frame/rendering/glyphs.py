#!/usr/bin/env python3
# ascii_frame/rendering/glyphs.py
"""
Luminance to glyph mapping.

Each pixel's mean channel value picks ramp[floor(mean / 255 * len(ramp))],
clamped to the last glyph. The ramp direction is the caller's choice.
"""

from __future__ import annotations

import math
from typing import Dict, List

from ascii_frame.errors import InvalidParameterError
from ascii_frame.raster import Raster

__all__ = ["default_ramps", "glyph_index", "map_to_glyphs", "glyph_rows", "to_text"]


def default_ramps() -> Dict[str, str]:
    return {
        "dot_only": " .",
        "ascii_basic": " .:-=+*#%@",
        "ascii_inverse": "@%#*+=-:. ",
        "ascii_dense": " .'`^\",:;Il!i~+_-?][}{1)(|\\/*tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$",
        "blocks": " ▏▎▍▌▋▊▉█",
        "shades": " ░▒▓█",
    }


def glyph_index(r: int, g: int, b: int, ramp_len: int) -> int:
    mean = (r + g + b) / 3.0
    return min(int(math.floor(mean / 255.0 * ramp_len)), ramp_len - 1)


def map_to_glyphs(raster: Raster, ramp: str) -> Raster:
    """Return a copy of `raster` with a glyph assigned to every pixel."""
    glyphs: List[str] = list(ramp)
    if not glyphs:
        raise InvalidParameterError("glyph ramp must not be empty")
    n = len(glyphs)
    pixels = [p.with_glyph(glyphs[glyph_index(p.r, p.g, p.b, n)]) for p in raster.pixels]
    return Raster(pixels, raster.width, raster.height)


def glyph_rows(raster: Raster, blank: str = " ") -> List[str]:
    return ["".join(p.glyph or blank for p in row) for row in raster.rows()]


def to_text(raster: Raster) -> str:
    return "\n".join(glyph_rows(raster))

#!/usr/bin/env python3
# ascii_frame/rendering/preview.py
"""
Quick ASCII preview straight from a raw RGBA buffer.

Uses Rec. 601 weighted luma (0.299 R + 0.587 G + 0.114 B), unlike the
energy engine and glyph mapper which use the plain channel mean.
"""

from __future__ import annotations

import logging

import numpy as np

log = logging.getLogger(__name__)

__all__ = ["PREVIEW_RAMP", "rgba_to_grayscale", "buffer_to_ascii"]

PREVIEW_RAMP = "@%#*+=-:. "


def rgba_to_grayscale(buffer: bytes, width: int, height: int) -> np.ndarray:
    """Return an (H, W) uint8 luma grid; all zeros when the buffer size is off."""
    if len(buffer) != width * height * 4:
        log.warning("Preview buffer size %d does not match %dx%d RGBA", len(buffer), width, height)
        return np.zeros((height, width), dtype=np.uint8)
    arr = np.frombuffer(bytes(buffer), dtype=np.uint8).reshape(height, width, 4).astype(np.float32)
    luma = 0.299 * arr[..., 0] + 0.587 * arr[..., 1] + 0.114 * arr[..., 2]
    return luma.astype(np.uint8)


def buffer_to_ascii(buffer: bytes, width: int, height: int, ramp: str = PREVIEW_RAMP) -> str:
    """Render a raw RGBA buffer as newline terminated rows of ramp glyphs."""
    if len(buffer) != width * height * 4:
        log.warning("Preview skipped: buffer size does not match %dx%d", width, height)
        return ""
    gray = rgba_to_grayscale(buffer, width, height).astype(np.int32)
    glyphs = np.array(list(ramp))
    idx = gray * (len(glyphs) - 1) // 255
    return "".join("".join(glyphs[row].tolist()) + "\n" for row in idx)

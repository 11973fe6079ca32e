#!/usr/bin/env python3
# ascii_frame/raster.py
"""
Raster: owned row-major grid of PixelSample plus explicit width/height.

Every stage in processing/ and rendering/ consumes and produces a Raster.
Construction paths:
- Raster.from_buffer(): raw capture bytes (RGBA8, BGRA8 or RGBA16F).
- Raster.from_array() / to_array(): (H, W, 3) uint8 numpy bridge.
- Raster.from_image() / to_image(): Pillow bridge for file based input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from ascii_frame.errors import InvalidParameterError, SizeMismatchError
from ascii_frame.pixel import PixelSample

log = logging.getLogger(__name__)

__all__ = ["Raster", "ColorFormat", "Size"]

Size = Tuple[int, int]                    # (width, height)


class ColorFormat(Enum):
    """Capture buffer layouts."""
    RGBA8 = "rgba8"
    BGRA8 = "bgra8"
    RGBA16F = "rgba16f"

    @property
    def stride(self) -> int:
        return 8 if self is ColorFormat.RGBA16F else 4

    @property
    def bgr(self) -> bool:
        return self is ColorFormat.BGRA8

    @classmethod
    def parse(cls, value) -> "ColorFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidParameterError(f"unknown color format: {value!r}") from None


def _decode(buffer: bytes, width: int, height: int, stride: int, bgr: bool) -> np.ndarray:
    if stride == 4:
        arr = np.frombuffer(buffer, dtype=np.uint8).reshape(height, width, 4)[..., :3]
    else:
        # Four little-endian half floats per sample, nominal range [0, 1]
        half = np.frombuffer(buffer, dtype="<f2").reshape(height, width, 4)[..., :3]
        scaled = np.nan_to_num(half.astype(np.float32), nan=0.0, posinf=1.0, neginf=0.0)
        arr = np.clip(np.floor(scaled * 255.0 + 0.5), 0, 255).astype(np.uint8)
    if bgr:
        arr = arr[..., ::-1]
    return arr


@dataclass
class Raster:
    pixels: List[PixelSample] = field(default_factory=list)
    width: int = 0
    height: int = 0

    # -------------------------
    # Construction
    # -------------------------

    @classmethod
    def black(cls, width: int, height: int) -> "Raster":
        pixels = [PixelSample(0, 0, 0, x, y) for y in range(height) for x in range(width)]
        return cls(pixels, width, height)

    @classmethod
    def from_buffer(
        cls,
        buffer: bytes,
        width: int,
        height: int,
        stride: int = 4,
        bgr: bool = False,
        strict: bool = False,
    ) -> "Raster":
        """
        Ingest an interleaved capture buffer.

        A buffer whose length disagrees with width*height*stride is a transient
        capture condition: it is logged and an all-black raster of the declared
        size comes back so a render loop can carry on. Pass strict=True to get
        SizeMismatchError instead.
        """
        if stride not in (4, 8):
            raise InvalidParameterError(f"channel stride must be 4 or 8, got {stride}")
        if width < 0 or height < 0:
            raise InvalidParameterError(f"negative raster size {width}x{height}")

        expected = width * height * stride
        if len(buffer) != expected:
            if strict:
                raise SizeMismatchError(expected, len(buffer))
            log.warning(
                "Buffer size mismatch: got %d bytes for %dx%d (stride %d), expected %d",
                len(buffer), width, height, stride, expected,
            )
            return cls.black(width, height)

        return cls.from_array(_decode(bytes(buffer), width, height, stride, bgr))

    @classmethod
    def from_format(cls, buffer: bytes, width: int, height: int, fmt: ColorFormat) -> "Raster":
        return cls.from_buffer(buffer, width, height, stride=fmt.stride, bgr=fmt.bgr)

    @classmethod
    def from_array(cls, arr: np.ndarray, glyphs: Optional[List[str]] = None) -> "Raster":
        if arr.ndim != 3 or arr.shape[2] < 3:
            raise InvalidParameterError(f"expected (H, W, 3) array, got shape {arr.shape}")
        h, w = arr.shape[:2]
        rgb = np.clip(arr[..., :3], 0, 255).astype(np.uint8).tolist()
        pixels = []
        for y, row in enumerate(rgb):
            for x, (r, g, b) in enumerate(row):
                pixels.append(PixelSample(r, g, b, x, y))
        if glyphs is not None:
            pixels = [p.with_glyph(ch) for p, ch in zip(pixels, glyphs)]
        return cls(pixels, w, h)

    @classmethod
    def from_image(cls, img: Image.Image) -> "Raster":
        if img.mode != "RGB":
            img = img.convert("RGB")
        return cls.from_array(np.asarray(img, dtype=np.uint8))

    # -------------------------
    # Export
    # -------------------------

    def to_array(self) -> np.ndarray:
        """Return an (H, W, 3) uint8 array of the color channels."""
        if not self.pixels:
            return np.zeros((self.height, self.width, 3), dtype=np.uint8)
        flat = np.array([p.color for p in self.pixels], dtype=np.uint8)
        return flat.reshape(self.height, self.width, 3)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_array(), "RGB")

    # -------------------------
    # Access
    # -------------------------

    @property
    def size(self) -> Size:
        return self.width, self.height

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def get_pixel(self, x: int, y: int) -> PixelSample:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height}")
        return self.pixels[self.index(x, y)]

    def rows(self) -> List[List[PixelSample]]:
        w = self.width
        return [self.pixels[y * w:(y + 1) * w] for y in range(self.height)]

    def is_valid(self) -> bool:
        return len(self.pixels) == self.width * self.height

    def copy(self) -> "Raster":
        return Raster(list(self.pixels), self.width, self.height)

    @classmethod
    def from_rows(cls, rows: List[List[PixelSample]]) -> "Raster":
        """Rebuild from rows of samples, reassigning positions."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        pixels = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise InvalidParameterError("ragged rows")
            for x, p in enumerate(row):
                pixels.append(p.with_position(x, y))
        return cls(pixels, width, height)

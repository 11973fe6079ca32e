#!/usr/bin/env python3
# ascii_frame/processing/filters.py
"""
Filter objects and the pipeline that chains them.

Every filter carries its own parameters and exposes apply(raster) -> Raster.
Filters never touch their input; each returns a fresh raster, so a failed
step leaves the caller's raster as it was.

Usage:
    pipe = Pipeline([Scale((80, 24)), EdgeOverlay(threshold=24), Ascii(" .:-=+*#%@")])
    out = pipe.apply(raster)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from ascii_frame.errors import InvalidParameterError
from ascii_frame.pixel import clamp_u8
from ascii_frame.processing.composite import mask_ontop
from ascii_frame.processing.energy import Kernel, grayscale_energy
from ascii_frame.processing.scaling import Scaling, resize
from ascii_frame.processing.seams import SeamSearch, carve, enlarge
from ascii_frame.raster import Raster, Size
from ascii_frame.rendering.glyphs import default_ramps, map_to_glyphs

log = logging.getLogger(__name__)

__all__ = [
    "Filter",
    "Flip",
    "Quantize",
    "Grayscale",
    "Brightness",
    "Scale",
    "GradientMagnitude",
    "MaskOntop",
    "EdgeOverlay",
    "SeamCarve",
    "Ascii",
    "Pipeline",
]


class Filter:
    """Interface for all filters."""
    name: str = "base"

    def apply(self, raster: Raster) -> Raster:
        raise NotImplementedError


@dataclass
class Flip(Filter):
    horizontal: bool = True
    vertical: bool = False
    name = "flip"

    def apply(self, raster: Raster) -> Raster:
        if not raster.pixels or not raster.is_valid():
            raise InvalidParameterError("cannot flip an empty or malformed raster")
        rows = raster.rows()
        if self.vertical:
            rows = rows[::-1]
        if self.horizontal:
            rows = [row[::-1] for row in rows]
        return Raster.from_rows(rows)


@dataclass
class Quantize(Filter):
    shades: int = 8
    name = "quantize"

    def apply(self, raster: Raster) -> Raster:
        if self.shades < 1:
            raise InvalidParameterError(f"quantize needs at least 1 shade, got {self.shades}")
        return Raster([p.quantize(self.shades) for p in raster.pixels], raster.width, raster.height)


@dataclass
class Grayscale(Filter):
    """Average the channels, then round up onto `shades` gray levels."""
    shades: int = 16
    name = "grayscale"

    def apply(self, raster: Raster) -> Raster:
        if not (2 <= self.shades <= 255):
            raise InvalidParameterError(f"shades must be between 2 and 255, got {self.shades}")
        factor = 255 // (self.shades - 1)
        pixels = []
        for p in raster.pixels:
            average = (p.r + p.g + p.b) / 3.0
            gray = clamp_u8(math.ceil(average / factor) * factor)
            pixels.append(p.with_color(gray, gray, gray))
        return Raster(pixels, raster.width, raster.height)


@dataclass
class Brightness(Filter):
    value: int = 0
    name = "brightness"

    def apply(self, raster: Raster) -> Raster:
        v = int(self.value)
        pixels = [
            p.with_color(clamp_u8(p.r + v), clamp_u8(p.g + v), clamp_u8(p.b + v))
            for p in raster.pixels
        ]
        return Raster(pixels, raster.width, raster.height)


@dataclass
class Scale(Filter):
    size: Size = (80, 24)
    scaling: Scaling = Scaling.NEAREST
    name = "scale"

    def apply(self, raster: Raster) -> Raster:
        if raster.size == tuple(self.size):
            return raster.copy()
        return resize(raster, self.size, self.scaling)


@dataclass
class GradientMagnitude(Filter):
    kernel: Kernel = Kernel.SOBEL
    name = "gradient"

    def apply(self, raster: Raster) -> Raster:
        return grayscale_energy(raster, self.kernel).to_raster()


@dataclass
class MaskOntop(Filter):
    """Composite a fixed overlay under the incoming raster."""
    other: Raster = field(default_factory=Raster)
    threshold: int = 0
    name = "mask"

    def apply(self, raster: Raster) -> Raster:
        return mask_ontop(raster, self.other, self.threshold)


@dataclass
class EdgeOverlay(Filter):
    """
    Edge map of the input, falling back to the input pixel wherever the two
    agree in luminance within `threshold`.
    """
    kernel: Kernel = Kernel.SOBEL
    threshold: int = 24
    name = "edges"

    def apply(self, raster: Raster) -> Raster:
        edges = grayscale_energy(raster, self.kernel).to_raster()
        return mask_ontop(edges, raster, self.threshold)


@dataclass
class SeamCarve(Filter):
    count: int = 0
    kernel: Kernel = Kernel.SOBEL
    search: SeamSearch = SeamSearch.GREEDY
    grow: bool = False
    name = "seams"

    def apply(self, raster: Raster) -> Raster:
        if self.count == 0:
            return raster.copy()
        op = enlarge if self.grow else carve
        return op(raster, self.count, self.kernel, self.search)


@dataclass
class Ascii(Filter):
    ramp: str = default_ramps()["ascii_basic"]
    name = "ascii"

    def apply(self, raster: Raster) -> Raster:
        return map_to_glyphs(raster, self.ramp)


# -------------------------
# Pipeline
# -------------------------

@dataclass
class Pipeline:
    filters: List[Filter] = field(default_factory=list)

    def add(self, f: Filter) -> "Pipeline":
        self.filters.append(f)
        return self

    def apply(self, raster: Raster) -> Raster:
        out = raster
        for f in self.filters:
            out = f.apply(out)
        return out

    @classmethod
    def from_config(cls, cfg, size: Optional[Size] = None) -> "Pipeline":
        """
        Build the standard chain from the "pipeline" and "render" sections.

        Scaling targets `size` (or the configured width/height) widened or
        narrowed by the seam count, so carving lands on the requested size.
        """
        p = cfg["pipeline"]
        width, height = size if size else (int(p["width"]), int(p["height"]))
        if width < 1 or height < 1:
            raise InvalidParameterError(f"target size must be positive, got {width}x{height}")
        kernel = Kernel.parse(p.get("kernel", "sobel"))
        seams = int(p.get("seams", 0))
        grow = p.get("seam_mode", "remove") == "add"

        pipe = cls()
        if p.get("flip_horizontal") or p.get("flip_vertical"):
            pipe.add(Flip(bool(p.get("flip_horizontal")), bool(p.get("flip_vertical"))))

        scaled_w = width - seams if grow else width + seams
        if scaled_w < 1:
            raise InvalidParameterError(f"{seams} seams leave no columns at width {width}")
        if grow and seams > scaled_w:
            raise InvalidParameterError(f"cannot add {seams} seams to {scaled_w} scaled columns")
        pipe.add(Scale((scaled_w, height), Scaling.parse(p.get("scaling", "nearest"))))

        if p.get("brightness"):
            pipe.add(Brightness(int(p["brightness"])))
        if p.get("quantize_shades"):
            pipe.add(Quantize(int(p["quantize_shades"])))
        if p.get("grayscale_shades"):
            pipe.add(Grayscale(int(p["grayscale_shades"])))
        if p.get("edge_overlay"):
            pipe.add(EdgeOverlay(kernel, int(p.get("mask_threshold", 24))))
        if seams:
            pipe.add(SeamCarve(seams, kernel, SeamSearch.parse(p.get("seam_search", "greedy")), grow))

        ramps = default_ramps()
        palette = cfg["render"].get("palette") or "ascii_basic"
        pipe.add(Ascii(ramps.get(palette, ramps["ascii_basic"])))

        log.debug("Pipeline for %dx%d: %s", width, height, ", ".join(f.name for f in pipe.filters))
        return pipe

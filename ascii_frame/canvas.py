#!/usr/bin/env python3
# ascii_frame/canvas.py
"""
Per-frame driver between a capture source and a terminal renderer.

The capture loop hands each raw buffer to Canvas.push_buffer(); the canvas
ingests it with the configured color format, runs the configured pipeline
at the current target size and keeps the result. frame() turns the last
result into prompt_toolkit style runs. One canvas per capture loop: it holds
its raster exclusively and shares nothing with other canvases.
"""

from __future__ import annotations

import logging
from typing import Optional

from ascii_frame.config import Config
from ascii_frame.errors import InvalidParameterError
from ascii_frame.processing.filters import Pipeline
from ascii_frame.raster import ColorFormat, Raster, Size
from ascii_frame.rendering.renderer import FrameFrag, Renderer

log = logging.getLogger(__name__)

__all__ = ["Canvas"]


class Canvas:
    def __init__(self, cfg: Config, size: Optional[Size] = None, renderer: Optional[Renderer] = None):
        self.cfg = cfg
        self.color_format = ColorFormat.parse(cfg.color_format)
        self.renderer = renderer or Renderer(cfg["render"].get("mode", "glyph"))
        self.size: Size = (0, 0)
        self.pipeline: Pipeline = Pipeline()
        self.raster: Optional[Raster] = None
        self.resize(*(size or cfg.target_size))

    def resize(self, width: int, height: int) -> None:
        """Retarget the pipeline, e.g. after the terminal changed size."""
        if width < 1 or height < 1:
            raise InvalidParameterError(f"canvas size must be positive, got {width}x{height}")
        size = (int(width), int(height))
        self.pipeline = Pipeline.from_config(self.cfg, size)
        self.size = size
        log.debug("Canvas resized to %dx%d", width, height)

    def push_buffer(self, buffer: bytes, width: int, height: int) -> Raster:
        """Ingest one captured frame and run it through the pipeline."""
        source = Raster.from_format(buffer, width, height, self.color_format)
        if source.width < 1 or source.height < 1:
            log.warning("Dropping empty %dx%d frame", width, height)
            return self.raster if self.raster is not None else Raster.black(*self.size)
        self.raster = self.pipeline.apply(source)
        return self.raster

    def push_image(self, img) -> Raster:
        """Same as push_buffer() for a Pillow image."""
        self.raster = self.pipeline.apply(Raster.from_image(img))
        return self.raster

    def frame(self, use_color: Optional[bool] = None) -> FrameFrag:
        if self.raster is None:
            return [[("", "")]]
        if use_color is None:
            use_color = bool(self.cfg["render"].get("color", True))
        return self.renderer.render(self.raster, use_color, self.cfg["render"].get("mode"))

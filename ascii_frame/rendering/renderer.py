#!/usr/bin/env python3
# ascii_frame/rendering/renderer.py
"""
Rendering dispatcher and terminal backends.

- Common API: Renderer.render(raster, use_color, mode)
- Backends may register via Renderer.register(mode, backend)
- Style format: list[list[tuple[str, str]]] suitable for prompt_toolkit FormattedText
  where style strings use "fg:#RRGGBB" tokens.

Backends:
- glyph: each pixel's glyph (or a full block when none was assigned),
  optionally colored with the pixel's RGB.
- block: one full block per pixel in the pixel's color.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from prompt_toolkit.formatted_text import FormattedText

from ascii_frame.raster import Raster

StyleRun = Tuple[str, str]                # (style, text)
LineFrag = List[StyleRun]                 # one terminal row as runs
FrameFrag = List[LineFrag]                # full terminal frame as rows

FULL_BLOCK = "█"

__all__ = [
    "Renderer",
    "RenderBackend",
    "GlyphBackend",
    "BlockBackend",
    "to_formatted_text",
    "StyleRun",
    "LineFrag",
    "FrameFrag",
]


def _rgb_to_style(r: int, g: int, b: int) -> str:
    # prompt_toolkit accepts "fg:#RRGGBB"
    return f"fg:#{r:02x}{g:02x}{b:02x}"


def _merge_runs(cells: List[StyleRun]) -> LineFrag:
    """Collapse neighbouring cells that share a style."""
    line: LineFrag = []
    run_style = None
    run_text: List[str] = []
    for style, ch in cells:
        if style != run_style and run_text:
            line.append((run_style, "".join(run_text)))
            run_text = []
        run_style = style
        run_text.append(ch)
    if run_text:
        line.append((run_style, "".join(run_text)))
    return line if line else [("", "")]


class RenderBackend:
    """Interface for all renderers."""
    name: str = "base"

    def cell(self, r: int, g: int, b: int, glyph) -> str:
        raise NotImplementedError

    def render(self, raster: Raster, use_color: bool) -> FrameFrag:
        if raster.width < 1 or raster.height < 1:
            return [[("", "")]]
        frame: FrameFrag = []
        for row in raster.rows():
            cells = [
                (_rgb_to_style(p.r, p.g, p.b) if use_color else "", self.cell(p.r, p.g, p.b, p.glyph))
                for p in row
            ]
            frame.append(_merge_runs(cells))
        return frame


class GlyphBackend(RenderBackend):
    name = "glyph"

    def cell(self, r, g, b, glyph) -> str:
        return glyph or FULL_BLOCK


class BlockBackend(RenderBackend):
    name = "block"

    def cell(self, r, g, b, glyph) -> str:
        return FULL_BLOCK


def to_formatted_text(frame: FrameFrag) -> FormattedText:
    """Flatten a frame into one FormattedText with newlines between rows."""
    runs: List[StyleRun] = []
    for i, line in enumerate(frame):
        if i:
            runs.append(("", "\n"))
        runs.extend(line)
    return FormattedText(runs)


# -------------------------
# Dispatcher
# -------------------------

@dataclass
class Renderer:
    """
    Rendering strategy holder.
    Use register() to add new modes.
    """
    default_mode: str = "glyph"

    def __post_init__(self):
        self._backends: Dict[str, RenderBackend] = {}
        self.register("glyph", GlyphBackend())
        self.register("block", BlockBackend())

    def register(self, mode: str, backend: RenderBackend) -> None:
        self._backends[mode] = backend

    @property
    def modes(self) -> List[str]:
        return sorted(self._backends)

    def render(self, raster: Raster, use_color: bool = True, mode: str = None) -> FrameFrag:
        backend = self._backends.get(mode or self.default_mode)
        if backend is None:
            # Fallback to glyph if unknown mode requested
            backend = self._backends["glyph"]
        return backend.render(raster, use_color)

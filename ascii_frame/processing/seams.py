#!/usr/bin/env python3
# ascii_frame/processing/seams.py
"""
Vertical seam search, removal and duplication over an EnergyGrid.

Two search strategies:
- GREEDY (default): pick the top-row column with the lowest projected cost
  (its energy plus the cheapest of the three reachable cells one row below),
  then walk down choosing the cheapest of left / same / right. Same column
  wins ties; left needs to be strictly lower than same; right needs to be
  strictly lower than the current pick. Fast, not globally optimal.
- DYNAMIC: full cumulative-minimum table, traced back from the cheapest
  bottom cell. Globally optimal per seam.

Seams are found one after another against a grid that shrinks by one cell
per row each time. A per-row column map translates every seam back into the
columns of the grid handed to find_seams(), so remove_seams() and
add_seams() can apply the whole set in a single pass per row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from ascii_frame.errors import InvalidParameterError
from ascii_frame.processing.energy import EnergyGrid, Kernel, grayscale_energy
from ascii_frame.raster import Raster

log = logging.getLogger(__name__)

__all__ = [
    "Seam",
    "SeamSearch",
    "find_seams",
    "remove_seams",
    "add_seams",
    "carve",
    "enlarge",
]


@dataclass(frozen=True)
class Seam:
    """One column index per row, top to bottom."""
    columns: Tuple[int, ...]

    @property
    def start(self) -> int:
        return self.columns[0]

    def __len__(self) -> int:
        return len(self.columns)


class SeamSearch(Enum):
    GREEDY = "greedy"
    DYNAMIC = "dynamic"

    @classmethod
    def parse(cls, value) -> "SeamSearch":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidParameterError(f"unknown seam search: {value!r}") from None


# -------------------------
# Single seam search
# -------------------------

def _greedy_seam(e: np.ndarray) -> np.ndarray:
    h, w = e.shape
    top = e[0].astype(np.float64)
    if h > 1:
        below = np.pad(e[1].astype(np.float64), 1, constant_values=np.inf)
        projected = top + np.minimum(np.minimum(below[:-2], below[1:-1]), below[2:])
    else:
        projected = top
    col = int(np.argmin(projected))

    cols = np.empty(h, dtype=np.int64)
    cols[0] = col
    for y in range(1, h):
        row = e[y]
        pick, pick_e = col, row[col]
        if col > 0 and row[col - 1] < pick_e:
            pick, pick_e = col - 1, row[col - 1]
        if col < w - 1 and row[col + 1] < pick_e:
            pick = col + 1
        col = pick
        cols[y] = col
    return cols


def _dynamic_seam(e: np.ndarray) -> np.ndarray:
    h, w = e.shape
    cost = e.astype(np.float64)
    back = np.zeros((h, w), dtype=np.int64)
    idx = np.arange(w)
    for y in range(1, h):
        padded = np.pad(cost[y - 1], 1, constant_values=np.inf)
        choices = np.stack([padded[:-2], padded[1:-1], padded[2:]])
        # argmin on [left, same, right] prefers left on ties; reorder so same wins
        order = np.stack([choices[1], choices[0], choices[2]])
        best = np.argmin(order, axis=0)
        offset = np.array([0, -1, 1])[best]
        back[y] = idx + offset
        cost[y] += order[best, idx]

    cols = np.empty(h, dtype=np.int64)
    cols[-1] = int(np.argmin(cost[-1]))
    for y in range(h - 1, 0, -1):
        cols[y - 1] = back[y, cols[y]]
    return cols


_SEARCH: Dict[SeamSearch, Callable[[np.ndarray], np.ndarray]] = {
    SeamSearch.GREEDY: _greedy_seam,
    SeamSearch.DYNAMIC: _dynamic_seam,
}


# -------------------------
# Public API
# -------------------------

def find_seams(grid: EnergyGrid, count: int, search: SeamSearch = SeamSearch.GREEDY) -> List[Seam]:
    """
    Find `count` seams, removing each from a working copy before the next.

    Returned columns refer to `grid` itself, not to the shrunken copy.
    """
    search = SeamSearch.parse(search)
    if count < 0 or count > grid.width:
        raise InvalidParameterError(f"seam count {count} out of range for width {grid.width}")
    h = grid.height
    if h == 0:
        return [Seam(()) for _ in range(count)]

    work = grid.values.copy()
    col_map = np.tile(np.arange(grid.width, dtype=np.int64), (h, 1))
    rows = np.arange(h)
    seams: List[Seam] = []
    for _ in range(count):
        cols = _SEARCH[search](work)
        seams.append(Seam(tuple(int(c) for c in col_map[rows, cols])))

        cur_w = work.shape[1]
        mask = np.ones((h, cur_w), dtype=bool)
        mask[rows, cols] = False
        work = work[mask].reshape(h, cur_w - 1)
        col_map = col_map[mask].reshape(h, cur_w - 1)

    log.debug("Found %d %s seams on %dx%d grid", count, search.value, grid.width, h)
    return seams


def _row_targets(seams: Sequence[Seam], width: int, height: int, distinct: bool) -> List[List[int]]:
    for s in seams:
        if len(s) != height:
            raise InvalidParameterError(f"seam has {len(s)} rows, grid has {height}")
    targets = []
    for y in range(height):
        cols = sorted(s.columns[y] for s in seams)
        if cols and (cols[0] < 0 or cols[-1] >= width):
            raise InvalidParameterError(f"seam column out of range in row {y}")
        if distinct and len(set(cols)) != len(cols):
            raise InvalidParameterError(f"seams overlap in row {y}")
        targets.append(cols)
    return targets


def _drop(row: Sequence, targets: List[int]) -> list:
    out = []
    k = 0
    for j, v in enumerate(row):
        if k < len(targets) and targets[k] == j:
            k += 1
            continue
        out.append(v)
    return out


def _duplicate(row: Sequence, targets: List[int]) -> list:
    out = []
    k = 0
    for j, v in enumerate(row):
        out.append(v)
        while k < len(targets) and targets[k] == j:
            out.append(v)
            k += 1
    return out


def remove_seams(grid: EnergyGrid, seams: Sequence[Seam], interpolate_fill: bool = False) -> EnergyGrid:
    """Drop every seam cell from `grid`, one pass per row."""
    if interpolate_fill:
        raise NotImplementedError("interpolated seam fill is not supported")
    if len(seams) > grid.width:
        raise InvalidParameterError(f"{len(seams)} seams exceed width {grid.width}")
    targets = _row_targets(seams, grid.width, grid.height, distinct=True)
    rows = [_drop(row, t) for row, t in zip(grid.rows(), targets)]
    new_w = grid.width - len(seams)
    return EnergyGrid(np.array(rows, dtype=np.int32).reshape(grid.height, new_w))


def add_seams(grid: EnergyGrid, seams: Sequence[Seam]) -> EnergyGrid:
    """Duplicate the cell under every seam, widening each row by len(seams)."""
    targets = _row_targets(seams, grid.width, grid.height, distinct=False)
    rows = [_duplicate(row, t) for row, t in zip(grid.rows(), targets)]
    new_w = grid.width + len(seams)
    return EnergyGrid(np.array(rows, dtype=np.int32).reshape(grid.height, new_w))


# -------------------------
# Raster helpers
# -------------------------

def _apply_to_raster(raster: Raster, seams: Sequence[Seam], new_w: int, grow: bool) -> Raster:
    targets = _row_targets(seams, raster.width, raster.height, distinct=not grow)
    op = _duplicate if grow else _drop
    rows = [op(row, t) for row, t in zip(raster.rows(), targets)]
    if not rows:
        return Raster([], new_w, 0)
    if new_w == 0:
        return Raster([], 0, raster.height)
    return Raster.from_rows(rows)


def carve(
    raster: Raster,
    count: int,
    kernel: Kernel = Kernel.SOBEL,
    search: SeamSearch = SeamSearch.GREEDY,
) -> Raster:
    """Shrink `raster` by `count` columns along its lowest-energy seams."""
    seams = find_seams(grayscale_energy(raster, kernel), count, search)
    return _apply_to_raster(raster, seams, raster.width - count, grow=False)


def enlarge(
    raster: Raster,
    count: int,
    kernel: Kernel = Kernel.SOBEL,
    search: SeamSearch = SeamSearch.GREEDY,
) -> Raster:
    """Widen `raster` by `count` columns, duplicating its lowest-energy seams."""
    seams = find_seams(grayscale_energy(raster, kernel), count, search)
    return _apply_to_raster(raster, seams, raster.width + count, grow=True)

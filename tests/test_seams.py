"""Tests for seam search, removal and duplication."""

import numpy as np
import pytest

from ascii_frame.errors import InvalidParameterError
from ascii_frame.processing.energy import EnergyGrid
from ascii_frame.processing.seams import (
    Seam,
    SeamSearch,
    add_seams,
    carve,
    enlarge,
    find_seams,
    remove_seams,
)

GRID = EnergyGrid(np.array([
    [5, 1, 4, 9],
    [3, 8, 2, 7],
    [6, 0, 9, 1],
]))


def test_greedy_seam_uses_lookahead_and_neighbour_rules():
    seams = find_seams(GRID, 1)
    assert seams == [Seam((1, 2, 1))]
    assert seams[0].start == 1


def test_greedy_prefers_same_column_on_ties():
    grid = EnergyGrid(np.array([[9, 0, 9], [0, 0, 0]]))
    assert find_seams(grid, 1)[0].columns == (1, 1)


def test_greedy_right_must_undercut_current_pick():
    grid = EnergyGrid(np.array([[9, 0, 9], [1, 5, 0]]))
    assert find_seams(grid, 1)[0].columns == (1, 2)


def test_sequential_seams_map_back_to_original_columns():
    seams = find_seams(GRID, 2)
    assert [s.columns for s in seams] == [(1, 2, 1), (2, 0, 0)]


def test_remove_seams_matches_sequential_removal():
    out = remove_seams(GRID, find_seams(GRID, 2))
    assert out.values.tolist() == [[5, 9], [8, 7], [9, 1]]


def test_dynamic_search_finds_cheaper_path():
    grid = EnergyGrid(np.array([
        [0, 5, 5],
        [1, 5, 5],
        [9, 9, 0],
    ]))
    assert find_seams(grid, 1, SeamSearch.GREEDY)[0].columns == (0, 0, 0)
    assert find_seams(grid, 1, "dynamic")[0].columns == (0, 1, 2)


@pytest.mark.parametrize("search", list(SeamSearch))
@pytest.mark.parametrize("k", [1, 3, 4])
def test_remove_seams_shrinks_exactly(search, k):
    rng = np.random.default_rng(k)
    values = rng.permutation(30).reshape(6, 5)
    grid = EnergyGrid(values)
    out = remove_seams(grid, find_seams(grid, k, search))
    assert (out.width, out.height) == (5 - k, 6)
    for row_out, row_in in zip(out.values.tolist(), values.tolist()):
        # survivors come from the same row, in the same order
        positions = [row_in.index(v) for v in row_out]
        assert positions == sorted(positions)


def test_seams_stay_connected():
    rng = np.random.default_rng(3)
    grid = EnergyGrid(rng.integers(0, 100, size=(8, 10)))
    for s in find_seams(grid, 1) + find_seams(grid, 1, SeamSearch.DYNAMIC):
        assert all(abs(a - b) <= 1 for a, b in zip(s.columns, s.columns[1:]))


def test_find_seams_count_out_of_range():
    with pytest.raises(InvalidParameterError):
        find_seams(GRID, 5)
    with pytest.raises(InvalidParameterError):
        find_seams(GRID, -1)
    assert find_seams(GRID, 0) == []


def test_find_seams_whole_width():
    seams = find_seams(GRID, 4)
    assert remove_seams(GRID, seams).values.shape == (3, 0)


def test_single_row_grid():
    grid = EnergyGrid(np.array([[4, 2, 7]]))
    assert find_seams(grid, 1)[0].columns == (1,)


def test_interpolate_fill_is_not_silently_ignored():
    with pytest.raises(NotImplementedError):
        remove_seams(GRID, find_seams(GRID, 1), interpolate_fill=True)


def test_remove_seams_rejects_overlap():
    with pytest.raises(InvalidParameterError):
        remove_seams(GRID, [Seam((0, 0, 0)), Seam((0, 1, 1))])


def test_remove_seams_rejects_wrong_length():
    with pytest.raises(InvalidParameterError):
        remove_seams(GRID, [Seam((0, 0))])


def test_add_seams_duplicates_columns():
    grid = EnergyGrid(np.array([[1, 2, 3]]))
    assert add_seams(grid, [Seam((1,))]).values.tolist() == [[1, 2, 2, 3]]
    assert add_seams(grid, [Seam((0,)), Seam((2,))]).values.tolist() == [[1, 1, 2, 3, 3]]


def test_add_then_remove_restores_width():
    seams = find_seams(GRID, 2)
    assert add_seams(GRID, seams).width == 6


def test_carve_raster(noisy):
    out = carve(noisy, 3)
    assert out.size == (6, 6)
    assert out.is_valid()
    assert {p.position for p in out.pixels} == {(x, y) for y in range(6) for x in range(6)}
    src_rows = [[p.color for p in row] for row in noisy.rows()]
    for y, row in enumerate(out.rows()):
        assert all(p.color in src_rows[y] for p in row)


def test_enlarge_raster(noisy):
    out = enlarge(noisy, 2, search=SeamSearch.DYNAMIC)
    assert out.size == (11, 6)
    assert out.is_valid()

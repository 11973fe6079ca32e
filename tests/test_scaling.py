"""Tests for nearest and bilinear resampling."""

import pytest

from ascii_frame.errors import InvalidParameterError
from ascii_frame.processing.scaling import Scaling, resize
from tests.conftest import gray, solid


@pytest.mark.parametrize("mode", [Scaling.NEAREST, Scaling.BILINEAR])
@pytest.mark.parametrize("src,dst", [((3, 2), (5, 4)), ((4, 4), (1, 1)), ((5, 3), (2, 7)), ((6, 1), (1, 6))])
def test_resize_covers_every_position(noisy, mode, src, dst):
    raster = resize(noisy, src, Scaling.NEAREST)
    out = resize(raster, dst, mode)
    w, h = dst
    assert out.size == dst
    assert len(out.pixels) == w * h
    assert {p.position for p in out.pixels} == {(x, y) for y in range(h) for x in range(w)}


def test_nearest_samples_floor_positions():
    out = resize(gray([[0, 10, 20, 30]]), (2, 1), Scaling.NEAREST)
    assert [p.r for p in out.pixels] == [0, 20]


def test_bilinear_midpoint():
    out = resize(gray([[0, 100]]), (3, 1), Scaling.BILINEAR)
    assert [p.r for p in out.pixels] == [0, 50, 100]


def test_bilinear_rounds_half_up():
    out = resize(gray([[0, 1]]), (3, 1), "bilinear")
    assert out.pixels[1].r == 1


def test_bilinear_same_size_is_identity(noisy):
    out = resize(noisy, noisy.size, Scaling.BILINEAR)
    assert [p.color for p in out.pixels] == [p.color for p in noisy.pixels]


def test_bilinear_two_dimensional():
    src = gray([[0, 100], [100, 200]])
    out = resize(src, (3, 3), Scaling.BILINEAR)
    assert out.get_pixel(1, 1).r == 100
    assert out.get_pixel(2, 2).r == 200
    assert out.get_pixel(1, 0).r == 50


def test_bilinear_single_pixel_target_samples_origin():
    src = gray([[7, 50, 90], [60, 80, 100], [30, 20, 10]])
    out = resize(src, (1, 1), Scaling.BILINEAR)
    assert out.pixels[0].r == 7


def test_bilinear_single_column_keeps_vertical_interpolation():
    src = gray([[0, 99], [100, 99]])
    out = resize(src, (1, 3), Scaling.BILINEAR)
    assert [p.r for p in out.pixels] == [0, 50, 100]


def test_resize_leaves_input_untouched():
    src = solid(2, 2, (5, 6, 7))
    resize(src, (4, 4), Scaling.BILINEAR)
    assert src.size == (2, 2)
    assert len(src.pixels) == 4


def test_resize_rejects_zero_target():
    with pytest.raises(InvalidParameterError):
        resize(solid(2, 2), (0, 3))


def test_resize_rejects_empty_source():
    with pytest.raises(InvalidParameterError):
        resize(solid(0, 0), (3, 3))


def test_unknown_scaling_mode():
    with pytest.raises(InvalidParameterError):
        Scaling.parse("bicubic")

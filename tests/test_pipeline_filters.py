"""Unit tests for the blur kernel and the final normalization step."""

from __future__ import annotations

import numpy as np
import pytest

from digit_predictor.pipeline.buffers import PixelBuffer
from digit_predictor.pipeline.filters import normalize, smooth


def _gray(values: np.ndarray) -> PixelBuffer:
    h, w = values.shape
    pixels = np.empty((h, w, 4), dtype=np.uint8)
    pixels[..., :3] = values[..., np.newaxis]
    pixels[..., 3] = 255
    return PixelBuffer(pixels)


@pytest.mark.parametrize("level", [0, 77, 200, 255])
def test_smoothing_leaves_flat_grid_unchanged(level: int) -> None:
    flat = _gray(np.full((28, 28), level, dtype=np.uint8))

    once = smooth(flat)
    twice = smooth(once)

    assert np.array_equal(once.pixels, flat.pixels)
    assert np.array_equal(twice.pixels, flat.pixels)


def test_single_pass_spreads_a_dot_with_kernel_weights() -> None:
    values = np.full((5, 5), 255, dtype=np.uint8)
    values[2, 2] = 0

    lum = smooth(_gray(values), passes=1).luminance()

    # 255 - 255 * w / 16 for kernel weights 4, 2 and 1.
    assert lum[2, 2] == 191
    assert lum[1, 2] == lum[2, 1] == lum[3, 2] == lum[2, 3] == 223
    assert lum[1, 1] == lum[3, 3] == 239
    assert lum[0, 0] == 255


def test_edges_are_clamped_not_zero_padded() -> None:
    values = np.full((4, 4), 255, dtype=np.uint8)
    values[:, 0] = 0

    lum = smooth(_gray(values), passes=1).luminance()

    # The missing column left of the image repeats the black edge column,
    # so only the right-hand neighbours (weight 4) are white.
    assert lum[0, 0] == 64
    # A white image stays white at its border.
    white = smooth(_gray(np.full((4, 4), 255, dtype=np.uint8)), passes=1)
    assert np.all(white.luminance() == 255)


def test_second_pass_blurs_further_than_first() -> None:
    values = np.full((9, 9), 255, dtype=np.uint8)
    values[4, 4] = 0

    one = smooth(_gray(values), passes=1).luminance()
    two = smooth(_gray(values), passes=2).luminance()

    assert two[4, 4] > one[4, 4]
    assert one[4, 2] == 255
    assert two[4, 2] < 255


def test_smoothing_does_not_modify_input() -> None:
    values = np.full((6, 6), 255, dtype=np.uint8)
    values[3, 3] = 0
    source = _gray(values)
    before = source.pixels.copy()

    smooth(source)

    assert np.array_equal(source.pixels, before)


def test_normalize_maps_white_to_zero_and_black_to_one() -> None:
    values = np.full((28, 28), 255, dtype=np.uint8)
    values[0, 1] = 0
    values[27, 27] = 51

    out = normalize(_gray(values))

    assert out.shape == (784,)
    assert out.dtype == np.float32
    assert out[0] == 0.0
    # Row-major: (row 0, col 1) is index 1; (27, 27) is the last entry.
    assert out[1] == pytest.approx(1.0)
    assert out[783] == pytest.approx(0.8)
    assert float(out.min()) >= 0.0
    assert float(out.max()) <= 1.0


def test_normalize_rejects_wrong_grid_size() -> None:
    with pytest.raises(ValueError):
        normalize(_gray(np.full((20, 28), 255, dtype=np.uint8)))

"""Unit tests for rescaling and mass-centering onto the 28x28 canvas."""

from __future__ import annotations

import numpy as np
import pytest

from digit_predictor.pipeline.buffers import PixelBuffer, Point
from digit_predictor.pipeline.geometry import center_of_mass
from digit_predictor.pipeline.resample import recenter, rescale


def _black(width: int, height: int) -> PixelBuffer:
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return PixelBuffer(pixels)


def _ink_centroid(buffer: PixelBuffer) -> tuple[float, float]:
    ink = 255.0 - buffer.luminance()
    rr, cc = np.indices(ink.shape)
    total = float(ink.sum())
    return float((cc * ink).sum() / total), float((rr * ink).sum() / total)


def test_rescale_preserves_aspect_ratio_for_wide_input() -> None:
    out, scale = rescale(_black(100, 50))

    assert scale == pytest.approx(0.2)
    assert (out.width, out.height) == (20, 10)
    assert out.width / out.height == pytest.approx(100 / 50)


@pytest.mark.parametrize(
    ("width", "height"),
    [(100, 50), (50, 100), (7, 3), (10, 10), (250, 250), (3, 200), (1, 1)],
)
def test_rescale_fits_longest_side_to_twenty(width: int, height: int) -> None:
    out, scale = rescale(_black(width, height))

    assert max(out.width, out.height) == 20
    assert min(out.width, out.height) >= 1
    assert scale == pytest.approx(min(20 / width, 20 / height))


def test_rescale_smooths_instead_of_picking_nearest_pixels() -> None:
    pixels = np.full((40, 40, 4), 255, dtype=np.uint8)
    checker = (np.indices((40, 40)).sum(axis=0) % 2) == 0
    pixels[checker, :3] = 0

    out, _ = rescale(PixelBuffer(pixels))
    lum = out.luminance()

    # Nearest-neighbour would only ever produce 0 or 255.
    assert np.any((lum > 40) & (lum < 215))


def test_rescale_keeps_solid_ink_solid_when_enlarging() -> None:
    out, scale = rescale(_black(10, 10))

    assert scale == pytest.approx(2.0)
    assert (out.width, out.height) == (20, 20)
    assert np.all(out.pixels[..., :3] == 0)


def test_recenter_integer_offset_pastes_exactly() -> None:
    placed = recenter(_black(10, 10), Point(4.0, 4.0))

    assert (placed.width, placed.height) == (28, 28)
    lum = placed.luminance()
    assert np.all(lum[10:20, 10:20] == 0)
    lum[10:20, 10:20] = 255
    assert np.all(lum == 255)
    assert np.all(placed.pixels[..., 3] == 255)


def test_recenter_moves_centroid_to_canvas_center_with_subpixel_offset() -> None:
    blob = _black(20, 8)
    centroid = center_of_mass(blob)

    placed = recenter(blob, centroid)
    cx, cy = _ink_centroid(placed)

    assert cx == pytest.approx(14.0, abs=0.05)
    assert cy == pytest.approx(14.0, abs=0.05)


def test_recenter_uses_mass_not_box_center() -> None:
    # Heavy ink on the left side of a 16x10 region.
    pixels = np.full((10, 16, 4), 255, dtype=np.uint8)
    pixels[:, :5, :3] = 0
    pixels[:, 15, :3] = 0
    buffer = PixelBuffer(pixels)

    placed = recenter(buffer, center_of_mass(buffer))
    cx, _ = _ink_centroid(placed)

    assert cx == pytest.approx(14.0, abs=0.05)


def test_recenter_drops_ink_pushed_off_canvas() -> None:
    # A centroid far outside the image shifts it completely off the canvas.
    placed = recenter(_black(10, 10), Point(-40.0, 5.0))

    assert np.all(placed.luminance() == 255)

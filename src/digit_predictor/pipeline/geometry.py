"""Locating the drawn ink: bounding box, crop and center of mass."""

from __future__ import annotations

import numpy as np

from digit_predictor.pipeline.buffers import BoundingBox, PixelBuffer, Point

# Pixels darker than this count as ink. Kept just below pure white so the
# anti-aliased fringe of a stroke is included in the box.
INK_THRESHOLD = 250.0


def find_bounding_box(buffer: PixelBuffer, threshold: float = INK_THRESHOLD) -> BoundingBox | None:
    """Return the tightest box around all ink pixels, or ``None`` if there is no ink."""
    mask = buffer.luminance() < threshold
    rows = np.where(mask.any(axis=1))[0]
    cols = np.where(mask.any(axis=0))[0]
    if len(rows) == 0 or len(cols) == 0:
        return None
    return BoundingBox(
        min_x=int(cols[0]),
        min_y=int(rows[0]),
        max_x=int(cols[-1]),
        max_y=int(rows[-1]),
    )


def crop(buffer: PixelBuffer, box: BoundingBox) -> PixelBuffer:
    """Copy out the pixels inside ``box``.

    The box must lie within the buffer; an empty canvas has to be handled
    by the caller before getting here.
    """
    if (
        box.min_x < 0
        or box.min_y < 0
        or box.max_x >= buffer.width
        or box.max_y >= buffer.height
        or box.width <= 0
        or box.height <= 0
    ):
        raise ValueError(f"bounding box {box} does not fit a {buffer.width}x{buffer.height} buffer")
    return PixelBuffer(buffer.pixels[box.min_y : box.max_y + 1, box.min_x : box.max_x + 1])


def center_of_mass(buffer: PixelBuffer, region: BoundingBox | None = None) -> Point:
    """Ink-weighted centroid of ``region`` in buffer coordinates.

    Each pixel weighs ``255 - luminance``, so darker pixels pull harder.
    A region without any ink falls back to its geometric center.
    """
    if region is None:
        region = BoundingBox.covering(buffer)

    lum = buffer.luminance()[region.min_y : region.max_y + 1, region.min_x : region.max_x + 1]
    mass = 255.0 - lum
    total = float(np.sum(mass))
    if total <= 0.0:
        return Point(region.min_x + region.width / 2.0, region.min_y + region.height / 2.0)

    rr, cc = np.indices(mass.shape)
    cy = float(np.sum(rr * mass) / total) + region.min_y
    cx = float(np.sum(cc * mass) / total) + region.min_x
    return Point(cx, cy)

"""Preprocessing for converting a freehand drawing into MNIST-style input.

Goal:
- Take an RGBA snapshot of the drawing surface (any size, any stroke width).
- Make it look like an MNIST training example: dark-on-light ink cropped,
  fitted into 20x20, mass-centered on a 28x28 canvas and softened.
- Return a 784-length vector ready to send to the classifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from digit_predictor.errors import EmptyCanvasError
from digit_predictor.logging_setup import get_logger
from digit_predictor.pipeline.buffers import BoundingBox, PixelBuffer, Point
from digit_predictor.pipeline.filters import normalize, smooth
from digit_predictor.pipeline.geometry import center_of_mass, crop, find_bounding_box
from digit_predictor.pipeline.resample import CANVAS_SIZE, recenter, rescale

log = get_logger(__name__)


class PixelSource(Protocol):
    """Anything that can hand over its current pixels on demand."""

    def snapshot(self) -> PixelBuffer: ...


@dataclass(frozen=True, eq=False)
class PreprocessResult:
    """All artifacts from one pipeline run.

    Only ``features`` goes to the classifier; the rest is kept so the UI can
    show what the model actually receives.
    """

    bounding_box: BoundingBox
    # Ink centroid in the coordinates of the original drawing.
    centroid: Point
    scale: float
    grid: PixelBuffer
    features: np.ndarray


def preprocess_drawing(buffer: PixelBuffer) -> PreprocessResult:
    """Normalize a drawing into a model-ready 784-length vector.

    Pipeline summary:
    1) Find the ink bounding box (stop here if the canvas is empty).
    2) Crop tightly around the digit.
    3) Compute the ink centroid of the crop.
    4) Scale the longest side to 20 pixels, aspect preserved.
    5) Paste on a white 28x28 canvas so the scaled centroid sits at (14, 14).
    6) Blur twice with the 3x3 kernel.
    7) Convert to inverted intensities in [0, 1] and flatten.
    """
    box = find_bounding_box(buffer)
    if box is None:
        raise EmptyCanvasError()

    cropped = crop(buffer, box)
    centroid = center_of_mass(cropped)
    scaled, scale = rescale(cropped)
    placed = recenter(scaled, centroid.scaled(scale))
    grid = smooth(placed)
    features = normalize(grid, size=CANVAS_SIZE)

    log.debug(
        "preprocessed drawing",
        source_size=(buffer.width, buffer.height),
        bounding_box=(box.min_x, box.min_y, box.max_x, box.max_y),
        crop_centroid=(round(centroid.x, 2), round(centroid.y, 2)),
        scale=round(scale, 4),
    )
    return PreprocessResult(
        bounding_box=box,
        centroid=Point(centroid.x + box.min_x, centroid.y + box.min_y),
        scale=scale,
        grid=grid,
        features=features,
    )


def prepare_features(source: PixelSource) -> np.ndarray:
    """Snapshot ``source`` and return only the feature vector."""
    return preprocess_drawing(source.snapshot()).features

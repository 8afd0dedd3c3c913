"""Resizing the cropped digit and placing it on the fixed MNIST canvas."""

from __future__ import annotations

import math

import numpy as np
import tensorflow as tf

from digit_predictor.pipeline.buffers import PixelBuffer, Point

# MNIST digits are fitted into a 20x20 box and then placed on a 28x28 canvas
# so the strokes keep a margin around them.
DIGIT_BOX_SIZE = 20
CANVAS_SIZE = 28


def rescale(buffer: PixelBuffer, box_size: int = DIGIT_BOX_SIZE) -> tuple[PixelBuffer, float]:
    """Resize so the longer side equals ``box_size``, preserving aspect ratio.

    Returns the resized buffer together with the uniform scale factor so the
    caller can map coordinates (e.g. the centroid) into the new image.
    """
    w, h = buffer.width, buffer.height
    scale = min(box_size / w, box_size / h)
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))

    # Antialiased bilinear behaves like an area filter when shrinking, which
    # avoids the jagged edges nearest-neighbour would leave behind.
    resized = tf.image.resize(
        buffer.pixels.astype(np.float32),
        size=(new_h, new_w),
        method="bilinear",
        antialias=True,
    ).numpy()
    return PixelBuffer(np.rint(np.clip(resized, 0.0, 255.0)).astype(np.uint8)), scale


def _paste_add(canvas: np.ndarray, image: np.ndarray, top: int, left: int) -> None:
    """Add ``image`` into ``canvas`` with its corner at (top, left).

    Parts of the image that fall outside the canvas are dropped.
    """
    canvas_h, canvas_w = canvas.shape[:2]
    h, w = image.shape[:2]

    # Source coordinates define what we copy from the image.
    # Destination coordinates define where copied pixels land on the canvas.
    src_r0 = max(0, -top)
    src_r1 = min(h, canvas_h - top)
    src_c0 = max(0, -left)
    src_c1 = min(w, canvas_w - left)
    if src_r1 <= src_r0 or src_c1 <= src_c0:
        return

    dst_r0 = top + src_r0
    dst_c0 = left + src_c0
    canvas[dst_r0 : dst_r0 + (src_r1 - src_r0), dst_c0 : dst_c0 + (src_c1 - src_c0)] += image[
        src_r0:src_r1, src_c0:src_c1
    ]


def recenter(buffer: PixelBuffer, centroid: Point, canvas_size: int = CANVAS_SIZE) -> PixelBuffer:
    """Place ``buffer`` on a white canvas so ``centroid`` lands on the canvas center.

    ``centroid`` is in the coordinates of ``buffer`` (already scaled). The
    offset is usually fractional, so the image is splatted bilinearly over
    the four neighbouring integer positions. This is done in "ink space"
    (255 - channel) so uncovered canvas stays white.
    """
    center = canvas_size / 2.0
    offset_x = center - centroid.x
    offset_y = center - centroid.y

    left = math.floor(offset_x)
    top = math.floor(offset_y)
    fx = offset_x - left
    fy = offset_y - top

    ink = 255.0 - buffer.pixels[..., :3].astype(np.float64)
    canvas = np.zeros((canvas_size, canvas_size, 3), dtype=np.float64)
    for dy, wy in ((0, 1.0 - fy), (1, fy)):
        for dx, wx in ((0, 1.0 - fx), (1, fx)):
            weight = wy * wx
            if weight > 0.0:
                _paste_add(canvas, ink * weight, top + dy, left + dx)

    out = np.empty((canvas_size, canvas_size, 4), dtype=np.uint8)
    out[..., :3] = np.rint(255.0 - np.clip(canvas, 0.0, 255.0)).astype(np.uint8)
    out[..., 3] = 255
    return PixelBuffer(out)

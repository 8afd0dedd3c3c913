"""Drawing-surface buffer and canvas rendering helpers for the predictor UI."""

from __future__ import annotations

import tkinter as tk

import numpy as np

from digit_predictor.pipeline.buffers import PixelBuffer
from digit_predictor.ui.constants import STROKE_REFERENCE_LINE_WIDTH, STROKE_REFERENCE_WIDTH


def paint_segment(
    pixels: np.ndarray,
    start: tuple[float, float],
    end: tuple[float, float],
    line_width: float,
) -> None:
    """Paint a round-capped black line from ``start`` to ``end`` into an RGBA array.

    Coverage falls off over one pixel at the stroke edge, which gives the
    same soft fringe a browser canvas would draw. Paint only ever darkens.
    """
    rows, cols = pixels.shape[:2]
    radius = line_width / 2.0
    (x0, y0), (x1, y1) = start, end

    # Only touch the rectangle the stroke can reach.
    c0 = max(0, int(np.floor(min(x0, x1) - radius - 1)))
    c1 = min(cols, int(np.ceil(max(x0, x1) + radius + 1)) + 1)
    r0 = max(0, int(np.floor(min(y0, y1) - radius - 1)))
    r1 = min(rows, int(np.ceil(max(y0, y1) + radius + 1)) + 1)
    if c1 <= c0 or r1 <= r0:
        return

    # Distance from each pixel center to the closest point on the segment.
    yy, xx = np.mgrid[r0:r1, c0:c1].astype(np.float64) + 0.5
    dx, dy = x1 - x0, y1 - y0
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        t = np.zeros_like(xx)
    else:
        t = np.clip(((xx - x0) * dx + (yy - y0) * dy) / length_sq, 0.0, 1.0)
    dist = np.hypot(xx - (x0 + t * dx), yy - (y0 + t * dy))

    coverage = np.clip(radius + 0.5 - dist, 0.0, 1.0)
    region = pixels[r0:r1, c0:c1, :3].astype(np.float64)
    painted = region * (1.0 - coverage[..., np.newaxis])
    pixels[r0:r1, c0:c1, :3] = np.minimum(region, np.rint(painted)).astype(np.uint8)
    pixels[r0:r1, c0:c1, 3] = 255


class DrawingSurface:
    """In-memory RGBA surface the user draws on.

    The preprocessing pipeline never sees this object directly, only the
    immutable ``PixelBuffer`` returned by ``snapshot()``.
    """

    def __init__(self, width: int, height: int) -> None:
        self.resize(width, height)

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def line_width(self) -> float:
        return self.width / STROKE_REFERENCE_WIDTH * STROKE_REFERENCE_LINE_WIDTH

    @property
    def is_drawing(self) -> bool:
        return self._last_point is not None

    def resize(self, width: int, height: int) -> None:
        """Reallocate the surface; previous strokes are discarded."""
        if width < 1 or height < 1:
            raise ValueError("surface must be at least 1x1")
        self._pixels = np.full((height, width, 4), 255, dtype=np.uint8)
        self._last_point: tuple[float, float] | None = None

    def clear(self) -> None:
        self._pixels.fill(255)
        self._last_point = None

    def begin_stroke(self, x: float, y: float) -> None:
        self._last_point = (x, y)
        paint_segment(self._pixels, (x, y), (x, y), self.line_width)

    def extend_stroke(self, x: float, y: float) -> None:
        if self._last_point is None:
            return
        paint_segment(self._pixels, self._last_point, (x, y), self.line_width)
        self._last_point = (x, y)

    def end_stroke(self) -> None:
        self._last_point = None

    def snapshot(self) -> PixelBuffer:
        """Immutable copy of the current pixels."""
        return PixelBuffer(self._pixels)


def draw_pixel_grid(
    canvas: tk.Canvas,
    intensities: np.ndarray,
    margin: int,
    size: int,
) -> None:
    """Draw ink intensities (0 = paper, 1 = ink) as a scaled pixel grid.

    This function caches rectangle items and only updates pixels whose
    intensity changed since the last draw. That avoids expensive full redraws
    when the preview is refreshed.
    """
    image_h, image_w = intensities.shape
    key = (image_h, image_w, margin, size)
    cache = getattr(canvas, "_pixel_grid_cache", None)

    if cache is None or cache.get("key") != key:
        canvas.delete("all")
        cell_h = size / image_h
        cell_w = size / image_w

        ids: list[list[int]] = []
        for r in range(image_h):
            row_ids: list[int] = []
            for c in range(image_w):
                x0 = margin + c * cell_w
                y0 = margin + r * cell_h
                item_id = canvas.create_rectangle(
                    x0,
                    y0,
                    x0 + cell_w,
                    y0 + cell_h,
                    fill="#ffffff",
                    outline="#ffffff",
                )
                row_ids.append(item_id)
            ids.append(row_ids)

        cache = {
            "key": key,
            "ids": ids,
            "last_gray": np.full((image_h, image_w), 255, dtype=np.int16),
        }
        setattr(canvas, "_pixel_grid_cache", cache)

    # Dark ink on light paper, same as the drawing surface.
    gray_values = 255 - np.rint(np.clip(intensities, 0.0, 1.0) * 255.0).astype(np.int16)
    changed = np.where(gray_values != cache["last_gray"])
    ids = cache["ids"]

    for r, c in zip(changed[0], changed[1]):
        g = int(gray_values[r, c])
        color = f"#{g:02x}{g:02x}{g:02x}"
        canvas.itemconfigure(ids[r][c], fill=color, outline=color)

    cache["last_gray"][changed] = gray_values[changed]

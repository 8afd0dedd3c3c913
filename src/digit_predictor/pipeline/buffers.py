"""Immutable value types passed between preprocessing stages.

Every stage takes one of these and returns a new one. Pixel arrays are
frozen (``writeable=False``) so a stage can never mutate its input by
accident.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """RGBA image stored as a read-only ``(height, width, 4)`` uint8 array."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"expected (height, width, 4) pixels, got shape {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("pixel buffer must be at least 1x1")
        # Own a private copy so callers cannot mutate the buffer behind our back.
        frozen = np.array(pixels, dtype=np.uint8, copy=True)
        frozen.setflags(write=False)
        object.__setattr__(self, "pixels", frozen)

    @classmethod
    def blank(cls, width: int, height: int) -> PixelBuffer:
        """Opaque white buffer of the given size."""
        return cls(np.full((height, width, 4), 255, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def luminance(self) -> np.ndarray:
        """Unweighted mean of the R, G and B channels, shape ``(height, width)``."""
        return self.pixels[..., :3].astype(np.float64).mean(axis=2)


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive pixel rectangle ``[min_x, max_x] x [min_y, max_y]``."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @classmethod
    def covering(cls, buffer: PixelBuffer) -> BoundingBox:
        """Box spanning the whole buffer."""
        return cls(0, 0, buffer.width - 1, buffer.height - 1)


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def scaled(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

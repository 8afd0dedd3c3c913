"""Smoothing and final normalization of the 28x28 grid."""

from __future__ import annotations

import numpy as np

from digit_predictor.pipeline.buffers import PixelBuffer

# 3x3 discrete Gaussian approximation; weights sum to 16.
BLUR_KERNEL = np.array(
    [
        [1.0, 2.0, 1.0],
        [2.0, 4.0, 2.0],
        [1.0, 2.0, 1.0],
    ],
    dtype=np.float64,
)
BLUR_PASSES = 2


def _blur_once(rgb: np.ndarray) -> np.ndarray:
    """One kernel pass over every colour channel, clamping at the edges."""
    h, w = rgb.shape[:2]
    # Edge padding reuses border pixels, so the frame does not darken/lighten.
    padded = np.pad(rgb, ((1, 1), (1, 1), (0, 0)), mode="edge")
    acc = np.zeros_like(rgb, dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            acc += BLUR_KERNEL[ky, kx] * padded[ky : ky + h, kx : kx + w]
    return np.rint(acc / BLUR_KERNEL.sum())


def smooth(buffer: PixelBuffer, passes: int = BLUR_PASSES) -> PixelBuffer:
    """Blur ``passes`` times in sequence; each pass reads the previous output.

    Values are rounded back to 8-bit after every pass and alpha is forced
    opaque.
    """
    if passes < 0:
        raise ValueError("passes must be >= 0")

    rgb = buffer.pixels[..., :3].astype(np.float64)
    for _ in range(passes):
        rgb = _blur_once(rgb)

    out = np.empty(buffer.pixels.shape, dtype=np.uint8)
    out[..., :3] = np.clip(rgb, 0.0, 255.0).astype(np.uint8)
    out[..., 3] = 255
    return PixelBuffer(out)


def normalize(buffer: PixelBuffer, size: int = 28) -> np.ndarray:
    """Flatten to ``size * size`` float32 intensities in [0, 1], row-major.

    White background maps to 0.0 and solid ink to 1.0. The row-major order
    is what the classifier expects and must not change on its own.
    """
    if buffer.width != size or buffer.height != size:
        raise ValueError(f"expected a {size}x{size} grid, got {buffer.width}x{buffer.height}")
    values = 1.0 - buffer.luminance() / 255.0
    return np.clip(values, 0.0, 1.0).astype(np.float32).reshape(-1)

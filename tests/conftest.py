"""Shared pytest setup for the digit predictor test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


# Make src/ importable without requiring an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def white_rgba():
    """Factory for opaque white RGBA arrays of a given size."""

    def _make(width: int, height: int) -> np.ndarray:
        return np.full((height, width, 4), 255, dtype=np.uint8)

    return _make

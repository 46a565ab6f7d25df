"""Pytest configuration.

This repository uses the "src" layout. To make running tests convenient without
an editable install, we add the src/ directory to sys.path.

Users can still install the package normally (recommended for real use).
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def square_points() -> np.ndarray:
    """Corners of the unit square."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])


@pytest.fixture
def random_points() -> np.ndarray:
    return np.random.default_rng(0).uniform(size=(60, 3))

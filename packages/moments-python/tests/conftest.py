"""Shared test fixtures for moments-python tests."""

import sys
from pathlib import Path

# Add tests directory to sys.path for the checks module import
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

import numpy as np
import pytest
from loguru import logger

from checks import ASCENDING, ONES, VALUES, ZEROS


@pytest.fixture(autouse=True)
def _quiet_loguru():
    """Drop loguru's default stderr sink so DEBUG rejections don't flood output."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def ascending() -> np.ndarray:
    """[1, 2, 3, 4, 5]: symmetric, platykurtic."""
    return np.array(ASCENDING)


@pytest.fixture
def values10() -> np.ndarray:
    """Ten mixed-sign values with known reference statistics."""
    return np.array(VALUES)


@pytest.fixture
def zeros() -> np.ndarray:
    return np.array(ZEROS)


@pytest.fixture
def ones() -> np.ndarray:
    return np.array(ONES)


@pytest.fixture
def random_values() -> np.ndarray:
    """Seeded, non-degenerate uniform samples."""
    np.random.seed(42)
    return np.random.rand(50) * 100 - 50


@pytest.fixture
def skewed_values() -> np.ndarray:
    """Seeded, right-skewed (lognormal) samples."""
    np.random.seed(123)
    return np.random.lognormal(mean=0.0, sigma=0.75, size=200)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Directory for test outputs (logs, config files)."""
    return tmp_path

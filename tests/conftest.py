"""
Pytest configuration and shared fixtures for mps-io tests.
"""

import numpy as np
import pytest

from mps_io.grid import GridSpec


@pytest.fixture
def simple_grid():
    """Create a simple test grid geometry."""
    return GridSpec(
        nx=10, ny=10, nz=5,
        xmin=0.5, ymin=0.5, zmin=0.5,
        xsiz=1.0, ysiz=1.0, zsiz=1.0,
    )


@pytest.fixture
def irregular_grid():
    """Create an irregular (non-cubic) grid with odd dimensions."""
    return GridSpec(
        nx=7, ny=5, nz=3,  # Odd, non-equal dimensions
        xmin=2.5, ymin=5.0, zmin=0.25,  # Non-standard origins
        xsiz=2.5, ysiz=1.5, zsiz=3.0,  # Non-equal cell sizes
    )


@pytest.fixture
def continuous_ti(irregular_grid):
    """Continuous training image on the irregular grid."""
    rng = np.random.default_rng(42)
    return rng.normal(10, 2, irregular_grid.shape)


@pytest.fixture
def categorical_ti(irregular_grid):
    """Three-facies training image on the irregular grid."""
    rng = np.random.default_rng(123)
    return rng.integers(0, 3, irregular_grid.shape).astype(np.float64)


@pytest.fixture
def write_text(tmp_path):
    """Write a text file in the test directory and return its path."""
    def _write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write

"""
Hard and soft conditioning data from EAS files.

EAS (Geo-EAS) is the GSLIB point-data format:
- Line 1: Title
- Line 2: Number of columns
- Next lines: Column names, one per line
- Remaining lines: One sample per row, columns X, Y, Z first

Samples are snapped to the nearest cell of the target grid. Samples
outside the grid are skipped and reported with a SkippedSampleWarning.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np

from mps_io.core import GridHeaderError, SkippedSampleWarning, read_header, read_rows
from mps_io.grid import NODATA, GridSpec

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def _read_samples(
    filepath: Path,
    spec: GridSpec,
    min_columns: int,
) -> tuple[NDArray[np.float64], tuple[NDArray[np.intp], NDArray[np.intp], NDArray[np.intp]]]:
    """Read the data block and snap samples to the grid, dropping outliers."""
    with open(filepath, "r") as f:
        _title, names = read_header(f, filepath)
        if len(names) < min_columns:
            raise GridHeaderError(
                f"{filepath}: {min_columns} columns needed, header declares {len(names)}"
            )
        data = read_rows(f, filepath, len(names))

    iz, iy, ix, inside = spec.points_to_indices(data[:, 0], data[:, 1], data[:, 2])
    skipped = int((~inside).sum())
    if skipped:
        warnings.warn(
            f"{filepath}: {skipped} of {len(inside)} samples outside the grid were skipped",
            SkippedSampleWarning,
            stacklevel=3,
        )
    return data[inside], (iz[inside], iy[inside], ix[inside])


def read_hard_data_eas(
    filepath: Path | str,
    spec: GridSpec,
    nodata: float = NODATA,
    value_col: int = 3,
) -> NDArray[np.float64]:
    """
    Read an EAS file into a hard data grid.

    Args:
        filepath: Input file path
        spec: Target grid geometry
        nodata: Value of uninformed cells; samples equal to it are ignored
        value_col: Column holding the sample value (0-based)

    Returns:
        Hard data grid of shape (nz, ny, nx), ``nodata`` where uninformed

    Raises:
        FileNotFoundError: If the file does not exist
        GridHeaderError: If the file has fewer than value_col + 1 columns
        GridFormatError: If a value cannot be parsed

    Example:
        >>> spec = GridSpec(nx=100, ny=100, nz=1, xsiz=10, ysiz=10)
        >>> hard = read_hard_data_eas("wells.dat", spec, nodata=-999)
    """
    if value_col < 3:
        raise ValueError(f"value_col must follow the X, Y, Z columns, got {value_col}")

    filepath = Path(filepath)
    data, (iz, iy, ix) = _read_samples(filepath, spec, value_col + 1)

    grid = np.full(spec.shape, nodata, dtype=np.float64)
    values = data[:, value_col]
    informed = ~np.isnan(values) & (values != nodata)
    grid[iz[informed], iy[informed], ix[informed]] = values[informed]

    logger.debug(
        "Read hard data %s: %d samples on grid %s", filepath, int(informed.sum()), spec.shape
    )
    return grid


def read_soft_data_eas(
    filepath: Path | str,
    categories: Sequence[float],
    spec: GridSpec,
    nodata: float = np.nan,
) -> NDArray[np.float64]:
    """
    Read an EAS file into a soft data grid.

    Each row gives X, Y, Z and then one probability per category, in the
    order of ``categories``.

    Args:
        filepath: Input file path
        categories: Available categories
        spec: Target grid geometry
        nodata: Value of uninformed cells

    Returns:
        Soft data grid of shape (nz, ny, nx, len(categories))

    Raises:
        FileNotFoundError: If the file does not exist
        GridHeaderError: If the file has fewer than 3 + len(categories) columns
        GridFormatError: If a value cannot be parsed
    """
    ncat = len(categories)
    if ncat == 0:
        raise ValueError("categories must not be empty")

    filepath = Path(filepath)
    data, (iz, iy, ix) = _read_samples(filepath, spec, 3 + ncat)

    grid = np.full(spec.shape + (ncat,), nodata, dtype=np.float64)
    grid[iz, iy, ix, :] = data[:, 3:3 + ncat]

    logger.debug(
        "Read soft data %s: %d samples, %d categories on grid %s",
        filepath, len(data), ncat, spec.shape,
    )
    return grid

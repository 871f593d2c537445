"""
GSLIB training image files.

GSLIB ASCII format as used for training images:
- Line 1: Title, starting with the grid dimensions "nx ny nz"
- Line 2: Number of channels (nvars)
- Lines 3 to 3+nvars: Channel names
- Remaining lines: One row of channel values per cell, x fastest, then y, then z
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from mps_io.core import (
    GridHeaderError,
    GridSizeError,
    check_grid,
    read_header,
    read_rows,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def _dims_from_title(title: str, filepath: Path) -> tuple[int, int, int]:
    tokens = title.split()
    try:
        nx, ny, nz = (int(t) for t in tokens[:3])
    except ValueError:
        raise GridHeaderError(
            f"{filepath}: title line {title!r} does not start with 'nx ny nz'; "
            f"pass shape explicitly"
        ) from None
    if min(nx, ny, nz) < 1:
        raise GridHeaderError(f"{filepath}: invalid grid dimensions ({nx}, {ny}, {nz})")
    return nz, ny, nx


def read_gslib(
    filepath: Path | str,
    channel: int = 0,
    mean_factor: float = 1.0,
    shape: tuple[int, int, int] | None = None,
) -> NDArray[np.float64]:
    """
    Read a GSLIB file into a training image, multiple channels supported.

    Args:
        filepath: Input file path
        channel: Channel (column) to take from the file. -1 averages all
            channels of each cell.
        mean_factor: Values read from the file are divided by this factor
        shape: Grid shape (nz, ny, nx). Read from the title line if None.

    Returns:
        Training image of shape (nz, ny, nx)

    Raises:
        FileNotFoundError: If the file does not exist
        GridHeaderError: If the header is malformed or the channel is invalid
        GridSizeError: If the number of rows is not nx * ny * nz

    Example:
        >>> ti = read_gslib("strebelle.gslib")
        >>> ti.shape
        (1, 250, 250)
    """
    if mean_factor == 0:
        raise ValueError("mean_factor must be non-zero")

    filepath = Path(filepath)

    with open(filepath, "r") as f:
        title, names = read_header(f, filepath)
        nvars = len(names)
        if channel < -1 or channel >= nvars:
            raise GridHeaderError(
                f"{filepath}: channel {channel} requested but file has {nvars} channel(s)"
            )
        if shape is None:
            shape = _dims_from_title(title, filepath)
        data = read_rows(f, filepath, nvars)

    nz, ny, nx = shape
    expected = nx * ny * nz
    if data.shape[0] != expected:
        raise GridSizeError(
            f"{filepath}: grid ({nx}, {ny}, {nz}) needs {expected} rows, found {data.shape[0]}"
        )

    if channel == -1:
        values = data.mean(axis=1)
    else:
        values = data[:, channel]

    logger.debug("Read GSLIB %s: shape=%s channels=%s", filepath, shape, names)
    return (values / mean_factor).reshape((nz, ny, nx))


def _write_values(
    filepath: Path,
    values: NDArray,
    nx: int,
    ny: int,
    nz: int,
    name: str,
    fmt: str,
) -> Path:
    with open(filepath, "w") as f:
        f.write(f"{nx} {ny} {nz}\n")
        f.write("1\n")
        f.write(f"{name}\n")
        np.savetxt(f, values, fmt=fmt)
    logger.debug("Wrote GSLIB %s: shape=%s", filepath, (nz, ny, nx))
    return filepath


def write_gslib(
    filepath: Path | str,
    grid: NDArray[np.floating],
    name: str = "v",
) -> Path:
    """
    Write a simulation grid to a GSLIB file.

    Args:
        filepath: Output file path
        grid: Simulation grid of shape (nz, ny, nx)
        name: Channel name written in the header

    Returns:
        Path of the written file
    """
    grid = check_grid(grid)
    nz, ny, nx = grid.shape
    return _write_values(Path(filepath), grid.ravel(), nx, ny, nz, name, "%.10g")


def write_gslib_indices(
    filepath: Path | str,
    indices: NDArray[np.integer],
    nx: int,
    ny: int,
    nz: int,
    name: str = "index",
) -> Path:
    """
    Write a flat index vector to a GSLIB file.

    Args:
        filepath: Output file path
        indices: Integer vector ordered x fastest, then y, then z
        nx, ny, nz: Grid dimensions
        name: Channel name written in the header

    Returns:
        Path of the written file

    Raises:
        GridSizeError: If len(indices) != nx * ny * nz
    """
    indices = np.asarray(indices).ravel()
    if not np.issubdtype(indices.dtype, np.integer):
        raise TypeError(f"indices must be integers, got dtype {indices.dtype}")
    if indices.size != nx * ny * nz:
        raise GridSizeError(
            f"index vector has {indices.size} entries, grid ({nx}, {ny}, {nz}) "
            f"needs {nx * ny * nz}"
        )
    return _write_values(Path(filepath), indices, nx, ny, nz, name, "%d")

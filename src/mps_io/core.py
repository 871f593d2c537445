"""
Core functionality for mps-io: errors, warnings and shared text parsing.

This module provides:
- The exception hierarchy raised by readers and writers
- The warning category for skipped samples
- Header and row parsing shared by the GSLIB-style text formats
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


class GridFileError(ValueError):
    """Base class for grid file format errors."""


class GridHeaderError(GridFileError):
    """Header is missing, unparsable or inconsistent with the data."""


class GridSizeError(GridFileError):
    """Declared grid dimensions disagree with the amount of data."""


class GridFormatError(GridFileError):
    """A data value cannot be parsed."""


class GridEncodeError(GridFileError):
    """A value cannot be written at the requested width."""


class SkippedSampleWarning(UserWarning):
    """Warning for samples that fall outside the target grid."""


def read_header(f: TextIO, filepath: Path) -> tuple[str, list[str]]:
    """
    Read a GSLIB/Geo-EAS header: title, variable count, variable names.

    Args:
        f: Open text file positioned at the start
        filepath: Path used in error messages

    Returns:
        Tuple of (title, names)

    Raises:
        GridHeaderError: If the header is truncated or the count is invalid
    """
    title = f.readline()
    if not title:
        raise GridHeaderError(f"{filepath}: empty file")

    count_line = f.readline()
    tokens = count_line.split()
    try:
        nvars = int(tokens[0])
    except (IndexError, ValueError):
        raise GridHeaderError(
            f"{filepath}: expected variable count on line 2, got {count_line.strip()!r}"
        ) from None
    if nvars < 1:
        raise GridHeaderError(f"{filepath}: variable count must be positive, got {nvars}")

    names = []
    for _ in range(nvars):
        line = f.readline()
        if not line:
            raise GridHeaderError(
                f"{filepath}: expected {nvars} variable names, found {len(names)}"
            )
        names.append(line.strip())

    return title.strip(), names


def read_rows(f: TextIO, filepath: Path, ncols: int) -> NDArray[np.float64]:
    """
    Read the whitespace-separated data block following a header.

    Args:
        f: Open text file positioned after the header
        filepath: Path used in error messages
        ncols: Declared number of columns per row

    Returns:
        2D array of shape (nrows, ncols)

    Raises:
        GridHeaderError: If a row width disagrees with the declared count
        GridFormatError: If a value is not a number
    """
    rows = []
    for lineno, line in enumerate(f, start=1):
        values = line.split()
        if not values:
            continue
        if len(values) != ncols:
            raise GridHeaderError(
                f"{filepath}: header declares {ncols} columns but data row {lineno} "
                f"has {len(values)}"
            )
        try:
            rows.append([float(v) for v in values])
        except ValueError as e:
            raise GridFormatError(f"{filepath}: data row {lineno}: {e}") from None

    if not rows:
        return np.empty((0, ncols), dtype=np.float64)
    return np.array(rows, dtype=np.float64)


def check_grid(grid: NDArray[np.floating], ndim: int = 3) -> NDArray[np.float64]:
    """Coerce a grid to a float64 array of the given rank."""
    arr = np.asarray(grid, dtype=np.float64)
    if arr.ndim != ndim:
        raise ValueError(f"Expected a {ndim}D grid, got shape {arr.shape}")
    return arr

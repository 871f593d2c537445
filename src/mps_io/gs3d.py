"""
GeoScene3D grid files: GS3D CSV (text) and GRD3 (binary).

GS3D CSV format:
- Line 1: Column names, X,Y,Z,V
- Remaining lines: One row per cell with world coordinates and value,
  z outer, y middle, x inner

GRD3 format (little endian, provisional layout, not verified against
external GRD3 readers):
- 72-byte header: magic b"GRD3", version, nx ny nz (int32),
  xmin ymin zmin (float64), xsiz ysiz zsiz (float64), value type (int32)
- nx * ny * nz values, x fastest, at the width given by the value type
"""

from __future__ import annotations

import logging
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from mps_io.core import (
    GridEncodeError,
    GridFormatError,
    GridHeaderError,
    GridSizeError,
    check_grid,
)
from mps_io.grid import Grid, GridSpec, resolve_spec

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


# ============================================================================
# GS3D CSV
# ============================================================================

CSV_COLUMNS = ("X", "Y", "Z", "V")


def write_gs3d_csv(
    filepath: Path | str,
    grid: NDArray[np.floating],
    spec: GridSpec | None = None,
) -> Path:
    """
    Write a simulation grid to a GS3D CSV file.

    Args:
        filepath: Output file path
        grid: Simulation grid of shape (nz, ny, nx)
        spec: Grid geometry. Origin (0, 0, 0) and unit cells if None.

    Returns:
        Path of the written file
    """
    filepath = Path(filepath)
    grid = check_grid(grid)
    spec = resolve_spec(grid, spec)

    x, y, z = spec.cell_centers()
    Z, Y, X = np.meshgrid(z, y, x, indexing="ij")
    table = np.column_stack([X.ravel(), Y.ravel(), Z.ravel(), grid.ravel()])

    with open(filepath, "w") as f:
        f.write(",".join(CSV_COLUMNS) + "\n")
        np.savetxt(f, table, fmt="%.10g", delimiter=",")

    logger.debug("Wrote GS3D CSV %s: shape=%s", filepath, grid.shape)
    return filepath


# Coordinates closer than this fraction of the axis scale are the same cell
LATTICE_TOL = 1e-6


def _axis_indices(
    coords: NDArray[np.float64],
    axis: str,
    filepath: Path,
) -> tuple[int, float, float, NDArray[np.intp]]:
    """
    Recover (n, min, step) along one axis and the cell index of each row.

    Raises:
        GridFormatError: If a coordinate is not finite or lies off the
            lattice min + i * step
    """
    if not np.all(np.isfinite(coords)):
        raise GridFormatError(f"{filepath}: non-finite {axis} coordinate")

    cmin = float(coords.min())
    tol = LATTICE_TOL * max(1.0, abs(cmin), float(coords.max()) - cmin)
    gaps = np.diff(np.unique(coords))
    gaps = gaps[gaps > tol]
    if gaps.size == 0:
        return 1, cmin, 1.0, np.zeros(coords.shape, dtype=np.intp)

    step = float(gaps.min())
    position = (coords - cmin) / step
    index = np.rint(position)
    offset = np.abs(position - index).max() * step
    if offset > tol:
        raise GridFormatError(
            f"{filepath}: {axis} coordinates are not on a regular lattice of step {step:g} "
            f"(off by up to {offset:g})"
        )
    return int(index.max()) + 1, cmin, step, index.astype(np.intp)


def read_gs3d_csv(
    filepath: Path | str,
    fill_value: float = np.nan,
) -> Grid:
    """
    Read a GS3D CSV file into a training image.

    The grid geometry is recovered from the listed coordinates: the
    origin is the smallest coordinate and the cell size the smallest
    spacing between distinct coordinates along each axis. Coordinates
    within a relative LATTICE_TOL of each other share a cell.

    Args:
        filepath: Input file path
        fill_value: Value of cells that have no row in the file

    Returns:
        Grid with values of shape (nz, ny, nx) and the recovered geometry

    Raises:
        FileNotFoundError: If the file does not exist
        GridHeaderError: If the X, Y, Z or value columns are missing
        GridFormatError: If a row cannot be parsed or a coordinate lies off
            the regular lattice
        GridSizeError: If the file holds no data rows
    """
    filepath = Path(filepath)

    with open(filepath, "r") as f:
        names = [n.strip().upper() for n in f.readline().split(",")]
        try:
            coord_cols = [names.index(axis) for axis in ("X", "Y", "Z")]
        except ValueError:
            raise GridHeaderError(
                f"{filepath}: header must name X, Y and Z columns, got {names}"
            ) from None
        if "V" in names:
            value_col = names.index("V")
        elif "VALUE" in names:
            value_col = names.index("VALUE")
        else:
            others = [i for i in range(len(names)) if i not in coord_cols]
            if not others:
                raise GridHeaderError(f"{filepath}: no value column in header {names}")
            value_col = others[0]

        lines = [line for line in f if line.strip()]

    if not lines:
        raise GridSizeError(f"{filepath}: no data rows")
    try:
        data = np.loadtxt(lines, delimiter=",", dtype=np.float64, ndmin=2)
    except ValueError as e:
        raise GridFormatError(f"{filepath}: {e}") from None
    if data.shape[1] != len(names):
        raise GridHeaderError(
            f"{filepath}: header names {len(names)} columns but rows have {data.shape[1]}"
        )

    nx, xmin, xsiz, ix = _axis_indices(data[:, coord_cols[0]], "X", filepath)
    ny, ymin, ysiz, iy = _axis_indices(data[:, coord_cols[1]], "Y", filepath)
    nz, zmin, zsiz, iz = _axis_indices(data[:, coord_cols[2]], "Z", filepath)
    spec = GridSpec(
        nx=nx, ny=ny, nz=nz,
        xmin=xmin, ymin=ymin, zmin=zmin,
        xsiz=xsiz, ysiz=ysiz, zsiz=zsiz,
    )

    values = np.full(spec.shape, fill_value, dtype=np.float64)
    values[iz, iy, ix] = data[:, value_col]

    logger.debug("Read GS3D CSV %s: shape=%s", filepath, spec.shape)
    return Grid(values=values, spec=spec)


# ============================================================================
# GRD3
# ============================================================================

GRD3_MAGIC = b"GRD3"
GRD3_VERSION = 1

# Provisional layout defined by this package. It has not been checked against
# files from other GRD3 tools and should not be assumed compatible with them.
GRD3_HEADER = np.dtype([
    ("magic", "S4"),
    ("version", "<i4"),
    ("nx", "<i4"),
    ("ny", "<i4"),
    ("nz", "<i4"),
    ("xmin", "<f8"),
    ("ymin", "<f8"),
    ("zmin", "<f8"),
    ("xsiz", "<f8"),
    ("ysiz", "<f8"),
    ("zsiz", "<f8"),
    ("value_type", "<i4"),
])


class Grd3ValueType(IntEnum):
    """On-disk width of GRD3 cell values."""

    FLOAT32 = 0
    FLOAT64 = 1
    UINT8 = 2
    INT16 = 3

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_GRD3_DTYPES[self])


_GRD3_DTYPES = {
    Grd3ValueType.FLOAT32: "<f4",
    Grd3ValueType.FLOAT64: "<f8",
    Grd3ValueType.UINT8: "u1",
    Grd3ValueType.INT16: "<i2",
}


def _encode(values: NDArray[np.float64], value_type: Grd3ValueType) -> NDArray:
    """Narrow float64 values to the on-disk type."""
    dtype = value_type.dtype
    if value_type == Grd3ValueType.FLOAT64:
        return values.astype(dtype)

    if np.issubdtype(dtype, np.integer):
        if not np.all(np.isfinite(values)):
            raise GridEncodeError(f"{value_type.name} cannot store nan or inf values")
        rounded = np.rint(values)
        info = np.iinfo(dtype)
        if rounded.min() < info.min or rounded.max() > info.max:
            raise GridEncodeError(
                f"{value_type.name} stores values in [{info.min}, {info.max}], "
                f"got [{values.min():g}, {values.max():g}]"
            )
        return rounded.astype(dtype)

    finite = values[np.isfinite(values)]
    if finite.size and np.abs(finite).max() > np.finfo(dtype).max:
        raise GridEncodeError(f"{value_type.name} overflow: max |value| {np.abs(finite).max():g}")
    return values.astype(dtype)


def write_grd3(
    filepath: Path | str,
    grid: NDArray[np.floating],
    spec: GridSpec | None = None,
    value_type: Grd3ValueType | int = Grd3ValueType.FLOAT64,
) -> Path:
    """
    Write a simulation grid to a GRD3 file.

    Args:
        filepath: Output file path
        grid: Simulation grid of shape (nz, ny, nx)
        spec: Grid geometry. Origin (0, 0, 0) and unit cells if None.
        value_type: On-disk width, 0: 4-byte float, 1: 8-byte float,
            2: 1-byte unsigned, 3: 2-byte signed. Integer widths round
            to the nearest integer.

    Returns:
        Path of the written file

    Raises:
        GridEncodeError: If a value does not fit the requested width.
            Nothing is written in that case.
    """
    filepath = Path(filepath)
    value_type = Grd3ValueType(value_type)
    grid = check_grid(grid)
    spec = resolve_spec(grid, spec)

    encoded = _encode(grid.ravel(), value_type)

    header = np.zeros(1, dtype=GRD3_HEADER)
    header["magic"] = GRD3_MAGIC
    header["version"] = GRD3_VERSION
    for key in ("nx", "ny", "nz", "xmin", "ymin", "zmin", "xsiz", "ysiz", "zsiz"):
        header[key] = getattr(spec, key)
    header["value_type"] = int(value_type)

    with open(filepath, "wb") as f:
        f.write(header.tobytes())
        f.write(encoded.tobytes())

    logger.debug(
        "Wrote GRD3 %s: shape=%s value_type=%s", filepath, grid.shape, value_type.name
    )
    return filepath


def read_grd3(filepath: Path | str) -> Grid:
    """
    Read a GRD3 file into a training image.

    Args:
        filepath: Input file path

    Returns:
        Grid with float64 values of shape (nz, ny, nx) and the header geometry

    Raises:
        FileNotFoundError: If the file does not exist
        GridHeaderError: If the header is truncated or not a GRD3 header
        GridSizeError: If the value block is shorter or longer than nx * ny * nz
    """
    filepath = Path(filepath)

    with open(filepath, "rb") as f:
        raw = f.read(GRD3_HEADER.itemsize)
        if len(raw) < GRD3_HEADER.itemsize:
            raise GridHeaderError(
                f"{filepath}: {len(raw)} bytes, too short for a GRD3 header"
            )
        header = np.frombuffer(raw, dtype=GRD3_HEADER)[0]
        if header["magic"] != GRD3_MAGIC:
            raise GridHeaderError(f"{filepath}: not a GRD3 file (magic {header['magic']!r})")
        if header["version"] != GRD3_VERSION:
            raise GridHeaderError(f"{filepath}: unsupported GRD3 version {header['version']}")
        try:
            value_type = Grd3ValueType(int(header["value_type"]))
        except ValueError:
            raise GridHeaderError(
                f"{filepath}: unknown GRD3 value type {header['value_type']}"
            ) from None
        try:
            spec = GridSpec(**{
                key: header[key].item()
                for key in ("nx", "ny", "nz", "xmin", "ymin", "zmin", "xsiz", "ysiz", "zsiz")
            })
        except ValueError as e:
            raise GridHeaderError(f"{filepath}: {e}") from None

        payload = f.read()

    itemsize = value_type.dtype.itemsize
    expected = spec.ncells * itemsize
    if len(payload) != expected:
        raise GridSizeError(
            f"{filepath}: grid {spec.shape} of {value_type.name} needs {expected} bytes, "
            f"found {len(payload)}"
        )

    values = np.frombuffer(payload, dtype=value_type.dtype).astype(np.float64)

    logger.debug("Read GRD3 %s: shape=%s value_type=%s", filepath, spec.shape, value_type.name)
    return Grid(values=values.reshape(spec.shape), spec=spec)

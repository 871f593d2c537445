"""
Grid data model shared by every reader and writer.

- GridSpec: grid geometry (dimensions, origin, cell size)
- Grid: values plus the geometry recovered from a file header
- No-data sentinel helpers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from mps_io.core import GridSizeError

if TYPE_CHECKING:
    from numpy.typing import NDArray


# ============================================================================
# No-data sentinel
# ============================================================================

# Default marker for cells without hard data
NODATA: float = -999.0


def is_nodata(
    values: NDArray[np.floating],
    nodata: float = NODATA,
) -> NDArray[np.bool_]:
    """
    Identify no-data cells in a grid.

    ``nan`` cells are always treated as no-data, whatever the sentinel.

    Args:
        values: Grid or any array of cell values
        nodata: Sentinel marking missing cells

    Returns:
        Boolean array where True indicates a no-data cell

    Example:
        >>> hard = read_hard_data_eas("hard.dat", spec)
        >>> informed = hard[~is_nodata(hard)]
    """
    values = np.asarray(values, dtype=np.float64)
    mask = np.isnan(values)
    if not np.isnan(nodata):
        mask |= values == nodata
    return mask


def mask_nodata(
    values: NDArray[np.floating],
    nodata: float = NODATA,
) -> np.ma.MaskedArray:
    """
    Convert a grid to a masked array with no-data cells masked.

    Args:
        values: Grid of cell values
        nodata: Sentinel marking missing cells

    Returns:
        Masked array where no-data cells are masked
    """
    values = np.asarray(values, dtype=np.float64)
    return np.ma.MaskedArray(values, mask=is_nodata(values, nodata))


@dataclass
class GridSpec:
    """
    3D grid geometry.

    Grids are stored as arrays of shape (nz, ny, nx) and flattened
    x-fastest (C order), which is the traversal of every file format
    in this package.

    Attributes:
        nx, ny, nz: Number of cells in each direction
        xmin, ymin, zmin: World coordinate of the first cell
        xsiz, ysiz, zsiz: Cell sizes
    """

    nx: int
    ny: int
    nz: int
    xmin: float = 0.0
    ymin: float = 0.0
    zmin: float = 0.0
    xsiz: float = 1.0
    ysiz: float = 1.0
    zsiz: float = 1.0

    def __post_init__(self) -> None:
        if min(self.nx, self.ny, self.nz) < 1:
            raise ValueError(
                f"Grid dimensions must be positive, got ({self.nx}, {self.ny}, {self.nz})"
            )
        if min(self.xsiz, self.ysiz, self.zsiz) <= 0:
            raise ValueError(
                f"Cell sizes must be positive, got ({self.xsiz}, {self.ysiz}, {self.zsiz})"
            )

    @classmethod
    def from_shape(
        cls,
        shape: tuple[int, int, int],
        origin: tuple[float, float, float] = (0.0, 0.0, 0.0),
        step: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> "GridSpec":
        """Build a spec from an array shape (nz, ny, nx)."""
        nz, ny, nx = (int(n) for n in shape)
        return cls(
            nx=nx, ny=ny, nz=nz,
            xmin=float(origin[0]), ymin=float(origin[1]), zmin=float(origin[2]),
            xsiz=float(step[0]), ysiz=float(step[1]), zsiz=float(step[2]),
        )

    @property
    def shape(self) -> tuple[int, int, int]:
        """Grid shape as (nz, ny, nx)."""
        return (self.nz, self.ny, self.nx)

    @property
    def ncells(self) -> int:
        """Total number of cells."""
        return self.nx * self.ny * self.nz

    @property
    def origin(self) -> tuple[float, float, float]:
        """World coordinate of the first cell as (xmin, ymin, zmin)."""
        return (self.xmin, self.ymin, self.zmin)

    @property
    def step(self) -> tuple[float, float, float]:
        """Cell sizes as (xsiz, ysiz, zsiz)."""
        return (self.xsiz, self.ysiz, self.zsiz)

    @property
    def xmax(self) -> float:
        """World X coordinate of the last cell."""
        return self.xmin + (self.nx - 1) * self.xsiz

    @property
    def ymax(self) -> float:
        """World Y coordinate of the last cell."""
        return self.ymin + (self.ny - 1) * self.ysiz

    @property
    def zmax(self) -> float:
        """World Z coordinate of the last cell."""
        return self.zmin + (self.nz - 1) * self.zsiz

    def cell_centers(self) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """
        Get cell coordinates along each axis.

        Returns:
            Tuple of (x, y, z) 1D arrays
        """
        x = self.xmin + np.arange(self.nx) * self.xsiz
        y = self.ymin + np.arange(self.ny) * self.ysiz
        z = self.zmin + np.arange(self.nz) * self.zsiz
        return x, y, z

    def points_to_indices(
        self,
        x: NDArray[np.floating],
        y: NDArray[np.floating],
        z: NDArray[np.floating],
    ) -> tuple[NDArray[np.intp], NDArray[np.intp], NDArray[np.intp], NDArray[np.bool_]]:
        """
        Convert world coordinates to grid indices.

        Each coordinate maps to ``(c - min) / step`` rounded half up.
        Points landing outside the grid are flagged, never clamped.

        Args:
            x, y, z: Point coordinates

        Returns:
            Tuple of (iz, iy, ix, inside) where ``inside`` is a boolean
            array marking the points that fall on a grid cell
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)

        fx = np.floor((x - self.xmin) / self.xsiz + 0.5)
        fy = np.floor((y - self.ymin) / self.ysiz + 0.5)
        fz = np.floor((z - self.zmin) / self.zsiz + 0.5)

        # nan coordinates compare False and end up outside
        inside = (
            (fx >= 0) & (fx < self.nx) &
            (fy >= 0) & (fy < self.ny) &
            (fz >= 0) & (fz < self.nz)
        )
        ix = np.where(inside, fx, 0).astype(np.intp)
        iy = np.where(inside, fy, 0).astype(np.intp)
        iz = np.where(inside, fz, 0).astype(np.intp)
        return iz, iy, ix, inside


@dataclass
class Grid:
    """Grid values with the geometry read from the file header."""

    values: NDArray[np.float64]
    spec: GridSpec

    @property
    def shape(self) -> tuple[int, int, int]:
        """Grid shape as (nz, ny, nx)."""
        return self.spec.shape


def resolve_spec(grid: NDArray[np.float64], spec: GridSpec | None) -> GridSpec:
    """
    Geometry of a grid about to be written.

    Args:
        grid: Grid of shape (nz, ny, nx)
        spec: Caller geometry. Origin (0, 0, 0) and unit cells if None.

    Returns:
        The spec to write

    Raises:
        GridSizeError: If the spec shape differs from the grid shape
    """
    if spec is None:
        return GridSpec.from_shape(grid.shape)
    if spec.shape != grid.shape:
        raise GridSizeError(f"Grid shape {grid.shape} does not match spec shape {spec.shape}")
    return spec

"""
Plain ASCII export of a simulation grid.

Format:
- Line 1: nx ny nz
- Line 2: xmin ymin zmin
- Line 3: xsiz ysiz zsiz
- Then each z layer as ny rows of nx values, layers separated by a blank line
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from mps_io.core import check_grid
from mps_io.grid import GridSpec, resolve_spec

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def write_ascii(
    filepath: Path | str,
    grid: NDArray[np.floating],
    spec: GridSpec | None = None,
    fmt: str = "%.10g",
) -> Path:
    """
    Write a simulation grid to a human-readable ASCII file.

    Args:
        filepath: Output file path
        grid: Simulation grid of shape (nz, ny, nx)
        spec: Grid geometry. Origin (0, 0, 0) and unit cells if None.
        fmt: Format string for values

    Returns:
        Path of the written file
    """
    filepath = Path(filepath)
    grid = check_grid(grid)
    spec = resolve_spec(grid, spec)

    with open(filepath, "w") as f:
        f.write(f"{spec.nx} {spec.ny} {spec.nz}\n")
        f.write(f"{spec.xmin:.10g} {spec.ymin:.10g} {spec.zmin:.10g}\n")
        f.write(f"{spec.xsiz:.10g} {spec.ysiz:.10g} {spec.zsiz:.10g}\n")
        for iz, layer in enumerate(grid):
            if iz:
                f.write("\n")
            np.savetxt(f, layer, fmt=fmt, delimiter=" ")

    logger.debug("Wrote ASCII %s: shape=%s", filepath, grid.shape)
    return filepath

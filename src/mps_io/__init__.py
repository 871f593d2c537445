"""
mps-io: grid file conversion for multiple-point geostatistics.

This package reads training images and conditioning data from the file
formats used by geomodeling tools, and writes simulation grids back out.
Grids are numpy arrays of shape (nz, ny, nx), flattened x fastest.

Readers:
    - :func:`read_gslib`: GSLIB training image, channel selection or average
    - :func:`read_gs3d_csv`: GeoScene3D CSV, geometry recovered from coordinates
    - :func:`read_grd3`: GeoScene3D binary grid
    - :func:`read_hard_data_eas`: EAS samples snapped to a hard data grid
    - :func:`read_soft_data_eas`: EAS per-category probabilities

Writers:
    - :func:`write_gslib`, :func:`write_gslib_indices`
    - :func:`write_gs3d_csv`, :func:`write_grd3`
    - :func:`write_ascii`: human-readable dump

Console:
    - :data:`ONSCREEN_CHARS`, :func:`render_grid`, :func:`show_grid`

Example:
    >>> from mps_io import read_gslib, write_grd3, GridSpec
    >>>
    >>> ti = read_gslib("strebelle.gslib")
    >>> spec = GridSpec.from_shape(ti.shape, origin=(500.0, 200.0, 0.0))
    >>> write_grd3("strebelle.grd3", ti, spec, value_type=2)
"""

__version__ = "1.0.0"

# Errors and warnings
from mps_io.core import (
    GridFileError,
    GridHeaderError,
    GridSizeError,
    GridFormatError,
    GridEncodeError,
    SkippedSampleWarning,
)

# Grid data model
from mps_io.grid import (
    Grid,
    GridSpec,
    NODATA,
    is_nodata,
    mask_nodata,
)

# File formats
from mps_io.gslib import read_gslib, write_gslib, write_gslib_indices
from mps_io.gs3d import (
    Grd3ValueType,
    read_gs3d_csv,
    write_gs3d_csv,
    read_grd3,
    write_grd3,
)
from mps_io.eas import read_hard_data_eas, read_soft_data_eas
from mps_io.ascii import write_ascii

# Console display
from mps_io.display import ONSCREEN_CHARS, glyph, render_grid, show_grid

__all__ = [
    # Version
    "__version__",
    # Errors and warnings
    "GridFileError",
    "GridHeaderError",
    "GridSizeError",
    "GridFormatError",
    "GridEncodeError",
    "SkippedSampleWarning",
    # Grid data model
    "Grid",
    "GridSpec",
    "NODATA",
    "is_nodata",
    "mask_nodata",
    # Readers
    "read_gslib",
    "read_gs3d_csv",
    "read_grd3",
    "read_hard_data_eas",
    "read_soft_data_eas",
    # Writers
    "write_gslib",
    "write_gslib_indices",
    "write_gs3d_csv",
    "write_grd3",
    "write_ascii",
    "Grd3ValueType",
    # Console display
    "ONSCREEN_CHARS",
    "glyph",
    "render_grid",
    "show_grid",
]

"""
Tests for EAS hard and soft data reading.
"""

import numpy as np
import pytest

from mps_io.core import GridFormatError, GridHeaderError, SkippedSampleWarning
from mps_io.eas import read_hard_data_eas, read_soft_data_eas
from mps_io.grid import NODATA, GridSpec


@pytest.fixture
def small_grid():
    """4 x 3 x 2 grid with 10 m cells starting at (100, 200, 0)."""
    return GridSpec(nx=4, ny=3, nz=2, xmin=100, ymin=200, zmin=0,
                    xsiz=10, ysiz=10, zsiz=5)


HARD = """wells
4
X
Y
Z
facies
100 200 0 1
130 220 5 2
112 209 1 3
"""

SOFT = """soft probabilities
6
X
Y
Z
P(A)
P(B)
P(C)
100 200 0 0.1 0.7 0.2
130 220 5 0.5 0.25 0.25
"""


class TestReadHardData:
    """Tests for read_hard_data_eas."""

    def test_samples_snapped_to_cells(self, write_text, small_grid):
        hard = read_hard_data_eas(write_text("hard.dat", HARD), small_grid)

        assert hard.shape == (2, 3, 4)
        assert hard[0, 0, 0] == 1
        assert hard[1, 2, 3] == 2
        # (112, 209, 1) rounds to cell (1, 1, 0)
        assert hard[0, 1, 1] == 3
        assert (hard == NODATA).sum() == small_grid.ncells - 3

    def test_custom_nodata(self, write_text, small_grid):
        hard = read_hard_data_eas(write_text("hard.dat", HARD), small_grid, nodata=-1.0)
        assert hard[0, 2, 2] == -1.0

    def test_nodata_samples_ignored(self, write_text, small_grid):
        text = HARD + "100 200 0 -999\n"
        hard = read_hard_data_eas(write_text("hard.dat", text), small_grid)
        # Later no-data row does not erase the informed cell
        assert hard[0, 0, 0] == 1

    def test_out_of_range_samples_skipped(self, write_text, small_grid):
        text = HARD + "90 200 0 8\n500 200 0 9\n100 200 20 9\n"
        with pytest.warns(SkippedSampleWarning, match="3 of 6"):
            hard = read_hard_data_eas(write_text("hard.dat", text), small_grid)

        reference = read_hard_data_eas(write_text("ref.dat", HARD), small_grid)
        np.testing.assert_array_equal(hard, reference)

    def test_value_column(self, write_text, small_grid):
        text = "two values\n5\nX\nY\nZ\na\nb\n100 200 0 1 42\n"
        hard = read_hard_data_eas(write_text("hard.dat", text), small_grid, value_col=4)
        assert hard[0, 0, 0] == 42

    def test_too_few_columns(self, write_text, small_grid):
        with pytest.raises(GridHeaderError, match="4 columns needed"):
            read_hard_data_eas(write_text("hard.dat", "pts\n3\nX\nY\nZ\n1 2 3\n"), small_grid)

    def test_row_width_mismatch(self, write_text, small_grid):
        with pytest.raises(GridHeaderError):
            read_hard_data_eas(write_text("hard.dat", HARD + "100 200 0\n"), small_grid)

    def test_bad_value(self, write_text, small_grid):
        with pytest.raises(GridFormatError):
            read_hard_data_eas(write_text("hard.dat", HARD + "100 200 0 x\n"), small_grid)

    def test_missing_file(self, tmp_path, small_grid):
        with pytest.raises(FileNotFoundError):
            read_hard_data_eas(tmp_path / "missing.dat", small_grid)

    def test_header_only(self, write_text, small_grid):
        hard = read_hard_data_eas(write_text("hard.dat", "empty\n4\nX\nY\nZ\nv\n"), small_grid)
        assert (hard == NODATA).all()


class TestReadSoftData:
    """Tests for read_soft_data_eas."""

    def test_shape(self, write_text, small_grid):
        soft = read_soft_data_eas(write_text("soft.dat", SOFT), [0, 1, 2], small_grid)
        assert soft.shape == (2, 3, 4, 3)

    def test_category_order(self, write_text, small_grid):
        """The second probability column fills category index 1."""
        soft = read_soft_data_eas(write_text("soft.dat", SOFT), [0, 1, 2], small_grid)

        np.testing.assert_allclose(soft[0, 0, 0], [0.1, 0.7, 0.2])
        assert soft[1, 2, 3, 1] == pytest.approx(0.25)

    def test_uninformed_cells_are_nan(self, write_text, small_grid):
        soft = read_soft_data_eas(write_text("soft.dat", SOFT), [0, 1, 2], small_grid)
        assert np.isnan(soft[0, 1, 1]).all()

    def test_fewer_categories_than_columns(self, write_text, small_grid):
        soft = read_soft_data_eas(write_text("soft.dat", SOFT), [0, 1], small_grid)
        np.testing.assert_allclose(soft[0, 0, 0], [0.1, 0.7])

    def test_too_many_categories(self, write_text, small_grid):
        with pytest.raises(GridHeaderError, match="7 columns needed"):
            read_soft_data_eas(write_text("soft.dat", SOFT), [0, 1, 2, 3], small_grid)

    def test_out_of_range_samples_skipped(self, write_text, small_grid):
        text = SOFT + "0 0 0 1 0 0\n"
        with pytest.warns(SkippedSampleWarning):
            soft = read_soft_data_eas(write_text("soft.dat", text), [0, 1, 2], small_grid)
        np.testing.assert_allclose(soft[0, 0, 0], [0.1, 0.7, 0.2])

    def test_empty_categories(self, write_text, small_grid):
        with pytest.raises(ValueError, match="categories"):
            read_soft_data_eas(write_text("soft.dat", SOFT), [], small_grid)

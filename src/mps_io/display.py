"""
Text-mode preview of grids in the console.

Categorical cell values are drawn as single glyphs taken from
ONSCREEN_CHARS; index 0 (a space) is reserved for no-data.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Sequence, TextIO

import numpy as np

from mps_io.core import check_grid

if TYPE_CHECKING:
    from numpy.typing import NDArray


ONSCREEN_CHARS: tuple[str, ...] = (
    " ", "0", "1", "2", "3", "4", "5", "6", "7", "8", "9",
    "a", "A", "b", "B", "c", "C", "d", "D", "e", "E", "f", "F", "g", "G", "h", "H",
    "i", "I", "j", "J", "k", "K", "l", "L", "m", "M", "n", "N", "p", "P", "q", "Q",
    "r", "R", "s", "S", "t", "T", "u", "U", "v", "v", "w", "W", ",", ";", ".", ":",
    "-", "_", "+", "/", "*", "<", ">", "!", "#", "¤", "%", "&", "(", ")", "=", "?",
)


def glyph(code: int) -> str:
    """Glyph for an integer code (0 is blank)."""
    if not 0 <= code < len(ONSCREEN_CHARS):
        raise ValueError(f"No glyph for code {code}, table holds {len(ONSCREEN_CHARS)}")
    return ONSCREEN_CHARS[code]


def render_grid(
    grid: NDArray[np.floating],
    categories: Sequence[float] | None = None,
) -> str:
    """
    Render a grid as text, one block per z layer.

    Rows are drawn with the largest y index on top. Each category is
    drawn with the glyph at its position in ``categories`` plus one;
    nan cells and values not listed in ``categories`` are blank.

    Args:
        grid: Grid of shape (nz, ny, nx)
        categories: Category values. The sorted distinct values of the
            grid if None.

    Returns:
        The rendered text
    """
    grid = check_grid(grid)
    if categories is None:
        categories = np.unique(grid[~np.isnan(grid)])
    categories = list(categories)
    if len(categories) >= len(ONSCREEN_CHARS):
        raise ValueError(
            f"{len(categories)} categories, at most {len(ONSCREEN_CHARS) - 1} can be drawn"
        )

    codes = np.zeros(grid.shape, dtype=np.intp)
    for i, category in enumerate(categories):
        codes[grid == category] = i + 1

    blocks = []
    for iz, layer in enumerate(codes):
        lines = [f"z = {iz}"]
        for row in layer[::-1]:
            lines.append("".join(ONSCREEN_CHARS[c] for c in row))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def show_grid(
    grid: NDArray[np.floating],
    categories: Sequence[float] | None = None,
    file: TextIO | None = None,
) -> None:
    """Print a grid to the console (see render_grid)."""
    print(render_grid(grid, categories), file=file or sys.stdout)

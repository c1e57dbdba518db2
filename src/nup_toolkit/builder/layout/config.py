"""
Module: builder.layout.config

Purpose:
    Grid shapes for N-up sheets. The shape for each pages-per-sheet value
    is a product decision, so it is kept as an explicit lookup table
    rather than derived from the page count.

Key Classes:
    - GridShape: Columns and rows of one sheet

Key Functions:
    - grid_for(): Look up the grid shape for a pages-per-sheet value

Used By:
    - builder.layout.paginator: Cell geometry
    - builder.output.renderer: Row/column placement
"""

from __future__ import annotations

import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)


class GridShape(NamedTuple):
    """Columns and rows of an output sheet grid."""

    cols: int
    rows: int

    @property
    def capacity(self) -> int:
        """Number of cells on the sheet."""
        return self.cols * self.rows

    def position(self, index: int) -> tuple[int, int]:
        """
        (row, col) of a cell, filling left-to-right then top-to-bottom.

        Example:
            >>> GridShape(2, 3).position(3)
            (1, 1)
        """
        if not 0 <= index < self.capacity:
            raise IndexError(f"Cell index {index} outside {self.cols}x{self.rows} grid")
        return index // self.cols, index % self.cols


# pages_per_sheet -> (cols, rows); 5 and 7 leave one cell empty
GRID_SHAPES: dict[int, GridShape] = {
    1: GridShape(1, 1),
    2: GridShape(1, 2),
    3: GridShape(1, 3),
    4: GridShape(2, 2),
    5: GridShape(2, 3),
    6: GridShape(2, 3),
    7: GridShape(2, 4),
    8: GridShape(2, 4),
}
FALLBACK_GRID = GridShape(1, 1)


def grid_for(pages_per_sheet: int) -> GridShape:
    """
    Get the grid shape for a pages-per-sheet value.

    Values outside the table fall back to a single cell.

    Example:
        >>> grid_for(6)
        GridShape(cols=2, rows=3)
    """
    shape = GRID_SHAPES.get(pages_per_sheet)
    if shape is None:
        logger.debug(f"No grid shape for {pages_per_sheet} pages per sheet, using 1x1")
        return FALLBACK_GRID
    return shape

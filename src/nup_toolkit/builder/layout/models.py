"""
Module: builder.layout.models

Purpose:
    Data models for sheet layout.
    Immutable dataclasses representing cells, placements and sheets.
    All coordinates are top-left origin, y increasing downward, in points.

Key Classes:
    - CellRect: Bounds of one grid cell
    - CellPlacement: PageItem assigned to a cell
    - SheetPlan: Complete plan for one output sheet
    - LayoutResult: Final layout output

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.paginator: Creates SheetPlans
    - builder.output.renderer: Draws SheetPlans
"""

from __future__ import annotations

from dataclasses import dataclass

from nup_toolkit.core.models import PageItem

from .config import GridShape


@dataclass(frozen=True)
class CellRect:
    """
    Bounds of one grid cell (top-left origin).

    Attributes:
        x: Left edge in points from the sheet's left edge
        top: Top edge in points from the sheet's top edge
        width: Cell width in points
        height: Cell height in points

    Example:
        >>> cell = CellRect(x=20, top=20, width=100, height=50)
        >>> cell.bottom
        70
    """

    x: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge (top + height)."""
        return self.top + self.height


@dataclass(frozen=True)
class CellPlacement:
    """
    A page assigned to a grid cell.

    Attributes:
        item: The page placed in the cell
        index: Cell index on the sheet (left-to-right, top-to-bottom)
        row: Zero-based row
        col: Zero-based column
        cell: Cell bounds
        sequence: 1-based position of the page in the whole output
    """

    item: PageItem
    index: int
    row: int
    col: int
    cell: CellRect
    sequence: int


@dataclass(frozen=True)
class SheetPlan:
    """
    Complete layout plan for a single output sheet.

    Attributes:
        index: Sheet number (0-indexed)
        grid: Grid shape of the sheet
        placements: Occupied cells, in cell order

    Example:
        >>> sheet.placement_count, sheet.empty_cells
        (1, 3)
    """

    index: int
    grid: GridShape
    placements: tuple[CellPlacement, ...]

    @property
    def placement_count(self) -> int:
        """Number of occupied cells on this sheet."""
        return len(self.placements)

    @property
    def empty_cells(self) -> int:
        """Number of cells left empty."""
        return self.grid.capacity - len(self.placements)

    @property
    def items(self) -> tuple[PageItem, ...]:
        return tuple(p.item for p in self.placements)


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output.

    Attributes:
        sheets: Tuple of SheetPlans
        pages_per_sheet: Group size used for partitioning
        cell_width: Width shared by every cell
        cell_height: Height shared by every cell
    """

    sheets: tuple[SheetPlan, ...]
    pages_per_sheet: int
    cell_width: float
    cell_height: float

    @property
    def sheet_count(self) -> int:
        """Number of output sheets."""
        return len(self.sheets)

    @property
    def total_placements(self) -> int:
        """Total number of placed pages across all sheets."""
        return sum(s.placement_count for s in self.sheets)

"""
Module: builder.layout

Purpose:
    N-up sheet packing. Groups the selected pages onto sheets and
    computes the grid cell each page occupies.

Key Functions:
    - paginate(): Arrange pages onto sheets
    - group_pages(): Contiguous chunking
    - grid_for(): Grid shape lookup

Key Classes:
    - GridShape: Columns and rows of a sheet
    - SheetPlan: Single sheet layout plan
    - LayoutResult: Complete layout
"""

from .config import GridShape, grid_for, GRID_SHAPES
from .models import CellRect, CellPlacement, SheetPlan, LayoutResult
from .paginator import (
    active_pages,
    group_pages,
    sheet_count,
    cell_size,
    cell_rect,
    paginate,
)

__all__ = [
    # Config
    "GridShape",
    "grid_for",
    "GRID_SHAPES",
    # Models
    "CellRect",
    "CellPlacement",
    "SheetPlan",
    "LayoutResult",
    # Functions
    "active_pages",
    "group_pages",
    "sheet_count",
    "cell_size",
    "cell_rect",
    "paginate",
]

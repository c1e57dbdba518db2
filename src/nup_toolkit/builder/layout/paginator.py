"""
Module: builder.layout.paginator

Purpose:
    Pack the selected pages onto N-up sheets and compute cell geometry.

Key Functions:
    - active_pages(): Selected pages in document order
    - group_pages(): Contiguous fixed-size chunking
    - sheet_count(): Number of sheets for a page count
    - cell_size(): Shared cell width/height for a grid
    - cell_rect(): Bounds of one cell
    - paginate(): Main layout function

Algorithm:
    Simple contiguous chunking in document order. Group k holds items
    [k*n, (k+1)*n); the last group may be short. No reordering and no
    rebalancing. Within a group, cells fill left-to-right, top-to-bottom.

Dependencies:
    - builder.layout.config: Grid shapes
    - builder.layout.models: CellRect, SheetPlan, LayoutResult
    - builder.config: Sheet size and margin

Used By:
    - builder.controller: Assembly
    - builder.session: Sheet count preview
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, TypeVar

from nup_toolkit.builder.config import BuilderConfig
from nup_toolkit.core.models import LayoutSettings, PageItem

from .config import GridShape, grid_for
from .models import CellPlacement, CellRect, LayoutResult, SheetPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")


def active_pages(pages: Sequence[PageItem]) -> List[PageItem]:
    """Selected pages, preserving order."""
    return [p for p in pages if p.is_selected]


def group_pages(items: Sequence[T], pages_per_sheet: int) -> List[List[T]]:
    """
    Split items into contiguous groups of pages_per_sheet.

    Concatenating the groups reproduces the input exactly.

    Args:
        items: Items in document order
        pages_per_sheet: Group size (>= 1)

    Returns:
        List of groups; every group except possibly the last is full

    Raises:
        ValueError: If pages_per_sheet < 1

    Example:
        >>> group_pages([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if pages_per_sheet < 1:
        raise ValueError(f"pages_per_sheet must be >= 1: {pages_per_sheet}")
    return [
        list(items[start:start + pages_per_sheet])
        for start in range(0, len(items), pages_per_sheet)
    ]


def sheet_count(page_count: int, pages_per_sheet: int) -> int:
    """Number of sheets needed for page_count pages (ceil division)."""
    if pages_per_sheet < 1:
        raise ValueError(f"pages_per_sheet must be >= 1: {pages_per_sheet}")
    return math.ceil(page_count / pages_per_sheet)


def cell_size(grid: GridShape, config: BuilderConfig) -> tuple[float, float]:
    """
    Get the (width, height) shared by every cell of a grid.

    Example:
        >>> cell_size(GridShape(2, 2), BuilderConfig(sheet_width=240, sheet_height=440, margin=20))
        (100.0, 200.0)
    """
    return config.content_width / grid.cols, config.content_height / grid.rows


def cell_rect(index: int, grid: GridShape, config: BuilderConfig) -> CellRect:
    """
    Get the bounds of a cell in top-left-origin coordinates.

    Raises:
        IndexError: If index is outside the grid
    """
    row, col = grid.position(index)
    width, height = cell_size(grid, config)
    return CellRect(
        x=config.margin + col * width,
        top=config.margin + row * height,
        width=width,
        height=height,
    )


def paginate(
    pages: Sequence[PageItem],
    layout: LayoutSettings,
    config: Optional[BuilderConfig] = None,
) -> LayoutResult:
    """
    Arrange the selected pages onto sheets.

    Args:
        pages: All page items in document order (unselected are skipped)
        layout: Layout settings (pages per sheet)
        config: Builder configuration (sheet size, margin)

    Returns:
        LayoutResult with one SheetPlan per group; empty when nothing
        is selected

    Example:
        >>> result = paginate(nine_pages, LayoutSettings(pages_per_sheet=4))
        >>> [s.placement_count for s in result.sheets]
        [4, 4, 1]
    """
    config = config or BuilderConfig()
    n = layout.pages_per_sheet
    grid = grid_for(n)
    width, height = cell_size(grid, config)

    selected = active_pages(pages)
    sheets: List[SheetPlan] = []
    sequence = 0

    for sheet_index, group in enumerate(group_pages(selected, n)):
        placements = []
        for i, item in enumerate(group):
            sequence += 1
            row, col = grid.position(i)
            placements.append(CellPlacement(
                item=item,
                index=i,
                row=row,
                col=col,
                cell=cell_rect(i, grid, config),
                sequence=sequence,
            ))
        sheets.append(SheetPlan(index=sheet_index, grid=grid, placements=tuple(placements)))

    logger.info(
        f"Paginated {len(selected)} of {len(pages)} pages onto {len(sheets)} sheets "
        f"({n} per sheet, {grid.cols}x{grid.rows} grid)"
    )

    return LayoutResult(
        sheets=tuple(sheets),
        pages_per_sheet=n,
        cell_width=width,
        cell_height=height,
    )

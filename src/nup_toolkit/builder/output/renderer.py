"""
Module: builder.output.renderer

Purpose:
    Place composited page images into their sheet cells through a
    DocumentEncoder. Layout math is top-left origin; the encoder is
    bottom-left origin. The conversion between the two lives in
    to_output_y() and nowhere else.

Key Functions:
    - to_output_y(): Top-down y to bottom-up y
    - fit_to_cell(): Aspect-preserving, centered fit inside a cell
    - draw_placement(): Draw one page (plus border/number) on a sheet

Dependencies:
    - builder.output.encoder: DocumentEncoder, EmbeddedImage
    - builder.layout.models: CellPlacement, CellRect

Used By:
    - builder.controller: Assembly
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nup_toolkit.builder.config import BuilderConfig
from nup_toolkit.builder.layout.models import CellPlacement, CellRect
from nup_toolkit.common import STYLE_THRESHOLDS
from nup_toolkit.core.models import LayoutSettings

from .encoder import DocumentEncoder, EmbeddedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageBox:
    """
    Where a scaled image lands inside its cell (top-left origin).

    Attributes:
        x: Left edge in points
        top: Top edge in points
        width: Drawn width in points
        height: Drawn height in points
        scale: Uniform scale factor applied to the image
    """

    x: float
    top: float
    width: float
    height: float
    scale: float


def to_output_y(sheet_height: float, top: float, height: float) -> float:
    """
    Convert a top-down y coordinate to bottom-up output space.

    Args:
        sheet_height: Sheet height in points
        top: Distance of the element's top edge from the sheet top
        height: Element height in points

    Returns:
        Distance of the element's bottom edge from the sheet bottom

    Example:
        >>> to_output_y(842, top=20, height=100)
        722
    """
    return sheet_height - top - height


def fit_to_cell(
    image_width: float,
    image_height: float,
    cell: CellRect,
    padding: float,
) -> ImageBox:
    """
    Fit an image inside a cell without distortion and center it.

    The scale factor is
    min((cell.width - padding) / image_width, (cell.height - padding) / image_height).

    Raises:
        ValueError: If the image has no area

    Example:
        >>> box = fit_to_cell(200, 100, CellRect(0, 0, 110, 110), padding=10)
        >>> (box.width, box.height, box.top)
        (100.0, 50.0, 30.0)
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image has no area: {image_width}x{image_height}")

    scale = min(
        (cell.width - padding) / image_width,
        (cell.height - padding) / image_height,
    )
    width = image_width * scale
    height = image_height * scale
    return ImageBox(
        x=cell.x + (cell.width - width) / 2,
        top=cell.top + (cell.height - height) / 2,
        width=width,
        height=height,
        scale=scale,
    )


def draw_placement(
    encoder: DocumentEncoder,
    sheet: int,
    placement: CellPlacement,
    image: EmbeddedImage,
    layout: LayoutSettings,
    config: BuilderConfig,
) -> ImageBox:
    """
    Draw one placed page onto a sheet.

    Draws the image scaled and centered in its cell, then the cell
    border (full cell bounds, not the image bounds) and the page
    number label when enabled. With page numbers on, the image is
    fitted above a label band at the bottom of the cell.

    Args:
        encoder: Output document encoder
        sheet: Sheet handle from encoder.new_sheet()
        placement: Cell assignment for the page
        image: Embedded composited page
        layout: Layout settings (borders, page numbers)
        config: Builder configuration

    Returns:
        The image box used, in top-left coordinates
    """
    cell = placement.cell
    fit_cell = cell
    if layout.show_page_numbers:
        # Keep a band under the image for the label
        band = config.page_number_font_size + 2 * STYLE_THRESHOLDS.page_number_offset_pt
        fit_cell = CellRect(cell.x, cell.top, cell.width, cell.height - band)
    box = fit_to_cell(image.width, image.height, fit_cell, config.inner_padding)

    encoder.draw_image(
        sheet,
        image,
        box.x,
        to_output_y(config.sheet_height, box.top, box.height),
        box.width,
        box.height,
    )

    if layout.show_borders:
        encoder.draw_rect(
            sheet,
            cell.x,
            to_output_y(config.sheet_height, cell.top, cell.height),
            cell.width,
            cell.height,
            stroke_width=config.border_width,
            color=config.border_color,
        )

    if layout.show_page_numbers:
        # Baseline just above the cell's bottom edge, inside the reserved band
        encoder.draw_text(
            sheet,
            str(placement.sequence),
            cell.x + cell.width / 2,
            to_output_y(config.sheet_height, cell.bottom, 0) + STYLE_THRESHOLDS.page_number_offset_pt,
            font_size=config.page_number_font_size,
        )

    logger.debug(
        f"Placed page {placement.sequence} in cell {placement.index} "
        f"(row {placement.row}, col {placement.col}) at scale {box.scale:.3f}"
    )
    return box

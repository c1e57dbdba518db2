"""
Module: builder.output

Purpose:
    Output document generation. Places composited pages into sheet cells
    and writes the document through a DocumentEncoder (ReportLab by default).

Key Functions:
    - draw_placement(): Draw one page onto a sheet
    - fit_to_cell(): Aspect-preserving fit
    - to_output_y(): Coordinate conversion

Key Classes:
    - DocumentEncoder: Abstract output document
    - ReportLabEncoder: Standard PDF implementation
"""

from .encoder import DocumentEncoder, ReportLabEncoder, EmbeddedImage
from .renderer import ImageBox, draw_placement, fit_to_cell, to_output_y

__all__ = [
    "DocumentEncoder",
    "ReportLabEncoder",
    "EmbeddedImage",
    "ImageBox",
    "draw_placement",
    "fit_to_cell",
    "to_output_y",
]

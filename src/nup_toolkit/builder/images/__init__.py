"""
Module: builder.images

Purpose:
    Page rendering and compositing for the assembly pipeline. Provides
    the rasterizer abstraction, raster codecs and the page compositor.

Key Classes:
    - Rasterizer: Abstract interface for page rendering
    - PyMuPdfRasterizer: Standard PDF implementation
    - RasterPage: Rendered page samples

Key Functions:
    - compose_page(): Async page compositing to JPEG bytes
    - composite_page(): In-memory compositing
"""

from .rasterizer import Rasterizer, PyMuPdfRasterizer, RasterPage
from .codec import encode_jpeg, encode_png, decode_overlay
from .compositor import compose_page, composite_page, rotated_size

__all__ = [
    "Rasterizer",
    "PyMuPdfRasterizer",
    "RasterPage",
    "encode_jpeg",
    "encode_png",
    "decode_overlay",
    "compose_page",
    "composite_page",
    "rotated_size",
]

"""
Module: builder.images.rasterizer

Purpose:
    Abstract interface for turning a page of a source document into a
    bitmap, plus the standard PyMuPDF-backed implementation.

Key Classes:
    - RasterPage: Rendered RGB samples with their dimensions
    - Rasterizer: Abstract base class for page rendering
    - PyMuPdfRasterizer: Standard implementation for PDF sources

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL: Image conversion

Used By:
    - builder.images.compositor: High-quality page renders
    - builder.session: Page counts and preview dimensions
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import fitz
from PIL import Image

from nup_toolkit.builder.errors import RasterizationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RasterPage:
    """
    A rendered page (immutable).

    Attributes:
        pixels: Packed 8-bit RGB samples, row-major, no padding
        width: Width in pixels
        height: Height in pixels
    """

    pixels: bytes = field(repr=False)
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate sample buffer size on construction."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid raster size: {self.width}x{self.height}")
        expected = self.width * self.height * 3
        if len(self.pixels) != expected:
            raise ValueError(
                f"Expected {expected} RGB samples for {self.width}x{self.height}, "
                f"got {len(self.pixels)}"
            )

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Image.Image:
        """Convert to an RGB PIL image."""
        return Image.frombytes("RGB", self.size, self.pixels)


class Rasterizer(ABC):
    """
    Abstract interface for rendering source document pages.

    Implementations must accept any positive scale and any 0-based page
    index below the document's page count, and raise
    RasterizationFailure with a descriptive message otherwise.
    """

    @abstractmethod
    def page_count(self, source_bytes: bytes) -> int:
        """
        Count the pages in a source document.

        Raises:
            RasterizationFailure: If the document cannot be parsed
        """

    @abstractmethod
    def rasterize(self, source_bytes: bytes, page_index: int, scale: float) -> RasterPage:
        """
        Render one page to RGB samples.

        Args:
            source_bytes: Raw document bytes
            page_index: Zero-based page index
            scale: Multiplier over 72 DPI (1.0 renders one pixel per point)

        Returns:
            Rendered page

        Raises:
            RasterizationFailure: If the document is malformed, the index
                is out of range or the scale is not positive
        """


class PyMuPdfRasterizer(Rasterizer):
    """
    Rasterizer for PDF documents using PyMuPDF.

    Example:
        >>> raster = PyMuPdfRasterizer().rasterize(pdf_bytes, 0, scale=1.5)
        >>> raster.size
        (893, 1263)
    """

    def page_count(self, source_bytes: bytes) -> int:
        with self._open(source_bytes) as doc:
            return doc.page_count

    def rasterize(self, source_bytes: bytes, page_index: int, scale: float) -> RasterPage:
        if scale <= 0:
            raise RasterizationFailure(f"Scale must be positive: {scale}")

        with self._open(source_bytes) as doc:
            if not 0 <= page_index < doc.page_count:
                raise RasterizationFailure(
                    f"Page index {page_index} out of range for document "
                    f"with {doc.page_count} pages"
                )
            try:
                page = doc[page_index]
                matrix = fitz.Matrix(scale, scale)
                pix = page.get_pixmap(matrix=matrix, alpha=False, colorspace=fitz.csRGB)
            except (RuntimeError, ValueError) as e:
                raise RasterizationFailure(f"Failed to render page {page_index}: {e}") from e

            logger.debug(f"Rasterized page {page_index} at scale {scale}: {pix.width}x{pix.height}")
            return RasterPage(pixels=bytes(pix.samples), width=pix.width, height=pix.height)

    @staticmethod
    def _open(source_bytes: bytes) -> fitz.Document:
        """Open a PDF from memory, wrapping parser errors."""
        try:
            doc = fitz.open(stream=source_bytes, filetype="pdf")
        except (RuntimeError, ValueError, TypeError) as e:
            raise RasterizationFailure(f"Failed to parse PDF: {e}") from e
        if doc.page_count == 0:
            doc.close()
            raise RasterizationFailure("Failed to parse PDF: document has no pages")
        return doc

"""
Module: builder.output.encoder

Purpose:
    Abstract interface for writing the output document, plus the
    standard ReportLab implementation. Coordinates passed to an encoder
    are PDF-style: points, bottom-left origin, y increasing upward.

Key Classes:
    - EmbeddedImage: Reusable handle to an embedded raster
    - DocumentEncoder: Abstract base class for document output
    - ReportLabEncoder: Standard in-memory PDF implementation

Dependencies:
    - reportlab: PDF generation
    - io (std): In-memory buffers

Used By:
    - builder.output.renderer: Sheet drawing
    - builder.controller: Document creation and serialization
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from nup_toolkit.builder.errors import EmbedFailure

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"


@dataclass(frozen=True)
class EmbeddedImage:
    """
    An image embedded in the output document.

    Attributes:
        handle: Encoder-specific reference, reusable across draws
        width: Intrinsic width in pixels
        height: Intrinsic height in pixels
    """

    handle: Any
    width: int
    height: int


class DocumentEncoder(ABC):
    """
    Abstract interface for building an output document sheet by sheet.

    Sheets are created in output order. Drawing always targets a sheet
    handle returned by new_sheet().
    """

    @abstractmethod
    def new_sheet(self, width: float, height: float) -> int:
        """Add a sheet of the given size in points and return its handle."""

    @abstractmethod
    def embed_raster(self, data: bytes) -> EmbeddedImage:
        """
        Embed a compressed raster image.

        Raises:
            EmbedFailure: If the bytes are not an acceptable image
        """

    @abstractmethod
    def draw_image(
        self,
        sheet: int,
        image: EmbeddedImage,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw an embedded image into an axis-aligned rectangle."""

    @abstractmethod
    def draw_rect(
        self,
        sheet: int,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        stroke_width: float,
        color: tuple[float, float, float],
    ) -> None:
        """Draw an unfilled rectangle."""

    @abstractmethod
    def draw_text(
        self,
        sheet: int,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
    ) -> None:
        """Draw a single line of text centered horizontally on x."""

    @abstractmethod
    def serialize(self) -> bytes:
        """Finish the document and return its bytes."""


class ReportLabEncoder(DocumentEncoder):
    """
    In-memory PDF encoder using ReportLab's canvas.

    ReportLab writes pages strictly in order, so only the most recently
    created sheet can be drawn on.

    Example:
        >>> enc = ReportLabEncoder()
        >>> sheet = enc.new_sheet(595.28, 841.89)
        >>> img = enc.embed_raster(jpeg_bytes)
        >>> enc.draw_image(sheet, img, 20, 20, 100, 140)
        >>> pdf_bytes = enc.serialize()
    """

    def __init__(self) -> None:
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer)
        self._current: Optional[int] = None
        self._sheet_count = 0
        self._serialized: Optional[bytes] = None

    @property
    def sheet_count(self) -> int:
        """Number of sheets created so far."""
        return self._sheet_count

    def new_sheet(self, width: float, height: float) -> int:
        self._check_open()
        if self._current is not None:
            self._canvas.showPage()
        self._canvas.setPageSize((width, height))
        self._current = self._sheet_count
        self._sheet_count += 1
        return self._current

    def embed_raster(self, data: bytes) -> EmbeddedImage:
        self._check_open()
        try:
            reader = ImageReader(io.BytesIO(data))
            width, height = reader.getSize()
        except Exception as e:
            raise EmbedFailure(f"Encoder rejected image ({len(data)} bytes): {e}") from e
        return EmbeddedImage(handle=reader, width=int(width), height=int(height))

    def draw_image(
        self,
        sheet: int,
        image: EmbeddedImage,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        self._check_sheet(sheet)
        self._canvas.drawImage(image.handle, x, y, width=width, height=height)

    def draw_rect(
        self,
        sheet: int,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        stroke_width: float,
        color: tuple[float, float, float],
    ) -> None:
        self._check_sheet(sheet)
        c = self._canvas
        c.saveState()
        c.setLineWidth(stroke_width)
        c.setStrokeColorRGB(*color)
        c.rect(x, y, width, height, stroke=1, fill=0)
        c.restoreState()

    def draw_text(
        self,
        sheet: int,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
    ) -> None:
        self._check_sheet(sheet)
        c = self._canvas
        c.saveState()
        c.setFont(DEFAULT_FONT, font_size)
        c.setFillColorRGB(0.4, 0.4, 0.4)
        c.drawCentredString(x, y, text)
        c.restoreState()

    def serialize(self) -> bytes:
        if self._serialized is None:
            if self._current is not None:
                self._canvas.showPage()
            self._canvas.save()
            self._serialized = self._buffer.getvalue()
            logger.debug(f"Serialized {self._sheet_count} sheets ({len(self._serialized)} bytes)")
        return self._serialized

    def _check_open(self) -> None:
        if self._serialized is not None:
            raise RuntimeError("Document already serialized")

    def _check_sheet(self, sheet: int) -> None:
        self._check_open()
        if sheet != self._current:
            raise ValueError(f"Sheet {sheet} is not the current sheet ({self._current})")

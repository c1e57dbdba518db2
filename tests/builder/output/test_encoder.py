"""
Tests for ReportLabEncoder.

Encoded documents are read back with PyMuPDF.
"""

import io

import fitz
import pytest
from PIL import Image

from nup_toolkit.builder.errors import EmbedFailure
from nup_toolkit.builder.images import encode_jpeg
from nup_toolkit.builder.output import ReportLabEncoder

A4 = (595.28, 841.89)


@pytest.fixture
def jpeg_bytes():
    return encode_jpeg(Image.new("RGB", (30, 40), (200, 10, 10)), 0.85)


class TestReportLabEncoder:
    """Tests for the ReportLab document encoder."""

    def test_serialize_when_sheets_drawn_then_pdf_with_sheet_count(self, jpeg_bytes):
        """Every new_sheet() call should become one page of the given size."""
        # Arrange
        enc = ReportLabEncoder()

        # Act
        for _ in range(3):
            sheet = enc.new_sheet(*A4)
            image = enc.embed_raster(jpeg_bytes)
            enc.draw_image(sheet, image, 20, 20, 100, 140)
        data = enc.serialize()

        # Assert
        assert data.startswith(b"%PDF")
        assert enc.sheet_count == 3
        with fitz.open(stream=data, filetype="pdf") as doc:
            assert doc.page_count == 3
            rect = doc[0].rect
            assert rect.width == pytest.approx(A4[0], abs=0.01)
            assert rect.height == pytest.approx(A4[1], abs=0.01)
            assert len(doc[2].get_images()) == 1

    def test_embed_when_jpeg_then_intrinsic_size_reported(self, jpeg_bytes):
        enc = ReportLabEncoder()
        enc.new_sheet(*A4)

        image = enc.embed_raster(jpeg_bytes)

        assert (image.width, image.height) == (30, 40)

    def test_embed_when_not_an_image_then_raises_embed_failure(self):
        """Garbage bytes should be rejected with EmbedFailure."""
        enc = ReportLabEncoder()
        enc.new_sheet(*A4)
        with pytest.raises(EmbedFailure, match="Encoder rejected image"):
            enc.embed_raster(b"garbage")

    def test_draw_text_when_called_then_text_in_output(self):
        """Labels should be written as real text."""
        enc = ReportLabEncoder()
        sheet = enc.new_sheet(*A4)
        enc.draw_text(sheet, "17", 300, 30, font_size=7)
        enc.draw_rect(sheet, 20, 20, 100, 100, stroke_width=1, color=(0.8, 0.8, 0.8))

        with fitz.open(stream=enc.serialize(), filetype="pdf") as doc:
            assert "17" in doc[0].get_text()

    def test_draw_when_old_sheet_then_raises_error(self, jpeg_bytes):
        """Only the most recent sheet should accept drawing."""
        enc = ReportLabEncoder()
        first = enc.new_sheet(*A4)
        enc.new_sheet(*A4)

        with pytest.raises(ValueError, match="not the current sheet"):
            enc.draw_rect(first, 0, 0, 10, 10, stroke_width=1, color=(0, 0, 0))

    def test_serialize_when_called_twice_then_same_bytes(self):
        """serialize() should be idempotent."""
        enc = ReportLabEncoder()
        enc.new_sheet(*A4)
        assert enc.serialize() == enc.serialize()

    def test_new_sheet_when_serialized_then_raises_error(self):
        """A finished document should not accept new sheets."""
        enc = ReportLabEncoder()
        enc.new_sheet(*A4)
        enc.serialize()
        with pytest.raises(RuntimeError, match="already serialized"):
            enc.new_sheet(*A4)

    def test_embed_when_png_then_accepted(self):
        """Lossless rasters should embed as well."""
        buf = io.BytesIO()
        Image.new("RGB", (5, 7), "white").save(buf, format="PNG")
        enc = ReportLabEncoder()
        enc.new_sheet(*A4)

        assert enc.embed_raster(buf.getvalue()).width == 5

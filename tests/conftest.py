import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import nup_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from nup_toolkit.builder.errors import EmbedFailure, RasterizationFailure
from nup_toolkit.builder.images.rasterizer import Rasterizer, RasterPage
from nup_toolkit.builder.output.encoder import DocumentEncoder, EmbeddedImage
from nup_toolkit.core.models import PageItem, SourceFile

MARKER_COLOR = (255, 0, 0)


class FakeRasterizer(Rasterizer):
    """
    Deterministic synthetic rasterizer.

    Every page is white with a red marker block covering the top-left
    quarter of the page, so rotation is observable in the output.
    Page sizes at scale 1.0 come from ``page_sizes``.
    """

    def __init__(self, page_sizes=None, fail_pages=()):
        self.page_sizes = list(page_sizes or [(40, 60)] * 12)
        self.fail_pages = set(fail_pages)
        self.calls = []

    def page_count(self, source_bytes):
        if source_bytes.startswith(b"BROKEN"):
            raise RasterizationFailure("Failed to parse PDF: not a PDF")
        return len(self.page_sizes)

    def rasterize(self, source_bytes, page_index, scale):
        self.calls.append((page_index, scale))
        if page_index in self.fail_pages or not 0 <= page_index < len(self.page_sizes):
            raise RasterizationFailure(f"Cannot render page {page_index}")
        w, h = self.page_sizes[page_index]
        width, height = max(1, round(w * scale)), max(1, round(h * scale))
        img = Image.new("RGB", (width, height), "white")
        img.paste(MARKER_COLOR, (0, 0, width // 4, height // 4))
        return RasterPage(pixels=img.tobytes(), width=width, height=height)


class RecordingEncoder(DocumentEncoder):
    """Document encoder fake that records every call."""

    def __init__(self):
        self.calls = []
        self.sheets = 0

    def new_sheet(self, width, height):
        self.calls.append(("new_sheet", width, height))
        self.sheets += 1
        return self.sheets - 1

    def embed_raster(self, data):
        try:
            with Image.open(io.BytesIO(data)) as img:
                size = img.size
        except OSError as e:
            raise EmbedFailure(f"bad image: {e}") from e
        self.calls.append(("embed", size))
        return EmbeddedImage(handle=data, width=size[0], height=size[1])

    def draw_image(self, sheet, image, x, y, width, height):
        self.calls.append(("draw_image", sheet, x, y, width, height))

    def draw_rect(self, sheet, x, y, width, height, *, stroke_width, color):
        self.calls.append(("draw_rect", sheet, x, y, width, height))

    def draw_text(self, sheet, text, x, y, *, font_size):
        self.calls.append(("draw_text", sheet, text, x, y))

    def serialize(self):
        self.calls.append(("serialize",))
        return b"%FAKE-DOCUMENT"

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def fake_rasterizer():
    """Synthetic rasterizer with twelve 40x60 pages."""
    return FakeRasterizer()


@pytest.fixture
def rasterizer_factory():
    """Factory for rasterizers with custom page sizes or failing pages."""
    return FakeRasterizer


@pytest.fixture
def recording_encoder():
    """Encoder fake that records calls."""
    return RecordingEncoder()


@pytest.fixture
def source_file():
    """A twelve-page source file backed by dummy bytes."""
    return SourceFile.create(b"%PDF-1.4 synthetic", "synthetic.pdf", page_count=12)


@pytest.fixture
def make_pages(source_file):
    """Factory creating n fresh page items for the synthetic source file."""
    def _create(n, **overrides):
        return [
            PageItem.create(source_file.id, i % source_file.page_count, **overrides)
            for i in range(n)
        ]
    return _create


@pytest.fixture
def make_pdf():
    """Factory building a real PDF with ReportLab, one page per size."""
    def _create(page_sizes=((200, 300),)):
        from reportlab.pdfgen import canvas

        buf = io.BytesIO()
        c = canvas.Canvas(buf)
        for i, (w, h) in enumerate(page_sizes):
            c.setPageSize((w, h))
            c.setFillColorRGB(0, 0, 0)
            c.rect(10, 10, w / 4, h / 4, stroke=0, fill=1)
            c.drawString(20, h - 30, f"Page {i + 1}")
            c.showPage()
        c.save()
        return buf.getvalue()
    return _create


@pytest.fixture
def sample_overlay():
    """Factory for a transparent annotation with an opaque marker block."""
    def _create(size, box, color=(0, 0, 255, 255)):
        img = Image.new("RGBA", size, (0, 0, 0, 0))
        img.paste(color, box)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
    return _create

"""
Module: builder

Purpose:
    N-up document assembly pipeline. Composites each selected page
    (rotation, ink-saver filters, annotation), packs pages onto sheets
    and writes a single output document.

Key Functions:
    - assemble(): Async main entry point
    - assemble_sync(): Blocking wrapper
    - load_source_file(): Import an uploaded document

Key Classes:
    - BuilderConfig: Sheet geometry and raster settings
    - DocumentSession: Files + ordered pages
    - Rasterizer / DocumentEncoder: Collaborator interfaces

Dependencies:
    - fitz (PyMuPDF): Page rendering
    - PIL, numpy: Compositing and filters
    - reportlab: PDF output

Used By:
    - nup_toolkit.cli: Command line front end
"""

from .config import BuilderConfig, load_layout_settings, save_layout_settings
from .errors import (
    AssemblyError,
    EmptySelection,
    RasterizationFailure,
    SurfaceUnavailable,
    EmbedFailure,
    AnnotationDecodeFailure,
    UnknownSourceFile,
)
from .images import Rasterizer, PyMuPdfRasterizer, RasterPage, compose_page
from .output import DocumentEncoder, ReportLabEncoder, EmbeddedImage
from .controller import assemble, assemble_sync
from .session import DocumentSession, load_source_file, create_page_items

__all__ = [
    # Config
    "BuilderConfig",
    "load_layout_settings",
    "save_layout_settings",
    # Errors
    "AssemblyError",
    "EmptySelection",
    "RasterizationFailure",
    "SurfaceUnavailable",
    "EmbedFailure",
    "AnnotationDecodeFailure",
    "UnknownSourceFile",
    # Collaborators
    "Rasterizer",
    "PyMuPdfRasterizer",
    "RasterPage",
    "DocumentEncoder",
    "ReportLabEncoder",
    "EmbeddedImage",
    # Pipeline
    "compose_page",
    "assemble",
    "assemble_sync",
    # Session
    "DocumentSession",
    "load_source_file",
    "create_page_items",
]

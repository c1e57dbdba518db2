"""
Module: builder.controller

Purpose:
    Orchestrate the complete document assembly pipeline.
    Select → Paginate → (Composite → Embed → Place) per page → Serialize

Key Functions:
    - assemble(): Async entry point producing the output document bytes
    - assemble_sync(): Blocking wrapper for scripts and the CLI

Concurrency:
    Pages are composited strictly one at a time in document order.
    Each step suspends around blocking work (rendering, decoding,
    encoding, serialization) but no two pages are ever in flight
    together. There is no cancellation point that yields partial output.

Dependencies:
    - builder.layout: Sheet packing
    - builder.images: Page compositing
    - builder.output: Placement and document encoding

Used By:
    - builder.session: Download action
    - cli: Command line front end
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Mapping, Optional, Sequence

from nup_toolkit.core.models import LayoutSettings, PageItem, SourceFile

from .config import BuilderConfig
from .errors import EmptySelection, UnknownSourceFile
from .images import PyMuPdfRasterizer, Rasterizer, compose_page
from .layout import active_pages, paginate
from .output import DocumentEncoder, ReportLabEncoder, draw_placement

logger = logging.getLogger(__name__)


async def assemble(
    pages: Sequence[PageItem],
    files: Mapping[str, SourceFile],
    layout: LayoutSettings,
    *,
    rasterizer: Optional[Rasterizer] = None,
    encoder: Optional[DocumentEncoder] = None,
    config: Optional[BuilderConfig] = None,
) -> bytes:
    """
    Assemble the selected pages into one N-up output document.

    Pipeline:
    1. Keep only selected pages, preserving order
    2. Partition into groups of layout.pages_per_sheet
    3. One fixed-size sheet per group
    4. Per occupied cell: composite, embed, fit, center, draw
    5. Optional cell borders and page numbers
    6. Serialize

    Rotation is already baked into each composited image; nothing is
    rotated here. The inputs are never modified.

    Args:
        pages: All page items in document order
        files: SourceFile id -> SourceFile
        layout: Layout settings
        rasterizer: Page renderer (defaults to PyMuPdfRasterizer)
        encoder: Fresh output document (defaults to ReportLabEncoder)
        config: Builder configuration

    Returns:
        Serialized output document

    Raises:
        EmptySelection: If no page is selected (no encoder calls are made)
        UnknownSourceFile: If a selected page references a missing file
        RasterizationFailure: If a page cannot be rendered
        AnnotationDecodeFailure: If an overlay cannot be decoded
        SurfaceUnavailable: If a canvas cannot be allocated
        EmbedFailure: If the encoder rejects a composited image

    Example:
        >>> pdf = await assemble(pages, files, LayoutSettings(pages_per_sheet=4))
    """
    config = config or BuilderConfig()
    start_time = time.perf_counter()

    selected = active_pages(pages)
    if not selected:
        raise EmptySelection("No pages selected")

    missing = sorted({p.source_file_id for p in selected if p.source_file_id not in files})
    if missing:
        raise UnknownSourceFile(f"Pages reference unknown source files: {', '.join(missing)}")

    rasterizer = rasterizer or PyMuPdfRasterizer()
    encoder = encoder or ReportLabEncoder()

    plan = paginate(selected, layout, config)
    logger.info(
        f"Assembling {plan.total_placements} pages onto {plan.sheet_count} sheets "
        f"({layout.pages_per_sheet} per sheet)"
    )

    for sheet in plan.sheets:
        handle = encoder.new_sheet(config.sheet_width, config.sheet_height)
        for placement in sheet.placements:
            item = placement.item
            image_bytes = await compose_page(item, files[item.source_file_id], rasterizer, config)
            image = await asyncio.to_thread(encoder.embed_raster, image_bytes)
            draw_placement(encoder, handle, placement, image, layout, config)

    output = await asyncio.to_thread(encoder.serialize)

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Assembled {plan.sheet_count} sheets ({len(output)} bytes) in {elapsed:.2f}s"
    )
    return output


def assemble_sync(
    pages: Sequence[PageItem],
    files: Mapping[str, SourceFile],
    layout: LayoutSettings,
    *,
    rasterizer: Optional[Rasterizer] = None,
    encoder: Optional[DocumentEncoder] = None,
    config: Optional[BuilderConfig] = None,
) -> bytes:
    """
    Blocking wrapper around assemble().

    Must not be called from inside a running event loop.
    """
    return asyncio.run(assemble(
        pages,
        files,
        layout,
        rasterizer=rasterizer,
        encoder=encoder,
        config=config,
    ))

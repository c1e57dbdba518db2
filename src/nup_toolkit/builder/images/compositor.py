"""
Module: builder.images.compositor

Purpose:
    Bake one PageItem into a single compressed raster: rotation, ink-saver
    filters and the annotation overlay are all applied here, so the
    assembler only has to position and scale the result.

Key Functions:
    - rotated_size(): Bounding box of a rotated page
    - composite_page(): Pure in-memory compositing of one page
    - compose_page(): Async end-to-end compositing to JPEG bytes

Algorithm:
    1. Rasterize the page at the high-quality render scale
    2. Allocate a canvas sized to the rotated bounding box
    3. Draw the raster rotated clockwise about the canvas center
    4. Apply filters to the whole rotated canvas
    5. Draw the annotation (unrotated page space) with the same rotation
       on top; the annotation itself is never filtered
    6. Encode the canvas as JPEG

Dependencies:
    - PIL: Canvas operations
    - asyncio (std): Suspension around blocking collaborator work
    - builder.filters: Pixel transform
    - builder.images.rasterizer: Page rendering

Used By:
    - builder.controller: One call per placed page, strictly sequential
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from PIL import Image

from nup_toolkit.builder.config import BuilderConfig
from nup_toolkit.builder.errors import SurfaceUnavailable
from nup_toolkit.builder.filters import apply_filters_to_image
from nup_toolkit.core.models import PageItem, Rotation, SourceFile

from .codec import decode_overlay, encode_jpeg
from .rasterizer import Rasterizer

logger = logging.getLogger(__name__)

# Clockwise rotation expressed as PIL transposes (PIL rotates counter-clockwise)
_CLOCKWISE_TRANSPOSE = {
    Rotation.CW_90: Image.Transpose.ROTATE_270,
    Rotation.CW_180: Image.Transpose.ROTATE_180,
    Rotation.CW_270: Image.Transpose.ROTATE_90,
}

CANVAS_BACKGROUND = "white"


def rotated_size(width: int, height: int, rotation: Rotation) -> tuple[int, int]:
    """
    Get the (width, height) of a page after rotation.

    Example:
        >>> rotated_size(600, 800, Rotation.CW_90)
        (800, 600)
    """
    if Rotation(rotation).swaps_dimensions:
        return height, width
    return width, height


def _rotate(image: Image.Image, rotation: Rotation) -> Image.Image:
    """Rotate clockwise by a multiple of 90 degrees about the image center."""
    transpose = _CLOCKWISE_TRANSPOSE.get(Rotation(rotation))
    if transpose is None:
        return image
    return image.transpose(transpose)


def _acquire_canvas(size: tuple[int, int]) -> Image.Image:
    """Allocate the RGB drawing surface for one page."""
    try:
        return Image.new("RGB", size, CANVAS_BACKGROUND)
    except (MemoryError, ValueError) as e:
        raise SurfaceUnavailable(f"Could not allocate {size[0]}x{size[1]} canvas: {e}") from e


def composite_page(
    raster: Image.Image,
    item: PageItem,
    overlay: Optional[Image.Image] = None,
) -> Image.Image:
    """
    Composite one page in memory.

    Args:
        raster: Unrotated page render
        item: Page descriptor supplying rotation and filters
        overlay: Decoded annotation in unrotated page space, or None.
            Stretched to the raster size when the dimensions differ.

    Returns:
        RGB canvas of the rotated bounding box with filters and
        annotation baked in

    Raises:
        SurfaceUnavailable: If the canvas cannot be allocated

    Example:
        >>> canvas = composite_page(Image.new("RGB", (60, 80)), item.with_rotation(90))
        >>> canvas.size
        (80, 60)
    """
    width, height = raster.size
    canvas = _acquire_canvas(rotated_size(width, height, item.rotation))

    canvas.paste(_rotate(raster.convert("RGB"), item.rotation), (0, 0))
    canvas = apply_filters_to_image(canvas, item.filters)

    if overlay is not None:
        if overlay.size != (width, height):
            overlay = overlay.resize((width, height), Image.Resampling.LANCZOS)
        layer = _rotate(overlay.convert("RGBA"), item.rotation)
        canvas = canvas.convert("RGBA")
        canvas.alpha_composite(layer)
        canvas = canvas.convert("RGB")

    return canvas


async def compose_page(
    item: PageItem,
    source: SourceFile,
    rasterizer: Rasterizer,
    config: Optional[BuilderConfig] = None,
) -> bytes:
    """
    Composite one page and return compressed JPEG bytes.

    Suspends while the rasterizer, overlay decoder and encoder run.
    Any failure aborts the whole page; there is no placeholder output.

    Args:
        item: Page descriptor
        source: SourceFile the page belongs to
        rasterizer: Page renderer
        config: Builder configuration (render scale, JPEG quality)

    Returns:
        JPEG bytes of the rotated, filtered, annotated page

    Raises:
        RasterizationFailure: If the page cannot be rendered
        AnnotationDecodeFailure: If the overlay cannot be decoded
        SurfaceUnavailable: If the canvas cannot be allocated
    """
    config = config or BuilderConfig()

    raster = await asyncio.to_thread(
        rasterizer.rasterize, source.data, item.original_page_index, config.render_scale
    )

    overlay = None
    if item.has_annotation:
        overlay = await asyncio.to_thread(decode_overlay, item.annotation_layer)

    canvas = composite_page(raster.to_image(), item, overlay)
    data = await asyncio.to_thread(encode_jpeg, canvas, config.jpeg_quality)

    logger.debug(
        f"Composed page {item.original_page_index} of {source.name}: "
        f"{canvas.width}x{canvas.height}, rotation {int(item.rotation)}, {len(data)} bytes"
    )
    return data

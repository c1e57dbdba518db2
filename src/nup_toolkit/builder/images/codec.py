"""
Module: builder.images.codec

Purpose:
    Raster encode/decode helpers: compress a composited canvas to JPEG
    bytes and decode annotation overlays back into drawable pixels.

Key Functions:
    - encode_jpeg(): Canvas to compressed bytes
    - decode_overlay(): Encoded overlay to RGBA image
    - encode_png(): RGBA image to PNG bytes (annotation storage)

Dependencies:
    - PIL: Image encoding/decoding

Used By:
    - builder.images.compositor: Final encode, overlay decode
    - builder.session: Annotation storage
"""

from __future__ import annotations

import io

from PIL import Image

from nup_toolkit.builder.errors import AnnotationDecodeFailure


def encode_jpeg(image: Image.Image, quality: float) -> bytes:
    """
    Compress an image to JPEG bytes.

    Args:
        image: Image to encode; converted to RGB when it carries alpha
        quality: Fraction in (0, 1], mapped onto the 1-100 JPEG scale

    Returns:
        Encoded JPEG bytes

    Raises:
        ValueError: If quality is outside (0, 1]
    """
    if not 0 < quality <= 1:
        raise ValueError(f"quality must be in (0, 1]: {quality}")
    if image.mode != "RGB":
        image = image.convert("RGB")

    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=max(1, round(quality * 100)))
    return buf.getvalue()


def encode_png(image: Image.Image) -> bytes:
    """Encode an image losslessly as PNG bytes."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def decode_overlay(data: bytes) -> Image.Image:
    """
    Decode an annotation overlay into an RGBA image.

    Args:
        data: Encoded raster bytes (PNG with alpha, typically)

    Returns:
        Fully loaded RGBA image

    Raises:
        AnnotationDecodeFailure: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise AnnotationDecodeFailure(f"Failed to decode annotation overlay: {e}") from e

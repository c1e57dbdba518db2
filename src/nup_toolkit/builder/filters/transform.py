"""
Module: builder.filters.transform

Purpose:
    Per-pixel ink-saver color transform. Maps RGB(A) samples to new
    samples according to a PageFilters configuration.

Key Functions:
    - apply_filters(): Transform a pixel array (pure)
    - apply_filters_to_image(): Transform a PIL image (pure)

Algorithm:
    Applied per pixel, in this order; each step sees the previous result:
    1. grayscale: r = g = b = 0.299r + 0.587g + 0.114b
    2. invert: c = 255 - c
    3. brightness: c *= 1 + whiteness/100
    4. contrast: c = c * k + 128 * (1 - k), k = 1 + blackness/100
    5. clamp to [0, 255] and round to the nearest integer (ties to even)
    Alpha is copied unchanged.

Dependencies:
    - numpy: Vectorized per-pixel math
    - PIL: Image <-> array conversion

Used By:
    - builder.images.compositor: Filters the rotated canvas
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from PIL import Image

from nup_toolkit.core.models import PageFilters

# Rec.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])
MID_GRAY = 128.0


def apply_filters(
    pixels: np.ndarray,
    filters: PageFilters,
    *,
    channels: Optional[int] = None,
) -> np.ndarray:
    """
    Apply ink-saver filters to an array of RGB or RGBA samples.

    The input is never modified. The output has the same shape and
    dtype uint8. Identical inputs always give identical outputs.

    Args:
        pixels: uint8 array shaped (..., 3) or (..., 4), or a flat sample
            buffer when channels is given
        filters: Filter configuration
        channels: Samples per pixel (3 or 4) of a flat buffer; the result
            is returned flat as well

    Returns:
        New uint8 array with transformed RGB and untouched alpha

    Raises:
        ValueError: If the last axis is not 3 or 4 channels, or a flat
            buffer does not hold whole pixels

    Example:
        >>> px = np.array([[[10, 20, 30]]], dtype=np.uint8)
        >>> apply_filters(px, PageFilters(invert=True))[0, 0].tolist()
        [245, 235, 225]
    """
    if pixels.ndim == 1 and channels is not None:
        if channels not in (3, 4) or pixels.size % channels:
            raise ValueError(
                f"Flat buffer of {pixels.size} samples is not whole {channels}-channel pixels"
            )
        return apply_filters(pixels.reshape(-1, channels), filters).reshape(-1)

    if pixels.ndim < 1 or pixels.shape[-1] not in (3, 4):
        raise ValueError(f"Expected RGB or RGBA samples, got shape {pixels.shape}")

    out = np.array(pixels, dtype=np.uint8, copy=True)
    if filters.is_neutral:
        return out

    rgb = out[..., :3].astype(np.float64)

    if filters.grayscale:
        luma = rgb @ LUMA_WEIGHTS
        rgb = np.repeat(luma[..., np.newaxis], 3, axis=-1)

    if filters.invert:
        rgb = 255.0 - rgb

    brightness = 1.0 + filters.whiteness / 100.0
    contrast = 1.0 + filters.blackness / 100.0
    intercept = MID_GRAY * (1.0 - contrast)

    rgb = rgb * brightness
    rgb = rgb * contrast + intercept

    np.clip(rgb, 0.0, 255.0, out=rgb)
    out[..., :3] = np.rint(rgb).astype(np.uint8)
    return out


def apply_filters_to_image(image: Image.Image, filters: PageFilters) -> Image.Image:
    """
    Apply ink-saver filters to a PIL image.

    RGB and RGBA images keep their mode; other modes are converted to
    RGB first.

    Args:
        image: Source image (not modified)
        filters: Filter configuration

    Returns:
        New filtered image of identical size
    """
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGB")
    if filters.is_neutral:
        return image.copy()
    result = apply_filters(np.asarray(image), filters)
    return Image.fromarray(result)

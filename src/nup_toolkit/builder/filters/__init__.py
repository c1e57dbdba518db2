"""
Module: builder.filters

Purpose:
    Ink-saver pixel filters (grayscale, invert, brightness, contrast).

Key Functions:
    - apply_filters(): Transform a pixel array
    - apply_filters_to_image(): Transform a PIL image
"""

from .transform import apply_filters, apply_filters_to_image

__all__ = [
    "apply_filters",
    "apply_filters_to_image",
]

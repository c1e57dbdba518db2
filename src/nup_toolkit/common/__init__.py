"""Common constants shared across the toolkit."""

from __future__ import annotations

from .thresholds import (
    SHEET_THRESHOLDS,
    RASTER_THRESHOLDS,
    STYLE_THRESHOLDS,
    INK_SAVER_PRESET,
    SheetThresholds,
    RasterThresholds,
    StyleThresholds,
    InkSaverPreset,
)

__all__ = [
    "SHEET_THRESHOLDS",
    "RASTER_THRESHOLDS",
    "STYLE_THRESHOLDS",
    "INK_SAVER_PRESET",
    "SheetThresholds",
    "RasterThresholds",
    "StyleThresholds",
    "InkSaverPreset",
]

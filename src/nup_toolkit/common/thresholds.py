"""Centralized sizing, scaling and styling constants.

This module contains the fixed numbers used by the compositing and
assembly pipeline. Keeping them in one place makes tuning easier and
lets BuilderConfig take its defaults from a single source.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SheetThresholds:
    """Output sheet geometry, in PDF points (1/72 inch)."""

    # A4 portrait
    width_pt: float = 595.28
    height_pt: float = 841.89

    margin_pt: float = 20.0  # Outer margin on every side
    inner_padding_pt: float = 10.0  # Subtracted from cell size when fitting an image


@dataclass(frozen=True)
class RasterThresholds:
    """Rasterization and encoding settings."""

    render_scale: float = 1.5  # High-quality render for final output
    preview_scale: float = 0.5  # Low-resolution render used for UI layout only
    jpeg_quality: float = 0.85  # Fraction in (0, 1]


@dataclass(frozen=True)
class StyleThresholds:
    """Decoration drawn onto output sheets."""

    border_width_pt: float = 1.0
    border_color: tuple[float, float, float] = (0.8, 0.8, 0.8)
    page_number_font_size: float = 7.0
    page_number_offset_pt: float = 3.0  # Gap between label baseline and cell bottom


@dataclass(frozen=True)
class InkSaverPreset:
    """Filter values applied by the one-click ink-saver toggle."""

    invert: bool = True
    grayscale: bool = True
    whiteness: float = 12.0
    blackness: float = 50.0


SHEET_THRESHOLDS = SheetThresholds()
RASTER_THRESHOLDS = RasterThresholds()
STYLE_THRESHOLDS = StyleThresholds()
INK_SAVER_PRESET = InkSaverPreset()

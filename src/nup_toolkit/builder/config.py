"""
Module: builder.config

Purpose:
    Configuration dataclass for the assembly pipeline. Immutable
    configuration with validation on construction, plus loading of
    persisted LayoutSettings from JSON.

Key Classes:
    - BuilderConfig: Sheet geometry, raster quality and styling

Key Functions:
    - load_layout_settings(): Read LayoutSettings from a JSON file
    - save_layout_settings(): Write LayoutSettings to a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - builder.controller: Main assembly entry point
    - builder.layout.paginator: Cell geometry
    - cli: Settings file handling
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from nup_toolkit.common import RASTER_THRESHOLDS, SHEET_THRESHOLDS, STYLE_THRESHOLDS
from nup_toolkit.core.models import LayoutSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for assembling documents (immutable).

    Attributes:
        sheet_width: Output sheet width in points
        sheet_height: Output sheet height in points
        margin: Outer sheet margin in points
        inner_padding: Padding subtracted from cell size when fitting images
        render_scale: Rasterization scale for final output
        preview_scale: Rasterization scale for preview dimensions
        jpeg_quality: Compression quality in (0, 1]
        border_width: Stroke width of cell borders in points
        border_color: RGB stroke color of cell borders, each in [0, 1]
        page_number_font_size: Font size of page-number labels in points

    Example:
        >>> config = BuilderConfig()
        >>> round(config.content_width, 2)
        555.28
    """

    # Sheet geometry
    sheet_width: float = SHEET_THRESHOLDS.width_pt
    sheet_height: float = SHEET_THRESHOLDS.height_pt
    margin: float = SHEET_THRESHOLDS.margin_pt
    inner_padding: float = SHEET_THRESHOLDS.inner_padding_pt

    # Raster quality
    render_scale: float = RASTER_THRESHOLDS.render_scale
    preview_scale: float = RASTER_THRESHOLDS.preview_scale
    jpeg_quality: float = RASTER_THRESHOLDS.jpeg_quality

    # Styling
    border_width: float = STYLE_THRESHOLDS.border_width_pt
    border_color: tuple[float, float, float] = STYLE_THRESHOLDS.border_color
    page_number_font_size: float = STYLE_THRESHOLDS.page_number_font_size

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.sheet_width <= 0:
            raise ValueError(f"sheet_width must be positive: {self.sheet_width}")
        if self.sheet_height <= 0:
            raise ValueError(f"sheet_height must be positive: {self.sheet_height}")
        if self.margin < 0:
            raise ValueError(f"margin must be non-negative: {self.margin}")
        if self.content_width <= 0:
            raise ValueError("Margins exceed sheet width")
        if self.content_height <= 0:
            raise ValueError("Margins exceed sheet height")
        if self.inner_padding < 0:
            raise ValueError(f"inner_padding must be non-negative: {self.inner_padding}")
        if self.render_scale <= 0:
            raise ValueError(f"render_scale must be positive: {self.render_scale}")
        if self.preview_scale <= 0:
            raise ValueError(f"preview_scale must be positive: {self.preview_scale}")
        if not 0 < self.jpeg_quality <= 1:
            raise ValueError(f"jpeg_quality must be in (0, 1]: {self.jpeg_quality}")
        if any(not 0 <= c <= 1 for c in self.border_color):
            raise ValueError(f"border_color components must be in [0, 1]: {self.border_color}")

    @property
    def content_width(self) -> float:
        """Width available for cells (excluding margins)."""
        return self.sheet_width - 2 * self.margin

    @property
    def content_height(self) -> float:
        """Height available for cells (excluding margins)."""
        return self.sheet_height - 2 * self.margin


def load_layout_settings(path: Path) -> LayoutSettings:
    """
    Load LayoutSettings from a JSON file.

    A missing, unreadable or malformed file falls back to defaults with
    a logged warning rather than aborting.

    Args:
        path: JSON file written by save_layout_settings()

    Returns:
        Loaded settings, or LayoutSettings() on any problem

    Example:
        >>> settings = load_layout_settings(Path("layout.json"))
    """
    if not path.exists():
        logger.warning(f"Settings file not found, using defaults: {path}")
        return LayoutSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to read settings from {path}, using defaults: {e}")
        return LayoutSettings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} does not contain an object, using defaults")
        return LayoutSettings()

    try:
        return LayoutSettings.from_dict(data)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid settings in {path}, using defaults: {e}")
        return LayoutSettings()


def save_layout_settings(settings: LayoutSettings, path: Path) -> None:
    """Write LayoutSettings to a JSON file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")

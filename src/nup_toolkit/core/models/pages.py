"""
Module: pages

Purpose:
    Provides the PageItem model - one selectable, rotatable, filterable,
    annotatable unit of output content - together with its Rotation and
    PageFilters value types.

Key Classes:
    - Rotation: Clockwise quarter turns (0/90/180/270)
    - PageFilters: Ink-saver filter configuration
    - PageItem: One page of one SourceFile

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - builder.filters.transform: Reads PageFilters
    - builder.images.compositor: Composites PageItems
    - builder.layout.paginator: Groups PageItems onto sheets
    - builder.session: Creates and edits PageItems

Design Notes:
    The ordered list of PageItems is the single source of truth for
    output order. Rotation and filters live on the PageItem, never on
    the SourceFile. Annotation pixel space is always the unrotated page.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional

# Inclusive bounds for whiteness/blackness; -100 keeps both multipliers non-negative
FILTER_MIN = -100.0
FILTER_MAX = 500.0


class Rotation(IntEnum):
    """Clockwise page rotation in degrees."""

    NONE = 0
    CW_90 = 90
    CW_180 = 180
    CW_270 = 270

    @property
    def swaps_dimensions(self) -> bool:
        """True when the rotated bounding box swaps width and height."""
        return self in (Rotation.CW_90, Rotation.CW_270)

    def turned(self) -> Rotation:
        """Next rotation a further 90 degrees clockwise (270 wraps to 0)."""
        return Rotation((self.value + 90) % 360)


@dataclass(frozen=True, slots=True)
class PageFilters:
    """
    Ink-saver filter configuration (immutable).

    Attributes:
        invert: Replace each channel c with 255 - c
        grayscale: Replace RGB with Rec.601 luma
        whiteness: Brightness boost in percent
        blackness: Contrast boost in percent (pivots around mid-gray)

    Invariants:
        - FILTER_MIN <= whiteness <= FILTER_MAX
        - FILTER_MIN <= blackness <= FILTER_MAX
    """

    invert: bool = False
    grayscale: bool = False
    whiteness: float = 0.0
    blackness: float = 0.0

    def __post_init__(self) -> None:
        """Validate slider ranges on construction."""
        if not FILTER_MIN <= self.whiteness <= FILTER_MAX:
            raise ValueError(
                f"whiteness must be in [{FILTER_MIN:g}, {FILTER_MAX:g}]: {self.whiteness}"
            )
        if not FILTER_MIN <= self.blackness <= FILTER_MAX:
            raise ValueError(
                f"blackness must be in [{FILTER_MIN:g}, {FILTER_MAX:g}]: {self.blackness}"
            )

    @property
    def is_neutral(self) -> bool:
        """True when applying these filters leaves every sample unchanged."""
        return (
            not self.invert
            and not self.grayscale
            and self.whiteness == 0
            and self.blackness == 0
        )

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON storage."""
        return {
            "invert": self.invert,
            "grayscale": self.grayscale,
            "whiteness": self.whiteness,
            "blackness": self.blackness,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PageFilters:
        """Deserialize from dictionary; missing keys take neutral values."""
        return cls(
            invert=bool(data.get("invert", False)),
            grayscale=bool(data.get("grayscale", False)),
            whiteness=float(data.get("whiteness", 0.0)),
            blackness=float(data.get("blackness", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class PageItem:
    """
    One unit of output content: exactly one page of one SourceFile.

    Instances are immutable; edits return new instances via the
    ``with_*`` helpers, so document assembly can never mutate the
    caller's snapshot.

    Attributes:
        id: Unique id, stable across reordering
        source_file_id: Id of the owning SourceFile (lookup only)
        original_page_index: Zero-based page index in the source
        is_selected: Unselected pages are skipped during assembly
        rotation: Clockwise rotation
        filters: Ink-saver filter configuration
        annotation_layer: Encoded transparent overlay (PNG bytes) in
            unrotated page pixel space, or None
        preview_width: Preview raster width (UI layout only)
        preview_height: Preview raster height (UI layout only)

    Example:
        >>> item = PageItem.create("file-1", 0, preview_width=298, preview_height=421)
        >>> item.with_rotation(90).rotation
        <Rotation.CW_90: 90>
    """

    id: str
    source_file_id: str
    original_page_index: int
    is_selected: bool = True
    rotation: Rotation = Rotation.NONE
    filters: PageFilters = field(default_factory=PageFilters)
    annotation_layer: Optional[bytes] = field(default=None, repr=False)
    preview_width: int = 0
    preview_height: int = 0

    def __post_init__(self) -> None:
        """Validate and normalise on construction."""
        if self.original_page_index < 0:
            raise ValueError(
                f"original_page_index must be >= 0: {self.original_page_index}"
            )
        try:
            rotation = Rotation(self.rotation)
        except ValueError:
            raise ValueError(
                f"rotation must be one of 0, 90, 180, 270: {self.rotation!r}"
            ) from None
        # Accept plain ints for rotation
        object.__setattr__(self, "rotation", rotation)

    @classmethod
    def create(
        cls,
        source_file_id: str,
        original_page_index: int,
        *,
        preview_width: int = 0,
        preview_height: int = 0,
    ) -> PageItem:
        """Create a freshly imported page: selected, upright, unfiltered."""
        return cls(
            id=str(uuid.uuid4()),
            source_file_id=source_file_id,
            original_page_index=original_page_index,
            preview_width=preview_width,
            preview_height=preview_height,
        )

    @property
    def has_annotation(self) -> bool:
        """True when an annotation overlay is attached."""
        return bool(self.annotation_layer)

    def with_rotation(self, rotation: int) -> PageItem:
        return replace(self, rotation=Rotation(rotation))

    def rotated(self) -> PageItem:
        """Copy turned a further 90 degrees clockwise."""
        return replace(self, rotation=self.rotation.turned())

    def with_filters(self, filters: PageFilters) -> PageItem:
        return replace(self, filters=filters)

    def with_selected(self, is_selected: bool) -> PageItem:
        return replace(self, is_selected=is_selected)

    def with_annotation(self, annotation_layer: Optional[bytes]) -> PageItem:
        return replace(self, annotation_layer=annotation_layer)

"""
Module: layout

Purpose:
    Provides the LayoutSettings dataclass - the global N-up layout that
    applies uniformly to every output sheet.

Key Classes:
    - LayoutSettings: Pages per sheet, borders, page numbers

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.paginator: Grouping and grid shape
    - builder.output.renderer: Border and page-number drawing
    - builder.config: JSON settings loading
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_PAGES_PER_SHEET = 1
MAX_PAGES_PER_SHEET = 8


@dataclass(frozen=True, slots=True)
class LayoutSettings:
    """
    Global layout configuration (immutable).

    Attributes:
        pages_per_sheet: Source pages packed onto one output sheet (1-8)
        show_borders: Outline every occupied cell
        show_page_numbers: Label every occupied cell with its output position

    Example:
        >>> LayoutSettings(pages_per_sheet=4, show_borders=True).pages_per_sheet
        4
    """

    pages_per_sheet: int = 1
    show_borders: bool = False
    show_page_numbers: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not MIN_PAGES_PER_SHEET <= self.pages_per_sheet <= MAX_PAGES_PER_SHEET:
            raise ValueError(
                f"pages_per_sheet must be in {MIN_PAGES_PER_SHEET}..{MAX_PAGES_PER_SHEET}: "
                f"{self.pages_per_sheet}"
            )

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON storage."""
        return {
            "pages_per_sheet": self.pages_per_sheet,
            "show_borders": self.show_borders,
            "show_page_numbers": self.show_page_numbers,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LayoutSettings:
        """
        Deserialize from dictionary.

        Unknown keys are ignored and missing keys take defaults.

        Raises:
            ValueError: If pages_per_sheet is out of range or not an integer
        """
        return cls(
            pages_per_sheet=int(data.get("pages_per_sheet", 1)),
            show_borders=bool(data.get("show_borders", False)),
            show_page_numbers=bool(data.get("show_page_numbers", False)),
        )

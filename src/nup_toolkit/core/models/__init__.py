"""
Core Models Package

Immutable, validated data models that serve as the single source of truth
for the compositing pipeline.

All models in this package are frozen dataclasses. Edits create new
instances, so a snapshot handed to the assembler can never change
underneath it.
"""

from .files import SourceFile
from .pages import Rotation, PageFilters, PageItem, FILTER_MIN, FILTER_MAX
from .layout import LayoutSettings, MIN_PAGES_PER_SHEET, MAX_PAGES_PER_SHEET

__all__ = [
    "SourceFile",
    "Rotation",
    "PageFilters",
    "PageItem",
    "FILTER_MIN",
    "FILTER_MAX",
    "LayoutSettings",
    "MIN_PAGES_PER_SHEET",
    "MAX_PAGES_PER_SHEET",
]

"""
N-up Toolkit Core Package

Shared data models for the page-composition pipeline: source files,
page items with their rotation/filters/annotation, and the global
layout settings.
"""

from .models import SourceFile, Rotation, PageFilters, PageItem, LayoutSettings

__all__ = [
    "SourceFile",
    "Rotation",
    "PageFilters",
    "PageItem",
    "LayoutSettings",
]

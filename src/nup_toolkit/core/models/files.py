"""
Module: files

Purpose:
    Provides the SourceFile dataclass - one uploaded original document.
    Holds the raw bytes every PageItem of that document is rendered from.

Key Classes:
    - SourceFile: Immutable uploaded document

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - core.models.pages.PageItem (by id only)
    - builder.session: File loading
    - builder.controller: Rasterization source lookup
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SourceFile:
    """
    One uploaded source document (immutable).

    PageItems reference a SourceFile by ``id`` only; the bytes are
    never duplicated per page.

    Attributes:
        id: Unique identifier (UUID4 string)
        name: Display name, usually the original file name
        size: Byte size of ``data``
        page_count: Total number of pages in the document
        data: Raw document bytes

    Invariants:
        - page_count >= 1
        - size == len(data)

    Example:
        >>> f = SourceFile.create(b"%PDF-...", "notes.pdf", page_count=3)
        >>> f.page_count
        3
    """

    id: str
    name: str
    size: int
    page_count: int
    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        """Validate file on construction."""
        if not self.id:
            raise ValueError("id must not be empty")
        if self.page_count < 1:
            raise ValueError(f"page_count must be >= 1: {self.page_count}")
        if self.size != len(self.data):
            raise ValueError(f"size {self.size} does not match data length {len(self.data)}")

    @classmethod
    def create(cls, data: bytes, name: str, *, page_count: int) -> SourceFile:
        """Create a SourceFile with a fresh id and computed size."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            size=len(data),
            page_count=page_count,
            data=bytes(data),
        )

    def page_indices(self) -> range:
        """Zero-based indices of every page in the document."""
        return range(self.page_count)

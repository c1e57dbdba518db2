"""
Module: builder.session

Purpose:
    Import-time entity creation and the document session that owns
    the ordered page list. The session is the snapshot handed to
    assemble(); it never shares mutable state with the pipeline.

Key Functions:
    - load_source_file(): Wrap raw bytes into a SourceFile
    - create_page_items(): One fresh PageItem per source page

Key Classes:
    - DocumentSession: Files + ordered pages, ink-saver toggle, assembly

Dependencies:
    - builder.images: Page counts, preview sizes, annotation encoding
    - builder.controller: Assembly

Used By:
    - cli: Command line front end
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PIL import Image

from nup_toolkit.common import INK_SAVER_PRESET
from nup_toolkit.core.models import LayoutSettings, PageFilters, PageItem, SourceFile

from .config import BuilderConfig
from .controller import assemble, assemble_sync
from .errors import RasterizationFailure
from .images import PyMuPdfRasterizer, Rasterizer, encode_png
from .layout import active_pages, sheet_count

logger = logging.getLogger(__name__)


def load_source_file(data: bytes, name: str, rasterizer: Rasterizer) -> SourceFile:
    """
    Load an uploaded document.

    Args:
        data: Raw document bytes
        name: Display name
        rasterizer: Used to count pages

    Returns:
        SourceFile with a fresh id

    Raises:
        RasterizationFailure: If the document cannot be parsed
    """
    try:
        page_count = rasterizer.page_count(data)
    except RasterizationFailure as e:
        raise RasterizationFailure(f"Failed to load {name}: {e}") from e

    source = SourceFile.create(data, name, page_count=page_count)
    logger.info(f"Loaded {name}: {page_count} pages, {source.size} bytes")
    return source


def create_page_items(
    source: SourceFile,
    rasterizer: Rasterizer,
    *,
    preview_scale: Optional[float] = None,
) -> List[PageItem]:
    """
    Create one PageItem per page of a source file.

    Every item starts selected, upright, unfiltered and unannotated.
    Preview dimensions come from a low-resolution render.

    Args:
        source: Loaded source file
        rasterizer: Used for the preview renders
        preview_scale: Render scale for preview sizes (default from config)

    Returns:
        Page items in source page order
    """
    scale = preview_scale or BuilderConfig().preview_scale
    items = []
    for page_index in source.page_indices():
        preview = rasterizer.rasterize(source.data, page_index, scale)
        items.append(PageItem.create(
            source.id,
            page_index,
            preview_width=preview.width,
            preview_height=preview.height,
        ))
    return items


class DocumentSession:
    """
    Ordered page list plus the source files it references.

    List order is document order. Pages are immutable, so edits replace
    items by id and leave every other item untouched.

    Example:
        >>> session = DocumentSession()
        >>> session.add_file(pdf_bytes, "notes.pdf")
        >>> session.set_ink_saver(True)
        >>> pdf = session.assemble_sync(LayoutSettings(pages_per_sheet=4))
    """

    def __init__(
        self,
        rasterizer: Optional[Rasterizer] = None,
        config: Optional[BuilderConfig] = None,
    ) -> None:
        self._rasterizer = rasterizer or PyMuPdfRasterizer()
        self._config = config or BuilderConfig()
        self._files: Dict[str, SourceFile] = {}
        self._pages: List[PageItem] = []

    @property
    def files(self) -> Dict[str, SourceFile]:
        """Copy of the file map (id -> SourceFile)."""
        return dict(self._files)

    @property
    def pages(self) -> List[PageItem]:
        """Copy of the ordered page list."""
        return list(self._pages)

    def add_file(self, data: bytes, name: str) -> SourceFile:
        """Load a document and append one page item per page."""
        source = load_source_file(data, name, self._rasterizer)
        items = create_page_items(source, self._rasterizer, preview_scale=self._config.preview_scale)
        self._files[source.id] = source
        self._pages.extend(items)
        return source

    def update_page(self, page: PageItem) -> None:
        """
        Replace the page with the same id, keeping its position.

        Raises:
            KeyError: If no page has that id
        """
        for i, existing in enumerate(self._pages):
            if existing.id == page.id:
                self._pages[i] = page
                return
        raise KeyError(f"No page with id {page.id}")

    def set_annotation(self, page_id: str, overlay: Optional[Image.Image]) -> None:
        """
        Attach a drawn overlay to a page, or clear it with None.

        The overlay is stored losslessly as PNG in unrotated page space.

        Raises:
            KeyError: If no page has that id
        """
        page = self._find(page_id)
        data = encode_png(overlay.convert("RGBA")) if overlay is not None else None
        self.update_page(page.with_annotation(data))

    def set_pages(self, pages: List[PageItem]) -> None:
        """
        Replace the ordered page list (reorder, subset selection).

        Raises:
            KeyError: If a page references a file not in the session
            ValueError: If two pages share an id
        """
        ids = [p.id for p in pages]
        if len(set(ids)) != len(ids):
            raise ValueError("Page ids must be unique")
        for page in pages:
            if page.source_file_id not in self._files:
                raise KeyError(f"Page {page.id} references unknown file {page.source_file_id}")
        self._pages = list(pages)

    def _find(self, page_id: str) -> PageItem:
        for page in self._pages:
            if page.id == page_id:
                return page
        raise KeyError(f"No page with id {page_id}")

    @property
    def ink_saver_enabled(self) -> bool:
        """True when the first page carries the inverted ink-saver look."""
        return bool(self._pages) and self._pages[0].filters.invert

    def set_ink_saver(self, enabled: bool) -> None:
        """
        Apply or clear the ink-saver preset on every page.

        Enabling replaces all four filter values with the preset;
        disabling resets them to neutral. Rotation is preserved.
        """
        if enabled:
            filters = PageFilters(
                invert=INK_SAVER_PRESET.invert,
                grayscale=INK_SAVER_PRESET.grayscale,
                whiteness=INK_SAVER_PRESET.whiteness,
                blackness=INK_SAVER_PRESET.blackness,
            )
        else:
            filters = PageFilters()
        for i, page in enumerate(self._pages):
            self._pages[i] = page.with_filters(filters)
        logger.info(f"Ink saver {'enabled' if enabled else 'disabled'} on {len(self._pages)} pages")

    def sheet_count(self, layout: LayoutSettings) -> int:
        """Number of output sheets the current selection will produce."""
        return sheet_count(len(active_pages(self._pages)), layout.pages_per_sheet)

    def reset(self) -> None:
        """Drop every file and page."""
        self._files.clear()
        self._pages.clear()

    async def assemble(self, layout: LayoutSettings) -> bytes:
        """Assemble the current snapshot into an output document."""
        return await assemble(
            self.pages,
            self.files,
            layout,
            rasterizer=self._rasterizer,
            config=self._config,
        )

    def assemble_sync(self, layout: LayoutSettings) -> bytes:
        """Blocking variant of assemble()."""
        return assemble_sync(
            self.pages,
            self.files,
            layout,
            rasterizer=self._rasterizer,
            config=self._config,
        )

"""
Tests for DocumentSession and the import helpers.
"""

import asyncio

import pytest
from PIL import Image

from nup_toolkit.builder import (
    BuilderConfig,
    DocumentSession,
    EmptySelection,
    RasterizationFailure,
    create_page_items,
    load_source_file,
)
from nup_toolkit.builder.images import decode_overlay
from nup_toolkit.common import INK_SAVER_PRESET
from nup_toolkit.core.models import LayoutSettings, PageFilters, PageItem, Rotation


@pytest.fixture
def session(fake_rasterizer):
    return DocumentSession(rasterizer=fake_rasterizer)


class TestLoadSourceFile:
    """Tests for load_source_file() and create_page_items()."""

    def test_load_when_valid_then_page_count_from_rasterizer(self, fake_rasterizer):
        source = load_source_file(b"%PDF fake", "notes.pdf", fake_rasterizer)

        assert source.name == "notes.pdf"
        assert source.page_count == 12
        assert source.size == len(b"%PDF fake")

    def test_load_when_unparseable_then_error_names_file(self, fake_rasterizer):
        """Parse failures should mention the file being loaded."""
        with pytest.raises(RasterizationFailure, match="Failed to load broken.pdf"):
            load_source_file(b"BROKEN", "broken.pdf", fake_rasterizer)

    def test_create_page_items_when_loaded_then_one_fresh_item_per_page(
        self, rasterizer_factory, source_file
    ):
        """Every page should start selected, upright and unfiltered."""
        rasterizer = rasterizer_factory(page_sizes=[(40, 60), (80, 20)] * 6)

        items = create_page_items(source_file, rasterizer, preview_scale=0.5)

        assert len(items) == 12
        assert [i.original_page_index for i in items] == list(range(12))
        assert all(i.source_file_id == source_file.id for i in items)
        assert all(i.is_selected and i.rotation is Rotation.NONE for i in items)
        assert all(i.filters.is_neutral and not i.has_annotation for i in items)
        assert (items[0].preview_width, items[0].preview_height) == (20, 30)
        assert (items[1].preview_width, items[1].preview_height) == (40, 10)
        assert len({i.id for i in items}) == 12


class TestDocumentSession:
    """Tests for DocumentSession."""

    def test_add_file_when_called_twice_then_pages_appended_in_order(self, session):
        """Pages of later files should follow earlier ones."""
        first = session.add_file(b"%PDF a", "a.pdf")
        second = session.add_file(b"%PDF b", "b.pdf")

        pages = session.pages
        assert len(pages) == 24
        assert {p.source_file_id for p in pages[:12]} == {first.id}
        assert {p.source_file_id for p in pages[12:]} == {second.id}
        assert set(session.files) == {first.id, second.id}

    def test_add_file_when_called_then_preview_scale_used(self, session, fake_rasterizer):
        """Preview sizes should come from renders at the preview scale."""
        session.add_file(b"%PDF a", "a.pdf")
        assert {scale for _, scale in fake_rasterizer.calls} == {BuilderConfig().preview_scale}

    def test_pages_when_list_mutated_then_session_unchanged(self, session):
        """pages should return a copy."""
        session.add_file(b"%PDF a", "a.pdf")
        session.pages.clear()
        assert len(session.pages) == 12

    def test_update_page_when_edited_then_position_kept(self, session):
        """Replacing a page should keep its place in the order."""
        session.add_file(b"%PDF a", "a.pdf")
        target = session.pages[3]

        session.update_page(target.with_rotation(180))

        assert session.pages[3].id == target.id
        assert session.pages[3].rotation is Rotation.CW_180

    def test_update_page_when_unknown_id_then_raises_key_error(self, session):
        with pytest.raises(KeyError):
            session.update_page(PageItem.create("nope", 0))

    def test_set_annotation_when_image_then_stored_as_png(self, session):
        """Overlays should be stored as decodable PNG bytes."""
        session.add_file(b"%PDF a", "a.pdf")
        target = session.pages[2]

        session.set_annotation(target.id, Image.new("RGBA", (20, 30), (0, 0, 255, 255)))

        stored = session.pages[2]
        assert stored.has_annotation
        assert stored.annotation_layer.startswith(b"\x89PNG")
        assert decode_overlay(stored.annotation_layer).size == (20, 30)

    def test_set_annotation_when_none_then_cleared(self, session):
        session.add_file(b"%PDF a", "a.pdf")
        target = session.pages[0]
        session.set_annotation(target.id, Image.new("RGBA", (4, 4)))

        session.set_annotation(target.id, None)

        assert session.pages[0].has_annotation is False

    def test_set_annotation_when_unknown_id_then_raises_key_error(self, session):
        with pytest.raises(KeyError):
            session.set_annotation("missing", None)

    def test_set_pages_when_reordered_then_order_replaced(self, session):
        session.add_file(b"%PDF a", "a.pdf")
        reordered = list(reversed(session.pages))

        session.set_pages(reordered)

        assert [p.id for p in session.pages] == [p.id for p in reordered]

    def test_set_pages_when_duplicate_ids_then_raises_error(self, session):
        """Two entries with one id should be rejected."""
        session.add_file(b"%PDF a", "a.pdf")
        first = session.pages[0]

        with pytest.raises(ValueError, match="Page ids must be unique"):
            session.set_pages([first, first])

    def test_set_pages_when_unknown_file_then_raises_key_error(self, session):
        with pytest.raises(KeyError, match="unknown file"):
            session.set_pages([PageItem.create("missing", 0)])

    def test_set_ink_saver_when_enabled_then_preset_on_every_page(self, session):
        """Enabling should apply all four preset values and keep rotation."""
        # Arrange
        session.add_file(b"%PDF a", "a.pdf")
        page = session.pages[0]
        session.update_page(page.with_rotation(90).with_filters(PageFilters(whiteness=-40)))

        # Act
        session.set_ink_saver(True)

        # Assert
        assert session.ink_saver_enabled is True
        expected = PageFilters(invert=True, grayscale=True, whiteness=12, blackness=50)
        assert all(p.filters == expected for p in session.pages)
        assert INK_SAVER_PRESET.grayscale is True
        assert session.pages[0].rotation is Rotation.CW_90

    def test_set_ink_saver_when_disabled_then_filters_cleared(self, session):
        """Disabling should reset every filter, grayscale included."""
        session.add_file(b"%PDF a", "a.pdf")
        session.update_page(session.pages[1].with_filters(PageFilters(grayscale=True)))
        session.set_ink_saver(True)

        session.set_ink_saver(False)

        assert session.ink_saver_enabled is False
        assert all(p.filters.is_neutral for p in session.pages)

    def test_ink_saver_enabled_when_no_pages_then_false(self, session):
        assert session.ink_saver_enabled is False

    @pytest.mark.parametrize("n,expected", [(1, 12), (4, 3), (5, 3), (8, 2)])
    def test_sheet_count_when_layout_then_ceil(self, session, n, expected):
        """Sheet preview should be ceil(selected / n)."""
        session.add_file(b"%PDF a", "a.pdf")
        assert session.sheet_count(LayoutSettings(pages_per_sheet=n)) == expected

    def test_sheet_count_when_pages_deselected_then_excluded(self, session):
        session.add_file(b"%PDF a", "a.pdf")
        for page in session.pages[:10]:
            session.update_page(page.with_selected(False))

        assert session.sheet_count(LayoutSettings(pages_per_sheet=4)) == 1

    def test_reset_when_called_then_empty(self, session):
        session.add_file(b"%PDF a", "a.pdf")
        session.reset()
        assert session.pages == []
        assert session.files == {}

    def test_assemble_when_empty_then_empty_selection(self, session):
        with pytest.raises(EmptySelection):
            asyncio.run(session.assemble(LayoutSettings()))

    def test_assemble_sync_when_real_pdf_then_output_document(self, make_pdf):
        """A session over a real PDF should assemble end to end."""
        real = DocumentSession()
        real.add_file(make_pdf([(200, 300)] * 3), "three.pdf")
        real.set_ink_saver(True)

        output = real.assemble_sync(LayoutSettings(pages_per_sheet=4))

        assert output.startswith(b"%PDF")

"""
Unit Tests for the Ink-Saver Filter Transform

Tests for apply_filters() and apply_filters_to_image().
"""

import numpy as np
import pytest
from PIL import Image

from nup_toolkit.builder.filters import apply_filters, apply_filters_to_image
from nup_toolkit.core.models import PageFilters


@pytest.fixture
def gradient():
    """A 16x16 RGBA array covering a spread of sample values."""
    rng = np.random.default_rng(seed=7)
    return rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)


class TestApplyFilters:
    """Tests for apply_filters()."""

    def test_apply_when_neutral_then_identity(self, gradient):
        """Neutral filters should return an equal copy."""
        result = apply_filters(gradient, PageFilters())

        assert np.array_equal(result, gradient)
        assert result is not gradient

    def test_apply_when_called_then_input_not_modified(self, gradient):
        """The input array should never be mutated."""
        before = gradient.copy()
        apply_filters(gradient, PageFilters(invert=True, whiteness=40))
        assert np.array_equal(gradient, before)

    def test_apply_when_invert_twice_then_round_trips(self, gradient):
        """Inverting twice should restore the original samples."""
        inverted = PageFilters(invert=True)
        result = apply_filters(apply_filters(gradient, inverted), inverted)
        assert np.array_equal(result, gradient)

    def test_apply_when_invert_then_channels_complemented(self):
        """Invert should map c to 255 - c."""
        px = np.array([[[10, 20, 30]]], dtype=np.uint8)
        result = apply_filters(px, PageFilters(invert=True))
        assert result[0, 0].tolist() == [245, 235, 225]

    def test_apply_when_grayscale_then_channels_equal(self, gradient):
        """Grayscale output should have R == G == B for every pixel."""
        result = apply_filters(gradient, PageFilters(grayscale=True))

        assert np.array_equal(result[..., 0], result[..., 1])
        assert np.array_equal(result[..., 1], result[..., 2])

    def test_apply_when_grayscale_then_uses_luma_weights(self):
        """Pure red should become 0.299 * 255."""
        px = np.array([[255, 0, 0]], dtype=np.uint8)
        result = apply_filters(px, PageFilters(grayscale=True))
        assert result[0].tolist() == [76, 76, 76]

    def test_apply_when_any_filters_then_alpha_unchanged(self, gradient):
        """Alpha should be copied through untouched."""
        result = apply_filters(
            gradient,
            PageFilters(invert=True, grayscale=True, whiteness=30, blackness=-20),
        )
        assert np.array_equal(result[..., 3], gradient[..., 3])

    def test_apply_when_extreme_boosts_then_clamped(self):
        """Extreme brightness and contrast should clamp into 0..255."""
        px = np.array([[0, 127, 200], [255, 129, 5]], dtype=np.uint8)
        result = apply_filters(px, PageFilters(whiteness=100, blackness=100))

        assert result.dtype == np.uint8
        assert result.min() >= 0
        assert result.max() <= 255
        # 200 * 2 = 400 -> (400 - 128) * 2 + 128 clamps to 255
        assert result[0, 2] == 255
        # 0 stays at the bottom: 0 * 2 * 2 - 128 clamps to 0
        assert result[0, 0] == 0

    @pytest.mark.parametrize("whiteness,blackness", [(150, 150), (400, 400), (500, -100)])
    def test_apply_when_boosts_beyond_100_then_clamped(self, gradient, whiteness, blackness):
        """Large slider values should still produce valid samples."""
        filters = PageFilters(whiteness=whiteness, blackness=blackness)

        result = apply_filters(gradient, filters)

        assert result.dtype == np.uint8
        assert result.shape == gradient.shape
        assert result.min() >= 0
        assert result.max() <= 255
        assert np.array_equal(result[..., 3], gradient[..., 3])

    def test_apply_when_contrast_then_pivots_around_mid_gray(self):
        """Contrast should leave 128 fixed."""
        px = np.array([[128, 128, 128]], dtype=np.uint8)
        result = apply_filters(px, PageFilters(blackness=50))
        assert result[0].tolist() == [128, 128, 128]

    def test_apply_when_ink_saver_preset_then_white_becomes_dark(self):
        """The ink-saver look should turn a white page near black."""
        px = np.full((2, 2, 3), 255, dtype=np.uint8)
        result = apply_filters(px, PageFilters(invert=True, whiteness=12, blackness=50))
        assert result.max() == 0

    def test_apply_when_same_input_then_deterministic(self, gradient):
        """Identical inputs should give identical outputs."""
        filters = PageFilters(invert=True, whiteness=12, blackness=50)
        assert np.array_equal(apply_filters(gradient, filters), apply_filters(gradient, filters))

    def test_apply_when_wrong_channel_count_then_raises_error(self):
        """Arrays without 3 or 4 channels should raise ValueError."""
        with pytest.raises(ValueError, match="Expected RGB or RGBA"):
            apply_filters(np.zeros((4, 4, 2), dtype=np.uint8), PageFilters(invert=True))

    def test_apply_when_flat_buffer_then_filtered_per_pixel(self):
        """A flat RGBA buffer should be filtered as whole pixels."""
        # Arrange
        flat = np.array([10, 20, 30, 255, 40, 50, 60, 128], dtype=np.uint8)

        # Act
        result = apply_filters(flat, PageFilters(invert=True), channels=4)

        # Assert
        assert result.shape == (8,)
        assert result.tolist() == [245, 235, 225, 255, 215, 205, 195, 128]

    def test_apply_when_flat_buffer_not_whole_pixels_then_raises_error(self):
        """A buffer length that is not a multiple of channels should fail."""
        with pytest.raises(ValueError, match="not whole 4-channel pixels"):
            apply_filters(np.zeros(7, dtype=np.uint8), PageFilters(invert=True), channels=4)


class TestApplyFiltersToImage:
    """Tests for apply_filters_to_image()."""

    def test_apply_when_rgb_image_then_same_size_and_mode(self):
        """RGB images should keep mode and size."""
        img = Image.new("RGB", (12, 8), (0, 0, 0))

        result = apply_filters_to_image(img, PageFilters(invert=True))

        assert result.mode == "RGB"
        assert result.size == (12, 8)
        assert result.getpixel((0, 0)) == (255, 255, 255)

    def test_apply_when_palette_image_then_converted_to_rgb(self):
        """Non-RGB modes should be converted before filtering."""
        img = Image.new("L", (4, 4), 0)
        result = apply_filters_to_image(img, PageFilters(invert=True))
        assert result.mode == "RGB"
        assert result.getpixel((1, 1)) == (255, 255, 255)

    def test_apply_when_neutral_then_returns_copy(self):
        """Neutral filters should return a distinct but equal image."""
        img = Image.new("RGBA", (3, 3), (1, 2, 3, 4))
        result = apply_filters_to_image(img, PageFilters())
        assert result is not img
        assert result.tobytes() == img.tobytes()

"""Tests for aspect normalization."""

import numpy as np
import pytest

from pixelcheck.imaging.aspect import frame_size, normalize_aspect, rgba_tuple

PADDING = [243, 244, 246, 255]


def solid(height: int, width: int, value: int = 7) -> np.ndarray:
    pixels = np.full((height, width, 4), value, dtype=np.uint8)
    pixels[..., 3] = 255
    return pixels


class TestFrameSize:
    """Test frame_size."""

    def test_tall_content_is_widened(self):
        assert frame_size(380, 280) == (498, 280)

    def test_wide_content_is_heightened(self):
        assert frame_size(1600, 100) == (1600, 900)

    def test_minimum_frame_floor(self):
        assert frame_size(10, 10, min_size=(300, 168)) == (300, 168)


class TestNormalizeAspect:
    """Test normalize_aspect."""

    def test_small_content_is_centered_in_minimum_frame(self):
        """Test centering inside the 300x168 minimum frame."""
        content = solid(100, 100)

        padded = normalize_aspect(content)

        assert padded.pixels.shape == (168, 300, 4)
        assert padded.offset == (100, 34)
        np.testing.assert_array_equal(padded.content(), content)
        assert padded.pixels[0, 0].tolist() == PADDING

    def test_minimum_frame_scales_with_density(self):
        """Test that the minimum frame is in logical pixels."""
        padded = normalize_aspect(solid(100, 100), dpr=2.0)

        assert padded.pixels.shape == (336, 600, 4)
        assert padded.offset == (250, 118)

    def test_wide_content_pads_top_and_bottom_only(self):
        """Test that content wider than 16:9 keeps its width."""
        content = solid(100, 1600)

        padded = normalize_aspect(content)

        assert padded.pixels.shape == (900, 1600, 4)
        assert padded.offset == (0, 400)
        np.testing.assert_array_equal(padded.content(), content)

    def test_content_is_never_rescaled(self):
        """Test that the padded frame contains the exact input pixels."""
        rng = np.random.default_rng(3)
        content = rng.integers(0, 256, size=(280, 380, 4), dtype=np.uint8)

        padded = normalize_aspect(content)

        assert (padded.content_width, padded.content_height) == (380, 280)
        np.testing.assert_array_equal(padded.content(), content)

    def test_custom_fill(self):
        padded = normalize_aspect(solid(10, 10), fill="rgba(255, 0, 0, 0.5)")

        assert padded.pixels[0, 0].tolist() == [255, 0, 0, 128]

    def test_unknown_fill_color(self):
        with pytest.raises(ValueError):
            rgba_tuple("not-a-color")

"""
Unit Tests for Coordinate Transforms

Tests for relative/absolute conversion, safe area and margins.
"""

import random

import pytest

from mangakit.core.models import Margins, NormalizedRect, PixelRect
from mangakit.layout.transform import (
    absolute_to_relative,
    apply_margins,
    apply_safe_area,
    first_defined,
    relative_to_absolute,
)


class TestRelativeToAbsolute:
    """Tests for relative_to_absolute."""

    def test_convert_when_full_width_panel_then_exact_pixels(self):
        result = relative_to_absolute(
            NormalizedRect(0, 0, 1, 0.33), PixelRect(0, 0, 1200, 1800)
        )
        assert result.x == 0
        assert result.y == 0
        assert result.width == 1200
        assert result.height == pytest.approx(594)

    def test_convert_when_bounds_offset_then_adds_origin(self):
        result = relative_to_absolute(
            NormalizedRect(0.5, 0.5, 0.5, 0.5), PixelRect(20, 20, 1160, 1760)
        )
        assert result == PixelRect(600, 900, 580, 880)

    def test_convert_when_out_of_range_then_not_clamped(self):
        result = relative_to_absolute(NormalizedRect(1.5, 0, 1, 1), PixelRect(0, 0, 100, 100))
        assert result.x == 150


class TestAbsoluteToRelative:
    """Tests for absolute_to_relative."""

    def test_convert_when_degenerate_bounds_then_raises(self):
        with pytest.raises(ValueError, match="degenerate"):
            absolute_to_relative(PixelRect(0, 0, 10, 10), PixelRect(0, 0, 0, 100))

    def test_round_trip_when_random_rects_then_identity(self):
        """absolute_to_relative(relative_to_absolute(r, b), b) == r within 1e-6."""
        rng = random.Random(42)
        for _ in range(200):
            bounds = PixelRect(
                rng.uniform(-500, 500), rng.uniform(-500, 500),
                rng.uniform(1, 4000), rng.uniform(1, 4000),
            )
            rect = NormalizedRect(rng.random(), rng.random(), rng.random(), rng.random())

            back = absolute_to_relative(relative_to_absolute(rect, bounds), bounds)

            assert back.x == pytest.approx(rect.x, rel=1e-6, abs=1e-9)
            assert back.y == pytest.approx(rect.y, rel=1e-6, abs=1e-9)
            assert back.width == pytest.approx(rect.width, rel=1e-6, abs=1e-9)
            assert back.height == pytest.approx(rect.height, rel=1e-6, abs=1e-9)

    def test_round_trip_when_pixel_rect_then_identity(self):
        bounds = PixelRect(20, 20, 1160, 1760)
        rect = PixelRect(30, 30, 565, 870)
        back = relative_to_absolute(absolute_to_relative(rect, bounds), bounds)
        assert back.x == pytest.approx(rect.x)
        assert back.width == pytest.approx(rect.width)
        assert back.height == pytest.approx(rect.height)


class TestApplySafeArea:
    """Tests for apply_safe_area."""

    def test_safe_area_when_uniform_margins_then_inset(self):
        result = apply_safe_area(1200, 1800, Margins(20, 20, 20, 20))
        assert result == PixelRect(20, 20, 1160, 1760)

    def test_safe_area_when_asymmetric_margins_then_each_side_applied(self):
        result = apply_safe_area(1000, 1500, Margins(top=10, right=30, bottom=50, left=20))
        assert result == PixelRect(20, 10, 950, 1440)


class TestApplyMargins:
    """Tests for apply_margins."""

    def test_apply_when_room_then_shrinks_inward(self):
        result = apply_margins(PixelRect(20, 20, 580, 880), Margins(10, 5, 5, 10))
        assert result == PixelRect(30, 30, 565, 865)

    def test_apply_when_margins_exceed_rect_then_clamped_to_zero(self):
        result = apply_margins(PixelRect(0, 0, 10, 10), Margins.uniform(20))
        assert result.width == 0
        assert result.height == 0
        assert result.is_renderable is False


class TestFirstDefined:
    """Tests for the ordered resolver."""

    def test_first_defined_when_first_set_then_later_not_evaluated(self):
        calls = []

        def later():
            calls.append("later")
            return 2

        assert first_defined([lambda: 1, later]) == 1
        assert calls == []

    def test_first_defined_when_zero_then_zero_counts_as_defined(self):
        assert first_defined([lambda: None, lambda: 0, lambda: 5]) == 0

    def test_first_defined_when_all_none_then_none(self):
        assert first_defined([lambda: None]) is None

"""
Unit Tests for Bubble Shapes, Tails and Panel Borders
"""

import math

import pytest
from PIL import Image, ImageDraw

from mangakit.bubbles.styles import get_bubble_style
from mangakit.compositor.shapes import (
    cloud_circles,
    draw_border,
    draw_bubble,
    draw_tail,
    star_points,
    tail_polygon,
)
from mangakit.core.models import BorderStyle, BubbleType, PixelRect, Point, TailDirection

RECT = PixelRect(100, 100, 200, 100)


@pytest.fixture
def canvas() -> Image.Image:
    return Image.new("RGB", (400, 300), (128, 128, 128))


class TestShapeGeometry:
    """Tests for the pure shape helpers."""

    def test_star_when_drawn_then_sixteen_vertices(self):
        points = star_points(RECT)
        assert len(points) == 16
        assert points[0] == pytest.approx((300, 150))
        assert points[1][0] < points[0][0]

    def test_star_when_any_vertex_then_inside_rect(self):
        for x, y in star_points(RECT):
            assert RECT.x - 1e-9 <= x <= RECT.right + 1e-9
            assert RECT.y - 1e-9 <= y <= RECT.bottom + 1e-9

    def test_cloud_when_drawn_then_six_circles(self):
        circles = cloud_circles(RECT)
        assert len(circles) == 6
        assert circles[-1] == pytest.approx((200, 150, 50))

    def test_tail_when_target_near_then_tip_stops_at_target(self):
        target = Point(230, 150)
        tip = tail_polygon(RECT, TailDirection.BOTTOM_RIGHT, target)[2]
        assert tip == pytest.approx((230, 150))

    def test_tail_when_no_target_then_follows_direction(self):
        tip = tail_polygon(RECT, TailDirection.TOP_LEFT, None)[2]
        assert tip[0] < RECT.center.x and tip[1] < RECT.center.y

    def test_tail_when_target_far_then_tip_past_bubble_edge(self):
        tip = tail_polygon(RECT, TailDirection.BOTTOM_RIGHT, Point(200, 1000))[2]
        assert tip[1] > RECT.bottom
        assert math.isclose(tip[0], 200)


class TestDrawing:
    """Tests for drawing onto a canvas."""

    @pytest.mark.parametrize("bubble_type", list(BubbleType))
    def test_bubble_when_any_type_then_center_filled(self, canvas, bubble_type):
        style = get_bubble_style(bubble_type)
        draw_bubble(ImageDraw.Draw(canvas), RECT, style)
        assert canvas.getpixel((200, 150)) == Image.new("RGB", (1, 1), style.fill).getpixel((0, 0))

    def test_tail_when_narration_then_nothing_drawn(self, canvas):
        before = canvas.tobytes()
        style = get_bubble_style(BubbleType.NARRATION)
        draw_tail(ImageDraw.Draw(canvas), RECT, style, TailDirection.BOTTOM_RIGHT, Point(350, 280))
        assert canvas.tobytes() == before

    def test_tail_when_standard_then_pixels_toward_target(self, canvas):
        style = get_bubble_style(BubbleType.STANDARD)
        draw_tail(ImageDraw.Draw(canvas), RECT, style, TailDirection.BOTTOM_LEFT, Point(200, 290))
        assert canvas.getpixel((200, 215)) != (128, 128, 128)

    def test_border_when_none_then_nothing_drawn(self, canvas):
        before = canvas.tobytes()
        draw_border(ImageDraw.Draw(canvas), RECT, BorderStyle.NONE, 2)
        assert canvas.tobytes() == before

    def test_border_when_zero_width_then_nothing_drawn(self, canvas):
        before = canvas.tobytes()
        draw_border(ImageDraw.Draw(canvas), RECT, BorderStyle.SOLID, 0)
        assert canvas.tobytes() == before

    def test_border_when_solid_then_single_stroke(self, canvas):
        draw_border(ImageDraw.Draw(canvas), RECT, BorderStyle.SOLID, 1)
        assert canvas.getpixel((100, 150)) == (0, 0, 0)
        assert canvas.getpixel((103, 150)) == (128, 128, 128)

    def test_border_when_double_then_inset_stroke(self, canvas):
        draw_border(ImageDraw.Draw(canvas), RECT, BorderStyle.DOUBLE, 1, double_inset=3)
        assert canvas.getpixel((100, 150)) == (0, 0, 0)
        assert canvas.getpixel((103, 150)) == (0, 0, 0)
        assert canvas.getpixel((101, 150)) == (128, 128, 128)

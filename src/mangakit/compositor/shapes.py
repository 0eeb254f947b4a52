"""
Module: compositor.shapes

Purpose:
    Draw bubble bodies, speech tails and panel borders onto a PIL image.
    Each concern dispatches once over its closed tag set (BubbleShape,
    BorderStyle).

Key Functions:
    - draw_bubble(): Bubble body for a style
    - draw_tail(): Tail toward the tail target
    - draw_border(): Panel border for a BorderStyle
    - cloud_circles() / star_points() / tail_polygon(): Shape geometry

Dependencies:
    - PIL: ImageDraw primitives
    - bubbles.styles: BubbleShape, BubbleStyle
"""

from __future__ import annotations

import math
from typing import Optional

from PIL import ImageDraw

from mangakit.bubbles.styles import BubbleShape, BubbleStyle
from mangakit.core.models import BorderStyle, PixelRect, Point, TailDirection

STAR_SPIKES = 8
STAR_INNER_RATIO = 0.7
DASH_DEGREES = 12
GAP_DEGREES = 8

# (center x, center y, radius) as fractions of the bubble width/height/width
_CLOUD_LAYOUT = (
    (0.2, 0.3, 0.15),
    (0.5, 0.2, 0.2),
    (0.8, 0.3, 0.15),
    (0.3, 0.7, 0.15),
    (0.7, 0.7, 0.15),
    (0.5, 0.5, 0.25),
)

_DIRECTION_VECTORS = {
    TailDirection.TOP_LEFT: (-1.0, -1.0),
    TailDirection.TOP_RIGHT: (1.0, -1.0),
    TailDirection.BOTTOM_LEFT: (-1.0, 1.0),
    TailDirection.BOTTOM_RIGHT: (1.0, 1.0),
}


def _stroke(width: float) -> int:
    return max(1, round(width))


# =============================================================================
# Geometry
# =============================================================================

def cloud_circles(rect: PixelRect) -> list[tuple[float, float, float]]:
    """Six overlapping circles (cx, cy, r) forming a thought cloud."""
    return [
        (rect.x + rect.width * fx, rect.y + rect.height * fy, rect.width * fr)
        for fx, fy, fr in _CLOUD_LAYOUT
    ]


def star_points(rect: PixelRect) -> list[tuple[float, float]]:
    """
    Vertices of an 8-spike star inscribed in `rect`.

    Points alternate between the outer ellipse and an inner ellipse at
    0.7 of its radii, starting at angle 0.
    """
    center = rect.center
    outer_x, outer_y = rect.width / 2, rect.height / 2
    points = []
    for i in range(STAR_SPIKES * 2):
        angle = i * math.pi / STAR_SPIKES
        ratio = 1.0 if i % 2 == 0 else STAR_INNER_RATIO
        points.append((
            center.x + math.cos(angle) * outer_x * ratio,
            center.y + math.sin(angle) * outer_y * ratio,
        ))
    return points


def _tail_vector(
    rect: PixelRect,
    direction: TailDirection,
    target: Optional[Point],
) -> tuple[float, float, float]:
    """Unit vector from the bubble center toward the target, plus distance."""
    center = rect.center
    if target is not None:
        dx, dy = target.x - center.x, target.y - center.y
        distance = math.hypot(dx, dy)
        if distance > 0:
            return dx / distance, dy / distance, distance
    dx, dy = _DIRECTION_VECTORS[direction]
    return dx / math.sqrt(2), dy / math.sqrt(2), math.inf


def tail_polygon(
    rect: PixelRect,
    direction: TailDirection,
    target: Optional[Point],
) -> list[tuple[float, float]]:
    """
    Triangle from the bubble body toward the tail target.

    The base sits at the bubble center (the body covers it), the tip
    reaches past the bubble edge but never beyond the target.
    """
    ux, uy, distance = _tail_vector(rect, direction, target)
    center = rect.center
    reach = min(distance, max(rect.width, rect.height) / 2 + min(rect.width, rect.height) * 0.35)
    half_base = min(rect.width, rect.height) * 0.15
    return [
        (center.x - uy * half_base, center.y + ux * half_base),
        (center.x + uy * half_base, center.y - ux * half_base),
        (center.x + ux * reach, center.y + uy * reach),
    ]


# =============================================================================
# Drawing
# =============================================================================

def _draw_dashed_ellipse(
    draw: ImageDraw.ImageDraw,
    box: tuple[float, float, float, float],
    color: str,
    width: int,
) -> None:
    start = 0
    while start < 360:
        draw.arc(box, start, min(start + DASH_DEGREES, 360), fill=color, width=width)
        start += DASH_DEGREES + GAP_DEGREES


def draw_bubble(draw: ImageDraw.ImageDraw, rect: PixelRect, style: BubbleStyle) -> None:
    """Draw the body of a bubble in its style's shape."""
    box = rect.as_box()
    width = _stroke(style.outline_width)
    shape = style.shape

    if shape == BubbleShape.CLOUD:
        for cx, cy, r in cloud_circles(rect):
            draw.ellipse(
                (cx - r, cy - r, cx + r, cy + r),
                fill=style.fill, outline=style.outline, width=width,
            )
    elif shape == BubbleShape.JAGGED:
        draw.polygon(star_points(rect), fill=style.fill, outline=style.outline, width=width)
    elif shape == BubbleShape.DASHED_ELLIPSE:
        draw.ellipse(box, fill=style.fill)
        _draw_dashed_ellipse(draw, box, style.outline, width)
    elif shape == BubbleShape.RECTANGLE:
        radius = min(10, rect.width / 4, rect.height / 4)
        draw.rounded_rectangle(box, radius=radius, fill=style.fill, outline=style.outline, width=width)
    else:
        draw.ellipse(box, fill=style.fill, outline=style.outline, width=width)


def draw_tail(
    draw: ImageDraw.ImageDraw,
    rect: PixelRect,
    style: BubbleStyle,
    direction: TailDirection,
    target: Optional[Point],
) -> None:
    """
    Draw the tail of a bubble. Call before draw_bubble so the body
    covers the tail base.

    Thought bubbles trail two small circles instead of a triangle;
    styles without a tail draw nothing.
    """
    if not style.has_tail:
        return
    width = _stroke(style.outline_width)

    if style.shape == BubbleShape.CLOUD:
        ux, uy, distance = _tail_vector(rect, direction, target)
        center = rect.center
        base = max(rect.width, rect.height) / 2
        unit = min(rect.width, rect.height)
        for offset, radius in ((base + unit * 0.12, unit * 0.08), (base + unit * 0.3, unit * 0.05)):
            offset = min(offset, distance)
            cx, cy = center.x + ux * offset, center.y + uy * offset
            draw.ellipse(
                (cx - radius, cy - radius, cx + radius, cy + radius),
                fill=style.fill, outline=style.outline, width=width,
            )
        return

    draw.polygon(
        tail_polygon(rect, direction, target),
        fill=style.fill, outline=style.outline, width=width,
    )


def draw_border(
    draw: ImageDraw.ImageDraw,
    rect: PixelRect,
    border_style: BorderStyle,
    width: float,
    *,
    color: str = "#000000",
    double_inset: float = 3,
) -> None:
    """
    Draw a panel border.

    none skips, double strokes a second rect inset by `double_inset`,
    anything else strokes once. A zero width draws nothing.
    """
    if border_style == BorderStyle.NONE or width <= 0:
        return

    stroke = _stroke(width)
    draw.rectangle(rect.as_box(), outline=color, width=stroke)
    if border_style == BorderStyle.DOUBLE:
        inner = rect.inset(double_inset)
        if inner.is_renderable:
            draw.rectangle(inner.as_box(), outline=color, width=stroke)

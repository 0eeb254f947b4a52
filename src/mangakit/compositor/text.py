"""
Module: compositor.text

Purpose:
    Bubble text layout: font loading, the font-size rule, greedy word
    wrapping and centred multi-line drawing.

Key Functions:
    - load_font(): Cached TrueType font with bitmap fallback
    - calculate_font_size(): Size shrinking with text length
    - wrap_text(): Greedy word wrap by measured width
    - draw_wrapped_text(): Centred multi-line text in a box
    - calculate_center_position(): Top-left for a centred single line

Dependencies:
    - PIL: Font metrics and drawing
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Union

from PIL import ImageDraw, ImageFont

from mangakit.core.models import PixelRect

logger = logging.getLogger(__name__)

MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 24
LINE_HEIGHT_FACTOR = 1.2

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

_REGULAR_FONTS = (
    "arial.ttf",        # Arial (Windows)
    "Arial.ttf",        # Arial (Mac)
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
)
_BOLD_FONTS = (
    "arialbd.ttf",
    "Arial Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
)


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False) -> Font:
    """
    Load a font for bubble text.

    Tries common system TrueType fonts (bold variants first when `bold`),
    then Pillow's built-in font at the requested size.

    Args:
        size: Font size in pixels
        bold: Prefer a bold face

    Returns:
        Font object
    """
    candidates = (_BOLD_FONTS + _REGULAR_FONTS) if bold else _REGULAR_FONTS
    for font_name in candidates:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.debug("Could not load TrueType font, using default")
    return ImageFont.load_default(size=size)


def calculate_font_size(
    width: float,
    height: float,
    text_length: int,
    *,
    min_size: float = MIN_FONT_SIZE,
    max_size: float = MAX_FONT_SIZE,
) -> float:
    """
    Font size for a bubble: smaller boxes and longer text get smaller type.

    size = clamp(min_size, max_size, min(width, height) / 8 * max(0.5, 1 - len / 100))

    Example:
        >>> calculate_font_size(400, 160, 0)
        20.0
        >>> calculate_font_size(400, 160, 80)
        12
    """
    base = min(width, height) / 8
    scale = max(0.5, 1 - text_length / 100)
    return max(min_size, min(max_size, base * scale))


def _text_width(draw: ImageDraw.ImageDraw, text: str, font: Font) -> float:
    left, _, right, _ = draw.textbbox((0, 0), text, font=font)
    return right - left


def wrap_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: Font,
    max_width: float,
) -> list[str]:
    """
    Greedy word wrap.

    Words are added to the current line until it would exceed
    `max_width`. A single word wider than `max_width` stays on its own
    line rather than being split.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and _text_width(draw, candidate, font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def calculate_center_position(
    box: tuple[float, float, float, float],
    text: str,
    font: Font,
    draw: ImageDraw.ImageDraw,
) -> tuple[float, float]:
    """
    Position to center a single line of text in a (x1, y1, x2, y2) box.

    Returns:
        (x, y) for the top-left of the text
    """
    x1, y1, x2, y2 = box
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    text_x = x1 + (x2 - x1 - (right - left)) / 2 - left
    text_y = y1 + (y2 - y1 - (bottom - top)) / 2 - top
    return text_x, text_y


def draw_wrapped_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    rect: PixelRect,
    font: Font,
    font_size: float,
    *,
    fill: str = "#000000",
    padding: float = 20,
    line_height_factor: float = LINE_HEIGHT_FACTOR,
) -> list[str]:
    """
    Draw word-wrapped text centred in `rect`.

    Lines are wrapped to rect.width - padding and stacked at
    font_size * line_height_factor, the block centred vertically.

    Returns:
        The lines drawn
    """
    lines = wrap_text(draw, text, font, rect.width - padding)
    if not lines:
        return lines

    line_height = font_size * line_height_factor
    center = rect.center
    top = center.y - len(lines) * line_height / 2

    for index, line in enumerate(lines):
        line_top = top + index * line_height
        position = calculate_center_position(
            (rect.x, line_top, rect.right, line_top + line_height),
            line,
            font,
            draw,
        )
        draw.text(position, line, fill=fill, font=font)
    return lines

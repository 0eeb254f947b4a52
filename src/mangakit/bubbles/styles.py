"""
Module: bubbles.styles

Purpose:
    Visual style catalog per bubble type. Styles only affect drawing;
    geometry never depends on them.

Key Classes:
    - BubbleShape: Shape drawn for a type
    - BubbleStyle: Fill, outline and text settings

Key Functions:
    - get_bubble_style(): Style for a BubbleType
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mangakit.core.models import BubbleType


class BubbleShape(str, Enum):
    ELLIPSE = "ellipse"
    CLOUD = "cloud"
    JAGGED = "jagged"
    DASHED_ELLIPSE = "dashed-ellipse"
    RECTANGLE = "rectangle"


@dataclass(frozen=True)
class BubbleStyle:
    shape: BubbleShape
    fill: str
    outline: str
    outline_width: int
    text_color: str
    bold: bool = False
    text_transform: str = "none"  # none | uppercase | lowercase
    has_tail: bool = True

    def transform_text(self, text: str) -> str:
        if self.text_transform == "uppercase":
            return text.upper()
        if self.text_transform == "lowercase":
            return text.lower()
        return text


BUBBLE_STYLES: dict[BubbleType, BubbleStyle] = {
    BubbleType.STANDARD: BubbleStyle(
        shape=BubbleShape.ELLIPSE,
        fill="#FFFFFF",
        outline="#000000",
        outline_width=2,
        text_color="#000000",
    ),
    BubbleType.THOUGHT: BubbleStyle(
        shape=BubbleShape.CLOUD,
        fill="#F8F8F8",
        outline="#666666",
        outline_width=2,
        text_color="#333333",
    ),
    BubbleType.SHOUT: BubbleStyle(
        shape=BubbleShape.JAGGED,
        fill="#FFFFFF",
        outline="#000000",
        outline_width=3,
        text_color="#000000",
        bold=True,
        text_transform="uppercase",
    ),
    BubbleType.WHISPER: BubbleStyle(
        shape=BubbleShape.DASHED_ELLIPSE,
        fill="#FFFFFF",
        outline="#999999",
        outline_width=1,
        text_color="#666666",
        text_transform="lowercase",
    ),
    BubbleType.NARRATION: BubbleStyle(
        shape=BubbleShape.RECTANGLE,
        fill="#FFFACD",
        outline="#000000",
        outline_width=2,
        text_color="#000000",
        has_tail=False,
    ),
}


def get_bubble_style(bubble_type: BubbleType) -> BubbleStyle:
    """Get the style for a bubble type (STANDARD for unknown tags)."""
    return BUBBLE_STYLES.get(BubbleType.parse(bubble_type), BUBBLE_STYLES[BubbleType.STANDARD])

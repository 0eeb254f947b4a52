"""
Core Models Package

Immutable data models shared by the layout, bubble and compositor stages.

All models in this package are frozen dataclasses. Render calls build a
new output tree from the input records every time; nothing is mutated in
place, so the same records can be rendered from several threads at once.
"""

from .geometry import Margins, NormalizedRect, PixelRect, Point
from .records import BorderStyle, BubbleType, Page, Panel, PanelType, SpeechBubble
from .rendered import RenderedBubble, RenderedPage, RenderedPanel, TailDirection

__all__ = [
    # Geometry
    "Margins",
    "NormalizedRect",
    "PixelRect",
    "Point",
    # Records
    "BorderStyle",
    "BubbleType",
    "Page",
    "Panel",
    "PanelType",
    "SpeechBubble",
    # Output
    "RenderedBubble",
    "RenderedPage",
    "RenderedPanel",
    "TailDirection",
]

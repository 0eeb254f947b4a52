"""
Core Package

Shared data models, schema validation and serialization for the layout
engine.

**DESIGN NOTES:**

1. **Immutable Data Models**
   - Frozen dataclasses, new instances created for any change
   - Rendering is a pure projection from records to a RenderedPage

2. **Two Coordinate Spaces**
   - NormalizedRect: fractions of a parent (resolution independent)
   - PixelRect: absolute page pixels

3. **Lenient Records, Strict Schema**
   - Records accept missing geometry (resolved by fallback chains)
   - The JSON schema rejects only syntactically invalid documents
"""

from .models import (
    Margins,
    NormalizedRect,
    PixelRect,
    Point,
    Page,
    Panel,
    SpeechBubble,
    RenderedPage,
    RenderedPanel,
    RenderedBubble,
)

__all__ = [
    "Margins",
    "NormalizedRect",
    "PixelRect",
    "Point",
    "Page",
    "Panel",
    "SpeechBubble",
    "RenderedPage",
    "RenderedPanel",
    "RenderedBubble",
]

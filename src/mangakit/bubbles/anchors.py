"""
Module: bubbles.anchors

Purpose:
    Rule-based bubble placement and external suggestion vetting.

    When no position is stored on a bubble, its rect comes from either an
    external placement source (e.g. vision-model coordinates) or, when
    that is missing or fails the sanity bounds, a fixed anchor slot keyed
    by bubble type and index. Both paths produce NormalizedRects relative
    to the panel box and are then run through the same overlap resolution.

Key Functions:
    - rule_based_anchor(): Fixed anchor slot for a bubble
    - estimate_bubble_size(): Size from character count
    - is_valid_suggestion(): Sanity check for external rects
    - coerce_suggestion(): Parse an external rect payload
    - suggested_or_anchor(): Vetted suggestion, else anchor
    - plan_bubble_rects(): Relative rects for a whole panel

Dependencies:
    - core.models: NormalizedRect, BubbleType, SpeechBubble

Used By:
    - bubbles.placement: Fallback geometry
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Sequence, Union

from mangakit.core.models import BubbleType, NormalizedRect, SpeechBubble

logger = logging.getLogger(__name__)

# Wide strip across the top of the panel
NARRATION_ANCHOR = NormalizedRect(0.1, 0.05, 0.8, 0.12)

# Upper-right, mid-left, lower-right; cycled by bubble index
DIALOGUE_ANCHORS = (
    NormalizedRect(0.55, 0.15, 0.35, 0.15),
    NormalizedRect(0.1, 0.45, 0.35, 0.15),
    NormalizedRect(0.55, 0.7, 0.35, 0.15),
)

# Sanity bounds for externally supplied rects
MIN_SUGGESTION_WIDTH = 0.1
MIN_SUGGESTION_HEIGHT = 0.05

DIALOGUE_ASPECT_RATIO = 1.5

SuggestionLike = Union[NormalizedRect, Mapping[str, Any], None]


def rule_based_anchor(bubble_type: BubbleType, index: int) -> NormalizedRect:
    """
    Fixed anchor slot for the bubble at `index` within its panel.

    Example:
        >>> rule_based_anchor(BubbleType.STANDARD, 3) == DIALOGUE_ANCHORS[0]
        True
    """
    if bubble_type == BubbleType.NARRATION:
        return NARRATION_ANCHOR
    return DIALOGUE_ANCHORS[index % len(DIALOGUE_ANCHORS)]


def estimate_bubble_size(text: str, bubble_type: BubbleType) -> tuple[float, float]:
    """
    Estimate (width, height) as fractions of the panel from text length.

    Narration boxes are wide and short. Other bubbles take an area
    proportional to the character count, clamped to [0.08, 0.25] of the
    panel, split at a fixed 1.5 width:height aspect ratio.
    """
    char_count = len(text)
    if bubble_type == BubbleType.NARRATION:
        return (
            min(0.8, max(0.4, char_count / 80)),
            min(0.15, max(0.08, char_count / 200)),
        )

    area = max(0.08, min(0.25, char_count / 100))
    return (
        math.sqrt(area * DIALOGUE_ASPECT_RATIO),
        math.sqrt(area / DIALOGUE_ASPECT_RATIO),
    )


def is_valid_suggestion(rect: NormalizedRect) -> bool:
    """
    Check an externally supplied rect against the sanity bounds.

    All four values in [0, 1], the rect fits inside the panel, and it is
    at least 0.1 wide and 0.05 tall.
    """
    return (
        rect.is_within_unit()
        and rect.width >= MIN_SUGGESTION_WIDTH
        and rect.height >= MIN_SUGGESTION_HEIGHT
    )


def coerce_suggestion(raw: SuggestionLike) -> Optional[NormalizedRect]:
    """
    Parse a suggestion payload into a NormalizedRect.

    Accepts a NormalizedRect, a mapping with relativeX/relativeY/
    relativeWidth/relativeHeight (or snake_case, or x/y/width/height).
    Returns None for anything malformed.
    """
    if raw is None or isinstance(raw, NormalizedRect):
        return raw
    if not isinstance(raw, Mapping):
        return None

    def _get(*keys: str) -> Any:
        for key in keys:
            if raw.get(key) is not None:
                return raw[key]
        return None

    values = (
        _get("relativeX", "relative_x", "x"),
        _get("relativeY", "relative_y", "y"),
        _get("relativeWidth", "relative_width", "width"),
        _get("relativeHeight", "relative_height", "height"),
    )
    if any(v is None for v in values):
        return None
    try:
        return NormalizedRect(*(float(v) for v in values))
    except (TypeError, ValueError):
        return None


def suggested_or_anchor(
    bubble: SpeechBubble,
    index: int,
    suggestion: SuggestionLike = None,
) -> NormalizedRect:
    """
    Relative rect for a bubble without stored geometry.

    Uses the external suggestion when it passes the sanity bounds,
    otherwise the rule-based anchor. Invalid suggestions are discarded
    silently (debug log only).
    """
    rect = coerce_suggestion(suggestion)
    if rect is not None:
        if is_valid_suggestion(rect):
            return rect
        logger.debug(f"Discarded placement suggestion for bubble {bubble.id}: {rect}")
    return rule_based_anchor(bubble.type, index)


def plan_bubble_rects(
    bubbles: Sequence[SpeechBubble],
    suggestions: Optional[Sequence[SuggestionLike]] = None,
) -> list[NormalizedRect]:
    """
    Relative rects for every bubble of a panel, ignoring stored geometry.

    Used when (re)placing freshly authored bubbles; the result can be
    persisted as the bubbles' relative fields.

    Args:
        bubbles: Bubbles in authoring order
        suggestions: Optional external rects, aligned with `bubbles`
            by index (missing entries fall back to anchors)
    """
    suggestions = suggestions or ()
    rects = []
    for index, bubble in enumerate(bubbles):
        suggestion = suggestions[index] if index < len(suggestions) else None
        rects.append(suggested_or_anchor(bubble, index, suggestion))
    return rects

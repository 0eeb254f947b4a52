"""
Bubbles Package

Speech bubble placement (geometry) and the per-type style catalog used
by the compositor.
"""

from .anchors import (
    DIALOGUE_ANCHORS,
    NARRATION_ANCHOR,
    coerce_suggestion,
    estimate_bubble_size,
    is_valid_suggestion,
    plan_bubble_rects,
    rule_based_anchor,
    suggested_or_anchor,
)
from .placement import (
    OverlapResult,
    bubble_absolute_to_relative,
    bubble_relative_to_absolute,
    calculate_tail_target,
    constrain_to_panel,
    determine_tail_direction,
    rects_overlap,
    render_bubbles,
    resolve_bubble_rect,
    resolve_overlaps,
)
from .styles import BUBBLE_STYLES, BubbleShape, BubbleStyle, get_bubble_style

__all__ = [
    # Anchors
    "DIALOGUE_ANCHORS",
    "NARRATION_ANCHOR",
    "coerce_suggestion",
    "estimate_bubble_size",
    "is_valid_suggestion",
    "plan_bubble_rects",
    "rule_based_anchor",
    "suggested_or_anchor",
    # Placement
    "OverlapResult",
    "bubble_absolute_to_relative",
    "bubble_relative_to_absolute",
    "calculate_tail_target",
    "constrain_to_panel",
    "determine_tail_direction",
    "rects_overlap",
    "render_bubbles",
    "resolve_bubble_rect",
    "resolve_overlaps",
    # Styles
    "BUBBLE_STYLES",
    "BubbleShape",
    "BubbleStyle",
    "get_bubble_style",
]

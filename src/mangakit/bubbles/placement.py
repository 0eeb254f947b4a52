"""
Module: bubbles.placement

Purpose:
    Turn a panel's speech bubble records into RenderedBubbles with final
    page-absolute geometry, kept inside the panel and with mutual overlap
    minimized.

    Per-bubble geometry resolves through an ordered chain:
    1. Own relative fields (fractions of the panel box)
    2. Own panel-local pixel fields, offset by the panel origin
    3. External placement suggestion, if it passes the sanity bounds
    4. Rule-based anchor slot

    Every rect is then constrained into the panel (padding 5px) and the
    whole list is run through the overlap relaxation.

Key Functions:
    - render_bubbles(): Full pipeline for one panel
    - resolve_bubble_rect(): Geometry chain for one bubble
    - constrain_to_panel(): Containment clamp
    - determine_tail_direction(): Quadrant heuristic
    - calculate_tail_target(): Default or record tail point
    - rects_overlap(): Overlap predicate (touching edges do not overlap)
    - resolve_overlaps(): Bounded greedy relaxation
    - bubble_absolute_to_relative() / bubble_relative_to_absolute():
      Conversions against a panel box for persisting edits

Key Classes:
    - OverlapResult: Outcome of resolve_overlaps()

Dependencies:
    - layout.transform: Coordinate conversion, first_defined
    - layout.config: RenderConfig
    - bubbles.anchors: Size estimation, suggestions, anchors

Used By:
    - layout.page_renderer: Bubbles of every renderable panel
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from mangakit.core.models import (
    NormalizedRect,
    PixelRect,
    Point,
    RenderedBubble,
    SpeechBubble,
    TailDirection,
)
from mangakit.layout.config import RenderConfig
from mangakit.layout.transform import absolute_to_relative, first_defined, relative_to_absolute

from .anchors import SuggestionLike, estimate_bubble_size, suggested_or_anchor

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 5


# =============================================================================
# Geometry
# =============================================================================

def constrain_to_panel(
    rect: PixelRect,
    panel_box: PixelRect,
    padding: float = DEFAULT_PADDING,
) -> PixelRect:
    """
    Clamp a bubble rect so it lies inside `panel_box` with `padding`.

    Width and height are clamped first, then x/y are clamped into
    [panel.x + padding, panel.right - width - padding] (same for y).

    Example:
        >>> constrain_to_panel(PixelRect(-50, 0, 400, 40), PixelRect(0, 0, 200, 100))
        PixelRect(x=5, y=5, width=190, height=40)
    """
    width = min(rect.width, panel_box.width - 2 * padding)
    height = min(rect.height, panel_box.height - 2 * padding)

    min_x = panel_box.x + padding
    max_x = panel_box.right - width - padding
    min_y = panel_box.y + padding
    max_y = panel_box.bottom - height - padding

    x = rect.x
    if x < min_x:
        x = min_x
    elif x > max_x:
        x = max_x

    y = rect.y
    if y < min_y:
        y = min_y
    elif y > max_y:
        y = max_y

    return PixelRect(x, y, width, height)


def bubble_relative_to_absolute(rect: NormalizedRect, panel_box: PixelRect) -> PixelRect:
    """Convert a bubble rect relative to its panel into page pixels."""
    return relative_to_absolute(rect, panel_box)


def bubble_absolute_to_relative(rect: PixelRect, panel_box: PixelRect) -> NormalizedRect:
    """
    Convert a page-absolute bubble rect into fractions of its panel.

    Used when an editor persists a dragged bubble, so the bubble keeps its
    place when the panel is resized.
    """
    return absolute_to_relative(rect, panel_box)


def _relative_extent(relative, absolute, panel_extent, estimate):
    if relative is not None:
        return relative
    if absolute is not None and panel_extent > 0:
        return absolute / panel_extent
    return estimate


def _from_relative(bubble: SpeechBubble, panel_box: PixelRect) -> Optional[PixelRect]:
    if bubble.relative_x is None or bubble.relative_y is None:
        return None
    rect = bubble.relative_rect
    if rect is None:
        # Stored pixel size wins over the estimate
        est_w, est_h = estimate_bubble_size(bubble.text, bubble.type)
        rect = NormalizedRect(
            bubble.relative_x,
            bubble.relative_y,
            _relative_extent(bubble.relative_width, bubble.width, panel_box.width, est_w),
            _relative_extent(bubble.relative_height, bubble.height, panel_box.height, est_h),
        )
    return relative_to_absolute(rect, panel_box)


def _from_absolute(bubble: SpeechBubble, panel_box: PixelRect) -> Optional[PixelRect]:
    if bubble.x is None or bubble.y is None:
        return None
    width, height = bubble.width, bubble.height
    if width is None or height is None:
        est_w, est_h = estimate_bubble_size(bubble.text, bubble.type)
        width = width if width is not None else est_w * panel_box.width
        height = height if height is not None else est_h * panel_box.height
    return PixelRect(panel_box.x + bubble.x, panel_box.y + bubble.y, width, height)


def resolve_bubble_rect(
    bubble: SpeechBubble,
    panel_box: PixelRect,
    index: int,
    suggestion: SuggestionLike = None,
    padding: float = DEFAULT_PADDING,
) -> PixelRect:
    """
    Resolve the page-absolute rect of one bubble, constrained to its panel.

    Args:
        bubble: Bubble record
        panel_box: Final absolute box of the owning panel
        index: Position of the bubble among its panel's bubbles
        suggestion: Optional external rect relative to the panel
        padding: Minimum gap to the panel edge

    Returns:
        PixelRect inside panel_box
    """
    rect = first_defined([
        lambda: _from_relative(bubble, panel_box),
        lambda: _from_absolute(bubble, panel_box),
        lambda: relative_to_absolute(
            suggested_or_anchor(bubble, index, suggestion), panel_box
        ),
    ])
    return constrain_to_panel(rect, panel_box, padding)


# =============================================================================
# Tails
# =============================================================================

def determine_tail_direction(rect: PixelRect, panel_box: PixelRect) -> TailDirection:
    """
    Quadrant the tail points toward.

    The tail points away from the bubble's position into the opposite
    quadrant of the panel: a bubble in the top-left points bottom-right.
    Centers exactly on the panel's midline count as right/bottom.
    """
    bubble_center = rect.center
    panel_center = panel_box.center
    is_left = bubble_center.x < panel_center.x
    is_top = bubble_center.y < panel_center.y

    if is_top and is_left:
        return TailDirection.BOTTOM_RIGHT
    if is_top:
        return TailDirection.BOTTOM_LEFT
    if is_left:
        return TailDirection.TOP_RIGHT
    return TailDirection.TOP_LEFT


def calculate_tail_target(
    bubble: SpeechBubble,
    panel_box: PixelRect,
    height_ratio: float = 0.7,
) -> Point:
    """
    Absolute point the tail aims at.

    Uses the bubble's own tail_target (relative to the panel box) when
    set, otherwise the horizontal panel center at `height_ratio` of its
    height.
    """
    if bubble.tail_target is not None:
        return Point(
            panel_box.x + bubble.tail_target.x * panel_box.width,
            panel_box.y + bubble.tail_target.y * panel_box.height,
        )
    return Point(
        panel_box.x + panel_box.width / 2,
        panel_box.y + panel_box.height * height_ratio,
    )


# =============================================================================
# Overlap resolution
# =============================================================================

def rects_overlap(a: PixelRect, b: PixelRect) -> bool:
    """
    True when two rects share interior area.

    Rects that only touch along an edge do not overlap.

    Example:
        >>> rects_overlap(PixelRect(0, 0, 10, 10), PixelRect(10, 0, 10, 10))
        False
    """
    return not (
        a.right <= b.x
        or b.right <= a.x
        or a.bottom <= b.y
        or b.bottom <= a.y
    )


def _has_overlap(bubbles: Sequence[RenderedBubble]) -> bool:
    for i in range(len(bubbles)):
        for j in range(i + 1, len(bubbles)):
            if rects_overlap(bubbles[i].rect, bubbles[j].rect):
                return True
    return False


@dataclass(frozen=True)
class OverlapResult:
    """
    Outcome of overlap resolution.

    Attributes:
        bubbles: Bubbles with final positions, same order as the input
        passes: Number of passes run (never above the budget)
        converged: True when no pair overlaps in the final positions
    """

    bubbles: tuple[RenderedBubble, ...]
    passes: int
    converged: bool


def resolve_overlaps(
    bubbles: Sequence[RenderedBubble],
    panel_box: PixelRect,
    *,
    padding: float = DEFAULT_PADDING,
    step: float = 10,
    max_iterations: int = 10,
) -> OverlapResult:
    """
    Push overlapping bubbles apart, best effort.

    Each pass scans pairs (i, j), i < j, in list order. When a pair
    overlaps, bubble j moves down by `step` and is re-clamped into the
    panel. The loop stops after a pass without overlaps or after
    `max_iterations` passes; running out of room is not an error, the
    positions reached so far are returned.

    Args:
        bubbles: Bubbles already constrained to panel_box
        panel_box: Final absolute box of the owning panel
        padding: Containment padding used when re-clamping
        step: Downward shift per overlap (px)
        max_iterations: Pass budget

    Returns:
        OverlapResult
    """
    resolved = list(bubbles)
    passes = 0
    converged = False

    while passes < max_iterations:
        passes += 1
        moved = False
        for i in range(len(resolved)):
            for j in range(i + 1, len(resolved)):
                if not rects_overlap(resolved[i].rect, resolved[j].rect):
                    continue
                moved = True
                current = resolved[j]
                shifted = PixelRect(
                    current.rect.x, current.rect.y + step,
                    current.rect.width, current.rect.height,
                )
                rect = constrain_to_panel(shifted, panel_box, padding)
                resolved[j] = replace(
                    current,
                    rect=rect,
                    tail_direction=determine_tail_direction(rect, panel_box),
                )
        if not moved:
            converged = True
            break

    if not converged:
        converged = not _has_overlap(resolved)
        if not converged:
            logger.warning(
                f"Bubble overlap unresolved after {passes} passes "
                f"({len(resolved)} bubbles in panel at {panel_box.x:.0f},{panel_box.y:.0f})"
            )

    logger.debug(f"Overlap resolution: {passes} passes, converged={converged}")
    return OverlapResult(bubbles=tuple(resolved), passes=passes, converged=converged)


# =============================================================================
# Pipeline
# =============================================================================

def render_bubbles(
    bubbles: Sequence[SpeechBubble],
    panel_box: PixelRect,
    *,
    config: Optional[RenderConfig] = None,
    suggestions: Optional[Sequence[SuggestionLike]] = None,
) -> tuple[RenderedBubble, ...]:
    """
    Place every bubble of a panel.

    Args:
        bubbles: Bubble records in authoring order
        panel_box: Final absolute box of the owning panel
        config: Render configuration (defaults to RenderConfig())
        suggestions: Optional external rects aligned with `bubbles` by index,
            relative to the panel box; only consulted for bubbles without
            stored geometry

    Returns:
        RenderedBubbles in authoring order, all inside panel_box. Empty when
        the panel is too small to hold a bubble with its padding.
    """
    config = config or RenderConfig()
    padding = config.bubble_padding

    if not bubbles:
        return ()
    if panel_box.width <= 2 * padding or panel_box.height <= 2 * padding:
        logger.debug(f"Panel box {panel_box} too small for bubbles, skipping {len(bubbles)}")
        return ()

    suggestions = suggestions or ()
    placed = []
    for index, bubble in enumerate(bubbles):
        suggestion = suggestions[index] if index < len(suggestions) else None
        rect = resolve_bubble_rect(bubble, panel_box, index, suggestion, padding)
        placed.append(RenderedBubble(
            id=bubble.id,
            text=bubble.text,
            type=bubble.type,
            rect=rect,
            tail_direction=determine_tail_direction(rect, panel_box),
            tail_target=calculate_tail_target(
                bubble, panel_box, config.tail_target_height_ratio
            ),
        ))

    result = resolve_overlaps(
        placed,
        panel_box,
        padding=padding,
        step=config.overlap_step,
        max_iterations=config.max_overlap_iterations,
    )
    return result.bubbles

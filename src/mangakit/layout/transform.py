"""
Module: layout.transform

Purpose:
    Pure, stateless conversions between normalized (relative) and pixel
    (absolute) coordinate spaces, plus margin and safe-area application.

Key Functions:
    - relative_to_absolute(): NormalizedRect -> PixelRect within bounds
    - absolute_to_relative(): Exact inverse of relative_to_absolute()
    - apply_safe_area(): Page size + margins -> safe area rect
    - apply_margins(): Shrink a rect inward, never below zero size
    - first_defined(): Ordered resolver for fallback chains

Round-trip law:
    For non-degenerate bounds,
    relative_to_absolute(absolute_to_relative(rect, b), b) == rect
    within floating point tolerance.

Dependencies:
    - core.models.geometry

Used By:
    - layout.page_renderer: Panel placement
    - bubbles.placement: Bubble placement
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from mangakit.core.models import Margins, NormalizedRect, PixelRect

T = TypeVar("T")


def relative_to_absolute(rect: NormalizedRect, bounds: PixelRect) -> PixelRect:
    """
    Convert a normalized rect to pixels within `bounds`.

    No clamping is applied; callers clamp as needed.

    Example:
        >>> relative_to_absolute(NormalizedRect(0, 0, 1, 0.33), PixelRect(0, 0, 1200, 1800))
        PixelRect(x=0, y=0, width=1200, height=594.0)
    """
    return PixelRect(
        x=bounds.x + rect.x * bounds.width,
        y=bounds.y + rect.y * bounds.height,
        width=rect.width * bounds.width,
        height=rect.height * bounds.height,
    )


def absolute_to_relative(rect: PixelRect, bounds: PixelRect) -> NormalizedRect:
    """
    Convert a pixel rect to fractions of `bounds`.

    Used when persisting edits made in pixel space, so layouts stay
    resolution independent across differently sized pages.

    Raises:
        ValueError: If bounds has zero width or height
    """
    if bounds.width == 0 or bounds.height == 0:
        raise ValueError(f"Cannot normalize against degenerate bounds: {bounds}")
    return NormalizedRect(
        x=(rect.x - bounds.x) / bounds.width,
        y=(rect.y - bounds.y) / bounds.height,
        width=rect.width / bounds.width,
        height=rect.height / bounds.height,
    )


def apply_safe_area(page_width: float, page_height: float, margins: Margins) -> PixelRect:
    """
    Compute the page safe area after page margins.

    Example:
        >>> apply_safe_area(1200, 1800, Margins.uniform(20))
        PixelRect(x=20, y=20, width=1160, height=1760)
    """
    return PixelRect(
        x=margins.left,
        y=margins.top,
        width=page_width - margins.left - margins.right,
        height=page_height - margins.top - margins.bottom,
    )


def apply_margins(rect: PixelRect, margins: Margins) -> PixelRect:
    """
    Shrink `rect` inward by `margins`.

    Width and height are clamped at zero; a zero-sized result is
    non-renderable (see PixelRect.is_renderable).
    """
    return PixelRect(
        x=rect.x + margins.left,
        y=rect.y + margins.top,
        width=max(0.0, rect.width - margins.left - margins.right),
        height=max(0.0, rect.height - margins.top - margins.bottom),
    )


def first_defined(sources: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """
    Return the first non-None value produced by `sources`, in order.

    Sources are evaluated lazily, so later (more expensive or less
    authoritative) fallbacks only run when earlier ones yield nothing.

    Example:
        >>> first_defined([lambda: None, lambda: 2, lambda: 1 / 0])
        2
    """
    for source in sources:
        value = source()
        if value is not None:
            return value
    return None

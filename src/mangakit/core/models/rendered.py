"""
Module: rendered

Purpose:
    Output tree of a render call. Computed fresh from the input records on
    every call, never cached or mutated in place. The same numbers feed
    both JSON consumers (editor overlays) and the raster compositor.

Key Classes:
    - TailDirection: Quadrant a bubble tail points toward
    - RenderedBubble: Final bubble geometry
    - RenderedPanel: Final panel geometry with its bubbles
    - RenderedPage: Complete page description

Dependencies:
    - dataclasses (std)
    - core.models.geometry
    - core.models.records: tag enums

Used By:
    - layout.page_renderer: Produces RenderedPage
    - bubbles.placement: Produces RenderedBubble
    - compositor: Draws the tree
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .geometry import Margins, NormalizedRect, PixelRect, Point
from .records import BorderStyle, BubbleType, PanelType


class TailDirection(str, Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RenderedBubble:
    """
    Bubble with final page-absolute geometry.

    Attributes:
        id: Bubble identifier
        text: Bubble text
        type: BubbleType (drives shape only)
        rect: Final PixelRect, always inside the owning panel box
        tail_direction: Quadrant the tail points toward
        tail_target: Absolute point the tail aims at
    """

    id: str
    text: str
    type: BubbleType
    rect: PixelRect
    tail_direction: TailDirection
    tail_target: Optional[Point] = None

    def to_dict(self) -> dict[str, Any]:
        d = {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            **self.rect.to_dict(),
            "tailDirection": self.tail_direction.value,
        }
        if self.tail_target is not None:
            d["tailTarget"] = self.tail_target.to_dict()
        return d


@dataclass(frozen=True, slots=True)
class RenderedPanel:
    """
    Panel with resolved geometry.

    Carries both the relative rect actually used (so edits can be
    persisted back in normalized form) and the final absolute box after
    panel margins.

    Attributes:
        id: Panel identifier
        panel_index: Position among the page's panels sorted by panel_index
        relative: NormalizedRect used, relative to the page safe area
        absolute: Final PixelRect after panel margins
        z_index: Stacking order
        panel_type: PanelType
        margins: Panel margins applied
        border_style: BorderStyle
        border_width: Border stroke width in pixels
        image_url: Panel artwork reference (not resolved here)
        bubbles: Placed bubbles, in authoring order
    """

    id: str
    panel_index: int
    relative: NormalizedRect
    absolute: PixelRect
    z_index: int
    panel_type: PanelType
    margins: Margins
    border_style: BorderStyle
    border_width: float
    image_url: Optional[str] = None
    bubbles: tuple[RenderedBubble, ...] = ()

    @property
    def is_renderable(self) -> bool:
        return self.absolute.is_renderable

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "panelIndex": self.panel_index,
            "relative": self.relative.to_dict(),
            "absolute": self.absolute.to_dict(),
            "zIndex": self.z_index,
            "panelType": self.panel_type.value,
            "margins": self.margins.to_dict(),
            "borderStyle": self.border_style.value,
            "borderWidth": self.border_width,
            "imageUrl": self.image_url,
            "bubbles": [b.to_dict() for b in self.bubbles],
        }


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """
    Fully resolved geometric description of a page.

    Attributes:
        page_id: Page identifier
        width, height: Page size in pixels
        margins: Resolved page margins
        safe_area: Page rect remaining after margins
        layout_template_id: Template the panels were resolved against
        panels: Panels sorted ascending by panel_index
        page_number: Page label number, if known

    Example:
        >>> rendered = render_page(page)
        >>> json.dumps(rendered.to_dict())
    """

    page_id: str
    width: float
    height: float
    margins: Margins
    safe_area: PixelRect
    layout_template_id: str
    panels: tuple[RenderedPanel, ...]
    page_number: Optional[int] = None

    @property
    def panel_count(self) -> int:
        return len(self.panels)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageId": self.page_id,
            "width": self.width,
            "height": self.height,
            "margins": self.margins.to_dict(),
            "safeArea": self.safe_area.to_dict(),
            "layoutTemplateId": self.layout_template_id,
            "pageNumber": self.page_number,
            "panels": [p.to_dict() for p in self.panels],
        }

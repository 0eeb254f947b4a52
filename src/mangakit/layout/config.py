"""
Module: layout.config

Purpose:
    Configuration for the geometry engine (page renderer and bubble
    placement). Holds every documented fallback value in one place.

Key Classes:
    - RenderConfig: Immutable render configuration
    - PageFormat: Named physical page size

Dependencies:
    - dataclasses (std)
    - core.models.geometry: Margins

Used By:
    - layout.page_renderer: Page/panel fallbacks
    - bubbles.placement: Padding and overlap resolution budget
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mangakit.core.models import BorderStyle, Margins


# Page defaults
DEFAULT_PAGE_WIDTH_PX = 1200
DEFAULT_PAGE_HEIGHT_PX = 1800
DEFAULT_PAGE_MARGINS = Margins.uniform(20)
DEFAULT_PANEL_MARGINS = Margins.uniform(10)
DEFAULT_LAYOUT_TEMPLATE_ID = "dialogue-4panel"


@dataclass(frozen=True)
class PageFormat:
    """Named physical page size in pixels at 300 DPI."""
    name: str
    width: int
    height: int


PAGE_FORMATS = {
    # B5 (182mm x 257mm), most common for manga
    "B5": PageFormat("B5 (Manga Standard)", 1654, 2339),
    # A4 (210mm x 297mm), common for comics
    "A4": PageFormat("A4 (Comic Standard)", 2480, 3508),
    "LETTER": PageFormat("US Letter", 2550, 3300),
}


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for geometry rendering (immutable).

    Attributes:
        default_page_width: Page width when the record has none
        default_page_height: Page height when the record has none
        default_page_margins: Page margins when the record has none
        default_panel_margins: Panel margins when neither the panel nor
            its template slot supplies any
        default_layout_template_id: Template used when the page names none
        default_z_index: Stacking order when neither panel nor slot has one
        default_border_style: Border style when the panel has none
        default_border_width: Border width when the panel has none
        bubble_padding: Minimum gap between a bubble and its panel edge
        overlap_step: Downward shift applied per overlap (px)
        max_overlap_iterations: Pass budget for overlap resolution
        tail_target_height_ratio: Default tail target depth within the panel

    Example:
        >>> config = RenderConfig(max_overlap_iterations=5)
        >>> config.bubble_padding
        5
    """

    # Page
    default_page_width: float = DEFAULT_PAGE_WIDTH_PX
    default_page_height: float = DEFAULT_PAGE_HEIGHT_PX
    default_page_margins: Margins = field(default=DEFAULT_PAGE_MARGINS)
    default_layout_template_id: str = DEFAULT_LAYOUT_TEMPLATE_ID

    # Panels
    default_panel_margins: Margins = field(default=DEFAULT_PANEL_MARGINS)
    default_z_index: int = 1
    default_border_style: BorderStyle = BorderStyle.SOLID
    default_border_width: float = 2

    # Bubbles
    bubble_padding: float = 5
    overlap_step: float = 10
    max_overlap_iterations: int = 10
    tail_target_height_ratio: float = 0.7

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.default_page_width <= 0:
            raise ValueError(f"default_page_width must be positive: {self.default_page_width}")
        if self.default_page_height <= 0:
            raise ValueError(f"default_page_height must be positive: {self.default_page_height}")
        if self.default_border_width < 0:
            raise ValueError(f"default_border_width must be non-negative: {self.default_border_width}")
        if self.default_page_margins.horizontal >= self.default_page_width:
            raise ValueError("Margins exceed page width")
        if self.default_page_margins.vertical >= self.default_page_height:
            raise ValueError("Margins exceed page height")
        if self.bubble_padding < 0:
            raise ValueError(f"bubble_padding must be non-negative: {self.bubble_padding}")
        if self.overlap_step <= 0:
            raise ValueError(f"overlap_step must be positive: {self.overlap_step}")
        if self.max_overlap_iterations <= 0:
            raise ValueError(
                f"max_overlap_iterations must be positive: {self.max_overlap_iterations}"
            )
        if not 0 <= self.tail_target_height_ratio <= 1:
            raise ValueError(
                f"tail_target_height_ratio must be within [0, 1]: {self.tail_target_height_ratio}"
            )

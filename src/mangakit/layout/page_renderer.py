"""
Module: layout.page_renderer

Purpose:
    Turn a Page record and its Panel records into a RenderedPage: a fully
    resolved, JSON-serializable description of where every panel and
    bubble sits on the page. Pure and synchronous; the same input always
    yields a structurally identical output.

Key Functions:
    - render_page(): Main entry point
    - resolve_panel_rect(): Panel geometry fallback chain
    - resolve_panel_margins(): Panel margin fallback chain
    - panel_render_order(): Compositing order (z_index, panel_index)
    - generate_panels_from_template(): Panel records for a new page

Dependencies:
    - layout.transform: Coordinate conversion and first_defined
    - layout.templates: Template lookup
    - bubbles.placement: Bubble geometry per panel

Used By:
    - compositor: Draws the RenderedPage
    - cli: `layout` and `render` commands
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from mangakit.bubbles.anchors import SuggestionLike
from mangakit.bubbles.placement import render_bubbles
from mangakit.core.models import (
    Margins,
    NormalizedRect,
    Page,
    Panel,
    PanelType,
    PixelRect,
    RenderedPage,
    RenderedPanel,
)

from .config import RenderConfig
from .templates import LayoutTemplate, PanelTemplate, require_layout
from .transform import (
    absolute_to_relative,
    apply_margins,
    apply_safe_area,
    first_defined,
    relative_to_absolute,
)

logger = logging.getLogger(__name__)

FULL_SAFE_AREA = NormalizedRect(0.0, 0.0, 1.0, 1.0)


def resolve_page_margins(page: Page, config: RenderConfig) -> Margins:
    """Page margins, with missing sides filled from the configured default."""
    if page.margins:
        return Margins.from_dict(page.margins, default=config.default_page_margins)
    return config.default_page_margins


def _derived_from_absolute(panel: Panel, safe_area: PixelRect) -> Optional[NormalizedRect]:
    rect = panel.absolute_rect
    if rect is None or not safe_area.is_renderable:
        return None
    logger.debug(f"Panel {panel.id}: relative rect derived from absolute fields")
    return absolute_to_relative(rect, safe_area)


def resolve_panel_rect(
    panel: Panel,
    slot: Optional[PanelTemplate],
    safe_area: PixelRect,
) -> NormalizedRect:
    """
    Relative rect of a panel within the page safe area.

    Fallback chain:
    1. Panel's own relative fields (all four set)
    2. Template slot geometry
    3. Panel's absolute fields converted against the safe area
    4. The whole safe area

    Args:
        panel: Panel record
        slot: Template slot for the panel's sorted position (may be None)
        safe_area: Page safe area in pixels

    Returns:
        NormalizedRect actually used
    """
    return first_defined([
        lambda: panel.relative_rect,
        lambda: slot.rect if slot is not None else None,
        lambda: _derived_from_absolute(panel, safe_area),
        lambda: FULL_SAFE_AREA,
    ])


def resolve_panel_margins(
    panel: Panel,
    slot: Optional[PanelTemplate],
    config: RenderConfig,
) -> Margins:
    """
    Panel margins: own (missing sides from the default), then slot, then default.
    """
    if panel.panel_margins:
        return Margins.from_dict(panel.panel_margins, default=config.default_panel_margins)
    if slot is not None:
        return slot.margins
    return config.default_panel_margins


def _render_panel(
    panel: Panel,
    position: int,
    template: LayoutTemplate,
    safe_area: PixelRect,
    config: RenderConfig,
    suggestions: Optional[Sequence[SuggestionLike]],
) -> RenderedPanel:
    slot = template.slot(position)
    if position >= template.panel_count and panel.relative_rect is None:
        logger.debug(
            f"Panel {panel.id}: position {position} past {template.id} slots, "
            f"reusing last slot"
        )

    relative = resolve_panel_rect(panel, slot, safe_area)
    margins = resolve_panel_margins(panel, slot, config)
    absolute = apply_margins(relative_to_absolute(relative, safe_area), margins)

    z_index = first_defined([
        lambda: panel.z_index,
        lambda: slot.z_index if slot is not None else None,
        lambda: config.default_z_index,
    ])
    panel_type = first_defined([
        lambda: panel.panel_type,
        lambda: slot.panel_type if slot is not None else None,
        lambda: PanelType.STANDARD,
    ])

    if absolute.is_renderable:
        bubbles = render_bubbles(
            panel.bubbles, absolute, config=config, suggestions=suggestions
        )
    else:
        logger.debug(f"Panel {panel.id}: non-renderable box {absolute}")
        bubbles = ()

    return RenderedPanel(
        id=panel.id,
        panel_index=position,
        relative=relative,
        absolute=absolute,
        z_index=z_index,
        panel_type=panel_type,
        margins=margins,
        border_style=panel.border_style or config.default_border_style,
        border_width=(
            panel.border_width if panel.border_width is not None
            else config.default_border_width
        ),
        image_url=panel.image_url,
        bubbles=bubbles,
    )


def render_page(
    page: Page,
    panels: Optional[Sequence[Panel]] = None,
    *,
    config: Optional[RenderConfig] = None,
    bubble_suggestions: Optional[Mapping[str, Sequence[SuggestionLike]]] = None,
) -> RenderedPage:
    """
    Resolve the geometry of a page, its panels and their bubbles.

    Args:
        page: Page record
        panels: Panel records; defaults to page.panels
        config: Render configuration (defaults to RenderConfig())
        bubble_suggestions: Optional external bubble rects keyed by panel
            id, aligned with that panel's bubbles by index

    Returns:
        RenderedPage with panels sorted ascending by panel_index

    Raises:
        TemplateNotFoundError: If the page names a template that does
            not exist. A page naming no template uses the default.

    Example:
        >>> rendered = render_page(Page(id="p1"), [Panel(id="a", panel_index=0)])
        >>> rendered.panels[0].absolute
        PixelRect(x=30.0, y=30.0, width=565.0, height=865.0)
    """
    config = config or RenderConfig()
    panels = page.panels if panels is None else panels
    bubble_suggestions = bubble_suggestions or {}

    width = page.width or config.default_page_width
    height = page.height or config.default_page_height
    margins = resolve_page_margins(page, config)
    safe_area = apply_safe_area(width, height, margins)

    template_id = page.layout_template_id or config.default_layout_template_id
    template = require_layout(template_id)

    ordered = sorted(panels, key=lambda p: p.panel_index)
    rendered_panels = tuple(
        _render_panel(
            panel,
            position,
            template,
            safe_area,
            config,
            bubble_suggestions.get(panel.id),
        )
        for position, panel in enumerate(ordered)
    )

    logger.debug(
        f"Rendered page {page.id}: {len(rendered_panels)} panels on {template_id}"
    )
    return RenderedPage(
        page_id=page.id,
        width=width,
        height=height,
        margins=margins,
        safe_area=safe_area,
        layout_template_id=template_id,
        panels=rendered_panels,
        page_number=page.page_number,
    )


def panel_render_order(rendered: RenderedPage) -> list[RenderedPanel]:
    """
    Panels in compositing order: z_index ascending, ties by panel_index.

    An inset panel with a higher z_index is drawn after, and on top of,
    the splash panel containing it.
    """
    return sorted(rendered.panels, key=lambda p: (p.z_index, p.panel_index))


def generate_panels_from_template(
    template: LayoutTemplate,
    page_id: str,
    page_width: float = 1200,
    page_height: float = 1800,
) -> list[Panel]:
    """
    Create panel records for a freshly created page.

    Each slot becomes a panel carrying the slot's relative rect, its
    geometry in whole page pixels, z_index, panel_type and margins.

    Args:
        template: Template to apply
        page_id: Owning page id, used to build panel ids
        page_width: Page width in pixels
        page_height: Page height in pixels

    Returns:
        Panel records in slot order, without bubbles or artwork
    """
    panels = []
    for index, slot in enumerate(template.panels):
        panels.append(Panel(
            id=f"{page_id}-{slot.id}",
            panel_index=index,
            relative_x=slot.rect.x,
            relative_y=slot.rect.y,
            relative_width=slot.rect.width,
            relative_height=slot.rect.height,
            x=round(slot.rect.x * page_width),
            y=round(slot.rect.y * page_height),
            width=round(slot.rect.width * page_width),
            height=round(slot.rect.height * page_height),
            z_index=slot.z_index,
            panel_type=slot.panel_type,
            panel_margins=slot.margins.to_dict(),
        ))
    return panels

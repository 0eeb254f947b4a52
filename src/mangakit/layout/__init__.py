"""
Module: layout

Purpose:
    Page geometry: coordinate transforms, the layout template registry
    and the page renderer producing RenderedPage trees.

Key Functions:
    - render_page(): Resolve page, panel and bubble geometry
    - relative_to_absolute() / absolute_to_relative(): Coordinate transforms
    - get_layout_by_id() / list_all(): Template registry

Key Classes:
    - RenderConfig: Fallback values and bubble placement budget
    - LayoutTemplate: Named panel arrangement

Used By:
    - compositor: Draws RenderedPage trees
    - cli: `templates`, `layout` and `render` commands
"""

from .config import PAGE_FORMATS, PageFormat, RenderConfig
from .transform import (
    absolute_to_relative,
    apply_margins,
    apply_safe_area,
    first_defined,
    relative_to_absolute,
)
from .templates import (
    LayoutTemplate,
    PanelTemplate,
    TemplateNotFoundError,
    default_layout,
    get_layout_by_id,
    get_layouts_by_panel_count,
    get_layouts_by_tag,
    get_recommended_layout,
    list_all,
    require_layout,
)
# Imported last: bubbles.placement depends on config and transform above
from .page_renderer import (
    generate_panels_from_template,
    panel_render_order,
    render_page,
    resolve_panel_margins,
    resolve_panel_rect,
)

__all__ = [
    # Config
    "PAGE_FORMATS",
    "PageFormat",
    "RenderConfig",
    # Transform
    "absolute_to_relative",
    "apply_margins",
    "apply_safe_area",
    "first_defined",
    "relative_to_absolute",
    # Templates
    "LayoutTemplate",
    "PanelTemplate",
    "TemplateNotFoundError",
    "default_layout",
    "get_layout_by_id",
    "get_layouts_by_panel_count",
    "get_layouts_by_tag",
    "get_recommended_layout",
    "list_all",
    "require_layout",
    # Renderer
    "generate_panels_from_template",
    "panel_render_order",
    "render_page",
    "resolve_panel_margins",
    "resolve_panel_rect",
]

"""
Module: compositor.compositor

Purpose:
    Draw a RenderedPage to a PIL image. Geometry is taken verbatim from
    the RenderedPage/RenderedBubble numbers (times the configured scale);
    nothing is recomputed here.

    Per page: fill the background, then for each renderable panel in
    (z_index, panel_index) order: panel background, artwork (cover-fit)
    or placeholder, bubbles with text, border. Finally the optional page
    number.

Key Functions:
    - compose_page_image(): Synchronous wrapper around Compositor.compose()
    - cover_fit(): Scale-to-cover with centre crop

Key Classes:
    - CompositorConfig: Colours, text settings and scale
    - Compositor: One page-render session with its image cache

Dependencies:
    - PIL: Raster drawing
    - compositor.images: ImageLoader
    - compositor.shapes / compositor.text: Drawing helpers
    - layout.page_renderer: panel_render_order

Used By:
    - compositor.export: Image and PDF export
    - cli: `render` command
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageOps

from mangakit.bubbles.styles import get_bubble_style
from mangakit.core.models import PixelRect, Point, RenderedBubble, RenderedPage, RenderedPanel
from mangakit.layout.page_renderer import panel_render_order

from .images import DEFAULT_FETCH_TIMEOUT, ImageLoader, ImageLoadError
from .shapes import draw_border, draw_bubble, draw_tail
from .text import calculate_center_position, calculate_font_size, draw_wrapped_text, load_font

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositorConfig:
    """
    Configuration for page compositing (immutable).

    Attributes:
        page_background: Page fill colour
        panel_background: Fill behind every panel
        placeholder_fill: Fill for panels whose artwork failed to load
        placeholder_text_color: "Panel N" label colour
        placeholder_font_size: "Panel N" label size
        border_color: Panel border colour
        double_border_inset: Inset of the second stroke of a double border
        page_number_color: Page number colour
        page_number_font_size: Page number size
        page_number_bottom_offset: Gap between page number and page bottom
        text_padding: Horizontal room subtracted from the bubble width for wrapping
        line_height_factor: Line height as a multiple of the font size
        min_font_size / max_font_size: Bubble text size bounds
        fetch_timeout: HTTP timeout per image (seconds)
        show_page_number: Draw RenderedPage.page_number when set
        scale: Output pixels per layout pixel (export quality)
    """

    page_background: str = "#FFFFFF"
    panel_background: str = "#F5F5F5"
    placeholder_fill: str = "#E0E0E0"
    placeholder_text_color: str = "#999999"
    placeholder_font_size: int = 14
    border_color: str = "#000000"
    double_border_inset: float = 3
    page_number_color: str = "#666666"
    page_number_font_size: int = 14
    page_number_bottom_offset: float = 10
    text_padding: float = 20
    line_height_factor: float = 1.2
    min_font_size: float = 12
    max_font_size: float = 24
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    show_page_number: bool = False
    scale: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.scale <= 0:
            raise ValueError(f"scale must be positive: {self.scale}")
        if self.min_font_size <= 0 or self.min_font_size > self.max_font_size:
            raise ValueError(
                f"Invalid font size bounds: {self.min_font_size}-{self.max_font_size}"
            )
        if self.line_height_factor <= 0:
            raise ValueError(f"line_height_factor must be positive: {self.line_height_factor}")
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive: {self.fetch_timeout}")


def cover_fit(image: Image.Image, width: int, height: int) -> Image.Image:
    """
    Scale `image` to fully cover width x height, centre-cropping the
    overflowing axis.
    """
    return ImageOps.fit(
        image,
        (width, height),
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )


def _scaled(rect: PixelRect, scale: float) -> PixelRect:
    if scale == 1:
        return rect
    return PixelRect(rect.x * scale, rect.y * scale, rect.width * scale, rect.height * scale)


def _scaled_point(point: Optional[Point], scale: float) -> Optional[Point]:
    if point is None or scale == 1:
        return point
    return Point(point.x * scale, point.y * scale)


def _pixel_box(rect: PixelRect) -> tuple[int, int, int, int]:
    """Rounded (left, top, right, bottom) for pasting."""
    return (round(rect.x), round(rect.y), round(rect.right), round(rect.bottom))


class Compositor:
    """
    Draws RenderedPages, caching decoded artwork by URL.

    One instance is one page-render session: a second compose() of the
    same page reuses every image decoded by the first. Distinct instances
    share nothing unless given the same cache dict.

    Example:
        >>> compositor = Compositor()
        >>> image = asyncio.run(compositor.compose(render_page(page)))
        >>> image.size
        (1200, 1800)
    """

    def __init__(
        self,
        config: Optional[CompositorConfig] = None,
        *,
        image_cache: Optional[dict[str, Image.Image]] = None,
    ):
        self.config = config or CompositorConfig()
        self.loader = ImageLoader(image_cache, timeout=self.config.fetch_timeout)

    @property
    def image_cache(self) -> dict[str, Image.Image]:
        return self.loader.cache

    async def compose(
        self,
        rendered: RenderedPage,
        *,
        page_number: Optional[int] = None,
    ) -> Image.Image:
        """
        Draw a page.

        Never raises for missing artwork, bubbles or panels: failed images
        become placeholders (logged as warnings), non-renderable panels
        are skipped.

        Args:
            rendered: Page geometry from render_page()
            page_number: Label to draw; defaults to rendered.page_number
                when config.show_page_number is set

        Returns:
            RGB image of the page
        """
        start = time.perf_counter()
        scale = self.config.scale
        size = (max(1, round(rendered.width * scale)), max(1, round(rendered.height * scale)))
        canvas = Image.new("RGB", size, self.config.page_background)
        draw = ImageDraw.Draw(canvas)

        panels = []
        for panel in panel_render_order(rendered):
            if panel.is_renderable:
                panels.append(panel)
            else:
                logger.debug(f"Skipping non-renderable panel {panel.id}")

        urls = [p.image_url for p in panels if p.image_url]
        images = await self.loader.load_many(urls)

        for panel in panels:
            artwork = images.get(panel.image_url) if panel.image_url else None
            self._draw_panel(canvas, draw, panel, artwork)

        if page_number is None and self.config.show_page_number:
            page_number = rendered.page_number
        if page_number is not None:
            self._draw_page_number(draw, size, page_number)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Composed page {rendered.page_id}: {len(panels)} panels in {elapsed_ms:.0f}ms"
        )
        return canvas

    # -------------------------------------------------------------------------
    # Panels
    # -------------------------------------------------------------------------

    def _draw_panel(
        self,
        canvas: Image.Image,
        draw: ImageDraw.ImageDraw,
        panel: RenderedPanel,
        artwork: Union[Image.Image, ImageLoadError, None],
    ) -> None:
        scale = self.config.scale
        box = _scaled(panel.absolute, scale)
        draw.rectangle(box.as_box(), fill=self.config.panel_background)

        if isinstance(artwork, ImageLoadError):
            logger.warning(f"Panel {panel.id}: {artwork}")
            self._draw_placeholder(draw, box, panel.panel_index)
        elif artwork is not None:
            self._draw_artwork(canvas, box, artwork)

        for bubble in panel.bubbles:
            self._draw_bubble(draw, bubble)

        draw_border(
            draw,
            box,
            panel.border_style,
            panel.border_width * scale,
            color=self.config.border_color,
            double_inset=self.config.double_border_inset * scale,
        )

    def _draw_artwork(self, canvas: Image.Image, box: PixelRect, artwork: Image.Image) -> None:
        left, top, right, bottom = _pixel_box(box)
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return
        fitted = cover_fit(artwork, width, height)
        if fitted.mode == "RGBA":
            canvas.paste(fitted, (left, top), fitted)
        else:
            canvas.paste(fitted.convert("RGB"), (left, top))

    def _draw_placeholder(self, draw: ImageDraw.ImageDraw, box: PixelRect, panel_index: int) -> None:
        draw.rectangle(box.as_box(), fill=self.config.placeholder_fill)
        label = f"Panel {panel_index + 1}"
        font = load_font(round(self.config.placeholder_font_size * self.config.scale))
        position = calculate_center_position(box.as_box(), label, font, draw)
        draw.text(position, label, fill=self.config.placeholder_text_color, font=font)

    # -------------------------------------------------------------------------
    # Bubbles
    # -------------------------------------------------------------------------

    def _draw_bubble(self, draw: ImageDraw.ImageDraw, bubble: RenderedBubble) -> None:
        scale = self.config.scale
        rect = _scaled(bubble.rect, scale)
        if not rect.is_renderable:
            logger.debug(f"Skipping non-renderable bubble {bubble.id}")
            return

        style = get_bubble_style(bubble.type)
        style_scaled = style
        if scale != 1:
            style_scaled = replace(style, outline_width=style.outline_width * scale)

        draw_tail(draw, rect, style_scaled, bubble.tail_direction, _scaled_point(bubble.tail_target, scale))
        draw_bubble(draw, rect, style_scaled)

        text = style.transform_text(bubble.text)
        if not text.strip():
            return
        font_size = calculate_font_size(
            rect.width,
            rect.height,
            len(text),
            min_size=self.config.min_font_size * scale,
            max_size=self.config.max_font_size * scale,
        )
        font = load_font(round(font_size), style.bold)
        draw_wrapped_text(
            draw,
            text,
            rect,
            font,
            font_size,
            fill=style.text_color,
            padding=self.config.text_padding * scale,
            line_height_factor=self.config.line_height_factor,
        )

    # -------------------------------------------------------------------------
    # Page label
    # -------------------------------------------------------------------------

    def _draw_page_number(
        self,
        draw: ImageDraw.ImageDraw,
        size: tuple[int, int],
        page_number: int,
    ) -> None:
        scale = self.config.scale
        label = str(page_number)
        font = load_font(round(self.config.page_number_font_size * scale))
        left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
        x = (size[0] - (right - left)) / 2 - left
        y = size[1] - self.config.page_number_bottom_offset * scale - bottom
        draw.text((x, y), label, fill=self.config.page_number_color, font=font)


def compose_page_image(
    rendered: RenderedPage,
    *,
    config: Optional[CompositorConfig] = None,
    image_cache: Optional[dict[str, Image.Image]] = None,
    page_number: Optional[int] = None,
) -> Image.Image:
    """
    Compose a page from synchronous code.

    Runs Compositor.compose() in a fresh event loop; do not call from
    inside a running loop (await Compositor.compose() there instead).
    """
    compositor = Compositor(config, image_cache=image_cache)
    return asyncio.run(compositor.compose(rendered, page_number=page_number))

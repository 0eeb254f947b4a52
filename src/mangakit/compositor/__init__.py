"""
Module: compositor

Purpose:
    Raster output: draws RenderedPage trees with PIL, loads panel
    artwork asynchronously, and exports PNG/JPEG/PDF files.

Key Modules:
    - compositor: Compositor and compose_page_image()
    - images: Async image loading with a per-session cache
    - shapes: Bubble bodies, tails and borders
    - text: Font sizing and word wrap
    - export: File output

Dependencies:
    - PIL: Drawing and encoding
    - aiohttp / aiofiles: Artwork fetch
    - reportlab: PDF output
"""

from .compositor import Compositor, CompositorConfig, compose_page_image, cover_fit
from .export import (
    QUALITY_SCALES,
    export_page_image,
    export_pdf,
    generate_thumbnail,
    quality_scale,
)
from .images import ImageLoader, ImageLoadError

__all__ = [
    "Compositor",
    "CompositorConfig",
    "compose_page_image",
    "cover_fit",
    "QUALITY_SCALES",
    "export_page_image",
    "export_pdf",
    "generate_thumbnail",
    "quality_scale",
    "ImageLoader",
    "ImageLoadError",
]

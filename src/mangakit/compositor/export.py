"""
Module: compositor.export

Purpose:
    Write composed page rasters to disk: PNG/JPEG files, thumbnails and
    multi-page PDFs (one PDF page per raster, sized from the raster at
    the given DPI).

Key Functions:
    - export_page_image(): PNG or JPEG file
    - generate_thumbnail(): Fixed-width preview
    - export_pdf(): Multi-page PDF via ReportLab
    - quality_scale(): Compositor scale for a quality preset

Dependencies:
    - PIL: Raster encoding and resizing
    - reportlab: PDF generation

Used By:
    - cli: `render` command
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

DEFAULT_DPI = 300
JPEG_QUALITY = 95
THUMBNAIL_WIDTH = 200

# Output pixels per layout pixel
QUALITY_SCALES = {
    "high": 2.0,
    "medium": 1.5,
    "low": 1.0,
}

IMAGE_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}


def quality_scale(quality: str) -> float:
    """
    Compositor scale for a quality preset.

    Raises:
        ValueError: If quality is not high, medium or low
    """
    try:
        return QUALITY_SCALES[quality]
    except KeyError:
        raise ValueError(
            f"Invalid quality {quality!r}. Must be one of: {', '.join(QUALITY_SCALES)}"
        ) from None


def export_page_image(
    image: Image.Image,
    output_path: Path,
    fmt: str = "png",
    *,
    jpeg_quality: int = JPEG_QUALITY,
) -> Path:
    """
    Save a composed page as PNG or JPEG.

    Args:
        image: Composed page
        output_path: Destination file
        fmt: "png", "jpg" or "jpeg"
        jpeg_quality: JPEG encoder quality (ignored for PNG)

    Returns:
        The path written

    Raises:
        ValueError: If fmt is not supported
    """
    pil_format = IMAGE_FORMATS.get(fmt.lower())
    if pil_format is None:
        raise ValueError(f"Invalid format {fmt!r}. Must be png, jpg, or jpeg")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if pil_format == "JPEG":
        image.convert("RGB").save(output_path, format="JPEG", quality=jpeg_quality)
    else:
        image.save(output_path, format="PNG")

    logger.info(f"Exported {image.width}x{image.height} {pil_format} to {output_path}")
    return output_path


def generate_thumbnail(image: Image.Image, width: int = THUMBNAIL_WIDTH) -> Image.Image:
    """
    Downscale a page to `width`, keeping its aspect ratio.

    Example:
        >>> generate_thumbnail(Image.new("RGB", (1200, 1800))).size
        (200, 300)
    """
    if width <= 0:
        raise ValueError(f"Thumbnail width must be positive: {width}")
    height = max(1, round(width * image.height / image.width))
    return image.resize((width, height), Image.Resampling.LANCZOS)


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """Convert PIL image to ReportLab ImageReader."""
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: float, dpi: int = DEFAULT_DPI) -> float:
    """Convert pixels to PDF points (1/72 inch)."""
    return px * 72.0 / dpi


def export_pdf(
    images: Sequence[Image.Image],
    output_path: Path,
    *,
    dpi: int = DEFAULT_DPI,
) -> Path:
    """
    Write pages to a PDF, one page per image, each filling its page.

    Args:
        images: Composed pages in reading order
        output_path: Destination PDF
        dpi: Pixel density used to size PDF pages

    Returns:
        The path written

    Example:
        >>> export_pdf([page_1, page_2], Path("out/chapter.pdf"))
    """
    if dpi <= 0:
        raise ValueError(f"dpi must be positive: {dpi}")
    if not images:
        logger.warning("No pages given, creating empty PDF")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(output_path))
    for image in images:
        width_pt = _px_to_pt(image.width, dpi)
        height_pt = _px_to_pt(image.height, dpi)
        c.setPageSize((width_pt, height_pt))
        c.drawImage(_pil_to_reader(image), 0, 0, width=width_pt, height=height_pt)
        c.showPage()
    c.save()

    logger.info(f"Rendered {len(images)} pages to {output_path}")
    return output_path

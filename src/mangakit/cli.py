"""
Module: cli

Purpose:
    Command line entry point.

    mangakit templates [--json]
        List the layout template catalog.
    mangakit layout PAGE.json [-o OUT.json]
        Resolve page geometry and print (or write) the RenderedPage JSON.
    mangakit render PAGE.json -o OUT.(png|jpg|pdf) [--page-number N]
                   [--quality high|medium|low] [--thumbnail PATH]
        Compose the page and export it.

Exit codes:
    0 on success, 1 when the page cannot be loaded or names an unknown
    layout template.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from mangakit import __version__
from mangakit.compositor import (
    CompositorConfig,
    compose_page_image,
    export_page_image,
    export_pdf,
    generate_thumbnail,
    quality_scale,
)
from mangakit.compositor.export import QUALITY_SCALES
from mangakit.core.schemas import RecordValidationError
from mangakit.core.utils import load_page_json, save_rendered_page_json
from mangakit.layout import TemplateNotFoundError, list_all, render_page

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mangakit",
        description="Manga page layout and speech bubble composition",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    templates = subparsers.add_parser("templates", help="List layout templates")
    templates.add_argument("--json", action="store_true", help="Print the catalog as JSON")

    layout = subparsers.add_parser("layout", help="Resolve page geometry to JSON")
    layout.add_argument("page", type=Path, help="Page document (JSON)")
    layout.add_argument("-o", "--output", type=Path, help="Write JSON here instead of stdout")
    layout.add_argument("--no-validate", action="store_true", help="Skip schema validation")

    render = subparsers.add_parser("render", help="Compose a page to PNG, JPEG or PDF")
    render.add_argument("page", type=Path, help="Page document (JSON)")
    render.add_argument("-o", "--output", type=Path, required=True,
                        help="Output file (.png, .jpg, .jpeg or .pdf)")
    render.add_argument("--page-number", type=int, help="Draw this page number label")
    render.add_argument("--quality", choices=list(QUALITY_SCALES), default="low",
                        help="Output scale preset (default: low, 1:1)")
    render.add_argument("--thumbnail", type=Path, help="Also write a 200px wide PNG thumbnail")
    render.add_argument("--no-validate", action="store_true", help="Skip schema validation")
    return parser


def _cmd_templates(args: argparse.Namespace) -> int:
    templates = list_all()
    if args.json:
        print(json.dumps([t.to_dict() for t in templates], indent=2))
        return 0
    for template in templates:
        tags = ", ".join(template.tags)
        print(f"{template.id:<22} {template.panel_count} panels  {template.name}  [{tags}]")
    return 0


def _cmd_layout(args: argparse.Namespace) -> int:
    page = load_page_json(args.page, validate=not args.no_validate)
    rendered = render_page(page)
    if args.output:
        save_rendered_page_json(rendered, args.output)
        logger.info(f"Wrote layout for page {page.id} to {args.output}")
    else:
        print(json.dumps(rendered.to_dict(), indent=2))
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    suffix = args.output.suffix.lower().lstrip(".")
    if suffix not in ("png", "jpg", "jpeg", "pdf"):
        print(f"Error: unsupported output format '.{suffix}'", file=sys.stderr)
        return 1

    page = load_page_json(args.page, validate=not args.no_validate)
    rendered = render_page(page)
    config = CompositorConfig(scale=quality_scale(args.quality))
    image = compose_page_image(rendered, config=config, page_number=args.page_number)

    if suffix == "pdf":
        export_pdf([image], args.output)
    else:
        export_page_image(image, args.output, suffix)

    if args.thumbnail:
        export_page_image(generate_thumbnail(image), args.thumbnail, "png")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    commands = {
        "templates": _cmd_templates,
        "layout": _cmd_layout,
        "render": _cmd_render,
    }
    try:
        return commands[args.command](args)
    except TemplateNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RecordValidationError as e:
        location = f" at {e.path}" if e.path else ""
        print(f"Error: invalid page document{location}: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: {args.page} is not valid JSON: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Serialization Utilities

Provides to/from JSON utilities for page documents and rendered output.

- Input: a page document is one JSON object holding the page fields and
  its nested panels (each with nested bubbles).
- Output: RenderedPage.to_dict() written as JSON, consumed by editor
  overlays and other layout-metadata clients.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.records import Page
from ..models.rendered import RenderedPage
from ..schemas.validator import validate_page


def deserialize_page(
    data: dict[str, Any],
    *,
    validate: bool = True,
) -> Page:
    """
    Deserialize a Page (with its panels and bubbles) from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the page schema first

    Returns:
        Page instance

    Raises:
        RecordValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_page(data)
    return Page.from_dict(data)


def load_page_json(path: Path, *, validate: bool = True) -> Page:
    """
    Load a page document from a JSON file.

    Args:
        path: Path to the JSON file
        validate: Whether to validate against the page schema

    Returns:
        Page instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not valid JSON
        RecordValidationError: If the document fails validation
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return deserialize_page(data, validate=validate)


def serialize_rendered_page(rendered: RenderedPage) -> dict[str, Any]:
    """Serialize a RenderedPage to a JSON-ready dictionary."""
    return rendered.to_dict()


def save_rendered_page_json(rendered: RenderedPage, path: Path) -> None:
    """
    Save a RenderedPage as pretty-printed JSON.

    Args:
        rendered: Rendered page to write
        path: Output file path (parent directories are created)
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_rendered_page(rendered), f, indent=2)

"""
Schema Validation Utilities

Validates untrusted page documents (page + nested panels + nested
bubbles) before they are turned into records.

Records are lenient by construction: every geometry field is optional.
The schema only rejects documents that are not syntactically valid
(wrong types, unknown enum tags, negative margins), so that anything
passing validation is guaranteed to render.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class RecordValidationError(Exception):
    """Raised when a page document fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_page(data: dict[str, Any]) -> None:
    """
    Validate a page document against the page schema.

    Args:
        data: Page dictionary, optionally with nested panels and bubbles

    Raises:
        RecordValidationError: If data is invalid. `errors` lists every
            violation found, `path` points at the first one.
    """
    if not isinstance(data, dict):
        raise RecordValidationError(
            f"Page document must be an object, got {type(data).__name__}"
        )

    schema = _load_schema("page")
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        raise RecordValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )

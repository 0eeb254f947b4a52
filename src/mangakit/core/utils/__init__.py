"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    deserialize_page,
    load_page_json,
    serialize_rendered_page,
    save_rendered_page_json,
)

__all__ = [
    "deserialize_page",
    "load_page_json",
    "serialize_rendered_page",
    "save_rendered_page_json",
]

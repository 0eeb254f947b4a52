"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_page,
    RecordValidationError,
)

__all__ = [
    "validate_page",
    "RecordValidationError",
]

"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_toc_payload,
    ValidationError,
    TOC_SCHEMA_VERSION,
)

__all__ = [
    "validate_toc_payload",
    "ValidationError",
    "TOC_SCHEMA_VERSION",
]

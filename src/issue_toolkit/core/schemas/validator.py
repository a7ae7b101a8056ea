"""
Schema Validation Utilities

Validates inbound TOC payloads before deserialization.

Two levels:
- basic (default): required keys and types that deserialization relies on
- strict: full JSON Schema validation with jsonschema against
  toc.schema.json

Page ranges with start > end or out-of-document bounds are NOT
validation errors; reconciliation corrects them and records a warning.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
TOC_SCHEMA_VERSION = 1


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


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_toc_payload(data: Any, *, strict: bool = False) -> None:
    """
    Validate a TOC payload: {"issue": {...}, "articles": [...]}.

    Args:
        data: Parsed JSON
        strict: If True, also validate against the full JSON Schema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("TOC payload must be an object", path="")

    missing = [f for f in ("issue", "articles") if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    version = data.get("schema_version", TOC_SCHEMA_VERSION)
    if version != TOC_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported TOC schema version: {version} (expected {TOC_SCHEMA_VERSION})",
            path="schema_version"
        )

    _validate_issue(data["issue"])

    articles = data["articles"]
    if not isinstance(articles, list):
        raise ValidationError("articles must be a list", path="articles")
    for i, article in enumerate(articles):
        _validate_article(article, f"articles[{i}]")

    if strict:
        schema = _load_schema("toc")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message]
            ) from e


def _validate_issue(issue: Any) -> None:
    if not isinstance(issue, dict):
        raise ValidationError("issue must be an object", path="issue")

    month = issue.get("month")
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise ValidationError(
            f"Invalid month: {month!r} (must be 1-12)",
            path="issue.month"
        )

    year = issue.get("year")
    if not isinstance(year, int) or isinstance(year, bool):
        raise ValidationError(
            f"Invalid year: {year!r} (must be an integer)",
            path="issue.year"
        )


def _validate_article(article: Any, path: str) -> None:
    if not isinstance(article, dict):
        raise ValidationError("article must be an object", path=path)

    title = article.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(
            f"Invalid title: {title!r} (must be a non-empty string)",
            path=f"{path}.title"
        )

    tags = article.get("tags", [])
    if not isinstance(tags, list):
        raise ValidationError("tags must be a list", path=f"{path}.tags")

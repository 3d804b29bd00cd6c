"""Slug helpers for record identifiers."""

import re
import uuid

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase *value* and collapse anything non-alphanumeric into hyphens."""
    return _NON_SLUG.sub("-", value.lower()).strip("-")


def unique_slug(value: str, fallback: str = "item") -> str:
    """Slugify *value* and append a short random suffix."""
    return f"{slugify(value) or fallback}-{uuid.uuid4().hex[:8]}"

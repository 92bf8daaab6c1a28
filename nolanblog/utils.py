"""Utility functions for the blog tooling.

String and path helpers shared by the config and content modules.

Key functions:
    slugify: Convert filenames and titles to URL slugs.
    coerce_datetime: Normalise YAML dates and date strings to naive datetimes.
    first_paragraph: First prose paragraph of a markdown body.
    split_tags: Normalise a front-matter tags value.
    is_markdown: Check if a path is a Markdown file.
    is_absolute_url: Check that a string is an absolute http(s) URL.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from pathlib import Path
from urllib.parse import urlparse


def _strip_date_prefix(name: str) -> str:
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return "-".join(parts[3:])
    return name


def slugify(name: str) -> str:
    """Convert filename (without extension) or title to slug, dropping date prefix.

    Args:
        name: Filename stem or free text.

    Returns:
        URL-friendly slug.
    """
    cleaned = _strip_date_prefix(name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "untitled"


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def coerce_datetime(value) -> datetime | None:
    """Normalise a front-matter date value to a naive datetime.

    PyYAML already turns ``2020-01-20`` into a ``date``; quoted values
    arrive as strings and are parsed as ISO dates. Values with a UTC offset
    are converted to UTC so every post date compares with every other.

    Returns:
        datetime, or None if the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return _naive_utc(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None
    return None


def first_paragraph(text: str, limit: int = 160) -> str:
    """Extract and clean the first prose paragraph from markdown text.

    Headings, images, code fences and rules are skipped. Whitespace is
    collapsed and the result truncated to ``limit`` characters.
    """
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "```", "---", "<")):
            continue
        collapsed = " ".join(para.split())
        return collapsed[:limit]
    return ""


def split_tags(value) -> list[str]:
    """Normalise a front-matter tags value to a list of unique tag names.

    Raises:
        ValueError: If the value is neither a list nor a string.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise ValueError("tags must be a list or comma separated string")
    seen: list[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file (case-insensitive .md)."""
    return path.suffix.lower() == ".md"


def is_absolute_url(value: str) -> bool:
    """Check that a string is an absolute http(s) URL with a host.

    Examples:
        >>> is_absolute_url("https://twitter.com/smnolan")
        True

        >>> is_absolute_url("twitter.com/smnolan")
        False
    """
    if not isinstance(value, str) or not value or value != value.strip():
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)

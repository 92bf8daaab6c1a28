"""Metadata extractors for blog posts.

The front-matter block is parsed once by ``extract_frontmatter``; each
extractor then reads one piece of post metadata from the parsed mapping and
the markdown body, and implements the MetadataExtractor protocol.
CompositeMetadataExtractor merges their results.

Key classes:
- TitleExtractor: Required front-matter ``title``.
- DateExtractor: Required front-matter ``date``.
- TagExtractor: Optional front-matter ``tags``.
- DraftExtractor: Optional front-matter ``draft`` flag.
- DescriptionExtractor: Excerpt from front-matter or first paragraph.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .utils import coerce_datetime, first_paragraph, split_tags

FRONTMATTER_RE = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)


class FrontmatterError(ValueError):
    """Raised when front-matter is present but unusable."""


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML front-matter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front-matter dict, remaining content). Content without a
        front-matter block yields an empty dict and the text unchanged.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"invalid front-matter YAML: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("front-matter must be a mapping")
    return data, text[match.end() :]


def _missing(key: str) -> FrontmatterError:
    return FrontmatterError(f"front-matter missing required field(s): {key}")


class TitleExtractor:
    """Reads the required, non-empty front-matter ``title``."""

    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        if "title" not in frontmatter:
            raise _missing("title")
        title = frontmatter["title"]
        if not isinstance(title, str) or not title.strip():
            raise FrontmatterError("front-matter title must be a non-empty string")
        return {"title": title.strip()}


class DateExtractor:
    """Reads the required front-matter ``date`` as a naive datetime."""

    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        if "date" not in frontmatter:
            raise _missing("date")
        date = coerce_datetime(frontmatter["date"])
        if date is None:
            raise FrontmatterError(
                f"front-matter date is not a valid date: {frontmatter['date']!r}"
            )
        return {"date": date}


class TagExtractor:
    """Reads front-matter ``tags`` as a list or comma separated string."""

    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        try:
            return {"tags": split_tags(frontmatter.get("tags"))}
        except ValueError as exc:
            raise FrontmatterError(str(exc)) from exc


class DraftExtractor:
    """Reads the front-matter ``draft`` flag; only YAML booleans are accepted."""

    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        draft = frontmatter.get("draft", False)
        if draft is None:
            draft = False
        if not isinstance(draft, bool):
            raise FrontmatterError(f"draft must be true or false, got {draft!r}")
        return {"draft": draft}


class DescriptionExtractor:
    """Extracts the excerpt shown in post listings.

    Uses front-matter ``excerpt`` or ``description`` when set, otherwise the
    first prose paragraph of the body truncated to 160 characters.
    """

    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        for key in ("excerpt", "description"):
            value = frontmatter.get(key)
            if isinstance(value, str) and value.strip():
                return {"excerpt": " ".join(value.split())}
        return {"excerpt": first_paragraph(body)}


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Later extractors override keys set by earlier ones.
    """

    def __init__(self, extractors: list | None = None):
        if extractors is None:
            self._extractors = [
                TitleExtractor(),
                DateExtractor(),
                TagExtractor(),
                DraftExtractor(),
                DescriptionExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        self._extractors.append(extractor)

    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        """Run every extractor and merge the results.

        Raises:
            FrontmatterError: If an extractor rejects the front-matter.
        """
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(body, frontmatter, path))
        return result


default_metadata_extractor = CompositeMetadataExtractor()

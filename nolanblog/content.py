"""Blog post loading for the blog tooling.

This module reads markdown posts from ``content/posts``, validates their
front-matter and parses the body with mistune to collect headings and the
languages used in fenced code blocks. Rendering to HTML is left to the
build tool.

Key classes:
- Post: Dataclass representing a blog post.
- Heading: Dataclass representing a heading in a post body.
- PostLoader: Discovers post files and builds Post instances.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import mistune

from .extractors import (
    FrontmatterError,
    default_metadata_extractor,
    extract_frontmatter,
)
from .protocols import MetadataExtractor
from .utils import is_markdown, slugify

CONTENT_DIR = "content/posts"

_parse_markdown = mistune.create_markdown(
    renderer="ast", plugins=["strikethrough", "footnotes", "table", "url"]
)


class ContentError(Exception):
    """Invalid post with file context.

    Attributes:
        source_path: Path to the post that caused the error.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


@dataclass
class Heading:
    """A heading in a post body.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: Plain text of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


@dataclass
class Post:
    """A blog post with its metadata.

    Attributes:
        title: Post title from front-matter.
        date: Publication date from front-matter.
        slug: URL-friendly slug.
        body: Markdown body without the front-matter block.
        excerpt: Short summary for listings.
        tags: Tags from front-matter.
        draft: Whether the post is a draft.
        path: Path to the source file.
        frontmatter: Raw front-matter mapping.
        headings: Headings found in the body.
        code_languages: Languages of fenced code blocks, first-seen order.
    """

    title: str
    date: datetime
    slug: str
    body: str
    excerpt: str
    tags: list[str]
    draft: bool
    path: Path
    frontmatter: dict[str, Any] = field(default_factory=dict)
    headings: list[Heading] = field(default_factory=list)
    code_languages: list[str] = field(default_factory=list)


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


def _plain_text(tokens: list[dict[str, Any]]) -> str:
    parts = []
    for token in tokens:
        if "children" in token:
            parts.append(_plain_text(token["children"]))
        elif "raw" in token:
            parts.append(token["raw"])
    return "".join(parts)


def _walk(tokens: list[dict[str, Any]]):
    for token in tokens:
        yield token
        children = token.get("children")
        if isinstance(children, list):
            yield from _walk(children)


def parse_markdown(body: str) -> tuple[list[Heading], list[str]]:
    """Parse a markdown body.

    Args:
        body: Markdown source without front-matter.

    Returns:
        Tuple of (headings, fenced code block languages).
    """
    headings: list[Heading] = []
    languages: list[str] = []
    issued: set[str] = set()
    for token in _walk(_parse_markdown(body)):
        kind = token.get("type")
        if kind == "heading":
            text = _plain_text(token.get("children", [])).strip()
            base_id = _generate_heading_id(text) or "section"
            heading_id = base_id
            suffix = 0
            while heading_id in issued:
                suffix += 1
                heading_id = f"{base_id}-{suffix}"
            issued.add(heading_id)
            level = token.get("attrs", {}).get("level", 1)
            headings.append(Heading(id=heading_id, text=text, level=level))
        elif kind == "block_code":
            info = (token.get("attrs", {}).get("info") or "").strip()
            language = info.split()[0].lower() if info else ""
            if language and language not in languages:
                languages.append(language)
    return headings, languages


class PostLoader:
    """Discovers and loads posts from a content directory.

    Attributes:
        content_dir: Directory holding the markdown posts.
        metadata_extractor: Extractor used for post metadata.
    """

    def __init__(
        self,
        content_dir: Path,
        metadata_extractor: MetadataExtractor | None = None,
    ):
        self.content_dir = content_dir
        self.metadata_extractor = metadata_extractor or default_metadata_extractor

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List markdown files in the content directory.

        Files starting with ``_`` are drafts and only listed when requested.
        """
        if not self.content_dir.exists():
            return []
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            if path.is_dir() or not is_markdown(path):
                continue
            if path.name.startswith("_") and not include_drafts:
                continue
            files.append(path)
        return files

    def load(self, include_drafts: bool = False) -> list[Post]:
        """Load every post.

        Args:
            include_drafts: Whether to include draft posts.

        Returns:
            List of Post objects in filename order.

        Raises:
            ContentError: If any post is invalid.
        """
        posts = []
        for path in self.iter_files(include_drafts=include_drafts):
            post = self.parse(path)
            if post.draft and not include_drafts:
                continue
            posts.append(post)
        return posts

    def parse(self, path: Path) -> Post:
        """Build a Post from a markdown file.

        Raises:
            ContentError: If front-matter is missing or malformed, lacks
                ``title`` or ``date``, or has unusable ``tags`` or ``draft``.
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ContentError(path, f"not valid UTF-8: {exc}") from exc
        try:
            frontmatter, body = extract_frontmatter(raw)
            if not frontmatter:
                raise ContentError(path, "missing front-matter block")
            metadata = self.metadata_extractor.extract(body, frontmatter, path)
        except FrontmatterError as exc:
            raise ContentError(path, str(exc)) from exc

        headings, languages = parse_markdown(body)
        slug_source = frontmatter.get("slug")
        slug = slugify(str(slug_source or path.stem.lstrip("_")))

        return Post(
            title=metadata["title"],
            date=metadata["date"],
            slug=slug,
            body=body,
            excerpt=metadata.get("excerpt", ""),
            tags=metadata.get("tags", []),
            draft=metadata.get("draft", False) or path.name.startswith("_"),
            path=path,
            frontmatter=frontmatter,
            headings=headings,
            code_languages=languages,
        )


def parse_post(path: Path) -> Post:
    """Parse a single post file with the default extractors."""
    return PostLoader(path.parent).parse(path)

"""Whole-repository loading and checking.

This module ties the configuration, plugin registry and posts together.

Key functions:
- load_site: Load configuration and posts, stopping at the first error.
- check_site: Run every check and collect all problems.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .collections import PostCollection
from .config import CONFIG_FILENAME, ConfigError, SiteConfig, load_config
from .content import CONTENT_DIR, ContentError, Post, PostLoader
from .plugins import (
    PluginNotFoundError,
    PluginOptionsError,
    default_plugin_registry,
)
from .protocols import PluginResolver


@dataclass
class Site:
    """A loaded blog repository.

    Attributes:
        root: Project root directory.
        config: Site configuration.
        posts: Posts in the content directory.
    """

    root: Path
    config: SiteConfig
    posts: PostCollection


@dataclass
class Problem:
    """A single check failure with file context."""

    source_path: Path
    message: str


@dataclass
class CheckReport:
    """Result of check_site.

    Attributes:
        config: Parsed configuration, or None if it failed to load.
        posts: Posts that parsed successfully.
        problems: Every problem found.
    """

    config: SiteConfig | None = None
    posts: list[Post] = field(default_factory=list)
    problems: list[Problem] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


def load_site(project_root: Path, include_drafts: bool = False) -> Site:
    """Load the site configuration and posts.

    Raises:
        ConfigError: If ``blog.yaml`` is invalid.
        ContentError: If any post is invalid.
    """
    config = load_config(project_root)
    posts = PostLoader(project_root / CONTENT_DIR).load(include_drafts=include_drafts)
    return Site(root=project_root, config=config, posts=PostCollection(posts))


def check_site(
    project_root: Path,
    registry: PluginResolver | None = None,
    include_drafts: bool = True,
) -> CheckReport:
    """Run every repository check.

    Checks the configuration, resolves each plugin, parses each post and
    looks for duplicate slugs. Problems are collected rather than raised.

    Args:
        project_root: Root directory of the project.
        registry: Plugin resolver; defaults to the built-in registry.
        include_drafts: Whether draft posts are checked too.

    Returns:
        CheckReport listing every problem found.
    """
    resolver = registry or default_plugin_registry
    report = CheckReport()
    config_path = project_root / CONFIG_FILENAME

    try:
        report.config = load_config(project_root)
    except ConfigError as exc:
        report.problems.append(Problem(exc.source_path or config_path, exc.message))

    if report.config is not None:
        for activation in report.config.plugins:
            try:
                resolver.resolve(activation)
            except (PluginNotFoundError, PluginOptionsError) as exc:
                report.problems.append(Problem(config_path, exc.message))

    loader = PostLoader(project_root / CONTENT_DIR)
    files = loader.iter_files(include_drafts=include_drafts)
    if not files:
        report.problems.append(
            Problem(project_root / CONTENT_DIR, "no posts found")
        )
    seen: dict[str, Path] = {}
    for path in files:
        try:
            post = loader.parse(path)
        except ContentError as exc:
            report.problems.append(Problem(exc.source_path, exc.message))
            continue
        if post.slug in seen:
            other = seen[post.slug].name
            report.problems.append(
                Problem(path, f"duplicate slug {post.slug!r} (also {other})")
            )
        else:
            seen[post.slug] = path
        report.posts.append(post)
    return report

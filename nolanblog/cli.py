"""Command-line interface for the blog tooling.

Commands:
- check: Validate the configuration, plugins and posts.
- config: Print the normalised site configuration.
- posts: List posts, newest first.
- post: Create a new post interactively.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import ConfigError, dump_config, load_config
from .content import CONTENT_DIR, ContentError, PostLoader
from .utils import slugify, split_tags


@click.group()
@click.version_option(version=__version__, prog_name="nolanblog")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (defaults to the current directory)",
)
@click.pass_context
def cli(ctx: click.Context, root: Path | None):
    """Shane Nolan's blog tooling."""
    ctx.ensure_object(dict)
    ctx.obj["root"] = (root or Path.cwd()).resolve()


@cli.command()
@click.pass_context
def check(ctx: click.Context):
    """Validate blog.yaml, its plugins and every post."""
    project_root = ctx.obj["root"]
    from .site import check_site

    report = check_site(project_root)
    if not report.ok:
        click.echo(click.style("Check failed:", fg="red", bold=True), err=True)
        for problem in report.problems:
            rel_path = _relative(problem.source_path, project_root)
            click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
            click.echo(click.style(f"  Error: {problem.message}", fg="white"), err=True)
        raise SystemExit(1)
    plugins = len(report.config.plugins) if report.config else 0
    click.echo(f"OK: {plugins} plugins, {len(report.posts)} posts")


@cli.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Output format",
)
@click.pass_context
def config(ctx: click.Context, fmt: str):
    """Print the normalised site configuration."""
    project_root = ctx.obj["root"]
    try:
        site_config = load_config(project_root)
    except ConfigError as exc:
        _fail(exc.source_path, exc.message, project_root)
    click.echo(dump_config(site_config, fmt=fmt), nl=False)


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option("--tag", default=None, help="Only posts with this tag")
@click.pass_context
def posts(ctx: click.Context, drafts: bool, tag: str | None):
    """List posts, newest first."""
    project_root = ctx.obj["root"]
    from .collections import PostCollection

    try:
        loaded = PostLoader(project_root / CONTENT_DIR).load(include_drafts=drafts)
    except ContentError as exc:
        _fail(exc.source_path, exc.message, project_root)
    collection = PostCollection(loaded)
    if tag:
        collection = collection.with_tag(tag)
    for post in collection.sorted():
        marker = " (draft)" if post.draft else ""
        click.echo(f"{post.date:%Y-%m-%d}  {post.slug}  {post.title}{marker}")


@cli.command()
@click.pass_context
def post(ctx: click.Context):
    """Create a new post interactively."""
    project_root = ctx.obj["root"]
    content_dir = project_root / CONTENT_DIR

    title = questionary.text(
        "Post title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    tags = questionary.text(
        "Tags (comma separated, optional):",
        style=_questionary_style(),
    ).ask()
    if tags is None:
        raise click.Abort()

    draft = questionary.confirm(
        "Mark as draft?",
        default=False,
        style=_questionary_style(),
    ).ask()
    if draft is None:
        raise click.Abort()

    today = datetime.now()
    slug = slugify(title)
    target_path = content_dir / f"{today:%Y-%m-%d}-{slug}.md"
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {_relative(target_path, project_root)}"
        )
    existing = _get_existing_slugs(content_dir)
    if slug in existing:
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {existing[slug].name}"
        )

    content_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        _render_post(title, today, tags, draft), encoding="utf-8"
    )
    click.echo(f"Created {_relative(target_path, project_root)}")


def _render_post(title: str, date: datetime, tags: str, draft: bool) -> str:
    """Render the front-matter block of a new post."""
    frontmatter: dict = {"title": title, "date": date.date()}
    tag_list = split_tags(tags)
    if tag_list:
        frontmatter["tags"] = tag_list
    if draft:
        frontmatter["draft"] = True
    block = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    return f"---\n{block}---\n\n"


def _get_existing_slugs(folder: Path) -> dict[str, Path]:
    """Map slug to file for every post under a folder, drafts included.

    Posts that fail to parse fall back to their filename slug; ``check``
    reports them separately.
    """
    loader = PostLoader(folder)
    slugs: dict[str, Path] = {}
    for path in loader.iter_files(include_drafts=True):
        try:
            slug = loader.parse(path).slug
        except ContentError:
            slug = slugify(path.stem.lstrip("_"))
        slugs.setdefault(slug, path)
    return slugs


def _relative(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def _fail(source_path: Path | None, message: str, project_root: Path):
    click.echo(click.style("Error:", fg="red", bold=True), err=True)
    if source_path is not None:
        click.echo(
            click.style(f"  File: {_relative(source_path, project_root)}", fg="yellow"),
            err=True,
        )
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

import nolanblog.cli as cli_mod
from nolanblog import __version__
from nolanblog.cli import cli
from nolanblog.content import parse_post

CONFIG = {
    "plugins": [
        {"resolve": "blog-theme", "options": {}},
        {"resolve": "google-analytics", "options": {"trackingId": "UA-41769697-13"}},
    ],
    "siteMetadata": {
        "title": "Shane Nolan",
        "author": "Shane Nolan",
        "description": "Shane Nolan's blog.",
        "social": [{"name": "github", "url": "https://github.com/shanenolan"}],
    },
}


def create_project(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "blog.yaml").write_text(yaml.safe_dump(CONFIG, sort_keys=False), encoding="utf-8")
    posts = root / "content" / "posts"
    posts.mkdir(parents=True)
    (posts / "2020-01-20-clean-code-enums.md").write_text(
        "---\ntitle: Clean Code - Enums\ndate: 2020-01-20\ntags: [enums]\n---\n\nEnums.\n",
        encoding="utf-8",
    )
    (posts / "2019-11-05-naming.md").write_text(
        "---\ntitle: Naming Things\ndate: 2019-11-05\n---\n\nNames.\n",
        encoding="utf-8",
    )
    (posts / "_2020-02-01-draft.md").write_text(
        "---\ntitle: Draft\ndate: 2020-02-01\n---\n\nLater.\n",
        encoding="utf-8",
    )
    return root


class FakePrompt:
    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer


def fake_prompts(monkeypatch, texts, confirm=False):
    answers = iter(texts)
    monkeypatch.setattr(
        cli_mod.questionary, "text", lambda *args, **kwargs: FakePrompt(next(answers))
    )
    monkeypatch.setattr(
        cli_mod.questionary, "confirm", lambda *args, **kwargs: FakePrompt(confirm)
    )


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_ok(tmp_path):
    root = create_project(tmp_path / "blog")
    result = CliRunner().invoke(cli, ["--root", str(root), "check"])
    assert result.exit_code == 0
    assert "OK: 2 plugins, 3 posts" in result.output


def test_check_uses_cwd_and_reports_problems(monkeypatch, tmp_path):
    root = create_project(tmp_path / "blog")
    (root / "content" / "posts" / "2020-04-01-broken.md").write_text(
        "# No front-matter\n", encoding="utf-8"
    )
    monkeypatch.chdir(root)
    result = CliRunner().invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "Check failed" in result.output
    assert "content/posts/2020-04-01-broken.md" in result.output
    assert "missing front-matter block" in result.output


def test_config_prints_yaml_and_json(tmp_path):
    root = create_project(tmp_path / "blog")
    runner = CliRunner()

    result = runner.invoke(cli, ["--root", str(root), "config"])
    assert result.exit_code == 0
    assert yaml.safe_load(result.output) == CONFIG

    result = runner.invoke(cli, ["--root", str(root), "config", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output) == CONFIG


def test_config_reports_invalid_file(tmp_path):
    root = create_project(tmp_path / "blog")
    (root / "blog.yaml").write_text("plugins: []\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--root", str(root), "config"])
    assert result.exit_code == 1
    assert "missing key(s): siteMetadata" in result.output


def test_posts_lists_newest_first(tmp_path):
    root = create_project(tmp_path / "blog")
    runner = CliRunner()

    result = runner.invoke(cli, ["--root", str(root), "posts"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "2020-01-20  clean-code-enums  Clean Code - Enums",
        "2019-11-05  naming  Naming Things",
    ]

    result = runner.invoke(cli, ["--root", str(root), "posts", "--drafts"])
    assert result.output.splitlines()[0] == "2020-02-01  draft  Draft (draft)"

    result = runner.invoke(cli, ["--root", str(root), "posts", "--tag", "enums"])
    assert result.output.splitlines() == ["2020-01-20  clean-code-enums  Clean Code - Enums"]


def test_posts_reports_invalid_post(tmp_path):
    root = create_project(tmp_path / "blog")
    (root / "content" / "posts" / "2020-04-01-broken.md").write_text(
        "---\ndate: 2020-04-01\n---\n", encoding="utf-8"
    )
    result = CliRunner().invoke(cli, ["--root", str(root), "posts"])
    assert result.exit_code == 1
    assert "missing required field(s): title" in result.output


def test_post_creates_file(monkeypatch, tmp_path):
    root = create_project(tmp_path / "blog")
    fake_prompts(monkeypatch, ["Clean Code: Booleans", "clean-code, booleans"])

    result = CliRunner().invoke(cli, ["--root", str(root), "post"])
    assert result.exit_code == 0, result.output

    created = list((root / "content" / "posts").glob("*-clean-code-booleans.md"))
    assert len(created) == 1
    assert f"Created content/posts/{created[0].name}" in result.output

    post = parse_post(created[0])
    assert post.title == "Clean Code: Booleans"
    assert post.tags == ["clean-code", "booleans"]
    assert not post.draft
    assert post.date.strftime("%Y-%m-%d") == created[0].name[:10]


def test_post_draft_in_new_directory(monkeypatch, tmp_path):
    root = tmp_path / "empty"
    root.mkdir()
    fake_prompts(monkeypatch, ["First Post", ""], confirm=True)

    result = CliRunner().invoke(cli, ["--root", str(root), "post"])
    assert result.exit_code == 0, result.output
    created = next((root / "content" / "posts").glob("*.md"))
    post = parse_post(created)
    assert post.draft
    assert post.tags == []
    assert "tags" not in post.frontmatter


def test_post_rejects_existing_slug(monkeypatch, tmp_path):
    root = create_project(tmp_path / "blog")
    fake_prompts(monkeypatch, ["Clean Code Enums", ""])

    result = CliRunner().invoke(cli, ["--root", str(root), "post"])
    assert result.exit_code == 1
    assert "slug 'clean-code-enums' already exists" in result.output


def test_posts_sorts_mixed_timezone_dates(tmp_path):
    root = create_project(tmp_path / "blog")
    (root / "content" / "posts" / "2020-01-21-offset.md").write_text(
        "---\ntitle: Offset\ndate: 2020-01-21 10:00:00+01:00\n---\n\nLater.\n",
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["--root", str(root), "posts"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[:2] == [
        "2020-01-21  offset  Offset",
        "2020-01-20  clean-code-enums  Clean Code - Enums",
    ]


def test_post_rejects_slug_override_in_subdirectory(monkeypatch, tmp_path):
    root = create_project(tmp_path / "blog")
    archive = root / "content" / "posts" / "2019"
    archive.mkdir()
    (archive / "2019-06-01-old-name.md").write_text(
        "---\ntitle: Old Name\ndate: 2019-06-01\nslug: booleans\n---\n\nOld.\n",
        encoding="utf-8",
    )
    fake_prompts(monkeypatch, ["Booleans", ""])

    result = CliRunner().invoke(cli, ["--root", str(root), "post"])
    assert result.exit_code == 1
    assert "slug 'booleans' already exists: 2019-06-01-old-name.md" in result.output
    assert not list((root / "content" / "posts").glob("*-booleans.md"))


def test_post_aborts_on_cancel(monkeypatch, tmp_path):
    root = create_project(tmp_path / "blog")
    fake_prompts(monkeypatch, [None])

    result = CliRunner().invoke(cli, ["--root", str(root), "post"])
    assert result.exit_code == 1
    assert len(list((root / "content" / "posts").glob("*.md"))) == 3


def test_main_invokes_cli(monkeypatch):
    called = {}
    monkeypatch.setattr(cli_mod, "cli", lambda: called.setdefault("ran", True))
    cli_mod.main()
    assert called["ran"]


def test_module_main_entrypoint():
    from nolanblog.__main__ import main

    assert callable(main)

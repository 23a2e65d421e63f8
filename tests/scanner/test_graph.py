"""Tests for graph construction over a real project tree."""

from __future__ import annotations

from pathlib import Path

import pytest

from harnify.models import HarnessEdge
from harnify.scanner import graph as graph_module
from harnify.scanner import scan
from harnify.scanner.graph import resolve_reference
from tests._fixtures.repo_builder import RepoBuilder


def _sample_project(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "CLAUDE.md": """
                # Project

                See [the guide](./docs/guide.md) and `./AGENTS.md`.
            """,
            "AGENTS.md": "# Agents\n",
            "docs/guide.md": "# Guide\n",
            ".claude/skills/deploy.md": """
                ---
                name: deploy
                trigger: ship it
                ---
                Follow ../../docs/guide.md when deploying.
            """,
            ".claude/settings.json": '{"hooks": "./scripts/hook.js"}\n',
        }
    )


def test_scan_builds_files_and_reference_edges(repo_builder: RepoBuilder) -> None:
    _sample_project(repo_builder)

    graph = repo_builder.scan()

    assert graph.root_path == str(repo_builder.path().resolve())
    paths = [file.relative_path for file in graph.files]
    assert paths == [
        ".claude/settings.json",
        ".claude/skills/deploy.md",
        "AGENTS.md",
        "CLAUDE.md",
        "docs/guide.md",
    ]
    assert set(graph.edges) == {
        HarnessEdge(source="CLAUDE.md", target="AGENTS.md", type="references"),
        HarnessEdge(source="CLAUDE.md", target="docs/guide.md", type="references"),
        HarnessEdge(source=".claude/skills/deploy.md", target="docs/guide.md", type="references"),
    }


def test_scan_populates_file_metadata(repo_builder: RepoBuilder) -> None:
    _sample_project(repo_builder)

    graph = repo_builder.scan()
    files = {file.relative_path: file for file in graph.files}

    skill = files[".claude/skills/deploy.md"]
    assert skill.type == "skill"
    assert skill.frontmatter == {"name": "deploy", "trigger": "ship it"}
    assert skill.content.startswith("---\nname: deploy")
    assert skill.references == ("../../docs/guide.md",)
    assert skill.token_info.bytes == len(skill.content.encode("utf-8"))
    assert skill.path == str(repo_builder.path().resolve() / ".claude" / "skills" / "deploy.md")

    settings = files[".claude/settings.json"]
    assert settings.type == "settings"
    assert settings.frontmatter is None
    assert settings.references == ()

    assert graph.scanned_at.endswith("Z")
    assert files["CLAUDE.md"].last_modified.endswith("Z")


def test_scan_is_idempotent(repo_builder: RepoBuilder) -> None:
    _sample_project(repo_builder)

    first = repo_builder.scan().to_dict()
    second = repo_builder.scan().to_dict()
    first.pop("scannedAt")
    second.pop("scannedAt")

    assert first == second


def test_scan_skips_files_that_fail_to_read(
    repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    _sample_project(repo_builder)
    real_parse = graph_module.parse_file

    def _flaky_parse(path: str):
        if path.endswith("AGENTS.md"):
            raise PermissionError(13, "Permission denied", path)
        return real_parse(path)

    monkeypatch.setattr(graph_module, "parse_file", _flaky_parse)

    graph = repo_builder.scan()
    paths = [file.relative_path for file in graph.files]

    assert "AGENTS.md" not in paths
    assert "CLAUDE.md" in paths
    assert "docs/guide.md" in paths


def test_scan_missing_root_yields_empty_graph(tmp_path: Path) -> None:
    graph = scan(tmp_path / "missing")

    assert graph.files == ()
    assert graph.edges == ()
    assert graph.root_path == str((tmp_path / "missing").resolve())


def test_scan_rejects_non_path_root() -> None:
    with pytest.raises(TypeError):
        scan(42)  # type: ignore[arg-type]


def test_scan_with_include_home_tags_home_files(
    repo_builder: RepoBuilder, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo_builder.write({"CLAUDE.md": "# Project\n"})
    home = tmp_path / "home"
    (home / ".claude").mkdir(parents=True)
    (home / ".claude" / "CLAUDE.md").write_text("# Global\n", encoding="utf-8")
    monkeypatch.setenv("HOME", str(home))

    graph = repo_builder.scan(include_home=True)

    paths = [file.relative_path for file in graph.files]
    assert paths == ["CLAUDE.md", "~/.claude/CLAUDE.md"]
    assert [file.relative_path for file in graph.project_files()] == ["CLAUDE.md"]


def test_scan_honours_extra_exclusions(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"AGENTS.md": "# Root\n", "vendor/AGENTS.md": "# Vendored\n"})

    graph = repo_builder.scan(exclude_dirs=["vendor"])

    assert [file.relative_path for file in graph.files] == ["AGENTS.md"]


def test_resolve_reference_is_relative_to_root() -> None:
    assert resolve_reference("/p/.claude/skills/a.md", "../../docs/x.md", "/p") == "docs/x.md"
    assert resolve_reference("/p/CLAUDE.md", "./AGENTS.md", "/p") == "AGENTS.md"
    assert resolve_reference("/p/CLAUDE.md", "../outside.md", "/p") == "../outside.md"


def test_malformed_frontmatter_does_not_fail_the_scan(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "CLAUDE.md": "# Project\n",
            "docs/deep.md": "---\nk: " + "[" * 3000 + "]" * 3000 + "\n---\n# Deep\n",
            "docs/broken.md": "---\nkey: [unclosed\n---\n# Broken\n",
        }
    )

    graph = repo_builder.scan()
    files = {file.relative_path: file for file in graph.files}

    assert set(files) == {"CLAUDE.md", "docs/broken.md", "docs/deep.md"}
    assert files["docs/deep.md"].frontmatter is None
    assert files["docs/broken.md"].frontmatter is None


def test_unexpected_error_in_one_file_skips_only_that_file(
    repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    _sample_project(repo_builder)
    real_parse = graph_module.parse_file

    def _exploding_parse(path: str):
        if path.endswith("guide.md"):
            raise RuntimeError("unexpected parser failure")
        return real_parse(path)

    monkeypatch.setattr(graph_module, "parse_file", _exploding_parse)

    paths = [file.relative_path for file in repo_builder.scan().files]

    assert "docs/guide.md" not in paths
    assert paths == [".claude/settings.json", ".claude/skills/deploy.md", "AGENTS.md", "CLAUDE.md"]


def test_scan_preserves_crlf_content_and_byte_size(repo_builder: RepoBuilder) -> None:
    raw = b"# Project\r\n\r\n- Use pnpm\r\n"
    (repo_builder.path() / "CLAUDE.md").write_bytes(raw)

    (claude,) = repo_builder.scan().files

    assert claude.content == "# Project\r\n\r\n- Use pnpm\r\n"
    assert claude.token_info.bytes == len(raw) == 25


def test_reference_fragment_is_dropped_from_edge_target(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "CLAUDE.md": "Install via [guide](./docs/guide.md#install).\n",
            "docs/guide.md": "# Guide\n",
        }
    )

    graph = repo_builder.scan()

    assert graph.edges == (HarnessEdge(source="CLAUDE.md", target="docs/guide.md", type="references"),)
    assert resolve_reference("/p/CLAUDE.md", "./a.md#top", "/p") == "a.md"

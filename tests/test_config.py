"""Tests for harnify.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from harnify.config import (
    DEFAULT_CONTEXT_WINDOW,
    ConfigError,
    HarnifyConfig,
    LintConfig,
    load_config,
    resolve_context_window,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, HarnifyConfig)
    assert config.root == tmp_path.resolve()
    assert config.include_home is False
    assert config.exclude_dirs == []
    assert config.lint.context_window is None
    assert config.lint.model is None
    assert config.server.host == "127.0.0.1"
    assert config.server.port == 3847


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".harnify.yml"
    config_file.write_text(
        """
include_home: true
exclude_dirs:
  - vendor
  - third_party
lint:
  context_window: 128000
  model: gpt-4
server:
  host: "0.0.0.0"
  port: 4000
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.include_home is True
    assert config.exclude_dirs == ["vendor", "third_party"]
    assert config.lint == LintConfig(context_window=128_000, model="gpt-4")
    assert config.server.host == "0.0.0.0"
    assert config.server.port == 4000


def test_load_config_accepts_directory_or_file(tmp_path: Path) -> None:
    (tmp_path / ".harnify.yml").write_text("exclude_dirs: vendor\n", encoding="utf-8")

    assert load_config(tmp_path).exclude_dirs == ["vendor"]
    assert load_config(tmp_path / ".harnify.yml").exclude_dirs == ["vendor"]


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".harnify.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).server.port == 3847


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "lint: [unclosed\n",
        "lint:\n  context_window: 0\n",
        "lint:\n  model: gpt-99\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".harnify.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_resolve_context_window_precedence() -> None:
    config = LintConfig(context_window=50_000, model="gpt-4")

    assert resolve_context_window() == DEFAULT_CONTEXT_WINDOW
    assert resolve_context_window(config=LintConfig(model="gpt-4")) == 128_000
    assert resolve_context_window(config=config) == 50_000
    assert resolve_context_window(model="claude-sonnet", config=config) == 200_000
    assert resolve_context_window(context_window=1_000, model="gpt-4", config=config) == 1_000


def test_resolve_context_window_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        resolve_context_window(context_window=-5)
    with pytest.raises(ValueError, match="Unknown model"):
        resolve_context_window(model="gpt-99")

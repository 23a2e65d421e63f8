"""Tests for the lint engine and its console formatting."""

from __future__ import annotations

import pytest

from harnify.linter import (
    BUILTIN_RULES,
    NO_ISSUES_MESSAGE,
    format_lint_results,
    has_errors,
    lint,
    sort_by_severity,
)
from harnify.models import LintResult
from tests._fixtures.harness_files import FAKE_ROOT, make_file


def _noisy_files():
    return [
        make_file(".claude/skills/lonely.md", "skill", "# Lonely\n"),
        make_file("CLAUDE.md", "config", "- Keep functions small and focused\n", references=["./missing.md"]),
        make_file("AGENTS.md", "agent", "- Keep functions small and focused\n", tokens=9000),
    ]


def test_builtin_rules_run_in_fixed_order() -> None:
    assert list(BUILTIN_RULES) == [
        "dead-reference",
        "trigger-conflict",
        "override-shadow",
        "token-heavy",
        "orphan-skill",
        "duplicate-rule",
    ]


def test_lint_sorts_by_severity() -> None:
    results = lint(_noisy_files(), FAKE_ROOT)

    assert [result.severity for result in results] == ["error", "warning", "info", "info"]
    assert [result.rule for result in results] == [
        "dead-reference",
        "duplicate-rule",
        "token-heavy",
        "orphan-skill",
    ]


def test_lint_uses_explicit_context_window() -> None:
    files = [make_file("AGENTS.md", "agent", tokens=5000)]

    assert lint(files, FAKE_ROOT) == []
    assert [result.rule for result in lint(files, FAKE_ROOT, context_window=128_000)] == ["token-heavy"]


def test_lint_rejects_unknown_rules_and_bad_windows() -> None:
    with pytest.raises(ValueError, match="no-such-rule"):
        lint([], FAKE_ROOT, rules=["no-such-rule"])
    with pytest.raises(ValueError):
        lint([], FAKE_ROOT, context_window=0)


def test_lint_of_nothing_is_clean() -> None:
    assert lint([], FAKE_ROOT) == []


def test_sort_by_severity_is_stable() -> None:
    results = [
        LintResult(rule="a", severity="info", message="1", file="x"),
        LintResult(rule="b", severity="error", message="2", file="x"),
        LintResult(rule="c", severity="info", message="3", file="x"),
        LintResult(rule="d", severity="warning", message="4", file="x"),
    ]

    assert [result.rule for result in sort_by_severity(results)] == ["b", "d", "a", "c"]


def test_format_lint_results() -> None:
    results = [
        LintResult(rule="dead-reference", severity="error", message="Referenced file \"./x.md\" does not exist", file="CLAUDE.md"),
        LintResult(rule="token-heavy", severity="info", message="File uses ~7,000 tokens", file="AGENTS.md"),
    ]

    output = format_lint_results(results)

    assert output.splitlines() == [
        '  [E] CLAUDE.md: Referenced file "./x.md" does not exist (dead-reference)',
        "  [I] AGENTS.md: File uses ~7,000 tokens (token-heavy)",
        "",
        "2 issue(s): 1 error(s), 0 warning(s), 1 info(s)",
    ]
    assert has_errors(results)
    assert not has_errors(results[1:])


def test_format_without_results() -> None:
    assert format_lint_results([]) == NO_ISSUES_MESSAGE


def test_lint_result_to_dict_omits_missing_related_file() -> None:
    bare = LintResult(rule="r", severity="info", message="m", file="f")
    linked = LintResult(rule="r", severity="info", message="m", file="f", related_file="g")

    assert bare.to_dict() == {"rule": "r", "severity": "info", "message": "m", "file": "f"}
    assert linked.to_dict()["relatedFile"] == "g"

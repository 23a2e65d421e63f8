"""Lint engine: run the built-in rules and format their findings."""

from __future__ import annotations

import os
from typing import List, Optional, Sequence

from ..config import DEFAULT_CONTEXT_WINDOW
from ..logging import get_logger
from ..models import ERROR, INFO, SEVERITY_ORDER, WARNING, HarnessFile, LintResult
from .base import LintOptions, LintRule
from .rules import BUILTIN_RULES

logger = get_logger("linter")

NO_ISSUES_MESSAGE = "No lint issues found."

_SEVERITY_ICONS = {ERROR: "E", WARNING: "W", INFO: "I"}


def lint(
    files: Sequence[HarnessFile],
    root_path: str | os.PathLike[str],
    *,
    context_window: int = DEFAULT_CONTEXT_WINDOW,
    rules: Optional[Sequence[str]] = None,
) -> List[LintResult]:
    """Run lint rules over ``files`` and return findings sorted by severity.

    Errors come first, then warnings, then info; ties keep rule evaluation
    order. ``rules`` restricts evaluation to the named rule ids.
    """
    options = LintOptions(root_path=os.fspath(root_path), context_window=context_window)

    results: List[LintResult] = []
    for rule_id, rule in _select_rules(rules):
        findings = rule(files, options)
        logger.debug("Rule %s produced %d finding(s)", rule_id, len(findings))
        results.extend(findings)

    return sort_by_severity(results)


def _select_rules(names: Optional[Sequence[str]]) -> List[tuple[str, LintRule]]:
    if names is None:
        return list(BUILTIN_RULES.items())
    unknown = [name for name in names if name not in BUILTIN_RULES]
    if unknown:
        raise ValueError(f"Unknown lint rules requested: {', '.join(sorted(unknown))}")
    wanted = set(names)
    return [(name, rule) for name, rule in BUILTIN_RULES.items() if name in wanted]


def sort_by_severity(results: Sequence[LintResult]) -> List[LintResult]:
    """Stable sort: error, warning, info, then anything unrecognised."""
    fallback = len(SEVERITY_ORDER)
    return sorted(results, key=lambda result: SEVERITY_ORDER.get(result.severity, fallback))


def format_lint_results(results: Sequence[LintResult]) -> str:
    """Render findings for console output with a closing severity tally."""
    if not results:
        return NO_ISSUES_MESSAGE

    counts = {ERROR: 0, WARNING: 0, INFO: 0}
    lines: List[str] = []
    for result in results:
        if result.severity in counts:
            counts[result.severity] += 1
        icon = _SEVERITY_ICONS.get(result.severity, "I")
        lines.append(f"  [{icon}] {result.file}: {result.message} ({result.rule})")

    lines.append("")
    lines.append(
        f"{len(results)} issue(s): {counts[ERROR]} error(s), "
        f"{counts[WARNING]} warning(s), {counts[INFO]} info(s)"
    )
    return "\n".join(lines)


def has_errors(results: Sequence[LintResult]) -> bool:
    return any(result.severity == ERROR for result in results)


__all__ = [
    "BUILTIN_RULES",
    "LintOptions",
    "NO_ISSUES_MESSAGE",
    "format_lint_results",
    "has_errors",
    "lint",
    "sort_by_severity",
]

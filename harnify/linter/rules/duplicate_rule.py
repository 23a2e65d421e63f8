"""duplicate-rule (warning): the same bullet directive appears in several files."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence, Set

from ...models import AGENT, CONFIG, RULE, WARNING, HarnessFile, LintResult
from ..base import LintOptions

RULE_ID = "duplicate-rule"

DIRECTIVE_TYPES = frozenset({CONFIG, AGENT, RULE})

BULLET_PATTERN = re.compile(r"^[-*]\s+(.{10,})$")
MIN_DIRECTIVE_LENGTH = 10
MAX_QUOTE_LENGTH = 80


def duplicate_rule(files: Sequence[HarnessFile], options: LintOptions) -> List[LintResult]:
    directive_to_files: Dict[str, List[str]] = {}

    for file in files:
        if file.type not in DIRECTIVE_TYPES:
            continue
        # A directive repeated inside one file is not a cross-file duplicate.
        for directive in dict.fromkeys(extract_normalized_directives(file.content)):
            directive_to_files.setdefault(directive, []).append(file.relative_path)

    results: List[LintResult] = []
    reported: Set[str] = set()
    for directive, owners in directive_to_files.items():
        if len(owners) < 2:
            continue
        paths = sorted(owners)
        key = "|".join(paths) + ":" + directive
        if key in reported:
            continue
        reported.add(key)
        results.append(
            LintResult(
                rule=RULE_ID,
                severity=WARNING,
                file=paths[0],
                related_file=paths[1],
                message=(
                    f'Directive "{directive[:MAX_QUOTE_LENGTH]}" is duplicated in: '
                    f"{', '.join(paths)}"
                ),
            )
        )
    return results


def extract_normalized_directives(content: str) -> List[str]:
    """Return normalized bullet directives with meaningful content."""
    directives: List[str] = []
    for line in content.split("\n"):
        match = BULLET_PATTERN.match(line.strip())
        if match is None:
            continue
        normalized = normalize(match.group(1))
        if len(normalized) >= MIN_DIRECTIVE_LENGTH:
            directives.append(normalized)
    return directives


def normalize(text: str) -> str:
    """Lowercase, collapse whitespace and drop quote characters."""
    collapsed = re.sub(r"\s+", " ", text.lower())
    return re.sub(r"[`\"']", "", collapsed).strip()

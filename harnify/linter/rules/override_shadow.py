"""override-shadow (warning): a child CLAUDE.md restates a parent directive.

Only direct parent/child directories are compared; deeper nesting is not.
"""

from __future__ import annotations

import posixpath
import re
from typing import List, Optional, Sequence, Set, Tuple

from ...models import CONFIG, WARNING, HarnessFile, LintResult
from ..base import LintOptions

RULE_ID = "override-shadow"

PRIMARY_CONFIG_NAME = "claude.md"

IMPERATIVE_KEYWORDS: Tuple[str, ...] = (
    "IMPORTANT",
    "NEVER",
    "ALWAYS",
    "DO NOT",
    "MUST",
    "SHALL",
    "USE",
    "PREFER",
)

DIRECTIVE_BULLET_PATTERN = re.compile(
    r"^[-*]\s+(?:" + "|".join(IMPERATIVE_KEYWORDS) + r")", re.IGNORECASE
)
DIRECTIVE_HEADING_PATTERN = re.compile(
    r"^#{1,4}\s+(?:rules?|conventions?|requirements?)", re.IGNORECASE
)

MIN_SHARED_WORDS = 3
MIN_WORD_LENGTH = 4
MAX_QUOTE_LENGTH = 80


def override_shadow(files: Sequence[HarnessFile], options: LintOptions) -> List[LintResult]:
    configs = [
        file
        for file in files
        if file.type == CONFIG
        and posixpath.basename(file.relative_path).lower() == PRIMARY_CONFIG_NAME
    ]

    results: List[LintResult] = []
    for index, first in enumerate(configs):
        for second in configs[index + 1:]:
            pair = _parent_child(first, second)
            if pair is None:
                continue
            parent, child = pair
            parent_rules = extract_directives(parent.content)
            child_rules = extract_directives(child.content)
            for overlap in find_overlaps(parent_rules, child_rules):
                results.append(
                    LintResult(
                        rule=RULE_ID,
                        severity=WARNING,
                        file=child.relative_path,
                        related_file=parent.relative_path,
                        message=f'Child CLAUDE.md may override parent rule: "{overlap}"',
                    )
                )
    return results


def _parent_child(
    first: HarnessFile, second: HarnessFile
) -> Optional[Tuple[HarnessFile, HarnessFile]]:
    dir_first = posixpath.dirname(first.relative_path) or "."
    dir_second = posixpath.dirname(second.relative_path) or "."
    if _is_direct_child(dir_first, dir_second):
        return first, second
    if _is_direct_child(dir_second, dir_first):
        return second, first
    return None


def _is_direct_child(parent_dir: str, child_dir: str) -> bool:
    rel = posixpath.relpath(child_dir, parent_dir)
    return rel not in ("", ".") and not rel.startswith("..") and "/" not in rel


def extract_directives(content: str) -> List[str]:
    """Return lowercased directive-like lines: imperative bullets and rule headings."""
    directives: List[str] = []
    for line in content.split("\n"):
        trimmed = line.strip()
        if DIRECTIVE_BULLET_PATTERN.match(trimmed):
            directives.append(re.sub(r"^[-*]\s+", "", trimmed).lower())
        if DIRECTIVE_HEADING_PATTERN.match(trimmed):
            directives.append(re.sub(r"^#+\s+", "", trimmed).lower())
    return directives


def find_overlaps(parent_rules: Sequence[str], child_rules: Sequence[str]) -> List[str]:
    """Return child directives sharing enough significant words with a parent one."""
    overlaps: List[str] = []
    for child_rule in child_rules:
        child_words = _significant_words(child_rule)
        for parent_rule in parent_rules:
            if len(child_words & _significant_words(parent_rule)) >= MIN_SHARED_WORDS:
                overlaps.append(child_rule[:MAX_QUOTE_LENGTH])
                break
    return overlaps


def _significant_words(rule: str) -> Set[str]:
    return {word for word in rule.split() if len(word) >= MIN_WORD_LENGTH}

"""orphan-skill (info): a skill nothing else references or mentions."""

from __future__ import annotations

import posixpath
import re
from typing import List, Sequence

from ...models import INFO, SKILL, HarnessFile, LintResult
from ..base import LintOptions

RULE_ID = "orphan-skill"

_MARKDOWN_SUFFIX = re.compile(r"\.md$", re.IGNORECASE)


def orphan_skill(files: Sequence[HarnessFile], options: LintOptions) -> List[LintResult]:
    skills = [file for file in files if file.type == SKILL]
    others = [file for file in files if file.type != SKILL]

    results: List[LintResult] = []
    for skill in skills:
        if is_skill_referenced(skill, others):
            continue
        results.append(
            LintResult(
                rule=RULE_ID,
                severity=INFO,
                file=skill.relative_path,
                message=(
                    f'Skill "{skill.relative_path}" is not referenced or triggered '
                    "by any other harness file"
                ),
            )
        )
    return results


def skill_name(relative_path: str) -> str:
    """Return the skill's base name without its markdown extension."""
    return _MARKDOWN_SUFFIX.sub("", posixpath.basename(relative_path))


def is_skill_referenced(skill: HarnessFile, others: Sequence[HarnessFile]) -> bool:
    skill_path = skill.relative_path
    name = skill_name(skill_path)
    # Whole-token match: "deploy" must not count inside "deployment".
    name_pattern = re.compile(rf"(?<![\w-]){re.escape(name)}(?![\w-])") if name else None

    for file in others:
        for ref in file.references:
            if (
                ref == skill_path
                or ref == skill.path
                or ref.endswith(f"/{skill_path}")
                or (name and ref.endswith(f"{name}.md"))
            ):
                return True

        if skill_path in file.content:
            return True
        if name_pattern is not None and name_pattern.search(file.content):
            return True

    return False

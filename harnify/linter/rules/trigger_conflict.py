"""trigger-conflict (warning): two skills share the same trigger keyword."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from ...models import SKILL, WARNING, HarnessFile, LintResult
from ..base import LintOptions

RULE_ID = "trigger-conflict"

TRIGGER_LINE_PATTERN = re.compile(r"^(?:trigger|triggers?):\s*(.+)$", re.IGNORECASE | re.MULTILINE)


def trigger_conflict(files: Sequence[HarnessFile], options: LintOptions) -> List[LintResult]:
    """Report each normalized trigger declared by two or more skill files."""
    # Insertion order of both the dict and the lists follows first sighting.
    trigger_map: Dict[str, List[str]] = {}

    for skill in files:
        if skill.type != SKILL:
            continue
        for trigger in extract_triggers(skill):
            normalized = trigger.strip().lower()
            if not normalized:
                continue
            owners = trigger_map.setdefault(normalized, [])
            if skill.relative_path not in owners:
                owners.append(skill.relative_path)

    results: List[LintResult] = []
    for trigger, paths in trigger_map.items():
        if len(paths) < 2:
            continue
        results.append(
            LintResult(
                rule=RULE_ID,
                severity=WARNING,
                file=paths[0],
                related_file=paths[1],
                message=f'Trigger "{trigger}" is shared by: {", ".join(paths)}',
            )
        )
    return results


def extract_triggers(skill: HarnessFile) -> List[str]:
    """Collect raw trigger keywords from frontmatter and ``trigger:`` lines."""
    triggers: List[str] = []

    frontmatter = skill.frontmatter
    if frontmatter:
        single = frontmatter.get("trigger")
        multiple = frontmatter.get("triggers")
        if isinstance(single, str):
            triggers.append(single)
        elif isinstance(multiple, list):
            triggers.extend(item for item in multiple if isinstance(item, str))
        elif isinstance(multiple, str):
            triggers.append(multiple)

    for match in TRIGGER_LINE_PATTERN.finditer(skill.content):
        value = match.group(1).strip()
        if "," in value:
            triggers.extend(part.strip() for part in value.split(","))
        else:
            triggers.append(value)

    return triggers

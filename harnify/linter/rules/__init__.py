"""Built-in lint rules, in evaluation order."""

from __future__ import annotations

from typing import Dict

from ..base import LintRule
from .dead_reference import dead_reference
from .duplicate_rule import duplicate_rule
from .orphan_skill import orphan_skill
from .override_shadow import override_shadow
from .token_heavy import token_heavy
from .trigger_conflict import trigger_conflict

BUILTIN_RULES: Dict[str, LintRule] = {
    "dead-reference": dead_reference,
    "trigger-conflict": trigger_conflict,
    "override-shadow": override_shadow,
    "token-heavy": token_heavy,
    "orphan-skill": orphan_skill,
    "duplicate-rule": duplicate_rule,
}

__all__ = [
    "BUILTIN_RULES",
    "dead_reference",
    "duplicate_rule",
    "orphan_skill",
    "override_shadow",
    "token_heavy",
    "trigger_conflict",
]

"""token-heavy (info): a file takes more than 3% of the context window."""

from __future__ import annotations

from typing import List, Sequence

from ...models import INFO, HarnessFile, LintResult
from ..base import LintOptions

RULE_ID = "token-heavy"

THRESHOLD_PERCENT = 3


def token_heavy(files: Sequence[HarnessFile], options: LintOptions) -> List[LintResult]:
    context_window = options.context_window
    threshold = context_window * (THRESHOLD_PERCENT / 100)

    results: List[LintResult] = []
    for file in files:
        tokens = file.token_info.tokens
        if tokens <= threshold:
            continue
        percent = tokens / context_window * 100
        results.append(
            LintResult(
                rule=RULE_ID,
                severity=INFO,
                file=file.relative_path,
                message=(
                    f"File uses ~{tokens:,} tokens "
                    f"({percent:.1f}% of {context_window:,} context window)"
                ),
            )
        )
    return results

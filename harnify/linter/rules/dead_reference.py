"""dead-reference (error): a referenced file does not exist."""

from __future__ import annotations

import os
from typing import List, Sequence

from ...models import ERROR, HarnessFile, LintResult
from ...scanner.references import strip_fragment
from ..base import LintOptions

RULE_ID = "dead-reference"


def dead_reference(files: Sequence[HarnessFile], options: LintOptions) -> List[LintResult]:
    """Flag references that resolve neither from the file's directory nor the root."""
    results: List[LintResult] = []
    known_paths = {file.path for file in files}
    known_relative_paths = {file.relative_path for file in files}

    for file in files:
        for ref in file.references:
            target = strip_fragment(ref)
            from_file_dir = os.path.normpath(os.path.join(os.path.dirname(file.path), target))
            from_root = os.path.normpath(os.path.join(options.root_path, target))

            if (
                from_file_dir in known_paths
                or from_root in known_paths
                or target in known_relative_paths
            ):
                continue
            # os.path.exists treats permission and other OS errors as missing.
            if os.path.exists(from_file_dir) or os.path.exists(from_root):
                continue

            results.append(
                LintResult(
                    rule=RULE_ID,
                    severity=ERROR,
                    file=file.relative_path,
                    related_file=ref,
                    message=f'Referenced file "{ref}" does not exist',
                )
            )

    return results

"""Shared contract for lint rule evaluators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence

from ..config import DEFAULT_CONTEXT_WINDOW
from ..models import HarnessFile, LintResult


@dataclass(frozen=True)
class LintOptions:
    """Inputs shared by every rule besides the file list."""

    root_path: str
    context_window: int = DEFAULT_CONTEXT_WINDOW

    def __post_init__(self) -> None:
        if self.context_window <= 0:
            raise ValueError("context_window must be a positive number of tokens")


# A rule is a pure function of the file list and options.
LintRule = Callable[[Sequence[HarnessFile], LintOptions], List[LintResult]]


__all__ = ["LintOptions", "LintRule"]

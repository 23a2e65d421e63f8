"""Extract relative file references from markdown content.

Three independent patterns feed one pool of candidates:

* ``LINK_PATTERN`` - the target of an inline link, ``[text](./path.md)``
* ``CODE_SPAN_PATTERN`` - a backtick span holding ``./`` or ``../``
* ``BARE_PATH_PATTERN`` - a relative path after start-of-line or whitespace

Candidates survive only if ``is_valid_file_ref`` accepts them.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Set, Tuple

LINK_PATTERN = re.compile(r"\[(?:[^\]]*)\]\(([^)]+)\)")
CODE_SPAN_PATTERN = re.compile(r"`([^`]*(?:\./|\.\./)[^`]+)`")
BARE_PATH_PATTERN = re.compile(r"(?:^|\s)(\.{1,2}/[\w/.@-]+\.\w+)", re.MULTILINE | re.ASCII)

REFERENCE_PATTERNS: Tuple[Pattern[str], ...] = (
    LINK_PATTERN,
    CODE_SPAN_PATTERN,
    BARE_PATH_PATTERN,
)

VALID_EXTENSIONS = frozenset(
    {
        ".md",
        ".ts",
        ".tsx",
        ".js",
        ".jsx",
        ".json",
        ".yaml",
        ".yml",
        ".toml",
        ".py",
        ".go",
        ".rs",
        ".java",
        ".c",
        ".cpp",
        ".h",
        ".css",
        ".scss",
        ".html",
        ".vue",
        ".svelte",
    }
)


def extract_references(content: str) -> List[str]:
    """Return the sorted, de-duplicated relative references found in ``content``."""
    refs: Set[str] = set()
    for candidate in iter_candidates(content):
        if is_valid_file_ref(candidate):
            refs.add(candidate)
    return sorted(refs)


def iter_candidates(content: str, patterns: Iterable[Pattern[str]] = REFERENCE_PATTERNS) -> Iterable[str]:
    """Yield every raw candidate matched by ``patterns``, trimmed, in pattern order."""
    for pattern in patterns:
        for match in pattern.finditer(content):
            yield match.group(1).strip()


def strip_fragment(ref: str) -> str:
    """Return ``ref`` without any trailing ``#anchor``."""
    return ref.split("#", 1)[0]


def is_valid_file_ref(ref: str) -> bool:
    """Return True when ``ref`` looks like a relative path to a known file type."""
    if not ref.startswith(("./", "../")):
        return False
    if "://" in ref:
        return False
    if ref.startswith("#"):
        return False

    path_only = strip_fragment(ref)
    last_dot = path_only.rfind(".")
    if last_dot == -1:
        return False
    return path_only[last_dot:].lower() in VALID_EXTENSIONS


__all__ = [
    "BARE_PATH_PATTERN",
    "CODE_SPAN_PATTERN",
    "LINK_PATTERN",
    "REFERENCE_PATTERNS",
    "VALID_EXTENSIONS",
    "extract_references",
    "is_valid_file_ref",
    "iter_candidates",
    "strip_fragment",
]

"""Harness file detection and classification."""

from __future__ import annotations

import logging
import os
import posixpath
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Set

from ..logging import get_logger
from ..models import AGENT, CONFIG, DOC, HOME_PREFIX, RULE, SETTINGS, SKILL, DetectedFile

logger = get_logger("scanner.detector")

ROOT_CONFIG_FILENAME = "CLAUDE.md"
SECONDARY_CONFIG_FILENAME = "codex.md"
AGENT_FILENAME = "AGENTS.md"
SETTINGS_FILENAME = "settings.json"
LEGACY_RULE_FILENAME = ".cursorrules"
TOOL_CONFIG_DIR = ".claude/"
RULE_DIR = ".cursor/rules"
DOCS_PREFIX = "docs/"

# Glob patterns for harness file detection, relative to the project root.
HARNESS_PATTERNS: tuple[str, ...] = (
    "CLAUDE.md",
    ".claude/CLAUDE.md",
    "**/AGENTS.md",
    ".claude/settings.json",
    ".claude/skills/**/*.md",
    ".cursorrules",
    ".cursor/rules/**",
    "codex.md",
    "docs/**/*.md",
)

# Patterns globbed under the user's home directory when opted in. Both live
# under HOME_CONFIG_DIR, which is the only home directory walked.
HOME_CONFIG_DIR = ".claude"
HOME_PATTERNS: tuple[str, ...] = (
    ".claude/CLAUDE.md",
    ".claude/skills/**/*.md",
)

EXCLUDED_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        ".omc",
        "dist",
        "build",
        "coverage",
        ".next",
        ".nuxt",
    }
)


def classify_file(relative_path: str) -> str:
    """Return the node type for a repository-relative path.

    Every path maps to exactly one type; anything unrecognised is a doc.
    """
    basename = relative_path.replace("\\", "/").rsplit("/", 1)[-1]
    lower_path = relative_path.lower()
    segmented = f"/{lower_path}"

    if basename == ROOT_CONFIG_FILENAME:
        return CONFIG
    if basename == AGENT_FILENAME:
        return AGENT
    if basename == SETTINGS_FILENAME and TOOL_CONFIG_DIR in lower_path:
        return SETTINGS
    if "/skills/" in segmented or "\\skills\\" in f"\\{lower_path}":
        return SKILL
    if basename == LEGACY_RULE_FILENAME or RULE_DIR in lower_path:
        return RULE
    if basename == SECONDARY_CONFIG_FILENAME:
        return CONFIG
    if lower_path.startswith(DOCS_PREFIX) or lower_path.startswith("docs\\"):
        return DOC
    return DOC


def detect_harness_files(
    root: str | os.PathLike[str],
    *,
    include_home: bool = False,
    exclude_dirs: Iterable[str] = (),
    home_dir: Optional[str] = None,
) -> List[DetectedFile]:
    """Detect all harness files under ``root``, sorted by relative path.

    A missing or unreadable root yields an empty list. When ``include_home``
    is set, user-level files under ``home_dir`` (default ``$HOME``) are merged
    in with a ``~/`` relative-path prefix.
    """
    root_path = Path(root)
    excluded = EXCLUDED_DIRS | frozenset(exclude_dirs)

    seen: Set[str] = set()
    files: List[DetectedFile] = []

    if root_path.is_dir():
        for rel_path in _glob(root_path, HARNESS_PATTERNS, excluded):
            if rel_path in seen:
                continue
            seen.add(rel_path)
            files.append(
                DetectedFile(
                    absolute_path=os.path.normpath(os.path.join(root_path, rel_path)),
                    relative_path=rel_path,
                    type=classify_file(rel_path),
                )
            )
    else:
        logger.debug("Scan root %s is not a readable directory", root_path)

    if include_home:
        files.extend(_detect_home_files(home_dir, seen))

    return sorted(files, key=lambda item: item.relative_path)


def _detect_home_files(home_dir: Optional[str], seen: Set[str]) -> List[DetectedFile]:
    home = home_dir or os.environ.get("HOME") or os.environ.get("USERPROFILE") or ""
    config_dir = Path(home) / HOME_CONFIG_DIR if home else None
    if config_dir is None or not os.path.isdir(config_dir):
        return []

    prefix = f"{HOME_CONFIG_DIR}/"
    patterns = tuple(pattern[len(prefix):] for pattern in HOME_PATTERNS if pattern.startswith(prefix))

    found: List[DetectedFile] = []
    # Home scans skip the project exclusion list; unreadable directories are ignored quietly.
    for sub_path in _glob(config_dir, patterns, frozenset(), quiet=True):
        rel_path = f"{prefix}{sub_path}"
        tagged = f"{HOME_PREFIX}{rel_path}"
        if tagged in seen:
            continue
        seen.add(tagged)
        found.append(
            DetectedFile(
                absolute_path=os.path.normpath(os.path.join(home, rel_path)),
                relative_path=tagged,
                type=classify_file(rel_path),
            )
        )
    return found


def _glob(
    root: Path, patterns: Sequence[str], excluded: frozenset[str], *, quiet: bool = False
) -> Iterator[str]:
    """Yield normalized relative paths of files matching any pattern."""
    level = logging.DEBUG if quiet else logging.WARNING

    def _on_error(exc: OSError) -> None:
        logger.log(level, "Skipping unreadable directory %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        dirnames[:] = sorted(name for name in dirnames if name not in excluded)

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            rel_path = rel_path.replace("\\", "/")
            if any(_pattern_matches(rel_path, pattern) for pattern in patterns):
                yield rel_path


def _pattern_matches(path: str, pattern: str) -> bool:
    """Match a relative path against a glob supporting a single ``**`` segment.

    ``prefix/**`` matches any file below ``prefix``; ``prefix/**/tail`` matches
    files below ``prefix`` whose base name matches ``tail``. Matching is
    case-sensitive and a plain pattern must equal the whole path.
    """
    if "**" not in pattern:
        return path.count("/") == pattern.count("/") and fnmatchcase(path, pattern)

    prefix, _, tail = pattern.partition("**")
    tail = tail.lstrip("/")
    if not path.startswith(prefix):
        return False
    remainder = path[len(prefix):]
    if not remainder:
        return False
    if not tail:
        return True
    return fnmatchcase(posixpath.basename(remainder), tail)


__all__ = [
    "EXCLUDED_DIRS",
    "HARNESS_PATTERNS",
    "HOME_PATTERNS",
    "HOME_PREFIX",
    "classify_file",
    "detect_harness_files",
]

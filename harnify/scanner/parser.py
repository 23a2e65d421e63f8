"""Read harness files and split YAML frontmatter from markdown bodies."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

MARKDOWN_SUFFIX = ".md"

# Leading ``---`` fenced block; the closing fence must sit on its own line.
_FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<body>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class ParsedFile:
    """Raw file text plus optional frontmatter mapping."""

    content: str
    frontmatter: Optional[Dict[str, Any]]


def is_markdown(path: str | os.PathLike[str]) -> bool:
    """Return True for descriptor-format (markdown) files."""
    return os.fspath(path).endswith(MARKDOWN_SUFFIX)


def parse_file(path: str | os.PathLike[str]) -> ParsedFile:
    """Read ``path`` and extract frontmatter when it is a markdown file.

    ``content`` is always the full raw text, frontmatter included. Raises
    ``OSError`` when the file cannot be read.
    """
    # newline="" keeps CRLF and lone CR as they are on disk.
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as handle:
        raw = handle.read()

    if not is_markdown(path):
        return ParsedFile(content=raw, frontmatter=None)
    return ParsedFile(content=raw, frontmatter=parse_frontmatter(raw))


def parse_frontmatter(text: str) -> Optional[Dict[str, Any]]:
    """Return the leading YAML block as a string-keyed mapping, or None.

    Missing, empty, non-mapping and malformed blocks all yield None.
    """
    match = _FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None

    try:
        data = yaml.safe_load(match.group("body"))
    except (yaml.YAMLError, RecursionError):
        # Deeply nested flow collections exhaust PyYAML's recursive composer.
        return None

    if not isinstance(data, dict) or not data:
        return None
    return {str(key): value for key, value in data.items()}


__all__ = ["ParsedFile", "is_markdown", "parse_file", "parse_frontmatter"]

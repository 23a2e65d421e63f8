"""In-memory harness files for rule tests that do not need a real tree."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from harnify.models import HarnessFile, TokenInfo

FAKE_ROOT = "/project"


def make_file(
    relative_path: str,
    type: str,
    content: str = "",
    *,
    root: str = FAKE_ROOT,
    references: Sequence[str] = (),
    frontmatter: Optional[Mapping[str, Any]] = None,
    tokens: Optional[int] = None,
) -> HarnessFile:
    size = len(content.encode("utf-8"))
    return HarnessFile(
        path=f"{root}/{relative_path}",
        relative_path=relative_path,
        type=type,
        token_info=TokenInfo(tokens=tokens if tokens is not None else -(-size // 4), bytes=size),
        frontmatter=frontmatter,
        content=content,
        last_modified="2025-01-01T00:00:00.000Z",
        references=tuple(references),
    )


__all__ = ["FAKE_ROOT", "make_file"]

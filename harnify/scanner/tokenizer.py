"""Token estimation for harness file content."""

from __future__ import annotations

from ..models import TokenInfo

BYTES_PER_TOKEN = 4


def count_tokens(content: str) -> TokenInfo:
    """Estimate tokens as ``ceil(utf8_bytes / 4)``.

    A byte-length approximation, good enough for comparing files against
    each other and against a context window; it is not a real tokenizer.
    """
    size = len(content.encode("utf-8"))
    return TokenInfo(tokens=-(-size // BYTES_PER_TOKEN), bytes=size)


__all__ = ["BYTES_PER_TOKEN", "count_tokens"]

"""Mask secrets in file content before it leaves the process."""

from __future__ import annotations

import re
from typing import Pattern, Tuple

REDACTION_MARKER = "[MASKED]"

_SECRET_KEYS = (
    r"api[_-]?key|token|secret|password|credential|auth[_-]?token"
    r"|private[_-]?key|access[_-]?key|client[_-]?secret"
)

# key=value or key: value (env files, YAML, markdown)
KEY_VALUE_PATTERN = re.compile(
    rf"({_SECRET_KEYS})\s*[:=]\s*[\"']?([^\s\"',}}]+)", re.IGNORECASE
)
# JSON "key": "value"
JSON_KEY_PATTERN = re.compile(rf"(\"(?:{_SECRET_KEYS})\")\s*:\s*\"([^\"]+)\"", re.IGNORECASE)
BEARER_PATTERN = re.compile(r"(Bearer)\s+([A-Za-z0-9_.~+/=-]{10,})")
SECRET_PREFIX_PATTERN = re.compile(
    r"\b(sk-[A-Za-z0-9]{20,}|ghp_[A-Za-z0-9]{36,}|xoxb-[A-Za-z0-9-]+|AKIA[A-Z0-9]{16})\b"
)

REDACTION_PATTERNS: Tuple[Pattern[str], ...] = (
    KEY_VALUE_PATTERN,
    JSON_KEY_PATTERN,
    BEARER_PATTERN,
    SECRET_PREFIX_PATTERN,
)


def _mask(match: re.Match[str]) -> str:
    key = match.group(1)
    if len(match.group(0)) > len(key):
        return f"{key}: {REDACTION_MARKER}"
    return REDACTION_MARKER


def redact_secrets(text: str) -> str:
    """Replace secret values with ``[MASKED]``, keeping any matched key name."""
    masked = text
    for pattern in REDACTION_PATTERNS:
        masked = pattern.sub(_mask, masked)
    return masked


__all__ = ["REDACTION_MARKER", "REDACTION_PATTERNS", "redact_secrets"]

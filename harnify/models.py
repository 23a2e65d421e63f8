"""Core data models shared across harnify components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

# Node types
CONFIG = "config"
AGENT = "agent"
SKILL = "skill"
SETTINGS = "settings"
RULE = "rule"
DOC = "doc"

NODE_TYPES: Tuple[str, ...] = (CONFIG, AGENT, SKILL, SETTINGS, RULE, DOC)

# Edge types
REFERENCES = "references"
OVERRIDES = "overrides"
TRIGGERS = "triggers"

EDGE_TYPES: Tuple[str, ...] = (REFERENCES, OVERRIDES, TRIGGERS)

# Relative-path prefix tagging files found under the user home directory.
HOME_PREFIX = "~/"

# Lint severities
ERROR = "error"
WARNING = "warning"
INFO = "info"

SEVERITY_ORDER: Dict[str, int] = {ERROR: 0, WARNING: 1, INFO: 2}


@dataclass(frozen=True)
class TokenInfo:
    """Estimated token count and raw byte size of a file."""

    tokens: int
    bytes: int

    def to_dict(self) -> Dict[str, int]:
        return {"tokens": self.tokens, "bytes": self.bytes}


@dataclass(frozen=True)
class DetectedFile:
    """A harness file found on disk, before it is read."""

    absolute_path: str
    relative_path: str
    type: str


@dataclass(frozen=True)
class HarnessFile:
    """A detected harness file with parsed content and metadata."""

    path: str
    relative_path: str
    type: str
    token_info: TokenInfo
    frontmatter: Optional[Mapping[str, Any]]
    content: str
    last_modified: str
    references: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "relativePath": self.relative_path,
            "type": self.type,
            "tokenInfo": self.token_info.to_dict(),
            "frontmatter": dict(self.frontmatter) if self.frontmatter is not None else None,
            "content": self.content,
            "lastModified": self.last_modified,
            "references": list(self.references),
        }


@dataclass(frozen=True)
class HarnessEdge:
    """Directed relationship between two harness files."""

    source: str
    target: str
    type: str = REFERENCES

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target, "type": self.type}


@dataclass(frozen=True)
class HarnessGraph:
    """The complete harness graph for a project."""

    files: Tuple[HarnessFile, ...]
    edges: Tuple[HarnessEdge, ...]
    root_path: str
    scanned_at: str

    def project_files(self) -> Tuple[HarnessFile, ...]:
        """Files from the scanned project, without user-home entries."""
        return tuple(file for file in self.files if not file.relative_path.startswith(HOME_PREFIX))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [file.to_dict() for file in self.files],
            "edges": [edge.to_dict() for edge in self.edges],
            "rootPath": self.root_path,
            "scannedAt": self.scanned_at,
        }


@dataclass(frozen=True)
class LintResult:
    """A single lint finding."""

    rule: str
    severity: str
    message: str
    file: str
    related_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "rule": self.rule,
            "severity": self.severity,
            "message": self.message,
            "file": self.file,
        }
        if self.related_file is not None:
            data["relatedFile"] = self.related_file
        return data


@dataclass
class ScanSummary:
    """Per-type grouping of a graph used by the CLI summary view."""

    total_tokens: int
    by_type: Dict[str, List[HarnessFile]] = field(default_factory=dict)


def summarize(graph: HarnessGraph) -> ScanSummary:
    """Group files by node type in display order."""
    by_type: Dict[str, List[HarnessFile]] = {}
    for node_type in NODE_TYPES:
        matching = [file for file in graph.files if file.type == node_type]
        if matching:
            by_type[node_type] = matching
    total = sum(file.token_info.tokens for file in graph.files)
    return ScanSummary(total_tokens=total, by_type=by_type)

"""Response models and conversion of a scan into the dashboard payload."""

from __future__ import annotations

import posixpath
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models import HarnessGraph, LintResult
from .redaction import redact_secrets


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenInfoModel(_CamelModel):
    tokens: int
    bytes: int


class HarnessFileModel(_CamelModel):
    path: str
    relative_path: str
    type: str
    token_info: TokenInfoModel
    frontmatter: Optional[Dict[str, Any]] = None
    content: str
    last_modified: str
    references: List[str]


class GraphNodeModel(_CamelModel):
    id: str
    label: str
    type: str
    token_info: TokenInfoModel
    path: str
    last_modified: str


class GraphEdgeModel(_CamelModel):
    id: str
    source: str
    target: str
    type: str


class GraphModel(_CamelModel):
    nodes: List[GraphNodeModel]
    edges: List[GraphEdgeModel]


class LintResultModel(_CamelModel):
    rule: str
    severity: str
    message: str
    file: str
    related_file: Optional[str] = None


class ScanResponse(_CamelModel):
    files: List[HarnessFileModel]
    graph: GraphModel
    lint_results: List[LintResultModel]


class HealthResponse(BaseModel):
    status: str


def empty_scan_payload() -> ScanResponse:
    return ScanResponse(files=[], graph=GraphModel(nodes=[], edges=[]), lint_results=[])


def build_scan_payload(
    graph: HarnessGraph, lint_results: Sequence[LintResult] = ()
) -> ScanResponse:
    """Convert a graph and its findings into the ``/api/scan`` response.

    File content is passed through ``redact_secrets``; edges get positional
    ids ``e0``, ``e1``, ...
    """
    files = [
        HarnessFileModel(
            path=file.path,
            relative_path=file.relative_path,
            type=file.type,
            token_info=TokenInfoModel(tokens=file.token_info.tokens, bytes=file.token_info.bytes),
            frontmatter=dict(file.frontmatter) if file.frontmatter is not None else None,
            content=redact_secrets(file.content),
            last_modified=file.last_modified,
            references=list(file.references),
        )
        for file in graph.files
    ]
    nodes = [
        GraphNodeModel(
            id=file.relative_path,
            label=posixpath.basename(file.relative_path),
            type=file.type,
            token_info=TokenInfoModel(tokens=file.token_info.tokens, bytes=file.token_info.bytes),
            path=file.relative_path,
            last_modified=file.last_modified,
        )
        for file in graph.files
    ]
    edges = [
        GraphEdgeModel(id=f"e{index}", source=edge.source, target=edge.target, type=edge.type)
        for index, edge in enumerate(graph.edges)
    ]
    findings = [
        LintResultModel(
            rule=result.rule,
            severity=result.severity,
            message=result.message,
            file=result.file,
            related_file=result.related_file,
        )
        for result in lint_results
    ]
    return ScanResponse(
        files=files,
        graph=GraphModel(nodes=nodes, edges=edges),
        lint_results=findings,
    )


__all__ = [
    "GraphEdgeModel",
    "GraphNodeModel",
    "HarnessFileModel",
    "HealthResponse",
    "LintResultModel",
    "ScanResponse",
    "build_scan_payload",
    "empty_scan_payload",
]

"""FastAPI application serving the harness dashboard data."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from ..config import DEFAULT_CONTEXT_WINDOW, DEFAULT_HOST, DEFAULT_PORT, ConfigError
from ..linter import lint
from ..logging import get_logger
from ..models import HarnessGraph, LintResult
from ..scanner import scan
from .payload import HealthResponse, ScanResponse, build_scan_payload, empty_scan_payload

logger = get_logger("service")


@dataclass(frozen=True)
class ScanSnapshot:
    """One immutable scan of a project together with its lint findings."""

    graph: HarnessGraph
    lint_results: Tuple[LintResult, ...] = field(default_factory=tuple)


def snapshot_from_graph(
    graph: HarnessGraph, *, context_window: int = DEFAULT_CONTEXT_WINDOW
) -> ScanSnapshot:
    """Lint the project files of ``graph``; user-home files are shown, not linted."""
    findings = lint(graph.project_files(), graph.root_path, context_window=context_window)
    return ScanSnapshot(graph=graph, lint_results=tuple(findings))


def take_snapshot(
    root: str | Path,
    *,
    include_home: bool = False,
    exclude_dirs: Iterable[str] = (),
    context_window: int = DEFAULT_CONTEXT_WINDOW,
) -> ScanSnapshot:
    """Scan ``root`` and lint it in one step."""
    graph = scan(root, include_home=include_home, exclude_dirs=exclude_dirs)
    return snapshot_from_graph(graph, context_window=context_window)


class SnapshotStore:
    """Holds the current snapshot; a rescan replaces it wholesale."""

    def __init__(
        self,
        snapshot: Optional[ScanSnapshot] = None,
        *,
        snapshot_factory: Optional[Callable[[], ScanSnapshot]] = None,
    ) -> None:
        self._snapshot = snapshot
        self._snapshot_factory = snapshot_factory
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[ScanSnapshot]:
        return self._snapshot

    def refresh(self) -> ScanSnapshot:
        if self._snapshot_factory is None:
            raise RuntimeError("Rescan is not available: no scan root configured")
        with self._lock:
            fresh = self._snapshot_factory()
            self._snapshot = fresh
        logger.info("Rescanned %s (%d files)", fresh.graph.root_path, len(fresh.graph.files))
        return fresh


def create_app(
    store: SnapshotStore,
    *,
    static_dir: Optional[Path] = None,
    allowed_origins: Optional[Iterable[str]] = None,
) -> FastAPI:
    """Create the FastAPI application exposing the current scan snapshot."""

    app = FastAPI(title="Harnify Dashboard", version="0.1.0")
    app.state.store = store

    origins = list(allowed_origins) if allowed_origins is not None else []
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/api/scan", response_model=ScanResponse)
    async def get_scan() -> ScanResponse:
        snapshot = store.snapshot
        if snapshot is None:
            return empty_scan_payload()
        return build_scan_payload(snapshot.graph, snapshot.lint_results)

    @app.post("/api/rescan", response_model=ScanResponse)
    async def rescan() -> ScanResponse:
        snapshot = await run_in_threadpool(store.refresh)
        return build_scan_payload(snapshot.graph, snapshot.lint_results)

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    # Mounted last so the API routes above take precedence over "/".
    if static_dir is not None:
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="dashboard")
        else:
            logger.warning("Dashboard assets not found at %s; serving API only", static_dir)

    return app


def run_service(
    store: SnapshotStore,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    static_dir: Optional[Path] = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    origin = f"http://{host}:{port}"
    app = create_app(store, static_dir=static_dir, allowed_origins=[origin])
    logger.info("Harnify dashboard: %s", origin)
    uvicorn.run(app, host=host, port=port, log_level="warning")


__all__ = [
    "ScanSnapshot",
    "SnapshotStore",
    "create_app",
    "run_service",
    "snapshot_from_graph",
    "take_snapshot",
]

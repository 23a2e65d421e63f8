"""Read-only dashboard service over a scan snapshot."""

from .app import (
    ScanSnapshot,
    SnapshotStore,
    create_app,
    run_service,
    snapshot_from_graph,
    take_snapshot,
)
from .payload import build_scan_payload
from .redaction import redact_secrets

__all__ = [
    "ScanSnapshot",
    "SnapshotStore",
    "build_scan_payload",
    "create_app",
    "redact_secrets",
    "run_service",
    "snapshot_from_graph",
    "take_snapshot",
]

"""Build the harness graph: detect, parse, count tokens and link references."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import REFERENCES, DetectedFile, HarnessEdge, HarnessFile, HarnessGraph
from .detector import detect_harness_files
from .parser import is_markdown, parse_file
from .references import extract_references, strip_fragment
from .tokenizer import count_tokens

_DEFAULT_MAX_WORKERS = 8


def _isoformat(timestamp: datetime) -> str:
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_reference(source_path: str, ref: str, root_path: str) -> str:
    """Resolve ``ref`` against the referencing file's directory, relative to root.

    A ``#fragment`` is dropped so the target names the file itself.
    """
    absolute = os.path.normpath(os.path.join(os.path.dirname(source_path), strip_fragment(ref)))
    return Path(os.path.relpath(absolute, root_path)).as_posix()


class HarnessScanner:
    """Walks a project and produces a ``HarnessGraph``.

    File processing fans out over a thread pool. A file that fails to process
    is logged and left out; it never aborts the scan or its siblings.
    """

    def __init__(
        self,
        *,
        include_home: bool = False,
        exclude_dirs: Iterable[str] = (),
        max_workers: Optional[int] = None,
    ) -> None:
        self.include_home = include_home
        self.exclude_dirs = tuple(exclude_dirs)
        self.max_workers = max_workers or _DEFAULT_MAX_WORKERS
        self.logger = get_logger("scanner")

    def scan(self, root: str | os.PathLike[str]) -> HarnessGraph:
        """Return the graph of harness files found under ``root``."""
        if not isinstance(root, (str, os.PathLike)):
            raise TypeError(f"Scan root must be a path, not {type(root).__name__}")

        root_path = os.fspath(Path(root).expanduser().resolve())
        detected = detect_harness_files(
            root_path,
            include_home=self.include_home,
            exclude_dirs=self.exclude_dirs,
        )
        self.logger.debug("Detected %d harness files under %s", len(detected), root_path)

        processed = self._process_all(detected, root_path)

        files: List[HarnessFile] = []
        edges: List[HarnessEdge] = []
        for item in processed:
            if item is None:
                continue
            harness_file, file_edges = item
            files.append(harness_file)
            edges.extend(file_edges)

        self.logger.debug("Built graph with %d files and %d edges", len(files), len(edges))
        return HarnessGraph(
            files=tuple(files),
            edges=tuple(edges),
            root_path=root_path,
            scanned_at=_isoformat(datetime.now(UTC)),
        )

    def _process_all(
        self, detected: Sequence[DetectedFile], root_path: str
    ) -> List[Optional[Tuple[HarnessFile, List[HarnessEdge]]]]:
        if not detected:
            return []
        workers = min(self.max_workers, len(detected))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission order, so output follows detection order.
            return list(pool.map(lambda item: self._process_safely(item, root_path), detected))

    def _process_safely(
        self, detected: DetectedFile, root_path: str
    ) -> Optional[Tuple[HarnessFile, List[HarnessEdge]]]:
        try:
            return process_file(detected, root_path)
        except Exception as exc:  # one bad file must not fail the batch
            self.logger.warning("Could not process %s: %s", detected.relative_path, exc)
            return None


def process_file(detected: DetectedFile, root_path: str) -> Tuple[HarnessFile, List[HarnessEdge]]:
    """Parse one detected file and build its outgoing reference edges."""
    parsed = parse_file(detected.absolute_path)
    stat_result = os.stat(detected.absolute_path)
    references: Tuple[str, ...] = ()
    if is_markdown(detected.absolute_path):
        references = tuple(extract_references(parsed.content))

    harness_file = HarnessFile(
        path=detected.absolute_path,
        relative_path=detected.relative_path,
        type=detected.type,
        token_info=count_tokens(parsed.content),
        frontmatter=parsed.frontmatter,
        content=parsed.content,
        last_modified=_isoformat(datetime.fromtimestamp(stat_result.st_mtime, UTC)),
        references=references,
    )
    edges = [
        HarnessEdge(
            source=detected.relative_path,
            target=resolve_reference(detected.absolute_path, ref, root_path),
            type=REFERENCES,
        )
        for ref in references
    ]
    return harness_file, edges


def scan(
    root: str | os.PathLike[str],
    *,
    include_home: bool = False,
    exclude_dirs: Iterable[str] = (),
    max_workers: Optional[int] = None,
) -> HarnessGraph:
    """Scan ``root`` and build its harness graph."""
    scanner = HarnessScanner(
        include_home=include_home,
        exclude_dirs=exclude_dirs,
        max_workers=max_workers,
    )
    return scanner.scan(root)


__all__ = ["HarnessScanner", "process_file", "resolve_reference", "scan"]

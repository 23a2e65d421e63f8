"""CLI entrypoints for harnify commands."""

from __future__ import annotations

import argparse
import json
import sys
import webbrowser
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .config import ConfigError, HarnifyConfig, MODEL_CONTEXT_WINDOWS, load_config, resolve_context_window
from .linter import format_lint_results, has_errors, lint
from .logging import configure_logging, get_logger
from .models import HarnessGraph, summarize
from .scanner import scan

__version__ = "0.1.0"

logger = get_logger("cli")

_DEFAULT_COMMAND = "scan"
_COMMANDS = frozenset({"scan", "lint"})
_TOP_LEVEL_FLAGS = frozenset({"-h", "--help", "--version"})
_VERBOSE_FLAGS = frozenset({"-v", "--verbose"})


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_scan_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--include-home",
        action="store_true",
        help="Also scan ~/.claude/ user-level harness files.",
    )
    parser.add_argument(
        "--exclude-dir",
        action="append",
        dest="exclude_dirs",
        default=None,
        metavar="NAME",
        help="Extra directory name to skip at any depth (repeatable).",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harnify",
        description=(
            "Visualize and lint AI agent harness files (CLAUDE.md, AGENTS.md, skills, rules). "
            "Without a command, 'scan' is assumed."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_verbose_option(parser)

    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan harness files, print a summary and serve the dashboard.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_path_argument(scan_parser)
    _add_scan_options(scan_parser)
    scan_parser.add_argument("--json", action="store_true", help="Output scan results as JSON.")
    scan_parser.add_argument("--port", type=int, default=None, help="Dashboard server port.")
    scan_parser.add_argument("--host", default=None, help="Dashboard server host.")
    scan_parser.add_argument(
        "--no-serve", action="store_true", help="Print the summary without serving the dashboard."
    )
    scan_parser.add_argument("--no-open", action="store_true", help="Don't auto-open the browser.")
    scan_parser.add_argument(
        "--dashboard-dir",
        type=Path,
        default=None,
        help="Directory of built dashboard assets to serve at /.",
    )

    lint_parser = subparsers.add_parser(
        "lint",
        help="Run lint rules on harness files.",
    )
    _add_verbose_option(lint_parser, suppress_default=True)
    _add_path_argument(lint_parser)
    _add_scan_options(lint_parser)
    window = lint_parser.add_mutually_exclusive_group()
    window.add_argument(
        "--context-window",
        type=int,
        default=None,
        help="Context window size in tokens used by token-heavy.",
    )
    window.add_argument(
        "--model",
        choices=sorted(MODEL_CONTEXT_WINDOWS),
        default=None,
        help="Model preset whose context window token-heavy should use.",
    )

    return parser


def _with_default_command(argv: Sequence[str]) -> List[str]:
    """Prepend ``scan`` unless the arguments already name a command."""
    args = list(argv)
    leading = [arg for arg in args if arg not in _VERBOSE_FLAGS][:1]
    if leading and (leading[0] in _COMMANDS or leading[0] in _TOP_LEVEL_FLAGS):
        return args
    return [_DEFAULT_COMMAND, *args]


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entrypoint for harnify commands."""
    parser = _build_parser()
    raw = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(_with_default_command(raw))

    configure_logging(verbose=bool(args.verbose), quiet=bool(getattr(args, "json", False)))

    root = args.path
    try:
        config = load_config(Path(root))
    except ConfigError as exc:
        parser.exit(1, f"harnify: invalid configuration: {exc}\n")

    if args.command == "lint":
        sys.exit(_run_lint(parser, args, root, config))
    _run_scan(parser, args, root, config)


def _scan_options(args: argparse.Namespace, config: HarnifyConfig) -> Dict[str, Any]:
    return {
        "include_home": bool(args.include_home) or config.include_home,
        "exclude_dirs": list(config.exclude_dirs) + list(args.exclude_dirs or []),
    }


def _scan_or_exit(
    parser: argparse.ArgumentParser, args: argparse.Namespace, root: str, config: HarnifyConfig
) -> HarnessGraph:
    logger.debug("Scanning %s", root)
    try:
        return scan(root, **_scan_options(args, config))
    except OSError as exc:  # pragma: no cover - unreadable root
        parser.exit(1, f"harnify scan failed: {exc}\nRun with --verbose for more details.\n")


def _run_lint(
    parser: argparse.ArgumentParser, args: argparse.Namespace, root: str, config: HarnifyConfig
) -> int:
    try:
        context_window = resolve_context_window(
            context_window=args.context_window,
            model=args.model,
            config=config.lint,
        )
    except ValueError as exc:
        parser.exit(2, f"harnify lint: {exc}\n")

    graph = _scan_or_exit(parser, args, root, config)
    results = lint(graph.project_files(), graph.root_path, context_window=context_window)
    print(format_lint_results(results))
    return 1 if has_errors(results) else 0


def _run_scan(
    parser: argparse.ArgumentParser, args: argparse.Namespace, root: str, config: HarnifyConfig
) -> None:
    graph = _scan_or_exit(parser, args, root, config)

    if args.json:
        print(json.dumps(graph.to_dict(), indent=2, default=str))
        return

    print("\n".join(render_summary(graph)))

    if args.no_serve:
        return

    from .service import SnapshotStore, run_service, snapshot_from_graph, take_snapshot

    context_window = resolve_context_window(config=config.lint)
    options = _scan_options(args, config)
    store = SnapshotStore(
        snapshot_from_graph(graph, context_window=context_window),
        snapshot_factory=lambda: take_snapshot(root, context_window=context_window, **options),
    )
    host = args.host or config.server.host
    port = args.port or config.server.port
    url = f"http://{host}:{port}"
    print(f"\n  Dashboard: {url}")
    if not args.no_open:
        webbrowser.open(url)
    run_service(store, host=host, port=port, static_dir=args.dashboard_dir)


def render_summary(graph: HarnessGraph) -> List[str]:
    """Return the human-readable scan summary, grouped by node type."""
    summary = summarize(graph)
    lines = [
        "",
        f"  harnify v{__version__} - Harness Scan Results",
        "",
        f"  Root: {graph.root_path}",
        f"  Files: {len(graph.files)}",
        f"  Total tokens: ~{summary.total_tokens:,}",
        f"  References: {len(graph.edges)}",
        "",
    ]
    for node_type, files in summary.by_type.items():
        lines.append(f"  {node_type.upper()} ({len(files)})")
        for file in files:
            lines.append(f"    {file.token_info.tokens:>8,} tok  {file.relative_path}")
        lines.append("")
    return lines


if __name__ == "__main__":
    main(sys.argv[1:])

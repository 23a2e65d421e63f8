"""Scan, lint and visualize AI agent harness files."""

from .cli import __version__
from .linter import format_lint_results, lint
from .scanner import scan

__all__ = ["__version__", "format_lint_results", "lint", "scan"]

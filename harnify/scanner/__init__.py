"""Harness scanning pipeline: detection, parsing, tokens, references, graph."""

from .detector import classify_file, detect_harness_files
from .graph import HarnessScanner, scan
from .parser import ParsedFile, parse_file
from .references import extract_references
from .tokenizer import count_tokens

__all__ = [
    "HarnessScanner",
    "ParsedFile",
    "classify_file",
    "count_tokens",
    "detect_harness_files",
    "extract_references",
    "parse_file",
    "scan",
]

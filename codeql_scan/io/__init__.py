"""codeql_scan.io

Filesystem contracts for one scan.

The output layout is a public contract: the CLI prints these paths and users
script against them, so the rules live in one place.
"""

from __future__ import annotations

from .layout import (
    FORMAT_EXTENSIONS,
    RESULTS_PREFIX,
    ScanPaths,
    format_timestamp,
    prepare_scan_paths,
    results_filename,
)

__all__ = [
    "FORMAT_EXTENSIONS",
    "RESULTS_PREFIX",
    "ScanPaths",
    "format_timestamp",
    "prepare_scan_paths",
    "results_filename",
]

from __future__ import annotations

import argparse
from pathlib import Path

from codeql_scan.domain.request import (
    DEFAULT_DATABASE_NAME,
    FORMAT_STRUCTURED,
    OUTPUT_FORMATS,
    validate_database_name,
)


def database_name_arg(value: str) -> str:
    try:
        return validate_database_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def add_scan_args(parser: argparse.ArgumentParser, *, default_output_dir: Path) -> None:
    """Register the scan command's flags.

    This includes:
    - the source tree to scan (required, positional)
    - output layout (directory, format, database name)
    - analyzer knobs (query suite, language, threads, binary)
    - execution knobs (dry-run, quiet, verbose)
    """

    parser.add_argument("source_root", help="Source tree to scan (no build required).")

    # Output layout
    parser.add_argument(
        "--output-dir",
        "-o",
        default=str(default_output_dir),
        help=f"Directory for the database and result file (default: {default_output_dir}).",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=list(OUTPUT_FORMATS),
        default=FORMAT_STRUCTURED,
        help="Result format: structured (SARIF), tabular (CSV) or graph (DOT). Default: structured.",
    )
    parser.add_argument(
        "--db-name",
        dest="database_name",
        type=database_name_arg,
        default=DEFAULT_DATABASE_NAME,
        help=f"Database directory name under the output dir (default: {DEFAULT_DATABASE_NAME}).",
    )

    # Analyzer
    parser.add_argument(
        "--query-suite",
        help="Query suite to run (default: $CODEQL_QUERY_SUITE or cpp-security-extended).",
    )
    parser.add_argument("--language", help="Extractor language (default: $CODEQL_LANGUAGE or cpp).")
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Analyzer threads, passed through as-is (default: $CODEQL_THREADS or 0 = analyzer decides).",
    )
    parser.add_argument("--codeql-bin", help="Path to the codeql executable (default: $CODEQL_BIN or PATH).")

    # Execution
    parser.add_argument("--dry-run", action="store_true", help="Print commands but do not execute")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress analyzer stdout/stderr (not recommended for debugging)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

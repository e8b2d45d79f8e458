#!/usr/bin/env python3
"""
CLI for the CodeQL no-build scan pipeline.

Pipeline:
  create database (--build-mode=none) -> analyze with a query suite -> summarize findings

Usage:
  python scan_cli.py path/to/src
  python scan_cli.py path/to/src --format tabular --output-dir out --db-name mydb
  python scan_cli.py path/to/src --query-suite codeql/cpp-queries:codeql-suites/cpp-security-and-quality.qls
  python scan_cli.py path/to/src --dry-run

Exit code 0 when the scan completed (even if the results could not be
summarized), 1 when any stage failed.
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from cli.args import add_scan_args
from cli.commands.scan import run_scan
from pipeline.config import default_output_dir
from pipeline.wiring import ENV_PATH, configure_logging, load_env


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a CodeQL database without compiling, run a query suite and summarize findings."
    )
    add_scan_args(parser, default_output_dir=default_output_dir())
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    # Always load .env from repo root so terminal runs behave like IDE runs
    load_env(ENV_PATH)

    args = parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    return run_scan(args)


if __name__ == "__main__":
    raise SystemExit(main())

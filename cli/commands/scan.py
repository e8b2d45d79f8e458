from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from cli.ui import print_outcome, print_scan_header
from codeql_scan.domain.request import ScanRequest
from pipeline.config import load_codeql_config
from pipeline.pipeline import ScanPipeline
from pipeline.wiring import build_pipeline
from tools.codeql.types import CodeQLConfig


def build_request(args: argparse.Namespace, config: CodeQLConfig) -> ScanRequest:
    return ScanRequest(
        source_root=Path(args.source_root).expanduser(),
        output_dir=Path(args.output_dir).expanduser(),
        query_suite=args.query_suite or config.query_suite,
        database_name=args.database_name,
        output_format=args.output_format,
        language=args.language,
        threads=args.threads,
        dry_run=bool(args.dry_run),
    )


def run_scan(args: argparse.Namespace, pipeline: Optional[ScanPipeline] = None) -> int:
    """Run the scan pipeline for parsed CLI args and return the process exit code."""
    config = load_codeql_config(
        codeql_bin=args.codeql_bin,
        language=args.language,
        query_suite=args.query_suite,
        threads=args.threads,
    )
    req = build_request(args, config)

    if pipeline is None:
        pipeline = build_pipeline(config=config, quiet=bool(args.quiet))

    print_scan_header(req)
    outcome = pipeline.run(req)
    print_outcome(outcome)
    return outcome.exit_code

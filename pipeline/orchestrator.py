"""pipeline.orchestrator

The pipeline driver: build database -> analyze -> summarize.

Rules
-----
- Stages run strictly in order; the first fatal error moves the pipeline to
  ``failed`` and later stages never run.
- Nothing is rolled back. A database created before a failing analysis stays
  on disk for inspection.
- Summarization is best-effort: a :class:`ParseError` is logged and recorded
  on the outcome, and the pipeline still finishes in ``done``.
- Run metadata is best-effort too; failing to write it never fails a scan.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from codeql_scan.domain.finding import SeverityHistogram
from codeql_scan.domain.request import ScanRequest, ScanResult
from codeql_scan.errors import ParseError, ScanError
from codeql_scan.io.layout import ScanPaths, prepare_scan_paths
from pipeline.models import (
    STATE_ANALYZING,
    STATE_BUILDING_DATABASE,
    STATE_DONE,
    STATE_FAILED,
    STATE_SUMMARIZING,
    TERMINAL_STATES,
    PipelineOutcome,
    StageFailure,
)
from pipeline.summary import load_findings
from tools.codeql.runner import analyze_database, build_analyze_args, build_create_args, codeql_version, create_database
from tools.codeql.types import CodeQLConfig
from tools.core_cmd import Runner, dry_run_runner, format_command, run_command
from tools.io import write_json

logger = logging.getLogger(__name__)


class ScanPipelineDriver:
    """Runs one :class:`ScanRequest` through the stage state machine."""

    def __init__(
        self,
        *,
        config: CodeQLConfig,
        runner: Runner = run_command,
        clock: Callable[[], datetime] = datetime.now,
        version_fn: Callable[[str], str] = codeql_version,
        write_metadata: bool = True,
    ) -> None:
        self.config = config
        self._runner = runner
        self._clock = clock
        self._version_fn = version_fn
        self._write_metadata = write_metadata

    # ------------------------------------------------------------------
    # State handling
    # ------------------------------------------------------------------

    @staticmethod
    def _transition(outcome: PipelineOutcome, state: str) -> None:
        if outcome.state in TERMINAL_STATES:
            raise RuntimeError(f"Pipeline already finished in state {outcome.state!r}")
        logger.info("Pipeline: %s -> %s", outcome.state, state)
        outcome.state = state
        outcome.transitions.append(state)

    def _fail(self, outcome: PipelineOutcome, cause: Exception) -> PipelineOutcome:
        outcome.failure = StageFailure(stage=outcome.state, cause=cause)
        logger.error("Stage %s failed: %s", outcome.state, cause)
        self._transition(outcome, STATE_FAILED)
        return outcome

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, req: ScanRequest) -> PipelineOutcome:
        outcome = PipelineOutcome(request=req)
        runner = dry_run_runner if req.dry_run else self._runner
        timings: Dict[str, float] = {}
        language = req.language or self.config.language
        threads = self.config.threads if req.threads is None else req.threads
        query_suite = req.query_suite or self.config.query_suite

        # --- building_database ---
        self._transition(outcome, STATE_BUILDING_DATABASE)
        t0 = time.time()
        try:
            paths = prepare_scan_paths(
                req.output_dir,
                database_name=req.database_name,
                output_format=req.output_format,
                now=self._clock(),
                create=not req.dry_run,
            )
            outcome.paths = paths
            create_database(
                paths.database,
                req.source_root,
                language,
                config=self.config,
                runner=runner,
                remove_existing=not req.dry_run,
            )
        except (ScanError, OSError) as e:
            return self._fail(outcome, e)
        timings[STATE_BUILDING_DATABASE] = time.time() - t0

        # --- analyzing ---
        self._transition(outcome, STATE_ANALYZING)
        t0 = time.time()
        try:
            analyze_database(
                paths.database,
                query_suite,
                req.output_format,
                paths.results,
                config=self.config,
                runner=runner,
                threads=threads,
            )
        except (ScanError, OSError) as e:
            return self._fail(outcome, e)
        timings[STATE_ANALYZING] = time.time() - t0

        outcome.result = ScanResult(database_path=paths.database, output_file_path=paths.results)

        if req.dry_run:
            self._transition(outcome, STATE_DONE)
            return outcome

        # --- summarizing ---
        self._transition(outcome, STATE_SUMMARIZING)
        try:
            findings = load_findings(paths.results, req.output_format)
        except ParseError as e:
            logger.warning("Could not summarize results: %s", e)
            outcome.summary_error = e
        else:
            outcome.result = replace(outcome.result, findings=tuple(findings))
            outcome.histogram = SeverityHistogram.from_findings(findings)

        if self._write_metadata:
            meta = self._build_metadata(
                req,
                outcome,
                paths,
                language=language,
                query_suite=query_suite,
                threads=threads,
                timings=timings,
            )
            try:
                write_json(paths.metadata, meta)
                outcome.metadata_path = paths.metadata
            except OSError as e:
                logger.warning("Could not write run metadata %s: %s", paths.metadata, e)

        self._transition(outcome, STATE_DONE)
        return outcome

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def _build_metadata(
        self,
        req: ScanRequest,
        outcome: PipelineOutcome,
        paths: ScanPaths,
        *,
        language: str,
        query_suite: str,
        threads: int,
        timings: Dict[str, float],
    ) -> Dict[str, Any]:
        """Standard metadata dict written next to the result file."""
        commands: List[str] = [
            format_command(
                self.config.codeql_bin,
                build_create_args(paths.database, Path(req.source_root).resolve(), language),
            ),
            format_command(
                self.config.codeql_bin,
                build_analyze_args(paths.database, query_suite, req.output_format, paths.results, threads),
            ),
        ]

        summary: Optional[Dict[str, int]] = outcome.histogram.to_dict() if outcome.histogram else None

        return {
            "scanner": "codeql",
            "scanner_version": self._version_fn(self.config.codeql_bin),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source_root": str(Path(req.source_root).resolve()),
            "database_path": str(paths.database),
            "results_path": str(paths.results),
            "output_format": req.output_format,
            "language": language,
            "query_suite": query_suite,
            "threads": threads,
            "commands": commands,
            "stage_seconds": {k: round(v, 3) for k, v in timings.items()},
            "severity_counts": summary,
            "summary_error": str(outcome.summary_error) if outcome.summary_error else None,
        }


def run_scan(req: ScanRequest, *, config: CodeQLConfig, runner: Runner = run_command) -> PipelineOutcome:
    """Convenience wrapper: run one scan with a fresh driver."""
    return ScanPipelineDriver(config=config, runner=runner).run(req)

"""pipeline.pipeline

A single, high-level object that represents this repo's primary capability:
scan a source tree with CodeQL and summarize the findings.

Callers (CLI, scripts, CI) should build it via
:func:`pipeline.wiring.build_pipeline` rather than wiring the driver, config
and runner themselves.
"""

from __future__ import annotations

from collections.abc import Callable

from codeql_scan.domain.request import ScanRequest
from pipeline.models import PipelineOutcome


class ScanPipeline:
    """High-level facade over :class:`~pipeline.orchestrator.ScanPipelineDriver`."""

    def __init__(self, *, run_fn: Callable[[ScanRequest], PipelineOutcome]) -> None:
        self._run_fn = run_fn

    def run(self, req: ScanRequest) -> PipelineOutcome:
        """Run the full scan pipeline for one request."""
        return self._run_fn(req)

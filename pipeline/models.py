"""pipeline.models

Pipeline states and the outcome record returned by the driver.

State machine
-------------
  idle -> building_database -> analyzing -> summarizing -> done

``failed`` is a terminal state reachable from any non-terminal state. The
outcome records which stage failed and the underlying error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from codeql_scan.domain.finding import SeverityHistogram
from codeql_scan.domain.request import ScanRequest, ScanResult
from codeql_scan.errors import ParseError
from codeql_scan.io.layout import ScanPaths

STATE_IDLE = "idle"
STATE_BUILDING_DATABASE = "building_database"
STATE_ANALYZING = "analyzing"
STATE_SUMMARIZING = "summarizing"
STATE_DONE = "done"
STATE_FAILED = "failed"

TERMINAL_STATES = frozenset({STATE_DONE, STATE_FAILED})

STAGE_LABELS = {
    STATE_BUILDING_DATABASE: "Building database",
    STATE_ANALYZING: "Analyzing",
    STATE_SUMMARIZING: "Summarizing",
}


@dataclass(frozen=True)
class StageFailure:
    stage: str
    cause: Exception

    @property
    def exit_code(self) -> Optional[int]:
        code = getattr(self.cause, "exit_code", None)
        return int(code) if code is not None else None

    @property
    def label(self) -> str:
        return STAGE_LABELS.get(self.stage, self.stage)


@dataclass
class PipelineOutcome:
    request: ScanRequest
    state: str = STATE_IDLE
    transitions: List[str] = field(default_factory=lambda: [STATE_IDLE])

    paths: Optional[ScanPaths] = None
    result: Optional[ScanResult] = None
    histogram: Optional[SeverityHistogram] = None

    failure: Optional[StageFailure] = None
    # Set when the scan succeeded but the result file could not be summarized.
    summary_error: Optional[ParseError] = None

    metadata_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.state == STATE_DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

"""codeql_scan.errors

Typed errors raised by the scan pipeline.

Fatal errors abort the pipeline at the stage where they occur. ``ParseError``
is the one non-fatal error: the scan itself has already succeeded when the
result file is parsed, so the driver only logs it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union


class ScanError(Exception):
    """Base class for every error raised by the pipeline."""


class PathNotFoundError(ScanError):
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        super().__init__(f"Path not found: {self.path}")


class ProcessLaunchError(ScanError):
    """The executable could not be found or started."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        self.reason = reason
        super().__init__(f"Could not launch '{executable}': {reason}")


class ToolExitError(ScanError):
    """The external tool ran but reported failure through its exit code."""

    action = "command"

    def __init__(self, exit_code: int, command: Optional[Sequence[str]] = None) -> None:
        self.exit_code = int(exit_code)
        self.command = list(command) if command else []
        super().__init__(f"{self.action} failed with exit code {self.exit_code}")


class DatabaseCreationError(ToolExitError):
    action = "database creation"


class AnalysisError(ToolExitError):
    action = "database analysis"


class ParseError(ScanError):
    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not parse {self.path}: {reason}")

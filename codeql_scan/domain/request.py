"""codeql_scan.domain.request

Input/output records for one scan.

``ScanRequest`` is owned by the caller (the CLI) and handed to the pipeline
driver. ``ScanResult`` is produced by the driver only once the analyzer has run
successfully.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .finding import Finding

FORMAT_STRUCTURED = "structured"
FORMAT_TABULAR = "tabular"
FORMAT_GRAPH = "graph"

OUTPUT_FORMATS: Tuple[str, ...] = (FORMAT_STRUCTURED, FORMAT_TABULAR, FORMAT_GRAPH)

DEFAULT_DATABASE_NAME = "codeql-db"


def validate_database_name(name: str) -> str:
    """Return ``name`` if it is a single directory name; raise ValueError otherwise.

    The database directory is deleted before each rebuild, so the name must
    never point outside (or at) the output directory.
    """
    if not name or not str(name).strip():
        raise ValueError("database_name must not be empty.")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise ValueError(f"database_name must be a plain directory name, got {name!r}.")
    return name


@dataclass(frozen=True)
class ScanRequest:
    source_root: Path
    output_dir: Path
    query_suite: str
    database_name: str = DEFAULT_DATABASE_NAME
    output_format: str = FORMAT_STRUCTURED

    # Optional overrides; None means "use the analyzer config".
    language: Optional[str] = None
    threads: Optional[int] = None

    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format {self.output_format!r}. Valid: {list(OUTPUT_FORMATS)}"
            )
        validate_database_name(self.database_name)


@dataclass(frozen=True)
class ScanResult:
    database_path: Path
    output_file_path: Path
    findings: Tuple[Finding, ...] = ()

"""codeql_scan.io.layout

Canonical output layout for one scan:

  <output_dir>/<database_name>/                      (analysis database)
  <output_dir>/scan-results-<timestamp>.<ext>        (result file)
  <output_dir>/scan-results-<timestamp>.metadata.json

The timestamp comes from the wall clock with one-second resolution. Two runs
inside the same second into the same directory share a result path; that is
accepted rather than handled.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

from codeql_scan.domain.request import FORMAT_GRAPH, FORMAT_STRUCTURED, FORMAT_TABULAR

RESULTS_PREFIX = "scan-results"

FORMAT_EXTENSIONS: Dict[str, str] = {
    FORMAT_STRUCTURED: "sarif",
    FORMAT_TABULAR: "csv",
    FORMAT_GRAPH: "dot",
}


@dataclass(frozen=True)
class ScanPaths:
    """Artifact paths for one scan."""

    output_dir: Path
    database: Path
    results: Path
    metadata: Path
    timestamp: str


def format_timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d-%H%M%S")


def results_filename(timestamp: str, output_format: str) -> str:
    try:
        ext = FORMAT_EXTENSIONS[output_format]
    except KeyError:
        raise ValueError(
            f"Unknown output format {output_format!r}. Valid: {sorted(FORMAT_EXTENSIONS)}"
        ) from None
    return f"{RESULTS_PREFIX}-{timestamp}.{ext}"


def prepare_scan_paths(
    output_dir: Union[str, Path],
    *,
    database_name: str,
    output_format: str,
    now: Optional[datetime] = None,
    create: bool = True,
) -> ScanPaths:
    """Resolve (and by default create) the output directory and derive paths.

    The database directory itself is not created here; the database builder
    owns its lifecycle.
    """
    out = Path(output_dir).expanduser().resolve()
    database = out / database_name
    if database.parent != out or database.name == "..":
        raise ValueError(f"Database {database_name!r} does not resolve to a directory directly under {out}")

    if create:
        out.mkdir(parents=True, exist_ok=True)

    ts = format_timestamp(now)
    return ScanPaths(
        output_dir=out,
        database=database,
        results=out / results_filename(ts, output_format),
        metadata=out / f"{RESULTS_PREFIX}-{ts}.metadata.json",
        timestamp=ts,
    )

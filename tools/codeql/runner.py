"""tools/codeql/runner.py

Tool-specific execution plumbing for CodeQL.

Keeps CodeQL CLI quirks (flag spelling, format names) close to the tool:

  codeql database create <db> --language=<lang> --source-root=<src> --build-mode=none --overwrite
  codeql database analyze <db> <suite> --format=<fmt> --output=<path> --threads=<n>

Both functions take a ``runner`` so callers (and tests) decide how the process
is actually launched.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Union

from codeql_scan.domain.request import FORMAT_GRAPH, FORMAT_STRUCTURED, FORMAT_TABULAR
from codeql_scan.errors import AnalysisError, DatabaseCreationError, PathNotFoundError, ProcessLaunchError
from tools.core_cmd import Runner, capture_command, run_command

from .types import CodeQLConfig

logger = logging.getLogger(__name__)

CODEQL_FALLBACKS = [
    "/opt/homebrew/bin/codeql",
    "/usr/local/bin/codeql",
    "/opt/codeql/codeql",
]

# Output format -> value of `codeql database analyze --format=...`
CODEQL_FORMATS: Dict[str, str] = {
    FORMAT_STRUCTURED: "sarif-latest",
    FORMAT_TABULAR: "csv",
    FORMAT_GRAPH: "dot",
}


def codeql_version(codeql_bin: str) -> str:
    try:
        res = capture_command([codeql_bin, "version", "--format=terse"], timeout_seconds=60)
    except ProcessLaunchError:
        return "unknown"
    if res.exit_code != 0:
        return "unknown"
    return (res.stdout or res.stderr).strip() or "unknown"


def build_create_args(db_path: Path, source_root: Path, language: str) -> List[str]:
    return [
        "database",
        "create",
        str(db_path),
        f"--language={language}",
        f"--source-root={source_root}",
        "--build-mode=none",
        "--overwrite",
    ]


def build_analyze_args(
    db_path: Path,
    query_suite: str,
    output_format: str,
    output_path: Path,
    threads: int,
) -> List[str]:
    try:
        fmt = CODEQL_FORMATS[output_format]
    except KeyError:
        raise ValueError(
            f"Unknown output format {output_format!r}. Valid: {sorted(CODEQL_FORMATS)}"
        ) from None
    return [
        "database",
        "analyze",
        str(db_path),
        str(query_suite),
        f"--format={fmt}",
        f"--output={output_path}",
        f"--threads={int(threads)}",
    ]


def _remove_existing_database(db_path: Path) -> None:
    if db_path.is_dir() and not db_path.is_symlink():
        logger.info("Removing existing database: %s", db_path)
        shutil.rmtree(db_path)
    elif db_path.exists() or db_path.is_symlink():
        logger.info("Removing existing path at database location: %s", db_path)
        db_path.unlink()


def create_database(
    db_path: Union[str, Path],
    source_root: Union[str, Path],
    language: Optional[str] = None,
    *,
    config: CodeQLConfig,
    runner: Runner = run_command,
    remove_existing: bool = True,
) -> None:
    """Create (or rebuild) a CodeQL database for ``source_root`` without compiling.

    Any previous database at ``db_path`` is deleted first so stale databases
    never survive a rebuild.
    """
    src = Path(source_root).expanduser().resolve()
    if not src.is_dir():
        raise PathNotFoundError(src)

    db = Path(db_path).expanduser().resolve()
    if remove_existing:
        _remove_existing_database(db)

    args = build_create_args(db, src, language or config.language)
    exit_code = runner(config.codeql_bin, args)
    if exit_code != 0:
        raise DatabaseCreationError(exit_code, [config.codeql_bin, *args])


def analyze_database(
    db_path: Union[str, Path],
    query_suite: Optional[str],
    output_format: str,
    output_path: Union[str, Path],
    *,
    config: CodeQLConfig,
    runner: Runner = run_command,
    threads: Optional[int] = None,
) -> None:
    """Run ``query_suite`` against the database and write one result file."""
    out = Path(output_path)

    args = build_analyze_args(
        Path(db_path),
        query_suite or config.query_suite,
        output_format,
        out,
        config.threads if threads is None else threads,
    )
    exit_code = runner(config.codeql_bin, args)
    if exit_code != 0:
        raise AnalysisError(exit_code, [config.codeql_bin, *args])

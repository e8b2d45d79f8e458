"""pipeline.config

Analyzer configuration.

Settings are read from the environment (optionally populated from a repo-root
``.env`` by :mod:`pipeline.wiring`) and frozen into a
:class:`~tools.codeql.types.CodeQLConfig` that is passed explicitly into every
CodeQL call. Nothing here mutates ``os.environ`` or ``PATH``.

Environment variables
---------------------
CODEQL_BIN          explicit path/name of the codeql executable
CODEQL_HOME         CodeQL install directory; ``<CODEQL_HOME>/codeql`` is tried
CODEQL_LANGUAGE     extractor language (default: cpp)
CODEQL_QUERY_SUITE  query suite to run (default: cpp-security-extended)
CODEQL_THREADS      analyzer thread count, passed through as-is (default: 0)
SCAN_OUTPUT_DIR     default output directory (default: codeql-results)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from codeql_scan.errors import ProcessLaunchError
from tools.codeql.runner import CODEQL_FALLBACKS
from tools.codeql.types import DEFAULT_LANGUAGE, DEFAULT_QUERY_SUITE, CodeQLConfig
from tools.core_cmd import which_or_raise

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "codeql-results"


def _env_str(env: Mapping[str, str], key: str) -> Optional[str]:
    v = env.get(key)
    if v is None:
        return None
    v = v.strip()
    return v or None


def parse_threads(raw: Optional[str]) -> int:
    if raw is None or not str(raw).strip():
        return 0
    try:
        return int(str(raw).strip())
    except ValueError:
        raise SystemExit(f"ERROR: CODEQL_THREADS must be an integer, got {raw!r}.") from None


def codeql_candidates(env: Mapping[str, str]) -> List[str]:
    out: List[str] = []
    home = _env_str(env, "CODEQL_HOME")
    if home:
        out.append(str(Path(home).expanduser() / "codeql"))
    out += CODEQL_FALLBACKS
    return out


def resolve_codeql_bin(env: Mapping[str, str], override: Optional[str] = None) -> str:
    """Resolve the codeql executable.

    When nothing can be found the bare name is returned; launching it later
    fails with ProcessLaunchError inside the pipeline, where the failure is
    attributed to a stage.
    """
    name = override or _env_str(env, "CODEQL_BIN") or "codeql"
    try:
        return which_or_raise(name, fallbacks=codeql_candidates(env))
    except ProcessLaunchError as e:
        logger.debug("%s", e)
        return name


def load_codeql_config(
    *,
    env: Optional[Mapping[str, str]] = None,
    codeql_bin: Optional[str] = None,
    language: Optional[str] = None,
    query_suite: Optional[str] = None,
    threads: Optional[int] = None,
) -> CodeQLConfig:
    """Build the analyzer config. Explicit arguments (CLI flags) win over env."""
    env = os.environ if env is None else env
    return CodeQLConfig(
        codeql_bin=resolve_codeql_bin(env, codeql_bin),
        language=language or _env_str(env, "CODEQL_LANGUAGE") or DEFAULT_LANGUAGE,
        query_suite=query_suite or _env_str(env, "CODEQL_QUERY_SUITE") or DEFAULT_QUERY_SUITE,
        threads=threads if threads is not None else parse_threads(env.get("CODEQL_THREADS")),
    )


def default_output_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    return Path(_env_str(env, "SCAN_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR)

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LANGUAGE = "cpp"
DEFAULT_QUERY_SUITE = "codeql/cpp-queries:codeql-suites/cpp-security-extended.qls"


@dataclass(frozen=True)
class CodeQLConfig:
    """Analyzer settings passed explicitly into every CodeQL call."""
    codeql_bin: str
    language: str = DEFAULT_LANGUAGE
    query_suite: str = DEFAULT_QUERY_SUITE
    # 0 lets the analyzer pick (one thread per core).
    threads: int = 0

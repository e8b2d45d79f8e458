"""codeql_scan.domain

Tool-agnostic domain types for one scan.
"""

from __future__ import annotations

from .finding import (
    SEVERITIES,
    SEVERITY_ERROR,
    SEVERITY_NOTE,
    SEVERITY_UNKNOWN,
    SEVERITY_WARNING,
    Finding,
    SeverityHistogram,
    normalize_severity,
)
from .request import (
    FORMAT_GRAPH,
    FORMAT_STRUCTURED,
    FORMAT_TABULAR,
    OUTPUT_FORMATS,
    ScanRequest,
    ScanResult,
    validate_database_name,
)

__all__ = [
    "FORMAT_GRAPH",
    "FORMAT_STRUCTURED",
    "FORMAT_TABULAR",
    "Finding",
    "OUTPUT_FORMATS",
    "SEVERITIES",
    "SEVERITY_ERROR",
    "SEVERITY_NOTE",
    "SEVERITY_UNKNOWN",
    "SEVERITY_WARNING",
    "ScanRequest",
    "ScanResult",
    "SeverityHistogram",
    "normalize_severity",
    "validate_database_name",
]

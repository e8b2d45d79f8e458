"""codeql_scan.domain.finding

Canonical representation of one analyzer finding, plus the severity histogram
used for the human summary.

Severity vocabulary
-------------------
Findings carry one of four severities: ``error``, ``warning``, ``note`` and
``unknown``. Analyzer outputs are not consistent about the spelling (SARIF uses
``level`` values, CodeQL's CSV uses ``recommendation`` for notes), so every
parser funnels raw values through :func:`normalize_severity`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_NOTE = "note"
SEVERITY_UNKNOWN = "unknown"

SEVERITIES: Tuple[str, ...] = (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    SEVERITY_NOTE,
    SEVERITY_UNKNOWN,
)

_SEVERITY_ALIASES: Dict[str, str] = {
    "recommendation": SEVERITY_NOTE,
}


def normalize_severity(raw: Any) -> str:
    if raw is None:
        return SEVERITY_UNKNOWN
    s = str(raw).strip().lower()
    s = _SEVERITY_ALIASES.get(s, s)
    if s in (SEVERITY_ERROR, SEVERITY_WARNING, SEVERITY_NOTE):
        return s
    return SEVERITY_UNKNOWN


@dataclass(frozen=True)
class Finding:
    """One reported issue instance."""

    name: str
    severity: str
    message: str

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"Invalid severity {self.severity!r}. Valid: {list(SEVERITIES)}")


@dataclass(frozen=True)
class SeverityHistogram:
    """Finding counts grouped by severity, in first-seen order.

    Built once from a finding sequence and never persisted.
    """

    counts: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "SeverityHistogram":
        counts: Dict[str, int] = {}
        for f in findings:
            counts[f.severity] = counts.get(f.severity, 0) + 1
        return cls(counts=counts)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def is_empty(self) -> bool:
        """True when no findings were reported ("no issues found")."""
        return self.total == 0

    def items(self) -> List[Tuple[str, int]]:
        return list(self.counts.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self.counts)

    def __getitem__(self, severity: str) -> int:
        return self.counts[severity]

    def get(self, severity: str, default: int = 0) -> int:
        return self.counts.get(severity, default)

    def to_dict(self) -> Dict[str, int]:
        return dict(self.counts)

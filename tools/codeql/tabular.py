"""tools/codeql/tabular.py

Tabular (CSV) result parsing.

Two shapes are accepted:

* a header row containing at least ``Name``, ``Severity`` and ``Message``
  (matched case-insensitively, any column order)
* CodeQL's native header-less CSV, whose fixed columns start with
  ``name, description, severity, message, path, start line, ...``

Anything else is a :class:`ParseError`. All values are read as strings.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from codeql_scan.domain.finding import Finding, normalize_severity
from codeql_scan.errors import ParseError
from tools.io import read_text

REQUIRED_COLUMNS = ("name", "severity", "message")

# Column positions in CodeQL's header-less CSV output.
NATIVE_COLUMNS: Dict[str, int] = {"name": 0, "severity": 2, "message": 3}

_NATIVE_SEVERITIES = {"error", "warning", "recommendation", "note"}


def _header_columns(row: Sequence[str]) -> Optional[Dict[str, int]]:
    normalized = [c.strip().lower() for c in row]
    if not all(col in normalized for col in REQUIRED_COLUMNS):
        return None
    return {col: normalized.index(col) for col in REQUIRED_COLUMNS}


def _looks_native(row: Sequence[str]) -> bool:
    if len(row) <= max(NATIVE_COLUMNS.values()):
        return False
    return row[NATIVE_COLUMNS["severity"]].strip().lower() in _NATIVE_SEVERITIES


def findings_from_rows(rows: List[List[str]], *, source: Path) -> List[Finding]:
    rows = [r for r in rows if any(c.strip() for c in r)]
    if not rows:
        return []

    columns = _header_columns(rows[0])
    if columns is not None:
        data_rows = rows[1:]
    elif _looks_native(rows[0]):
        columns = dict(NATIVE_COLUMNS)
        data_rows = rows
    else:
        raise ParseError(source, f"missing required columns {list(REQUIRED_COLUMNS)}")

    width = max(columns.values()) + 1
    findings: List[Finding] = []
    for n, row in enumerate(data_rows, start=1):
        if len(row) < width:
            raise ParseError(source, f"row {n} has {len(row)} columns, expected at least {width}")
        findings.append(
            Finding(
                name=row[columns["name"]].strip(),
                severity=normalize_severity(row[columns["severity"]]),
                message=row[columns["message"]],
            )
        )
    return findings


def parse_csv_file(path: Path) -> List[Finding]:
    path = Path(path)
    if not path.is_file():
        raise ParseError(path, "file does not exist")
    try:
        text = read_text(path)
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid UTF-8 ({e})") from e
    except OSError as e:
        raise ParseError(path, str(e)) from e

    try:
        rows = list(csv.reader(io.StringIO(text), strict=True))
    except csv.Error as e:
        raise ParseError(path, f"invalid CSV ({e})") from e
    return findings_from_rows(rows, source=path)

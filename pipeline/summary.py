"""pipeline.summary

Result summarization: parse the analyzer's result file and count findings by
severity.

Result files are analysis reports, not raw logs, so they are loaded fully
into memory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Union

from codeql_scan.domain.finding import Finding, SeverityHistogram
from codeql_scan.domain.request import FORMAT_GRAPH, FORMAT_STRUCTURED, FORMAT_TABULAR, OUTPUT_FORMATS
from codeql_scan.errors import ParseError
from tools.codeql.sarif import parse_sarif_file
from tools.codeql.tabular import parse_csv_file

PARSERS: Dict[str, Callable[[Path], List[Finding]]] = {
    FORMAT_STRUCTURED: parse_sarif_file,
    FORMAT_TABULAR: parse_csv_file,
}


def load_findings(path: Union[str, Path], output_format: str) -> List[Finding]:
    """Return the ordered findings in ``path``; raises ParseError."""
    path = Path(path)
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format {output_format!r}. Valid: {list(OUTPUT_FORMATS)}")
    if output_format == FORMAT_GRAPH:
        raise ParseError(path, "graph output cannot be summarized")
    return PARSERS[output_format](path)


def summarize(path: Union[str, Path], output_format: str) -> SeverityHistogram:
    return SeverityHistogram.from_findings(load_findings(path, output_format))

"""codeql_scan

Core package namespace for the CodeQL no-build scan pipeline.

This package owns the contracts shared by every other layer:

* domain types (scan request/result, findings, severity histogram)
* the error taxonomy
* filesystem layout rules (where the database and result files go)

It must not import ``tools`` or ``pipeline``; those layers depend on it, never
the other way round.
"""

from __future__ import annotations

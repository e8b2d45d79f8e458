#!/usr/bin/env python3
"""tools/io.py

Single source of truth for tiny filesystem helpers used across the pipeline.

Keep the actual implementations here and have other modules import them, so
two copies of ``write_json`` never drift apart (formatting options, newline
handling, atomicity).

This module contains ONLY filesystem IO (no parsing policy).
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def write_json(path: Path, data: Any) -> None:
    """Write pretty JSON to disk (UTF-8), atomically via a sibling temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_json(path: Path) -> Any:
    """Read JSON from disk (UTF-8)."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def read_text(path: Path) -> str:
    """Read a whole text file (strict UTF-8, newlines untranslated)."""
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest


class FakeCodeQL:
    """Stands in for the codeql executable.

    ``database create`` makes the database directory; ``database analyze``
    writes ``results_text`` to the ``--output`` path. Exit codes per
    subcommand come from ``exit_codes``.
    """

    def __init__(self, *, exit_codes: Optional[Dict[str, int]] = None, results_text: Optional[str] = None) -> None:
        self.exit_codes = exit_codes or {}
        self.results_text = results_text
        self.calls: List[Tuple[str, List[str]]] = []

    @property
    def subcommands(self) -> List[str]:
        return [args[1] for _, args in self.calls]

    def __call__(self, executable: str, args: Sequence[str]) -> int:
        args = [str(a) for a in args]
        self.calls.append((executable, args))
        sub = args[1]
        code = self.exit_codes.get(sub, 0)

        if sub == "create" and code == 0:
            db = Path(args[2])
            db.mkdir(parents=True, exist_ok=True)
            (db / "codeql-database.yml").write_text("primaryLanguage: cpp\n", encoding="utf-8")

        if sub == "analyze" and code == 0 and self.results_text is not None:
            out = next(a for a in args if a.startswith("--output="))
            Path(out[len("--output="):]).write_text(self.results_text, encoding="utf-8")

        return code


@pytest.fixture
def fake_codeql():
    return FakeCodeQL


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    src.mkdir()
    (src / "main.cpp").write_text("int main() { return 0; }\n", encoding="utf-8")
    return src

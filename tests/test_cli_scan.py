from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli.commands.scan import run_scan
from pipeline.wiring import build_pipeline
from scan_cli import main, parse_args
from tools.codeql.types import CodeQLConfig

SARIF = json.dumps(
    {
        "runs": [
            {
                "results": [
                    {"ruleId": "a", "level": "error", "message": {"text": "x"}},
                    {"ruleId": "b", "level": "warning", "message": {"text": "y"}},
                    {"ruleId": "c", "level": "error", "message": {"text": "z"}},
                ]
            }
        ]
    }
)


def _pipeline(runner):
    return build_pipeline(config=CodeQLConfig(codeql_bin="codeql"), runner=runner, write_metadata=False)


def test_parse_args_defaults(source_root: Path) -> None:
    args = parse_args([str(source_root)])
    assert args.source_root == str(source_root)
    assert args.output_format == "structured"
    assert args.database_name == "codeql-db"
    assert args.threads is None
    assert not args.dry_run


def test_parse_args_rejects_unknown_format(source_root: Path) -> None:
    with pytest.raises(SystemExit):
        parse_args([str(source_root), "--format", "xml"])


@pytest.mark.parametrize("name", ["../precious", ".", ".."])
def test_parse_args_rejects_database_outside_output_dir(source_root: Path, name: str) -> None:
    with pytest.raises(SystemExit):
        parse_args([str(source_root), "--db-name", name])


def test_success_prints_breakdown(tmp_path: Path, source_root: Path, fake_codeql, capsys) -> None:
    args = parse_args([str(source_root), "--output-dir", str(tmp_path / "out"), "--codeql-bin", "codeql"])

    code = run_scan(args, _pipeline(fake_codeql(results_text=SARIF)))

    out = capsys.readouterr().out
    assert code == 0
    assert "Scan completed" in out
    assert "scan-results-" in out
    assert "error   : 2" in out
    assert "warning : 1" in out
    assert "total   : 3" in out


def test_no_issues_message(tmp_path: Path, source_root: Path, fake_codeql, capsys) -> None:
    args = parse_args([str(source_root), "-o", str(tmp_path / "out"), "--codeql-bin", "codeql"])

    code = run_scan(args, _pipeline(fake_codeql(results_text='{"runs": [{"results": []}]}')))

    assert code == 0
    assert "No issues found" in capsys.readouterr().out


def test_unparseable_results_still_exit_zero(tmp_path: Path, source_root: Path, fake_codeql, capsys) -> None:
    args = parse_args([str(source_root), "-o", str(tmp_path / "out"), "--format", "tabular", "--codeql-bin", "codeql"])

    code = run_scan(args, _pipeline(fake_codeql(results_text="Rule,Level\nx,y\n")))

    assert code == 0
    assert "Could not summarize" in capsys.readouterr().out


def test_stage_failure_exits_one_and_names_stage(tmp_path: Path, source_root: Path, fake_codeql, capsys) -> None:
    args = parse_args([str(source_root), "-o", str(tmp_path / "out"), "--codeql-bin", "codeql"])

    code = run_scan(args, _pipeline(fake_codeql(exit_codes={"analyze": 7})))

    out = capsys.readouterr().out
    assert code == 1
    assert "Stage 'Analyzing' failed (exit code 7)" in out
    assert "Database left for inspection" in out


def test_main_dry_run_needs_no_analyzer(tmp_path: Path, source_root: Path, capsys) -> None:
    code = main(
        [
            str(source_root),
            "-o",
            str(tmp_path / "out"),
            "--codeql-bin",
            "definitely-not-on-path-codeql",
            "--dry-run",
        ]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "definitely-not-on-path-codeql database create" in out
    assert "definitely-not-on-path-codeql database analyze" in out
    assert "Dry run completed" in out
    assert not (tmp_path / "out").exists()


def test_main_missing_source_root_exits_one(tmp_path: Path, capsys) -> None:
    code = main([str(tmp_path / "missing"), "-o", str(tmp_path / "out"), "--codeql-bin", "codeql"])

    assert code == 1
    assert "Stage 'Building database' failed" in capsys.readouterr().out


def test_sample_fixtures_are_scannable_source_root(tmp_path: Path, fake_codeql) -> None:
    fixtures = Path(__file__).resolve().parent / "fixtures" / "vulnerable_cpp"
    runner = fake_codeql(results_text=SARIF)
    args = parse_args([str(fixtures), "-o", str(tmp_path / "out"), "--codeql-bin", "codeql"])

    assert run_scan(args, _pipeline(runner)) == 0
    assert f"--source-root={fixtures}" in runner.calls[0][1]

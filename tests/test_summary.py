from __future__ import annotations

import json
from pathlib import Path

import pytest

from codeql_scan.domain.finding import Finding
from codeql_scan.errors import ParseError
from pipeline.summary import load_findings, summarize


def _write_sarif(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_empty_structured_result_is_no_issues(tmp_path: Path) -> None:
    p = _write_sarif(tmp_path / "r.sarif", {"runs": [{"results": []}]})

    hist = summarize(p, "structured")

    assert hist.is_empty
    assert hist.total == 0
    assert hist.to_dict() == {}


def test_property_severity_wins_over_level(tmp_path: Path) -> None:
    p = _write_sarif(
        tmp_path / "r.sarif",
        {
            "runs": [
                {
                    "results": [
                        {
                            "ruleId": "cpp/overflow",
                            "message": {"text": "Buffer overflow"},
                            "properties": {"severity": "error"},
                            "level": "warning",
                        }
                    ]
                }
            ]
        },
    )

    findings = load_findings(p, "structured")

    assert findings == [Finding(name="cpp/overflow", severity="error", message="Buffer overflow")]


def test_level_used_when_no_property(tmp_path: Path) -> None:
    p = _write_sarif(
        tmp_path / "r.sarif",
        {"runs": [{"results": [{"ruleId": "a", "message": {"text": "m"}, "level": "note"}]}]},
    )
    assert summarize(p, "structured").to_dict() == {"note": 1}


def test_rule_definition_is_last_resort(tmp_path: Path) -> None:
    p = _write_sarif(
        tmp_path / "r.sarif",
        {
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "rules": [
                                {"id": "cpp/a", "properties": {"problem.severity": "recommendation"}},
                                {"id": "cpp/b", "defaultConfiguration": {"level": "error"}},
                            ]
                        }
                    },
                    "results": [
                        {"ruleId": "cpp/a", "message": {"text": "a"}},
                        {"rule": {"index": 1}, "message": {"text": "b"}},
                        {"ruleId": "cpp/unlisted", "message": {"text": "c"}},
                    ],
                }
            ]
        },
    )

    findings = load_findings(p, "structured")

    assert [f.severity for f in findings] == ["note", "error", "unknown"]
    assert findings[1].name == ""


def test_structured_multiple_runs_keep_first_seen_order(tmp_path: Path) -> None:
    p = _write_sarif(
        tmp_path / "r.sarif",
        {
            "runs": [
                {"results": [{"ruleId": "w1", "level": "warning", "message": "plain"}]},
                {"results": [{"name": "e1", "level": "error"}, {"ruleId": "w2", "level": "WARNING"}]},
                {},
            ]
        },
    )

    hist = summarize(p, "structured")

    assert hist.items() == [("warning", 2), ("error", 1)]
    assert load_findings(p, "structured")[0].message == "plain"


def test_tabular_counts_by_severity(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text(
        "Name,Severity,Message\n"
        "A,error,first\n"
        "B,warning,second\n"
        "C,error,third\n",
        encoding="utf-8",
    )

    hist = summarize(p, "tabular")

    assert hist.to_dict() == {"error": 2, "warning": 1}
    assert list(hist) == ["error", "warning"]


def test_tabular_header_is_case_insensitive_and_order_free(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text('message,Path,SEVERITY,name\n"says ""hi"", twice",a.cpp,Warning,R1\n', encoding="utf-8")

    assert load_findings(p, "tabular") == [Finding(name="R1", severity="warning", message='says "hi", twice')]


def test_tabular_native_codeql_csv_without_header(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text(
        '"Uncontrolled data used in OS command","desc","error","This argument flows to system.","/user_service.cpp","16","12","16","18"\n'
        '"Poorly documented function","desc","recommendation","Poorly documented.","/user_service.cpp","8","6","8","33"\n',
        encoding="utf-8",
    )

    findings = load_findings(p, "tabular")

    assert [f.severity for f in findings] == ["error", "note"]
    assert findings[0].name == "Uncontrolled data used in OS command"


def test_tabular_empty_file_is_no_issues(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text("", encoding="utf-8")
    assert summarize(p, "tabular").is_empty


def test_tabular_header_only_is_no_issues(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text("Name,Severity,Message\n", encoding="utf-8")
    assert summarize(p, "tabular").is_empty


def test_tabular_unknown_columns_raise_parse_error(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text("Rule,Level,Text\nA,error,x\n", encoding="utf-8")
    with pytest.raises(ParseError):
        summarize(p, "tabular")


def test_tabular_short_row_raises_parse_error(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_text("Name,Severity,Message\nA,error\n", encoding="utf-8")
    with pytest.raises(ParseError):
        summarize(p, "tabular")


def test_missing_file_raises_parse_error(tmp_path: Path) -> None:
    with pytest.raises(ParseError) as ei:
        summarize(tmp_path / "nope.sarif", "structured")
    assert ei.value.path == tmp_path / "nope.sarif"


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[]",
        '{"version": "2.1.0"}',
        '{"runs": [{"results": {}}]}',
        '{"runs": [{"results": ["x"]}]}',
        '{"runs": [{"tool": "codeql", "results": []}]}',
        '{"runs": [{"tool": [], "results": []}]}',
        '{"runs": [{"tool": {"driver": []}, "results": []}]}',
        '{"runs": [{"tool": {"driver": "codeql"}, "results": []}]}',
        '{"runs": [{"tool": {"driver": {"rules": {}}}, "results": []}]}',
    ],
)
def test_corrupt_structured_file_raises_parse_error(tmp_path: Path, text: str) -> None:
    p = tmp_path / "r.sarif"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ParseError):
        summarize(p, "structured")


def test_graph_output_cannot_be_summarized(tmp_path: Path) -> None:
    p = tmp_path / "r.dot"
    p.write_text("digraph {}", encoding="utf-8")
    with pytest.raises(ParseError):
        summarize(p, "graph")


def test_unknown_format_is_a_programming_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        summarize(tmp_path / "r.xml", "xml")


@pytest.mark.parametrize(
    "result",
    [
        {"ruleId": "a", "level": "error", "message": ["not", "an", "object"]},
        {"ruleId": "a", "level": "error", "message": {"text": 3}},
        {"ruleId": "a", "level": "error", "properties": "high"},
        {"ruleId": "a", "level": "error", "rule": "a"},
    ],
)
def test_odd_result_fields_are_tolerated(tmp_path: Path, result) -> None:
    doc = {"runs": [{"tool": {"driver": {"rules": ["x", {"id": 1}]}}, "results": [result]}]}
    p = _write_sarif(tmp_path / "r.sarif", doc)

    findings = load_findings(p, "structured")

    assert findings == [Finding(name="a", severity="error", message="")]


def test_tabular_invalid_utf8_raises_parse_error(tmp_path: Path) -> None:
    p = tmp_path / "r.csv"
    p.write_bytes(b"Name,Severity,Message\nA,error,caf\xe9\n")
    with pytest.raises(ParseError):
        summarize(p, "tabular")

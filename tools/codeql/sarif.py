"""tools/codeql/sarif.py

Structured (SARIF) result parsing.

Severity resolution for one result, first match wins:

1. ``properties.severity`` on the result
2. the result's top-level ``level``
3. the rule definition in ``tool.driver.rules``: ``properties["problem.severity"]``,
   then ``defaultConfiguration.level``
4. ``unknown``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from codeql_scan.domain.finding import SEVERITY_UNKNOWN, Finding, normalize_severity
from codeql_scan.errors import ParseError
from tools.io import read_json


def driver_rules(run_obj: Dict[str, Any], *, source: Path, index: int) -> List[Any]:
    """Return ``tool.driver.rules`` for one run; absent levels mean no rules."""
    tool = run_obj.get("tool")
    if tool is None:
        return []
    if not isinstance(tool, dict):
        raise ParseError(source, f"runs[{index}].tool is not an object")
    driver = tool.get("driver")
    if driver is None:
        return []
    if not isinstance(driver, dict):
        raise ParseError(source, f"runs[{index}].tool.driver is not an object")
    rules = driver.get("rules")
    if rules is None:
        return []
    if not isinstance(rules, list):
        raise ParseError(source, f"runs[{index}].tool.driver.rules is not a list")
    return rules


def rules_by_id(rules: List[Any]) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for r in rules:
        if isinstance(r, dict) and isinstance(r.get("id"), str):
            out[r["id"]] = r
    return out


def result_rule_id(res: Dict[str, Any]) -> Optional[str]:
    rid = res.get("ruleId")
    if isinstance(rid, str) and rid.strip():
        return rid.strip()
    rule = res.get("rule")
    if isinstance(rule, dict) and isinstance(rule.get("id"), str) and rule["id"].strip():
        return rule["id"].strip()
    name = res.get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    return None


def _rule_def(res: Dict[str, Any], rules: List[Any], rmap: Dict[str, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    rid = result_rule_id(res)
    if rid and rid in rmap:
        return rmap[rid]

    idx = res.get("ruleIndex")
    rule = res.get("rule")
    if idx is None and isinstance(rule, dict):
        idx = rule.get("index")
    if isinstance(idx, int) and not isinstance(idx, bool):
        if 0 <= idx < len(rules) and isinstance(rules[idx], dict):
            return rules[idx]
    return None


def result_message(res: Dict[str, Any]) -> str:
    msg = res.get("message")
    if isinstance(msg, dict):
        text = msg.get("text")
        if isinstance(text, str):
            return text
        markdown = msg.get("markdown")
        if isinstance(markdown, str):
            return markdown
        return ""
    if isinstance(msg, str):
        return msg
    return ""


def result_severity(res: Dict[str, Any], rule_def: Optional[Dict[str, Any]] = None) -> str:
    props = res.get("properties")
    if isinstance(props, dict) and props.get("severity") not in (None, ""):
        return normalize_severity(props.get("severity"))

    if res.get("level") not in (None, ""):
        return normalize_severity(res.get("level"))

    if isinstance(rule_def, dict):
        rprops = rule_def.get("properties")
        if isinstance(rprops, dict) and rprops.get("problem.severity") not in (None, ""):
            return normalize_severity(rprops.get("problem.severity"))
        dc = rule_def.get("defaultConfiguration")
        if isinstance(dc, dict) and dc.get("level") not in (None, ""):
            return normalize_severity(dc.get("level"))

    return SEVERITY_UNKNOWN


def findings_from_sarif(data: Any, *, source: Path) -> List[Finding]:
    """Extract findings from an already-decoded SARIF document, in file order."""
    if not isinstance(data, dict):
        raise ParseError(source, "top-level value is not an object")
    runs = data.get("runs")
    if not isinstance(runs, list):
        raise ParseError(source, "missing 'runs' list")

    findings: List[Finding] = []
    for i, run_obj in enumerate(runs):
        if not isinstance(run_obj, dict):
            raise ParseError(source, f"runs[{i}] is not an object")
        results = run_obj.get("results")
        if results is None:
            continue
        if not isinstance(results, list):
            raise ParseError(source, f"runs[{i}].results is not a list")

        rules = driver_rules(run_obj, source=source, index=i)
        rmap = rules_by_id(rules)
        for j, res in enumerate(results):
            if not isinstance(res, dict):
                raise ParseError(source, f"runs[{i}].results[{j}] is not an object")
            rdef = _rule_def(res, rules, rmap)
            findings.append(
                Finding(
                    name=result_rule_id(res) or "",
                    severity=result_severity(res, rdef),
                    message=result_message(res),
                )
            )
    return findings


def parse_sarif_file(path: Path) -> List[Finding]:
    path = Path(path)
    if not path.is_file():
        raise ParseError(path, "file does not exist")
    try:
        data = read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(path, f"invalid JSON ({e})") from e
    except OSError as e:
        raise ParseError(path, str(e)) from e
    return findings_from_sarif(data, source=path)

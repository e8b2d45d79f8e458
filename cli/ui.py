from __future__ import annotations

from codeql_scan.domain.request import ScanRequest
from pipeline.models import PipelineOutcome


def print_scan_header(req: ScanRequest) -> None:
    print("\n🚀 Running CodeQL scan")
    print(f"  Source   : {req.source_root}")
    print(f"  Output   : {req.output_dir}")
    print(f"  Format   : {req.output_format}")
    print(f"  Database : {req.database_name}")


def print_outcome(outcome: PipelineOutcome) -> None:
    """Print the human-readable end-of-run report."""
    if not outcome.ok:
        failure = outcome.failure
        if failure is None:
            print(f"\n❌ Scan did not finish (state: {outcome.state})")
            return
        code = failure.exit_code
        code_str = f" (exit code {code})" if code is not None else ""
        print(f"\n❌ Stage '{failure.label}' failed{code_str}: {failure.cause}")
        if outcome.paths is not None and outcome.paths.database.exists():
            print("  Database left for inspection:", outcome.paths.database)
        return

    if outcome.request.dry_run:
        print("\n✅ Dry run completed (nothing executed).")
        return

    print("\n✅ Scan completed.")
    if outcome.result is not None:
        print("📄 Results saved to:", outcome.result.output_file_path)
    if outcome.metadata_path is not None:
        print("📄 Metadata saved to:", outcome.metadata_path)

    if outcome.summary_error is not None:
        print(f"⚠️ Could not summarize results: {outcome.summary_error.reason}")
        return

    hist = outcome.histogram
    if hist is None or hist.is_empty:
        print("🎉 No issues found.")
        return

    width = max(len(sev) for sev in hist)
    print("\nFindings by severity:")
    for sev, count in hist.items():
        print(f"  {sev.ljust(width)} : {count}")
    print(f"  {'total'.ljust(width)} : {hist.total}")

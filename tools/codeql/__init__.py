"""CodeQL integration modules.

Split into:
  - types.py  : small shared data structures (CodeQLConfig)
  - runner.py : `codeql database create` / `codeql database analyze` invocations
  - sarif.py  : structured (SARIF) result parsing into findings
  - tabular.py: tabular (CSV) result parsing into findings

The pipeline driver (pipeline/orchestrator.py) is the orchestration layer.
"""

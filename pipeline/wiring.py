"""pipeline.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- load configuration / environment variables (``.env`` via python-dotenv)
- configure logging
- choose real vs stub implementations (useful for testing)
- build the high-level pipeline facade object
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from pipeline.orchestrator import ScanPipelineDriver
from pipeline.pipeline import ScanPipeline
from tools.codeql.types import CodeQLConfig
from tools.core_cmd import Runner, run_command

ROOT_DIR: Path = Path(__file__).resolve().parents[1]
ENV_PATH: Path = ROOT_DIR / ".env"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def load_env(dotenv_path: Path = ENV_PATH) -> bool:
    """Load KEY=VALUE pairs from ``.env``; variables already set always win."""
    if not dotenv_path.exists():
        return False
    return bool(load_dotenv(dotenv_path, override=False))


def configure_logging(*, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def build_pipeline(
    *,
    config: CodeQLConfig,
    quiet: bool = False,
    runner: Optional[Runner] = None,
    write_metadata: bool = True,
) -> ScanPipeline:
    """Build the high-level pipeline facade.

    ``runner`` swaps the process launcher (tests pass a fake); by default the
    analyzer's output streams are inherited, or discarded when ``quiet``.
    """
    if runner is None:
        runner = functools.partial(run_command, quiet=True) if quiet else run_command

    driver = ScanPipelineDriver(config=config, runner=runner, write_metadata=write_metadata)
    return ScanPipeline(run_fn=driver.run)

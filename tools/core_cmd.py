"""tools/core_cmd.py

Command-execution helpers shared by the analyzer adapters.

This module deliberately avoids tool-specific knowledge. It provides:

* :func:`which_or_raise` - resolve executables reliably across environments.
* :func:`run_command` - run a subprocess that inherits stdout/stderr and
  return its exit code.
* :func:`capture_command` - run a short subprocess and capture its output.
* :func:`dry_run_runner` - print a command instead of running it.

A non-zero exit code is never an error here; callers decide whether it is
fatal. Only launch failures raise (:class:`ProcessLaunchError`).
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from codeql_scan.errors import ProcessLaunchError

logger = logging.getLogger(__name__)

# (executable, args) -> exit code
Runner = Callable[[str, Sequence[str]], int]


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    elapsed_seconds: float
    command_str: str
    stdout: str
    stderr: str


def format_command(executable: str, args: Sequence[str]) -> str:
    return " ".join([str(executable), *[str(a) for a in args]])


def which_or_raise(bin_name: str, fallbacks: Optional[List[str]] = None) -> str:
    """Locate an executable and return its absolute path.

    ``bin_name`` may itself be a path to an executable file.
    """
    found = shutil.which(bin_name)
    if found:
        return found

    for candidate in fallbacks or []:
        p = Path(candidate)
        if p.is_file() and os.access(str(p), os.X_OK):
            return str(p)

    raise ProcessLaunchError(
        bin_name,
        f"not found on PATH. Tried fallbacks: {fallbacks or []}",
    )


def _merged_env(env: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    if env is None:
        return None
    env2 = os.environ.copy()
    env2.update(env)
    return env2


def run_command(
    executable: str,
    args: Sequence[str],
    *,
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
    quiet: bool = False,
) -> int:
    """Run ``executable args...`` (no ``shell=True``) and return its exit code.

    The child inherits this process's stdout/stderr unless ``quiet`` is set, in
    which case both are discarded.
    """
    cmd = [str(executable), *[str(a) for a in args]]
    logger.debug("Running: %s", " ".join(cmd))

    kwargs: Dict[str, object] = {}
    if quiet:
        kwargs["stdout"] = subprocess.DEVNULL
        kwargs["stderr"] = subprocess.DEVNULL

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=_merged_env(env),
            **kwargs,
        )
    except FileNotFoundError as e:
        raise ProcessLaunchError(str(executable), "executable not found") from e
    except PermissionError as e:
        raise ProcessLaunchError(str(executable), "permission denied") from e
    except OSError as e:
        raise ProcessLaunchError(str(executable), str(e)) from e

    return int(proc.returncode)


def capture_command(
    cmd: Sequence[str],
    *,
    cwd: Optional[Path] = None,
    timeout_seconds: int = 0,
) -> CmdResult:
    """Run a subprocess and capture stdout/stderr.

    A timeout is reported as exit code 124, like coreutils ``timeout``.
    """
    cmd = [str(c) for c in cmd]
    t0 = time.time()
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            text=True,
            capture_output=True,
            timeout=timeout_seconds if timeout_seconds and timeout_seconds > 0 else None,
        )
    except subprocess.TimeoutExpired as e:
        return CmdResult(
            exit_code=124,
            elapsed_seconds=time.time() - t0,
            command_str=" ".join(cmd),
            stdout=e.stdout if isinstance(e.stdout, str) else "",
            stderr=e.stderr if isinstance(e.stderr, str) else "",
        )
    except OSError as e:
        raise ProcessLaunchError(cmd[0] if cmd else "", str(e)) from e

    return CmdResult(
        exit_code=proc.returncode,
        elapsed_seconds=time.time() - t0,
        command_str=" ".join(cmd),
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )


def dry_run_runner(executable: str, args: Sequence[str]) -> int:
    print("  Command :", format_command(executable, args))
    print("  (dry-run: not executing)")
    return 0

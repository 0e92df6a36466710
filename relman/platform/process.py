"""Subprocess execution with Result-based error handling.

Wraps subprocess.run so git invocations hand back captured stdout or a
structured error instead of raising.

Usage:
    result = run(["git", "rev-parse", "HEAD"], cwd=repo_root)
    match result:
        case Ok(stdout):
            head = stdout.strip()
        case Err(error):
            console.error(f"git failed: {error.stderr}")
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from relman.core.result import Err, Ok, Result

__all__ = ["ProcessError", "overlay_env", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code of the process (-1 if it never ran).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        return f"{shown} failed (exit {self.returncode})"


def overlay_env(overrides: Mapping[str, str]) -> dict[str, str]:
    """The current environment with ``overrides`` applied on top."""
    env = dict(os.environ)
    env.update(overrides)
    return env


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    A non-zero exit, a timeout and a command that cannot be started all
    come back as ProcessError.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Full environment for the child (inherits the current one if None).
        timeout: Maximum seconds to wait (None for no limit).
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError(command, -1, partial, f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, "", str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)

"""Subprocess calls for post-install steps.

The installed ``hcp`` binary is invoked to check authentication and configure
its profile. Failures come back as ``ProcessError`` values so the caller
decides whether a failing command is a warning or an error:

    match run([str(binary), "auth", "print-access-token"]):
        case Ok(_):
            ...
        case Err(error):
            console.warning(str(error))
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePath

from hcp_setup.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero or could not be started.

    Attributes:
        command: Command line as executed
        returncode: Exit code, -1 if the process never ran or timed out
        stdout: Captured standard output (empty when not captured)
        stderr: Captured standard error, or the reason the command never ran
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        # Binaries run from the tool cache: show "hcp", not the cache path.
        head = [PurePath(self.command[0]).name, *self.command[1:3]] if self.command else []
        shown = " ".join(head)
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _failed(
    cmd: list[str], returncode: int, *, stdout: str = "", stderr: str = ""
) -> Err[ProcessError]:
    return Err(ProcessError(tuple(cmd), returncode, stdout, stderr))


def run(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run a command with its output captured.

    Nothing is echoed, so secrets printed by the command (access tokens) stay
    out of CI logs.

    Returns:
        Ok(stdout), or Err(ProcessError) on non-zero exit, timeout or launch failure
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return _failed(cmd, -1, stderr=f"timed out after {timeout}s")
    except OSError as e:
        return _failed(cmd, -1, stderr=str(e))

    if proc.returncode != 0:
        return _failed(cmd, proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
    return Ok(proc.stdout)


def run_silent(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run a command with output going straight to the runner log."""
    try:
        proc = subprocess.run(cmd, cwd=cwd, env=env, check=False)
    except OSError as e:
        return _failed(cmd, -1, stderr=str(e))

    if proc.returncode != 0:
        return _failed(cmd, proc.returncode)
    return Ok(None)

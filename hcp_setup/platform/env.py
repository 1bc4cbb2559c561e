"""Process PATH mutation.

A directory added here is visible to commands spawned by this process right
away, and to later CI steps through the runner's ``GITHUB_PATH`` file.
"""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from pathlib import Path

__all__ = ["add_path"]


def add_path(
    directory: Path,
    *,
    github_path_file: Path | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """Prepend ``directory`` to PATH.

    Args:
        directory: Directory holding the executable
        github_path_file: Runner PATH file to append to, if running in CI
        environ: Environment to mutate (defaults to os.environ)

    Raises:
        OSError: If the runner PATH file cannot be written. PATH itself has
            already been updated by then.
    """
    env = os.environ if environ is None else environ
    current = env.get("PATH", "")
    entry = str(directory)
    env["PATH"] = f"{entry}{os.pathsep}{current}" if current else entry

    if github_path_file is not None:
        github_path_file.parent.mkdir(parents=True, exist_ok=True)
        with github_path_file.open("a", encoding="utf-8") as handle:
            handle.write(f"{entry}\n")

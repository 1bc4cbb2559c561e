"""Persistent tool cache.

Installed binaries live under the runner's tool cache so later jobs on the
same machine can skip the download::

    <root>/<tool>/<version>/<arch>/hcp
    <root>/<tool>/<version>/<arch>.complete

An entry only counts once its ``.complete`` marker exists, so a job killed
half-way through caching never leaves a usable-looking partial install.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from hcp_setup.core.result import Err, Ok, Result
from hcp_setup.platform.files import atomic_write_text, make_executable
from hcp_setup.releases.semver import clean, is_valid, parse_range, parse_version
from hcp_setup.tools.installer import InstallError

__all__ = ["ToolCache"]


class ToolCache:
    """Versioned tool directories with completion markers."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def entry_dir(self, tool: str, version: str, arch: str) -> Path:
        return self._root / tool / (clean(version) or version) / arch

    def _marker(self, tool: str, version: str, arch: str) -> Path:
        entry = self.entry_dir(tool, version, arch)
        return entry.parent / f"{arch}.complete"

    def is_complete(self, tool: str, version: str, arch: str) -> bool:
        return (
            self._marker(tool, version, arch).exists()
            and self.entry_dir(tool, version, arch).is_dir()
        )

    def versions(self, tool: str, arch: str) -> list[str]:
        """List cached versions of ``tool`` for ``arch``, highest first."""
        tool_dir = self._root / tool
        if not tool_dir.is_dir():
            return []

        found: list[str] = []
        for child in tool_dir.iterdir():
            if child.is_dir() and is_valid(child.name) and self.is_complete(tool, child.name, arch):
                found.append(child.name)

        def key(version: str) -> tuple[int, object]:
            parsed = parse_version(version)
            return (0, version) if parsed is None else (1, parsed)

        return sorted(found, key=key, reverse=True)

    def find(self, tool: str, version_spec: str, arch: str) -> Path | None:
        """Find a cached install for an exact version or a range.

        A range (including ``*``) picks the highest cached version that
        satisfies it.

        Returns:
            The entry directory, or None when nothing matches.
        """
        spec = version_spec.strip()
        if is_valid(spec):
            if self.is_complete(tool, spec, arch):
                return self.entry_dir(tool, spec, arch)
            return None

        parsed = parse_range(spec)
        if isinstance(parsed, Err):
            return None
        for version in self.versions(tool, arch):
            if parsed.value.contains(version):
                return self.entry_dir(tool, version, arch)
        return None

    def cache_file(
        self,
        source: Path,
        target_name: str,
        tool: str,
        version: str,
        arch: str,
    ) -> Result[Path, InstallError]:
        """Copy an executable into a fresh cache entry and mark it complete.

        Returns:
            Ok with the entry directory, or Err with InstallError
        """
        if not source.is_file():
            return Err(InstallError(path=source, message="Source file not found"))

        entry = self.entry_dir(tool, version, arch)
        marker = self._marker(tool, version, arch)
        try:
            marker.unlink(missing_ok=True)
            if entry.exists():
                shutil.rmtree(entry)
            entry.mkdir(parents=True)

            target = entry / target_name
            shutil.copy2(source, target)
            make_executable(target)

            atomic_write_text(marker, "")
        except OSError as e:
            return Err(InstallError(path=entry, message=f"Failed to cache {tool}: {e}"))

        return Ok(entry)

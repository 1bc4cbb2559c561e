"""Zip archive extraction.

Release archives are zip files holding the executable at the top level. Member
paths are sanitized: absolute paths, ``..`` segments, drive letters and
symlinks are skipped.
"""

from __future__ import annotations

import shutil
import stat
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from hcp_setup.core.result import Err, Ok, Result

__all__ = ["Installer", "InstallResult", "InstallError"]


@dataclass(frozen=True, slots=True)
class InstallError:
    """Installation failure.

    Attributes:
        path: Archive, file or directory involved in the failure
        message: Human-readable error message
    """

    path: Path | None
    message: str

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Result of an extraction.

    Attributes:
        install_dir: Directory the archive was extracted into
        files_count: Number of files extracted
    """

    install_dir: Path
    files_count: int

    def find(self, name: str) -> Path | None:
        """Locate an extracted file by name, preferring the shallowest match."""
        direct = self.install_dir / name
        if direct.is_file():
            return direct
        matches = sorted(self.install_dir.rglob(name), key=lambda p: len(p.parts))
        for match in matches:
            if match.is_file():
                return match
        return None


class Installer:
    """Zip extractor.

    Usage:
        installer = Installer()
        result = installer.install(archive_path, extract_dir)
        if is_ok(result):
            print(f"Extracted {result.value.files_count} files")
    """

    def install(self, archive: Path, install_dir: Path) -> Result[InstallResult, InstallError]:
        """Extract ``archive`` into a clean ``install_dir``."""
        if not archive.exists():
            return Err(InstallError(path=archive, message="Archive not found"))
        if not archive.name.lower().endswith(".zip"):
            return Err(InstallError(path=archive, message="Unsupported archive format"))

        try:
            if install_dir.exists():
                shutil.rmtree(install_dir)
            install_dir.mkdir(parents=True, exist_ok=True)
            install_root = install_dir.resolve()

            files_count = 0
            with zipfile.ZipFile(archive, "r") as zf:
                for info in zf.infolist():
                    if info.is_dir():
                        continue

                    rel_path = _safe_relative_path(info.filename)
                    if rel_path is None:
                        continue

                    unix_attrs = info.external_attr >> 16
                    if (unix_attrs & 0o170000) == stat.S_IFLNK:
                        continue

                    full_path = install_dir / rel_path
                    if not _is_within_root(install_root, full_path):
                        continue

                    full_path.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as src, open(full_path, "wb") as dst:
                        shutil.copyfileobj(src, dst)

                    mode = unix_attrs & 0o777
                    if mode:
                        full_path.chmod(mode)

                    files_count += 1

            return Ok(InstallResult(install_dir=install_dir, files_count=files_count))

        except zipfile.BadZipFile as e:
            return Err(InstallError(path=archive, message=f"Invalid zip file: {e}"))
        except OSError as e:
            return Err(InstallError(path=archive, message=f"IO error: {e}"))


def _safe_relative_path(member_name: str) -> Path | None:
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None
    parts = PurePosixPath(normalized).parts
    if not parts or any(part in {"", ".", ".."} for part in parts):
        return None
    if parts[0].endswith(":"):
        return None
    return Path(*parts)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root)
    except OSError:
        return False

"""Host platform and architecture detection.

Release builds are published per ``(os, arch)`` pair using Go's naming
(``linux``/``darwin``/``windows`` and ``amd64``/``arm64``/``386``/``arm``).
This module maps the running interpreter's host onto those identifiers.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

from hcp_setup.core.result import Err, Ok, Result

__all__ = [
    "Platform",
    "Arch",
    "PlatformInfo",
    "UnsupportedPlatformError",
    "detect",
    "detect_arch",
    "detect_platform",
    "build_target",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == Platform.WINDOWS else ""

    @property
    def release_os(self) -> str | None:
        """OS identifier used by release builds, or None if unsupported."""
        return {
            Platform.LINUX: "linux",
            Platform.MACOS: "darwin",
            Platform.WINDOWS: "windows",
        }.get(self)

    def exe_name(self, name: str) -> str:
        """Get executable name with platform-appropriate suffix.

        Example: exe_name("hcp") -> "hcp.exe" on Windows, "hcp" elsewhere.
        """
        return f"{name}{self.exe_suffix}"


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    X86 = auto()
    ARM64 = auto()
    ARM = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def release_arch(self) -> str | None:
        """Architecture identifier used by release builds, or None if unsupported."""
        return {
            Arch.X64: "amd64",
            Arch.X86: "386",
            Arch.ARM64: "arm64",
            Arch.ARM: "arm",
        }.get(self)


@dataclass(frozen=True, slots=True)
class UnsupportedPlatformError:
    """The host cannot run any published build."""

    platform: Platform
    arch: Arch

    def __str__(self) -> str:
        if self.platform.release_os is None:
            return f"unsupported platform: {self.platform}"
        return f"unsupported architecture: {self.arch}"


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected host platform."""

    platform: Platform
    arch: Arch

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI and hang.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


def arch_from_machine(machine: str) -> Arch:
    """Map a machine string (uname or PROCESSOR_ARCHITECTURE) to Arch."""
    machine = machine.strip().lower()
    if machine in ("x86_64", "amd64", "x64"):
        return Arch.X64
    if machine in ("aarch64", "arm64", "armv8l", "armv8b"):
        return Arch.ARM64
    if machine in ("i386", "i486", "i586", "i686", "x86", "386"):
        return Arch.X86
    if machine.startswith("armv6") or machine.startswith("armv7") or machine == "arm":
        return Arch.ARM
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    return arch_from_machine(machine)


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect platform and architecture of the host (cached)."""
    return PlatformInfo(platform=detect_platform(), arch=detect_arch())


def build_target(info: PlatformInfo) -> Result[tuple[str, str], UnsupportedPlatformError]:
    """Return the ``(os, arch)`` release identifiers for a host.

    Returns:
        Ok with the identifier pair, or Err when either half has no build.
    """
    os_id = info.platform.release_os
    arch_id = info.arch.release_arch
    if os_id is None or arch_id is None:
        return Err(UnsupportedPlatformError(platform=info.platform, arch=info.arch))
    return Ok((os_id, arch_id))

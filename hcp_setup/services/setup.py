"""End-to-end install of the hcp CLI.

1. Resolve the requested version (cache short-circuit, exact lookup or range
   search).
2. Reuse a cached install of the resolved version if there is one.
3. Otherwise download the build for this host, extract it, cache the binary
   and put it on PATH.
4. After a fresh install, check authentication and configure the CLI
   profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hcp_setup.core.config import SetupConfig
from hcp_setup.core.result import Err, Ok, Result
from hcp_setup.output.console import ConsoleProtocol
from hcp_setup.platform.detection import PlatformInfo, UnsupportedPlatformError, build_target
from hcp_setup.platform.env import add_path
from hcp_setup.platform.process import run, run_silent
from hcp_setup.releases.catalog import ReleaseCatalog
from hcp_setup.releases.errors import ResolveError
from hcp_setup.releases.model import Build, ProductRelease
from hcp_setup.releases.selector import (
    CachedInstallation,
    ResolvedRelease,
    resolve,
    resolve_release,
)
from hcp_setup.tools.cache import ToolCache
from hcp_setup.tools.download import Downloader
from hcp_setup.tools.http import HttpClient, RealHttpClient
from hcp_setup.tools.installer import InstallError, Installer

__all__ = ["SetupService", "SetupOutcome", "SetupError", "TOOL_NAME"]

TOOL_NAME = "hcp"

type SetupError = ResolveError | UnsupportedPlatformError | InstallError


@dataclass(frozen=True, slots=True)
class SetupOutcome:
    """What an install run ended up putting on PATH.

    Attributes:
        version: Installed version
        path: Directory added to PATH
        from_cache: True if no download was needed
    """

    version: str
    path: Path
    from_cache: bool


class SetupService:
    def __init__(
        self,
        *,
        config: SetupConfig,
        platform: PlatformInfo,
        console: ConsoleProtocol,
        http: HttpClient | None = None,
    ) -> None:
        self._config = config
        self._platform = platform
        self._console = console
        self._http = http if http is not None else RealHttpClient(timeout=config.timeout)
        self._cache = ToolCache(config.tool_cache_dir)
        self._catalog = ReleaseCatalog(self._http, console, product=TOOL_NAME)

    @property
    def exe_name(self) -> str:
        return self._platform.platform.exe_name(TOOL_NAME)

    def resolve_release(self) -> Result[ResolvedRelease, SetupError]:
        """Resolve the configured version against the catalog, ignoring the cache."""
        return resolve_release(self._catalog, self._config.version)

    def host_build(self, release: ProductRelease) -> Result[Build, SetupError]:
        """Return the release's build for this host."""
        target = build_target(self._platform)
        if isinstance(target, Err):
            return target
        os_id, arch_id = target.value
        build = release.build_for(os_id, arch_id)
        if build is None:
            return Err(InstallError(path=None, message=f"no build found for {os_id} {arch_id}"))
        return Ok(build)

    def install(self) -> Result[SetupOutcome, SetupError]:
        target = build_target(self._platform)
        if isinstance(target, Err):
            return target
        _os_id, arch_id = target.value

        resolution = resolve(
            self._catalog,
            self._config.version,
            lambda spec: self._cache.find(TOOL_NAME, spec, arch_id),
        )
        if isinstance(resolution, Err):
            return resolution

        resolved = resolution.value
        if isinstance(resolved, CachedInstallation):
            path = resolved.path
            self._console.debug("cached installation found")
            on_path = self._add_path(path)
            if isinstance(on_path, Err):
                return on_path
            return Ok(SetupOutcome(version=path.parent.name, path=path, from_cache=True))

        release = resolved.release
        cached = self._cache.find(TOOL_NAME, release.version, arch_id)
        if cached is not None:
            self._console.debug("cached installation found")
            on_path = self._add_path(cached)
            if isinstance(on_path, Err):
                return on_path
            return Ok(SetupOutcome(version=release.version, path=cached, from_cache=True))

        installed = self._install(release)
        if isinstance(installed, Err):
            return installed

        binary = installed.value / self.exe_name
        self._check_auth(binary)
        configured = self._configure_profile(binary)
        if isinstance(configured, Err):
            return configured

        return Ok(SetupOutcome(version=release.version, path=installed.value, from_cache=False))

    def _install(self, release: ProductRelease) -> Result[Path, SetupError]:
        build = self.host_build(release)
        if isinstance(build, Err):
            return build
        b = build.value

        self._console.debug(
            f"downloading and installing {TOOL_NAME}: {release.version}, {b.os}, {b.arch}"
        )

        work_dir = self._config.temp_dir / "hcp-setup"
        downloaded = Downloader(self._http, work_dir / "downloads").download(b.url)
        if isinstance(downloaded, Err):
            message = f"failed to download {TOOL_NAME}: {downloaded.error}"
            return Err(InstallError(path=None, message=message))

        extract_dir = work_dir / f"{TOOL_NAME}_{release.version}_{b.os}_{b.arch}"
        extracted = Installer().install(downloaded.value.path, extract_dir)
        if isinstance(extracted, Err):
            message = f"failed to extract {TOOL_NAME}: {extracted.error}"
            return Err(InstallError(path=None, message=message))

        binary = extracted.value.find(self.exe_name)
        if binary is None:
            message = f"{self.exe_name} not found in archive"
            return Err(InstallError(path=extract_dir, message=message))

        cached = self._cache.cache_file(
            binary, self.exe_name, TOOL_NAME, release.version, b.arch
        )
        if isinstance(cached, Err):
            message = f"failed to cache {TOOL_NAME}: {cached.error}"
            return Err(InstallError(path=None, message=message))

        on_path = self._add_path(cached.value)
        if isinstance(on_path, Err):
            return on_path
        self._console.success(f"Installed {TOOL_NAME} {release.version}")
        return cached

    def _add_path(self, directory: Path) -> Result[None, InstallError]:
        github_path = self._config.github_path_file
        try:
            add_path(directory, github_path_file=github_path)
        except OSError as e:
            message = f"failed to add {directory} to PATH: {e}"
            return Err(InstallError(path=github_path, message=message))
        self._console.debug(f"added {directory} to PATH")
        return Ok(None)

    def _check_auth(self, binary: Path) -> None:
        # Output is captured: print-access-token writes a secret to stdout.
        result = run([str(binary), "auth", "print-access-token"])
        if isinstance(result, Err):
            self._console.warning(
                "The hcp CLI is not authenticated. "
                'Authenticate by adding the "hashicorp/hcp-auth-action" step '
                "prior this one."
            )

    def _configure_profile(self, binary: Path) -> Result[None, InstallError]:
        quiet = run_silent([str(binary), "profile", "set", "core/quiet", "true"])
        if isinstance(quiet, Err):
            self._console.warning(
                "Failed to configure the profile to be quiet. "
                "This is not supported in versions < 0.4.0."
            )

        project_id = self._config.project_id
        if not project_id:
            return Ok(None)

        result = run_silent(
            [str(binary), "profile", "set", "--quiet", "project_id", project_id]
        )
        if isinstance(result, Err):
            return Err(
                InstallError(path=None, message=f"failed to set project_id: {result.error}")
            )
        return Ok(None)

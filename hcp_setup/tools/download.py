"""Release archive downloads.

Archives are immutable per URL, so one already present in the download
directory is reused instead of being fetched again. That matters on
self-hosted runners, which keep their temp directory between jobs.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from hcp_setup.core.result import Err, Ok, Result
from hcp_setup.tools.http import HttpError

if TYPE_CHECKING:
    from collections.abc import Callable

    from hcp_setup.tools.http import HttpClient

__all__ = ["Downloader", "DownloadResult"]


@dataclass(frozen=True, slots=True)
class DownloadResult:
    """A local copy of a remote archive.

    Attributes:
        path: Archive on disk
        from_cache: True if no request was made
        size: Size in bytes
    """

    path: Path
    from_cache: bool
    size: int

    @classmethod
    def of(cls, path: Path, *, from_cache: bool) -> DownloadResult:
        return cls(path=path, from_cache=from_cache, size=path.stat().st_size)


class Downloader:
    """Fetches archives into ``cache_dir``, one file per URL.

    Usage:
        downloader = Downloader(http, config.temp_dir / "hcp-setup" / "downloads")
        match downloader.download(build.url):
            case Ok(result):
                installer.install(result.path, extract_dir)
            case Err(error):
                ...
    """

    def __init__(self, http: HttpClient, cache_dir: Path) -> None:
        self._http = http
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def cache_key(self, url: str) -> str:
        """File name for URL: short URL hash plus the URL's own file name.

        Example: ".../hcp_0.5.0_linux_amd64.zip" -> "a1b2c3d4_hcp_0.5.0_linux_amd64.zip"
        """
        name = PurePosixPath(urlparse(url).path).name or "download"
        digest = hashlib.sha256(url.encode()).hexdigest()[:8]
        return f"{digest}_{name}"

    def cache_path(self, url: str) -> Path:
        return self._cache_dir / self.cache_key(url)

    def download(
        self,
        url: str,
        *,
        force: bool = False,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[DownloadResult, HttpError]:
        """Return a local copy of ``url``, fetching it unless already present.

        Args:
            url: Archive URL
            force: Fetch even if a copy exists
            progress: Optional callback(downloaded_bytes, total_bytes)
        """
        target = self.cache_path(url)
        if target.is_file() and not force:
            return Ok(DownloadResult.of(target, from_cache=True))

        # A killed job leaves only the .part file, never a truncated archive.
        staging = target.with_name(f"{target.name}.part")
        self._cache_dir.mkdir(parents=True, exist_ok=True)

        fetched = self._http.download(url, staging, progress=progress)
        if isinstance(fetched, Err):
            staging.unlink(missing_ok=True)
            return fetched

        staging.replace(target)
        return Ok(DownloadResult.of(target, from_cache=False))

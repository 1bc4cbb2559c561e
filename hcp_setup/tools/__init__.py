"""Tool acquisition infrastructure.

- HTTP client (http.py)
- Download cache (download.py)
- Zip extraction (installer.py)
- Persistent tool cache (cache.py)
"""

from hcp_setup.tools.cache import ToolCache
from hcp_setup.tools.download import Downloader, DownloadResult
from hcp_setup.tools.http import (
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
)
from hcp_setup.tools.installer import Installer, InstallError, InstallResult

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Download
    "Downloader",
    "DownloadResult",
    # Install
    "Installer",
    "InstallError",
    "InstallResult",
    # Cache
    "ToolCache",
]

"""HTTP access to the releases API and artifact host.

- HttpClient: what the catalog and downloader need (JSON GET, file download)
- RealHttpClient: urllib with system certificates and a per-request timeout
- MockHttpClient: canned responses keyed by URL, recording every call
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol, runtime_checkable

from hcp_setup import __version__
from hcp_setup.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "USER_AGENT",
]

USER_AGENT = f"hcp-setup/{__version__}"

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class HttpError:
    """A failed request.

    Attributes:
        url: Requested URL
        status: HTTP status, 0 when no response was received or the body was unusable
        message: Reason phrase or transport error
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


@runtime_checkable
class HttpClient(Protocol):
    def get_json(self, url: str) -> Result[object, HttpError]:
        """Fetch URL and decode the body as JSON; an empty body decodes to None."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Stream URL into ``dest``, calling progress(downloaded, total)."""
        ...


class RealHttpClient:
    """urllib-based client.

    Every request carries a timeout so a stalled catalog fails the step
    instead of hanging the job.
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = USER_AGENT) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _open(self, url: str, accept: str) -> Any:
        req = urllib.request.Request(
            url,
            headers={"User-Agent": self.user_agent, "Accept": accept},
        )
        return urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context)

    def _fetch[T](
        self, url: str, accept: str, consume: Callable[[Any], T]
    ) -> Result[T, HttpError]:
        try:
            with self._open(url, accept) as response:
                return Ok(consume(response))
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message=f"timed out after {self.timeout}s"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_json(self, url: str) -> Result[object, HttpError]:
        body = self._fetch(url, "application/json", lambda response: response.read())
        if isinstance(body, Err):
            return body

        raw: bytes = body.value
        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        def save(response: Any) -> Path:
            total = int(response.headers.get("Content-Length") or 0)
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(dest, "wb") as f:
                _copy(response, f, total, progress)
            return dest

        return self._fetch(url, "*/*", save)


def _copy(
    src: BinaryIO,
    dst: BinaryIO,
    total: int,
    progress: Callable[[int, int], None] | None,
) -> None:
    done = 0
    while chunk := src.read(_CHUNK_SIZE):
        dst.write(chunk)
        done += len(chunk)
        if progress:
            progress(done, total)


class MockHttpClient:
    """In-memory client for tests.

    Usage:
        client = MockHttpClient()
        client.set_json(f"{RELEASES_API}/hcp?limit=20", [release_json])
        catalog = ReleaseCatalog(client, MockConsole())
        ...
        assert client.urls() == [f"{RELEASES_API}/hcp?limit=20"]

    Unknown URLs answer with a 404 HttpError.
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, object] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, response: object) -> None:
        """Answer ``get_json(url)`` with a decoded body or an HttpError."""
        self._json_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        """Answer ``download(url)`` with file content or an HttpError."""
        self._download_responses[url] = response

    def urls(self, method: str = "get_json") -> list[str]:
        """URLs requested with ``method``, in call order."""
        return [url for name, url in self.calls if name == method]

    def _answer(self, method: str, url: str, responses: dict[str, Any]) -> Result[Any, HttpError]:
        self.calls.append((method, url))
        if url not in responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(self, url: str) -> Result[object, HttpError]:
        return self._answer("get_json", url, self._json_responses)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        content = self._answer("download", url, self._download_responses)
        if isinstance(content, Err):
            return content

        data: bytes = content.value
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        if progress:
            progress(len(data), len(data))
        return Ok(dest)

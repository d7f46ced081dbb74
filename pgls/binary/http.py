"""HTTP client abstraction for the release index and asset downloads.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pgls import __version__
from pgls.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    Allows injecting mock clients so unit tests never touch the network.
    """

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and return the body as text."""
        ...

    def head(self, url: str) -> Result[int, HttpError]:
        """Issue a HEAD request and return the final status code.

        Non-2xx statuses are returned as Err.
        """
        ...

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Download URL to file.

        Args:
            url: URL to download
            dest: Destination path

        Returns:
            Ok with dest path, or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Redirects (GitHub serves release assets from a CDN host)
    - Chunked download to a file
    - Timeout handling
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = f"pgls/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _open(self, url: str, *, method: str = "GET", accept: str | None = None) -> Any:
        headers = {"User-Agent": self.user_agent}
        if accept is not None:
            headers["Accept"] = accept
        req = urllib.request.Request(url, headers=headers, method=method)
        return urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context)

    def _error(self, url: str, e: Exception, *, timeout_message: str) -> HttpError:
        if isinstance(e, urllib.error.HTTPError):
            return HttpError(url=url, status=e.code, message=str(e.reason))
        if isinstance(e, urllib.error.URLError):
            return HttpError(url=url, status=0, message=str(e.reason))
        if isinstance(e, TimeoutError):
            return HttpError(url=url, status=0, message=timeout_message)
        return HttpError(url=url, status=0, message=str(e))

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and return as text."""
        try:
            with self._open(url, accept="application/vnd.github+json") as response:
                body: bytes = response.read()
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e, timeout_message="Request timed out"))

        try:
            return Ok(body.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def head(self, url: str) -> Result[int, HttpError]:
        """HEAD request; 2xx is Ok, anything else is Err."""
        try:
            with self._open(url, method="HEAD") as response:
                status = int(response.status)
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e, timeout_message="Request timed out"))

        if 200 <= status < 300:
            return Ok(status)
        return Err(HttpError(url=url, status=status, message="Unexpected status"))

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Download URL to file in chunks."""
        try:
            with self._open(url, accept="application/octet-stream") as response:
                chunk_size = 8192

                dest.parent.mkdir(parents=True, exist_ok=True)

                with open(dest, "wb") as f:
                    while True:
                        chunk = response.read(chunk_size)
                        if not chunk:
                            break
                        f.write(chunk)

                return Ok(dest)
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e, timeout_message="Download timed out"))


class MockHttpClient:
    """Mock HTTP client for testing.

    Allows setting predefined responses for specific URLs. Unknown URLs
    answer 404.

    Usage:
        client = MockHttpClient()
        client.set_text(RELEASES_API, '[{"tag_name": "0.8.1"}]')
        result = client.get_text(RELEASES_API)
    """

    def __init__(self) -> None:
        self._text_responses: dict[str, str | HttpError] = {}
        self._head_responses: dict[str, int | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text_responses[url] = response

    def set_head(self, url: str, response: int | HttpError) -> None:
        self._head_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def calls_to(self, method: str) -> list[str]:
        """URLs requested with ``method`` in call order."""
        return [url for m, url in self.calls if m == method]

    def get_text(self, url: str) -> Result[str, HttpError]:
        self.calls.append(("get_text", url))

        response = self._text_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def head(self, url: str) -> Result[int, HttpError]:
        self.calls.append(("head", url))

        response = self._head_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        if not 200 <= response < 300:
            return Err(HttpError(url=url, status=response, message="Unexpected status"))
        return Ok(response)

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Mock download - writes predefined content to dest."""
        self.calls.append(("download", url))

        response = self._download_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)

        return Ok(dest)

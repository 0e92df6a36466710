"""HTTP client abstraction for the GitHub and Artifactory REST calls.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Scripted implementation for testing
- build_url: Safe URL construction from a base and path segments

Status handling belongs to callers: any response that reached the server,
including 4xx/5xx, comes back as ``Ok(HttpResponse)``. ``Err(HttpError)``
means the request never completed (DNS, TLS, refused connection, timeout).
No retries are attempted here.
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from relman import __version__
from relman.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "InvalidUrl",
    "MockHttpClient",
    "RealHttpClient",
    "RecordedRequest",
    "build_url",
]

DEFAULT_USER_AGENT = f"release-manager/{__version__}"


@dataclass(frozen=True, slots=True)
class HttpError:
    """Transport failure: the request did not produce an HTTP response.

    Attributes:
        url: The URL that failed
        message: Human-readable error message
    """

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and raw body of a completed request."""

    status: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> object | None:
        """Decode the body as JSON, or None if it is empty or malformed."""
        if not self.body:
            return None
        try:
            return json.loads(self.body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None


@dataclass(frozen=True, slots=True)
class InvalidUrl:
    url: str
    reason: str


def build_url(
    base: str,
    *segments: str,
    query: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
    safe_query: str = "",
) -> Result[str, InvalidUrl]:
    """Append percent-encoded path segments (and a query) to ``base``.

    Segments containing ``/`` are split, so a repository-relative prefix such
    as ``io/example/core/1.0.0`` may be passed as one segment.

    Args:
        base: Absolute http(s) URL, possibly with a path of its own.
        segments: Path segments to append.
        query: Query parameters, encoded with ``urlencode``.
        safe_query: Characters left unescaped in query values.
    """
    try:
        parts = urllib.parse.urlsplit(base)
    except ValueError as e:
        return Err(InvalidUrl(url=base, reason=str(e)))

    if parts.scheme not in ("http", "https"):
        return Err(InvalidUrl(url=base, reason="scheme must be http or https"))
    if not parts.netloc:
        return Err(InvalidUrl(url=base, reason="missing host"))

    path_parts = [p for p in parts.path.split("/") if p]
    for segment in segments:
        path_parts.extend(
            urllib.parse.quote(p, safe="") for p in segment.split("/") if p
        )
    path = "/" + "/".join(path_parts)

    encoded_query = parts.query
    if query:
        items = list(query.items()) if isinstance(query, Mapping) else list(query)
        encoded_query = urllib.parse.urlencode(items, safe=safe_query)

    return Ok(urllib.parse.urlunsplit((parts.scheme, parts.netloc, path, encoded_query, "")))


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    Injecting this lets tests replace the network with MockHttpClient.
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        """Send one request.

        Returns:
            Ok with the response (any status), or Err with HttpError when
            the transport failed.
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles HTTPS with system certificates and turns HTTP error statuses
    into ordinary responses.
    """

    def __init__(self, timeout: float | None = None, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds (None keeps the socket default)
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        all_headers = {"User-Agent": self.user_agent}
        if headers:
            all_headers.update(headers)

        try:
            req = urllib.request.Request(url, data=body, headers=all_headers, method=method)
            if self.timeout is None:
                response_cm = urllib.request.urlopen(req, context=self._ssl_context)
            else:
                response_cm = urllib.request.urlopen(
                    req, timeout=self.timeout, context=self._ssl_context
                )
            with response_cm as response:
                return Ok(HttpResponse(status=response.status, body=response.read()))
        except urllib.error.HTTPError as e:
            try:
                error_body = e.read()
            except OSError:
                error_body = b""
            return Ok(HttpResponse(status=e.code, body=error_body))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, message=str(e)))


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None

    def json(self) -> object | None:
        if self.body is None:
            return None
        return json.loads(self.body.decode("utf-8"))


type _Scripted = HttpResponse | HttpError


def _empty_calls() -> list[RecordedRequest]:
    return []


def _empty_routes() -> dict[tuple[str, str], deque[_Scripted]]:
    return {}


@dataclass
class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are scripted per (method, url). Several responses for the same
    route are served in order; the last one keeps being served once the
    queue is down to it. Unscripted routes answer 404.

    Usage:
        client = MockHttpClient()
        client.set_response("POST", url, HttpResponse(201, b'{"sha": "abc"}'))
        result = client.request("POST", url, body=b"{}")
        assert client.calls[0].method == "POST"
    """

    calls: list[RecordedRequest] = field(default_factory=_empty_calls)
    _routes: dict[tuple[str, str], deque[_Scripted]] = field(default_factory=_empty_routes)

    def set_response(self, method: str, url: str, *responses: _Scripted) -> None:
        """Script the response(s) for ``method url``."""
        self._routes[(method.upper(), url)] = deque(responses)

    def set_json(self, method: str, url: str, payload: object, *, status: int = 200) -> None:
        """Script a JSON response for ``method url``."""
        body = json.dumps(payload).encode("utf-8")
        self.set_response(method, url, HttpResponse(status=status, body=body))

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        method = method.upper()
        self.calls.append(
            RecordedRequest(method=method, url=url, headers=dict(headers or {}), body=body)
        )

        queue = self._routes.get((method, url))
        if not queue:
            return Ok(HttpResponse(status=404, body=b'{"message": "Not Found (mock)"}'))

        scripted = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(scripted, HttpError):
            return Err(scripted)
        return Ok(scripted)

    def calls_to(self, method: str, url: str) -> list[RecordedRequest]:
        """All recorded calls to ``method url``."""
        return [c for c in self.calls if c.method == method.upper() and c.url == url]

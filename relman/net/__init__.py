"""Network transport."""

from .http import (
    HttpClient,
    HttpError,
    HttpResponse,
    InvalidUrl,
    MockHttpClient,
    RealHttpClient,
    RecordedRequest,
    build_url,
)

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

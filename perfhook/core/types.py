"""Core types and data structures for PerfHook."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit


class HttpMethod(Enum):
    """
    HTTP methods understood by the performance backend.

    Verbs outside this set (HEAD, TRACE, CONNECT, custom verbs) are unmapped
    and are not instrumented.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @classmethod
    def from_string(cls, method: Optional[str]) -> Optional[HttpMethod]:
        """Map a raw method string (any case) to an HttpMethod, or None."""
        if not isinstance(method, str):
            return None
        try:
            return cls(method.strip().upper())
        except ValueError:
            return None


def find_header(headers: Mapping[str, Any], name: str) -> Optional[Any]:
    """Case-insensitive header lookup."""
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return value
    return None


def normalize_url(url: str) -> str:
    """Return scheme://host/path with query string and fragment stripped."""
    parts = urlsplit(str(url))
    return f"{parts.scheme}://{parts.hostname or ''}{parts.path}"


@dataclass
class RequestDescriptor:
    """Outgoing request as seen by the interceptor.

    ``extra`` is the per-call metadata bag. It is owned by the HTTP call and
    must be the same object at pre-send and at completion.
    """

    method: str
    url: str
    extra: dict[str, Any] = field(default_factory=dict)
    headers: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None

    @property
    def http_method(self) -> Optional[HttpMethod]:
        return HttpMethod.from_string(self.method)

    @property
    def normalized_url(self) -> str:
        return normalize_url(self.url)


@dataclass
class ResponseDescriptor:
    """Response (or partial response) for a request."""

    request: RequestDescriptor
    status_code: Optional[int] = None
    headers: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None

    def get_header(self, name: str) -> Optional[Any]:
        return find_header(self.headers, name)


@dataclass
class FailureEvent:
    """Transport or protocol failure for a request.

    ``response`` is set when the client still produced a response object
    (for example a non-2xx response attached to the raised error).
    """

    request: RequestDescriptor
    response: Optional[ResponseDescriptor] = None
    error: Optional[BaseException] = None

"""Common test utilities for PerfHook tests."""

from __future__ import annotations

from typing import Any

from perfhook.backends.memory import RecordedMeasurement
from perfhook.core.types import HttpMethod, RequestDescriptor, ResponseDescriptor


def create_test_request(
    method: str = "GET",
    url: str = "https://api.example.com/users?page=2#top",
    headers: dict[str, Any] | None = None,
    body: Any = None,
) -> RequestDescriptor:
    """
    Create a request descriptor with a fresh metadata bag.

    Args:
        method: HTTP method
        url: Full request URL
        headers: Request headers (default: accept JSON)
        body: Request body

    Returns:
        RequestDescriptor instance for testing
    """
    return RequestDescriptor(
        method=method,
        url=url,
        extra={},
        headers={"accept": "application/json"} if headers is None else headers,
        body=body,
    )


def create_test_response(
    request: RequestDescriptor,
    status_code: int | None = 200,
    headers: dict[str, Any] | None = None,
    body: Any = None,
) -> ResponseDescriptor:
    """Create a response descriptor answering ``request``."""
    return ResponseDescriptor(
        request=request,
        status_code=status_code,
        headers={"content-type": "application/json"} if headers is None else headers,
        body=body,
    )


class FlakyMeasurement(RecordedMeasurement):
    """Recorded measurement whose response attributes cannot be set."""

    def __init__(self, name: str = "https://api.example.com/flaky", method: HttpMethod = HttpMethod.GET) -> None:
        super().__init__(name, method)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("response_") and value is not None:
            raise RuntimeError(f"backend rejected {name}")
        super().__setattr__(name, value)

"""Instrumentation for requests HTTP client library."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ...core.types import FailureEvent, RequestDescriptor, ResponseDescriptor
from ..base import InstrumentationBase, replace_method
from ..http import decode_text_body, get_content_type_header

logger = logging.getLogger(__name__)


class RequestsInstrumentation(InstrumentationBase):
    """Instrumentation for the requests HTTP client library.

    Patches requests.Session.request so every call opens a measurement
    before it is sent and closes it when the response (or exception) comes
    back. The metadata bag is a dict created for each call.
    """

    def __init__(self, enabled: bool = True, interceptor: Any = None) -> None:
        super().__init__(
            name="RequestsInstrumentation",
            module_name="requests",
            enabled=enabled,
            interceptor=interceptor,
        )

    def patch(self, module: Any) -> Optional[Callable[[], None]]:
        """Patch the requests module."""
        if not hasattr(module, "Session"):
            logger.warning("requests.Session not found, skipping instrumentation")
            return None

        original_request = module.Session.request
        instrumentation = self

        def patched_request(session_self, method: str, url: str, *args, **kwargs):
            """Patched Session.request method."""
            interceptor = instrumentation.interceptor
            if interceptor is None:
                return original_request(session_self, method, url, *args, **kwargs)

            request = instrumentation._begin(
                interceptor, instrumentation._describe_request, session_self, method, url, kwargs
            )
            if request is None:
                return original_request(session_self, method, url, *args, **kwargs)

            try:
                response = original_request(session_self, method, url, *args, **kwargs)
            except Exception as e:
                instrumentation._fail(interceptor, instrumentation._describe_failure, request, e)
                raise

            instrumentation._succeed(
                interceptor, instrumentation._describe_response, request, response, bool(kwargs.get("stream"))
            )
            return response

        restore = replace_method(module.Session, "request", patched_request)
        logger.info("requests.Session.request instrumented")
        return restore

    def _describe_request(
        self, session: Any, method: str, url: Any, request_kwargs: dict[str, Any]
    ) -> RequestDescriptor:
        headers = dict(getattr(session, "headers", None) or {})
        headers.update(request_kwargs.get("headers") or {})

        json_data = request_kwargs.get("json")
        body = json_data if json_data is not None else request_kwargs.get("data")

        return RequestDescriptor(
            method=str(method),
            url=str(url),
            extra={},
            headers=headers,
            body=decode_text_body(body, get_content_type_header(headers)),
        )

    def _describe_response(
        self, request: RequestDescriptor, response: Any, stream: bool = False
    ) -> ResponseDescriptor:
        headers = dict(response.headers)
        body = None
        # Streamed bodies have not been read yet and must stay unread
        if not stream:
            body = decode_text_body(response.content, get_content_type_header(headers))
        return ResponseDescriptor(
            request=request,
            status_code=response.status_code,
            headers=headers,
            body=body,
        )

    def _describe_failure(self, request: RequestDescriptor, error: BaseException) -> FailureEvent:
        partial: Optional[ResponseDescriptor] = None
        response = getattr(error, "response", None)
        if response is not None and hasattr(response, "status_code"):
            # requests keeps _content as False until the body has been read
            unread = getattr(response, "_content", False) is False
            partial = self._describe_response(request, response, stream=unread)
        return FailureEvent(request=request, response=partial, error=error)

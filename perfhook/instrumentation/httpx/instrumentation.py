"""Instrumentation for httpx HTTP client library."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from ...core.types import FailureEvent, RequestDescriptor, ResponseDescriptor
from ..base import InstrumentationBase, replace_method
from ..http import decode_text_body, get_content_type_header

logger = logging.getLogger(__name__)


class HttpxInstrumentation(InstrumentationBase):
    """Instrumentation for the httpx HTTP client library.

    Patches both sync and async clients:
    - httpx.Client.send (sync)
    - httpx.AsyncClient.send (async)

    The request's ``extensions`` dict is used as the metadata bag, so the
    correlation key travels with the request through redirects.
    """

    def __init__(self, enabled: bool = True, interceptor: Any = None) -> None:
        super().__init__(
            name="HttpxInstrumentation",
            module_name="httpx",
            enabled=enabled,
            interceptor=interceptor,
        )

    def patch(self, module: Any) -> Optional[Callable[[], None]]:
        """Patch the httpx module."""
        restores = []
        if hasattr(module, "Client"):
            restores.append(self._patch_sync_client(module))
        else:
            logger.warning("httpx.Client not found, skipping sync instrumentation")

        if hasattr(module, "AsyncClient"):
            restores.append(self._patch_async_client(module))
        else:
            logger.warning("httpx.AsyncClient not found, skipping async instrumentation")

        if not restores:
            return None

        def restore() -> None:
            for undo in reversed(restores):
                undo()

        return restore

    def _patch_sync_client(self, module: Any) -> Callable[[], None]:
        """Patch httpx.Client.send for sync HTTP calls."""
        original_send = module.Client.send
        instrumentation = self

        def patched_send(client_self, request, **kwargs):
            """Patched Client.send method."""
            interceptor = instrumentation.interceptor
            if interceptor is None:
                return original_send(client_self, request, **kwargs)

            descriptor = instrumentation._begin(interceptor, instrumentation._describe_request, request)
            if descriptor is None:
                return original_send(client_self, request, **kwargs)

            try:
                response = original_send(client_self, request, **kwargs)
            except Exception as e:
                instrumentation._fail(interceptor, instrumentation._describe_failure, descriptor, e)
                raise

            instrumentation._succeed(interceptor, instrumentation._describe_response, descriptor, response)
            return response

        restore = replace_method(module.Client, "send", patched_send)
        logger.info("httpx.Client.send instrumented")
        return restore

    def _patch_async_client(self, module: Any) -> Callable[[], None]:
        """Patch httpx.AsyncClient.send for async HTTP calls."""
        original_send = module.AsyncClient.send
        instrumentation = self

        async def patched_send(client_self, request, **kwargs):
            """Patched AsyncClient.send method."""
            interceptor = instrumentation.interceptor
            if interceptor is None:
                return await original_send(client_self, request, **kwargs)

            descriptor = instrumentation._begin(interceptor, instrumentation._describe_request, request)
            if descriptor is None:
                return await original_send(client_self, request, **kwargs)

            try:
                response = await original_send(client_self, request, **kwargs)
            except Exception as e:
                instrumentation._fail(interceptor, instrumentation._describe_failure, descriptor, e)
                raise

            instrumentation._succeed(interceptor, instrumentation._describe_response, descriptor, response)
            return response

        restore = replace_method(module.AsyncClient, "send", patched_send)
        logger.info("httpx.AsyncClient.send instrumented")
        return restore

    def _describe_request(self, request: httpx.Request) -> RequestDescriptor:
        headers = dict(request.headers)
        try:
            body = request.content
        except httpx.RequestNotRead:
            body = None
        return RequestDescriptor(
            method=request.method,
            url=str(request.url),
            extra=request.extensions,
            headers=headers,
            body=decode_text_body(body, get_content_type_header(headers)),
        )

    def _describe_response(self, request: RequestDescriptor, response: httpx.Response) -> ResponseDescriptor:
        headers = dict(response.headers)
        try:
            body = response.content
        except httpx.ResponseNotRead:
            body = None
        return ResponseDescriptor(
            request=request,
            status_code=response.status_code,
            headers=headers,
            body=decode_text_body(body, get_content_type_header(headers)),
        )

    def _describe_failure(self, request: RequestDescriptor, error: BaseException) -> FailureEvent:
        partial: Optional[ResponseDescriptor] = None
        response = getattr(error, "response", None)
        if isinstance(response, httpx.Response):
            partial = self._describe_response(request, response)
        return FailureEvent(request=request, response=partial, error=error)

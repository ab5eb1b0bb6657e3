"""Interceptor that opens, populates and closes one measurement per HTTP call.

Per-call states:

    PENDING --on_request--> OPEN --on_response / on_error--> CLOSED
    PENDING --on_request fails or method unmapped--> ABANDONED

Every hook returns an ``InstrumentationResult`` and never raises; the HTTP
call's own outcome is never changed by instrumentation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .config import InterceptorConfig
from .measurement_store import MeasurementStore
from .result import InstrumentationResult, fail_open
from .types import FailureEvent, RequestDescriptor, ResponseDescriptor

if TYPE_CHECKING:
    from ..backends.base import Measurement, MeasurementBackend

logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = "content-type"


class PerformanceInterceptor:
    """
    Correlates pre-send and completion hooks of concurrent HTTP calls.

    The store is owned by this instance. Completion hooks use the store's
    atomic ``take``, so a call whose success and failure hooks both fire is
    still stopped exactly once.
    """

    def __init__(
        self,
        backend: MeasurementBackend,
        config: InterceptorConfig | None = None,
        store: MeasurementStore | None = None,
    ) -> None:
        self.backend = backend
        self.config = config or InterceptorConfig()
        self.store = store if store is not None else MeasurementStore()

    def __repr__(self) -> str:
        return f"PerformanceInterceptor(backend={self.backend.name}, open={len(self.store)})"

    def on_request(self, request: RequestDescriptor) -> InstrumentationResult:
        """Pre-send hook: open and start a measurement for ``request``."""
        return fail_open(self._open, request)

    def on_response(self, response: ResponseDescriptor) -> InstrumentationResult:
        """Success hook: close the request's measurement with response data."""
        return fail_open(self._close, response.request, response)

    def on_error(self, event: FailureEvent) -> InstrumentationResult:
        """Failure hook: close the request's measurement, using the partial response if any."""
        return fail_open(self._close, event.request, event.response)

    def _open(self, request: RequestDescriptor) -> InstrumentationResult:
        method = request.http_method
        if method is None:
            logger.debug(f"Not instrumenting {request.method!r} request to {request.normalized_url}")
            return InstrumentationResult.skipped(f"unmapped method {request.method!r}")

        measurement = self.backend.new_measurement(request.normalized_url, method)

        key_strategy = self.config.key_strategy
        key_strategy.stamp(request)
        key = key_strategy.extract(request)

        self.store.open(key, measurement)
        started = False
        try:
            measurement.start()
            started = True
            request_size = self.config.request_size_estimator(request)
            if request_size is not None:
                measurement.request_payload_size = request_size
        except Exception:
            # Never leave a half-opened measurement behind
            self.store.discard(key, measurement)
            if started:
                self._stop_quietly(measurement)
            raise

        logger.debug(f"Opened measurement for {method.value} {request.normalized_url} (key={key!r})")
        return InstrumentationResult.success()

    def _close(
        self, request: RequestDescriptor, response: Optional[ResponseDescriptor]
    ) -> InstrumentationResult:
        key = self.config.key_strategy.extract(request)
        measurement = self.store.take(key)
        if measurement is None:
            return InstrumentationResult.skipped(f"no open measurement for key {key!r}")

        try:
            if response is not None:
                self._set_response(measurement, response)
        finally:
            measurement.stop()

        logger.debug(f"Closed measurement for {request.normalized_url} (key={key!r})")
        return InstrumentationResult.success()

    def _set_response(self, measurement: Measurement, response: ResponseDescriptor) -> None:
        response_size = self.config.response_size_estimator(response)
        if response_size is not None:
            measurement.response_payload_size = response_size

        content_type = response.get_header(CONTENT_TYPE_HEADER)
        if content_type is not None:
            measurement.response_content_type = str(content_type)

        if response.status_code is not None:
            measurement.http_response_code = response.status_code

    @staticmethod
    def _stop_quietly(measurement: Measurement) -> None:
        try:
            measurement.stop()
        except Exception as e:
            logger.debug(f"Failed to stop abandoned measurement: {e}")

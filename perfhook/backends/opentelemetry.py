"""OpenTelemetry backend: each measurement is recorded as a CLIENT span."""

from __future__ import annotations

import logging
from typing import Optional
from typing_extensions import override

from opentelemetry import trace
from opentelemetry.trace import Span, Status, Tracer
from opentelemetry.trace import SpanKind as OTelSpanKind
from opentelemetry.trace import StatusCode as OTelStatusCode

from ..core.types import HttpMethod
from .base import Measurement, MeasurementBackend

logger = logging.getLogger(__name__)

INSTRUMENTATION_SCOPE = "perfhook"


class PerfSpanAttributes:
    """Span attribute names, following the OpenTelemetry HTTP conventions."""

    HTTP_REQUEST_METHOD = "http.request.method"
    URL_FULL = "url.full"
    HTTP_REQUEST_BODY_SIZE = "http.request.body.size"
    HTTP_RESPONSE_BODY_SIZE = "http.response.body.size"
    HTTP_RESPONSE_CONTENT_TYPE = "http.response.header.content-type"
    HTTP_RESPONSE_STATUS_CODE = "http.response.status_code"


class SpanMeasurement(Measurement):
    """Measurement backed by an OpenTelemetry span.

    The span is created on ``start()``. Attributes are collected on the
    measurement and written to the span just before it ends.
    """

    def __init__(self, tracer: Tracer, name: str, method: HttpMethod) -> None:
        super().__init__()
        self._tracer = tracer
        self.name = name
        self.method = method
        self.span: Optional[Span] = None

    @override
    def start(self) -> None:
        self.span = self._tracer.start_span(
            name=f"{self.method.value} {self.name}",
            kind=OTelSpanKind.CLIENT,
            attributes={
                PerfSpanAttributes.HTTP_REQUEST_METHOD: self.method.value,
                PerfSpanAttributes.URL_FULL: self.name,
            },
        )

    @override
    def stop(self) -> None:
        span = self.span
        if span is None:
            logger.debug(f"Stopping measurement for {self.name} that was never started")
            return

        for attribute, value in (
            (PerfSpanAttributes.HTTP_REQUEST_BODY_SIZE, self.request_payload_size),
            (PerfSpanAttributes.HTTP_RESPONSE_BODY_SIZE, self.response_payload_size),
            (PerfSpanAttributes.HTTP_RESPONSE_CONTENT_TYPE, self.response_content_type),
            (PerfSpanAttributes.HTTP_RESPONSE_STATUS_CODE, self.http_response_code),
        ):
            if value is not None:
                span.set_attribute(attribute, value)

        if self.http_response_code is not None and self.http_response_code >= 400:
            span.set_status(Status(OTelStatusCode.ERROR, f"HTTP {self.http_response_code}"))
        span.end()


class OpenTelemetryBackend(MeasurementBackend):
    """Creates span-backed measurements from a tracer (default: global tracer provider)."""

    def __init__(self, tracer: Tracer | None = None) -> None:
        self._tracer = tracer or trace.get_tracer(INSTRUMENTATION_SCOPE)

    def __repr__(self) -> str:
        return f"OpenTelemetryBackend(tracer={self._tracer!r})"

    @property
    @override
    def name(self) -> str:
        return "opentelemetry"

    @override
    def new_measurement(self, name: str, method: HttpMethod) -> SpanMeasurement:
        return SpanMeasurement(self._tracer, name, method)

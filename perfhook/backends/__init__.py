"""Measurement backends for PerfHook."""

from .base import Measurement, MeasurementBackend
from .memory import InMemoryMeasurementBackend, RecordedMeasurement
from .opentelemetry import OpenTelemetryBackend, PerfSpanAttributes, SpanMeasurement

__all__ = [
    # Base
    "Measurement",
    "MeasurementBackend",
    # Backends
    "InMemoryMeasurementBackend",
    "RecordedMeasurement",
    "OpenTelemetryBackend",
    "SpanMeasurement",
    "PerfSpanAttributes",
]

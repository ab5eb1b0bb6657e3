"""PerfHook: HTTP client performance measurements for telemetry backends."""

from .backends import (
    InMemoryMeasurementBackend,
    Measurement,
    MeasurementBackend,
    OpenTelemetryBackend,
)
from .core import (
    CounterKeyStrategy,
    FailureEvent,
    FunctionKeyStrategy,
    HttpMethod,
    InstrumentationResult,
    InterceptorConfig,
    KeyStrategy,
    MeasurementStore,
    PerfHook,
    PerformanceInterceptor,
    RandomKeyStrategy,
    RequestDescriptor,
    ResponseDescriptor,
    estimate_request_size,
    estimate_response_size,
)
from .core.logger import LogLevel, get_log_level, set_log_level
from .instrumentation.httpx import HttpxInstrumentation
from .instrumentation.requests import RequestsInstrumentation

__version__ = "0.1.0"

__all__ = [
    # Core
    "PerfHook",
    "PerformanceInterceptor",
    "InterceptorConfig",
    "MeasurementStore",
    "InstrumentationResult",
    "HttpMethod",
    "RequestDescriptor",
    "ResponseDescriptor",
    "FailureEvent",
    # Key strategies
    "KeyStrategy",
    "RandomKeyStrategy",
    "CounterKeyStrategy",
    "FunctionKeyStrategy",
    # Size estimation
    "estimate_request_size",
    "estimate_response_size",
    # Logger
    "LogLevel",
    "set_log_level",
    "get_log_level",
    # Backends
    "Measurement",
    "MeasurementBackend",
    "InMemoryMeasurementBackend",
    "OpenTelemetryBackend",
    # Instrumentations
    "RequestsInstrumentation",
    "HttpxInstrumentation",
]

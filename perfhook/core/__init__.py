"""Core module for PerfHook."""

from .config import (
    InterceptorConfig,
    PerfHookFileConfig,
    find_project_root,
    load_perfhook_config,
)
from .interceptor import PerformanceInterceptor
from .key_strategy import (
    EXTRA_KEY,
    CounterKeyStrategy,
    FunctionKeyStrategy,
    KeyStrategy,
    RandomKeyStrategy,
    get_key_strategy,
)
from .measurement_store import MeasurementStore
from .result import InstrumentationResult, InstrumentationResultCode, fail_open
from .sdk import PerfHook
from .size_estimation import estimate_request_size, estimate_response_size
from .types import (
    FailureEvent,
    HttpMethod,
    RequestDescriptor,
    ResponseDescriptor,
    normalize_url,
)

__all__ = [
    # Main SDK
    "PerfHook",
    "PerformanceInterceptor",
    # Config
    "InterceptorConfig",
    "PerfHookFileConfig",
    "load_perfhook_config",
    "find_project_root",
    # Types
    "HttpMethod",
    "RequestDescriptor",
    "ResponseDescriptor",
    "FailureEvent",
    "normalize_url",
    # Correlation
    "KeyStrategy",
    "RandomKeyStrategy",
    "CounterKeyStrategy",
    "FunctionKeyStrategy",
    "get_key_strategy",
    "EXTRA_KEY",
    "MeasurementStore",
    # Size estimation
    "estimate_request_size",
    "estimate_response_size",
    # Results
    "InstrumentationResult",
    "InstrumentationResultCode",
    "fail_open",
]

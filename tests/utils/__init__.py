"""Test utilities for PerfHook tests."""

from .test_helpers import FlakyMeasurement, create_test_request, create_test_response

__all__ = [
    "create_test_request",
    "create_test_response",
    "FlakyMeasurement",
]

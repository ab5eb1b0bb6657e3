"""In-memory measurement backend for testing and development."""

from __future__ import annotations

import threading
import time
from typing import Any, Optional
from typing_extensions import override

from ..core.types import HttpMethod
from .base import Measurement, MeasurementBackend


class RecordedMeasurement(Measurement):
    """Measurement that remembers how it was used."""

    def __init__(self, name: str, method: HttpMethod) -> None:
        super().__init__()
        self.name = name
        self.method = method
        self.start_count = 0
        self.stop_count = 0
        self.started_at: Optional[float] = None
        self.stopped_at: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"RecordedMeasurement({self.method.value} {self.name}, "
            f"started={self.start_count}, stopped={self.stop_count})"
        )

    @override
    def start(self) -> None:
        self.start_count += 1
        self.started_at = time.monotonic()

    @override
    def stop(self) -> None:
        self.stop_count += 1
        self.stopped_at = time.monotonic()

    @property
    def duration_ms(self) -> Optional[float]:
        if self.started_at is None or self.stopped_at is None:
            return None
        return (self.stopped_at - self.started_at) * 1000

    @property
    def attributes(self) -> dict[str, Any]:
        """Attributes that have been set, without the unset ones."""
        values = {
            "request_payload_size": self.request_payload_size,
            "response_payload_size": self.response_payload_size,
            "response_content_type": self.response_content_type,
            "http_response_code": self.http_response_code,
        }
        return {key: value for key, value in values.items() if value is not None}


class InMemoryMeasurementBackend(MeasurementBackend):
    """
    Keeps every measurement it creates.

    Provides helper methods to query measurements by name or state.
    """

    def __init__(self) -> None:
        self._measurements: list[RecordedMeasurement] = []
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"InMemoryMeasurementBackend(measurements={len(self._measurements)})"

    @property
    @override
    def name(self) -> str:
        return "in-memory"

    @override
    def new_measurement(self, name: str, method: HttpMethod) -> RecordedMeasurement:
        measurement = RecordedMeasurement(name, method)
        with self._lock:
            self._measurements.append(measurement)
        return measurement

    def get_all_measurements(self) -> list[RecordedMeasurement]:
        with self._lock:
            return list(self._measurements)

    def get_measurements_by_name(self, name: str) -> list[RecordedMeasurement]:
        return [m for m in self.get_all_measurements() if m.name == name]

    def get_stopped_measurements(self) -> list[RecordedMeasurement]:
        return [m for m in self.get_all_measurements() if m.stop_count > 0]

    def clear(self) -> None:
        with self._lock:
            self._measurements.clear()

"""Base classes for measurement backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..core.types import HttpMethod


class Measurement(ABC):
    """
    A named, timed telemetry record for one HTTP call.

    Lifecycle: created -> ``start()`` -> attributes set -> ``stop()``.
    The interceptor guarantees ``stop()`` is called at most once.
    """

    def __init__(self) -> None:
        self.request_payload_size: Optional[int] = None
        self.response_payload_size: Optional[int] = None
        self.response_content_type: Optional[str] = None
        self.http_response_code: Optional[int] = None

    @abstractmethod
    def start(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass


class MeasurementBackend(ABC):
    """Factory for measurements, implemented once per telemetry SDK."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name for logging."""
        pass

    @abstractmethod
    def new_measurement(self, name: str, method: HttpMethod) -> Measurement:
        """Create (but do not start) a measurement for an HTTP call."""
        pass

"""Thread-safe store of open measurements keyed by correlation key."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Hashable, Optional

if TYPE_CHECKING:
    from ..backends.base import Measurement

logger = logging.getLogger(__name__)


class MeasurementStore:
    """
    Holds every measurement that has been opened and not yet closed.

    Invariants:
    - A key is present iff its measurement is open.
    - ``take`` removes and returns in one step, so concurrent completion
      paths for the same key cannot both receive the measurement.
    - ``open`` on an existing key overwrites it (last writer wins).
    """

    def __init__(self) -> None:
        self._measurements: dict[Hashable, Measurement] = {}
        self._lock = threading.Lock()

    def open(self, key: Hashable, measurement: Measurement) -> None:
        with self._lock:
            previous = self._measurements.get(key)
            self._measurements[key] = measurement
        if previous is not None and previous is not measurement:
            logger.debug(f"Correlation key collision on {key!r}, dropping earlier measurement")

    def take(self, key: Hashable) -> Optional[Measurement]:
        """Remove and return the measurement for ``key``, or None if absent."""
        with self._lock:
            return self._measurements.pop(key, None)

    def discard(self, key: Hashable, measurement: Measurement) -> None:
        """Remove ``key`` only while it still maps to ``measurement``."""
        with self._lock:
            if self._measurements.get(key) is measurement:
                del self._measurements[key]

    def clear(self) -> None:
        with self._lock:
            self._measurements.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._measurements)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._measurements

    def __repr__(self) -> str:
        return f"MeasurementStore(open={len(self)})"

"""Correlation key strategies.

A key strategy links a request's pre-send step to its completion step. It
writes a key into the request's metadata bag when the request is sent and
reads the same key back when the response (or failure) arrives.

The default ``RandomKeyStrategy`` draws a random 32-bit integer. Two
in-flight requests can draw the same value; when that happens the second
measurement overwrites the first in the store and the first one is never
reported. ``CounterKeyStrategy`` is injective and is the recommended choice
when every call must be accounted for.
"""

from __future__ import annotations

import itertools
import random
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable

from .types import RequestDescriptor

EXTRA_KEY = "_perfhook_key"
MAX_KEY_VALUE = 1 << 32


class KeyStrategy(ABC):
    """Stamps and extracts correlation keys on a request's metadata bag."""

    @abstractmethod
    def stamp(self, request: RequestDescriptor) -> None:
        """Write a fresh key into ``request.extra``."""

    def extract(self, request: RequestDescriptor) -> Hashable:
        """Read back the key written by ``stamp``."""
        return request.extra[EXTRA_KEY]


class RandomKeyStrategy(KeyStrategy):
    """Random integer in ``[0, 2**32)``. Collisions are possible but rare."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._random = rng or random.Random()

    def stamp(self, request: RequestDescriptor) -> None:
        request.extra[EXTRA_KEY] = self._random.randrange(MAX_KEY_VALUE)


class CounterKeyStrategy(KeyStrategy):
    """Monotonically increasing integer, unique for the lifetime of the strategy."""

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def stamp(self, request: RequestDescriptor) -> None:
        with self._lock:
            value = next(self._counter)
        request.extra[EXTRA_KEY] = value


class FunctionKeyStrategy(KeyStrategy):
    """Key strategy built from a user supplied ``(stamp, extract)`` pair."""

    def __init__(
        self,
        stamp: Callable[[RequestDescriptor], None],
        extract: Callable[[RequestDescriptor], Hashable],
    ) -> None:
        self._stamp = stamp
        self._extract = extract

    def stamp(self, request: RequestDescriptor) -> None:
        self._stamp(request)

    def extract(self, request: RequestDescriptor) -> Hashable:
        return self._extract(request)


_STRATEGIES: dict[str, Callable[[], KeyStrategy]] = {
    "random": RandomKeyStrategy,
    "counter": CounterKeyStrategy,
}


def get_key_strategy(name: Any) -> KeyStrategy:
    """Build a key strategy from its configured name."""
    factory = _STRATEGIES.get(str(name).strip().lower())
    if factory is None:
        raise ValueError(f"Unknown key strategy {name!r}, expected one of {sorted(_STRATEGIES)}")
    return factory()

"""Fail-open result type for instrumentation operations.

Every hook the interceptor exposes returns an ``InstrumentationResult``
instead of raising. Failures are collapsed into ``IGNORED_FAILURE`` and
logged at debug level so the instrumented HTTP call never sees them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class InstrumentationResultCode(Enum):
    SUCCESS = 0
    IGNORED_FAILURE = 1
    SKIPPED = 2


@dataclass
class InstrumentationResult:
    """Outcome of a single instrumentation step."""

    code: InstrumentationResultCode
    error: Optional[BaseException] = None
    reason: str = ""

    @classmethod
    def success(cls) -> InstrumentationResult:
        return cls(code=InstrumentationResultCode.SUCCESS)

    @classmethod
    def ignored(cls, error: BaseException | str) -> InstrumentationResult:
        if isinstance(error, str):
            error = Exception(error)
        return cls(code=InstrumentationResultCode.IGNORED_FAILURE, error=error)

    @classmethod
    def skipped(cls, reason: str) -> InstrumentationResult:
        return cls(code=InstrumentationResultCode.SKIPPED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.code == InstrumentationResultCode.SUCCESS


def fail_open(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> InstrumentationResult:
    """Run ``operation`` and convert any exception into an ignored failure.

    If the operation itself returns an ``InstrumentationResult`` it is passed
    through unchanged; any other return value counts as success.
    """
    try:
        result = operation(*args, **kwargs)
    except Exception as e:
        name = getattr(operation, "__qualname__", repr(operation))
        logger.debug(f"Ignoring instrumentation failure in {name}: {e!r}")
        return InstrumentationResult.ignored(e)
    if isinstance(result, InstrumentationResult):
        return result
    return InstrumentationResult.success()

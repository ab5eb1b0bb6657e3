"""Base class for HTTP client instrumentations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..core.types import FailureEvent
from .registry import RestoreFn, register_patch

if TYPE_CHECKING:
    from ..core.interceptor import PerformanceInterceptor
    from ..core.result import InstrumentationResult
    from ..core.types import RequestDescriptor, ResponseDescriptor

logger = logging.getLogger(__name__)

_MISSING = object()


def replace_method(owner: type, name: str, replacement: Callable[..., Any]) -> RestoreFn:
    """Set ``owner.name`` to ``replacement`` and return a callable that undoes it.

    A method that was only inherited is removed again on restore instead of
    being pinned onto ``owner``.
    """
    previous = owner.__dict__.get(name, _MISSING)
    setattr(owner, name, replacement)

    def restore() -> None:
        if previous is _MISSING:
            delattr(owner, name)
        else:
            setattr(owner, name, previous)

    return restore


class InstrumentationBase(ABC):
    """
    Patches one HTTP client module so its calls drive a PerformanceInterceptor.

    When no interceptor is given, the one owned by the ``PerfHook`` singleton
    is looked up on every call; calls pass straight through while it is None.
    """

    def __init__(
        self,
        name: str,
        module_name: str,
        enabled: bool = True,
        interceptor: PerformanceInterceptor | None = None,
    ) -> None:
        self.name = name
        self.module_name = module_name
        self.enabled = enabled
        self._interceptor = interceptor

        if enabled:
            register_patch(module_name, self.patch, owner=name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(module={self.module_name}, enabled={self.enabled})"

    @property
    def interceptor(self) -> Optional[PerformanceInterceptor]:
        if self._interceptor is not None:
            return self._interceptor

        from ..core.sdk import PerfHook

        return PerfHook.get_instance().interceptor

    @abstractmethod
    def patch(self, module: Any) -> Optional[RestoreFn]:
        """Replace the client's send method on ``module``; return a callable that puts it back."""

    def _begin(
        self,
        interceptor: PerformanceInterceptor,
        describe: Callable[..., RequestDescriptor],
        *args: Any,
    ) -> Optional[RequestDescriptor]:
        """Build the request descriptor and run the pre-send hook.

        Returns None when no measurement was opened, in which case the call
        goes ahead uninstrumented and no completion hook is run.
        """
        try:
            request = describe(*args)
        except Exception as e:
            logger.debug(f"[{self.name}] Could not describe request, skipping instrumentation: {e}")
            return None
        if not interceptor.on_request(request).ok:
            return None
        return request

    def _succeed(
        self,
        interceptor: PerformanceInterceptor,
        describe: Callable[..., ResponseDescriptor],
        request: RequestDescriptor,
        *args: Any,
    ) -> InstrumentationResult:
        try:
            response = describe(request, *args)
        except Exception as e:
            # Still close the measurement, just without response attributes
            logger.debug(f"[{self.name}] Could not describe response: {e}")
            return interceptor.on_error(FailureEvent(request=request))
        return interceptor.on_response(response)

    def _fail(
        self,
        interceptor: PerformanceInterceptor,
        describe: Callable[[RequestDescriptor, BaseException], FailureEvent],
        request: RequestDescriptor,
        error: BaseException,
    ) -> InstrumentationResult:
        try:
            event = describe(request, error)
        except Exception as e:
            logger.debug(f"[{self.name}] Could not describe failure: {e}")
            event = FailureEvent(request=request, error=error)
        return interceptor.on_error(event)

"""PerfHook SDK singleton and lifecycle management."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Optional

from .config import InterceptorConfig, PerfHookFileConfig, load_perfhook_config
from .interceptor import PerformanceInterceptor
from .key_strategy import get_key_strategy
from .logger import LogLevel, configure_logger, is_log_level

if TYPE_CHECKING:
    from ..backends.base import MeasurementBackend
    from ..instrumentation.base import InstrumentationBase

logger = logging.getLogger(__name__)

ENV_DISABLED = "PERFHOOK_DISABLED"
ENV_LOG_LEVEL = "PERFHOOK_LOG_LEVEL"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


class PerfHook:
    """
    Main SDK singleton.

    Owns the ``PerformanceInterceptor`` shared by every installed HTTP client
    instrumentation. Instrumentations pass calls straight through until
    ``initialize`` has built the interceptor.
    """

    _instance: PerfHook | None = None
    _initialized = False

    def __init__(self) -> None:
        self.interceptor: Optional[PerformanceInterceptor] = None
        self.file_config: Optional[PerfHookFileConfig] = None
        self.instrumentations: list[InstrumentationBase] = []

    @classmethod
    def get_instance(cls) -> PerfHook:
        """Get the singleton PerfHook instance."""
        if cls._instance is None:
            cls._instance = PerfHook()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Undo installed patches and drop the singleton so the next ``initialize`` starts from scratch."""
        from ..instrumentation.registry import uninstall_hooks

        restored = uninstall_hooks()
        if restored:
            logger.debug(f"Restored {', '.join(restored)}")
        cls._instance = None
        cls._initialized = False

    @property
    def patched_modules(self) -> list[str]:
        """Names of the client modules whose send methods are currently patched."""
        from ..instrumentation.registry import applied_patches

        return [applied.module_name for applied in applied_patches()]

    @classmethod
    def initialize(
        cls,
        backend: MeasurementBackend | None = None,
        config: InterceptorConfig | None = None,
        log_level: LogLevel | None = None,
        instrument_requests: bool | None = None,
        instrument_httpx: bool | None = None,
    ) -> PerfHook:
        """
        Initialize the PerfHook SDK.

        Configuration precedence (highest to lowest):
        1. Initialization parameters (this function's arguments)
        2. Environment variables (PERFHOOK_DISABLED, PERFHOOK_LOG_LEVEL)
        3. YAML configuration (.perfhook/config.yaml)
        4. Built-in defaults

        Args:
            backend: Measurement backend. Defaults to OpenTelemetryBackend on the global tracer provider.
            config: Size estimator and key strategy overrides.
            log_level: Logging level (silent, error, warn, info, debug). Default: info
            instrument_requests: Patch the requests library. Default: True
            instrument_httpx: Patch the httpx library. Default: True

        Returns:
            The initialized PerfHook instance
        """
        instance = cls.get_instance()
        file_config = load_perfhook_config()
        instance.file_config = file_config

        configure_logger(log_level=instance._resolve_log_level(log_level), prefix="PerfHook")

        if cls._initialized:
            logger.debug("Already initialized, skipping...")
            return instance

        if _env_flag(ENV_DISABLED):
            logger.debug(f"PerfHook disabled via {ENV_DISABLED}")
            return instance

        interceptor_file_config = file_config.interceptor if file_config else None
        if interceptor_file_config and interceptor_file_config.enabled is False:
            logger.debug("PerfHook disabled via config file")
            return instance

        if config is None:
            config = InterceptorConfig()
            if interceptor_file_config and interceptor_file_config.key_strategy:
                try:
                    config.key_strategy = get_key_strategy(interceptor_file_config.key_strategy)
                except ValueError as e:
                    logger.warning(f"Invalid interceptor.key_strategy in config file, using random: {e}")

        if backend is None:
            from ..backends.opentelemetry import OpenTelemetryBackend

            backend = OpenTelemetryBackend()

        instance.interceptor = PerformanceInterceptor(backend=backend, config=config)
        instance._install_instrumentations(instrument_requests, instrument_httpx)

        cls._initialized = True
        logger.info(f"PerfHook initialized with {backend.name} backend")
        return instance

    def _resolve_log_level(self, log_level: LogLevel | None) -> LogLevel:
        candidates: list[Any] = [log_level, os.environ.get(ENV_LOG_LEVEL)]
        if self.file_config:
            candidates.append(self.file_config.log_level)
        for candidate in candidates:
            if candidate is None:
                continue
            if is_log_level(candidate):
                return candidate
            logger.warning(f"Ignoring invalid log level {candidate!r}")
        return "info"

    def _install_instrumentations(self, instrument_requests: bool | None, instrument_httpx: bool | None) -> None:
        from ..instrumentation.registry import install_hooks

        file_instrumentations = self.file_config.instrumentations if self.file_config else None

        def wanted(explicit: bool | None, from_file: bool | None) -> bool:
            if explicit is not None:
                return explicit
            if from_file is not None:
                return from_file
            return True

        if wanted(instrument_requests, file_instrumentations.requests if file_instrumentations else None):
            from ..instrumentation.requests import RequestsInstrumentation

            self.instrumentations.append(RequestsInstrumentation())

        if wanted(instrument_httpx, file_instrumentations.httpx if file_instrumentations else None):
            from ..instrumentation.httpx import HttpxInstrumentation

            self.instrumentations.append(HttpxInstrumentation())

        if self.instrumentations:
            install_hooks()

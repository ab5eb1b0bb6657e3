"""Configuration for PerfHook.

Two layers:
- ``InterceptorConfig``: the in-process overrides (size estimators and
  correlation key strategy) handed to ``PerformanceInterceptor``.
- ``PerfHookFileConfig``: optional ``.perfhook/config.yaml`` found from the
  project root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .key_strategy import KeyStrategy, RandomKeyStrategy
from .size_estimation import (
    RequestSizeEstimator,
    ResponseSizeEstimator,
    estimate_request_size,
    estimate_response_size,
)

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".perfhook"
CONFIG_FILE_NAME = "config.yaml"
PROJECT_ROOT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg", ".git")


@dataclass
class InterceptorConfig:
    request_size_estimator: RequestSizeEstimator = estimate_request_size
    response_size_estimator: ResponseSizeEstimator = estimate_response_size
    key_strategy: KeyStrategy = field(default_factory=RandomKeyStrategy)


@dataclass
class InterceptorFileConfig:
    enabled: Optional[bool] = None
    key_strategy: Optional[str] = None


@dataclass
class InstrumentationsFileConfig:
    requests: Optional[bool] = None
    httpx: Optional[bool] = None


@dataclass
class PerfHookFileConfig:
    interceptor: Optional[InterceptorFileConfig] = None
    instrumentations: Optional[InstrumentationsFileConfig] = None
    log_level: Optional[str] = None


def find_project_root(start: Path | None = None) -> Optional[Path]:
    """Walk up from ``start`` (default: cwd) to the first directory with a project marker."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in PROJECT_ROOT_MARKERS):
            return directory
    return None


def _section(data: dict[str, Any], name: str, cls: type) -> Any:
    raw = data.get(name)
    if not isinstance(raw, dict):
        return None
    known = {key: value for key, value in raw.items() if key in cls.__dataclass_fields__}
    return cls(**known)


def load_perfhook_config(project_root: Path | None = None) -> Optional[PerfHookFileConfig]:
    """Load ``.perfhook/config.yaml``; None if missing or unparsable."""
    root = project_root or find_project_root()
    if root is None:
        return None

    config_path = root / CONFIG_DIR_NAME / CONFIG_FILE_NAME
    if not config_path.is_file():
        logger.debug(f"No config file at {config_path}")
        return None

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config file {config_path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Config file {config_path} must contain a mapping, ignoring it")
        return None

    log_level = data.get("log_level")
    return PerfHookFileConfig(
        interceptor=_section(data, "interceptor", InterceptorFileConfig),
        instrumentations=_section(data, "instrumentations", InstrumentationsFileConfig),
        log_level=str(log_level) if log_level is not None else None,
    )

"""Pytest configuration and fixtures for PerfHook tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from perfhook.backends.memory import InMemoryMeasurementBackend
    from perfhook.core.interceptor import PerformanceInterceptor


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def original_cwd() -> Generator[str, None, None]:
    """Save and restore the current working directory."""
    cwd = os.getcwd()
    yield cwd
    os.chdir(cwd)


@pytest.fixture
def memory_backend() -> InMemoryMeasurementBackend:
    """Create a fresh InMemoryMeasurementBackend for testing."""
    from perfhook.backends.memory import InMemoryMeasurementBackend

    return InMemoryMeasurementBackend()


@pytest.fixture
def interceptor(memory_backend: InMemoryMeasurementBackend) -> PerformanceInterceptor:
    """Interceptor with the default config writing to the in-memory backend."""
    from perfhook.core.interceptor import PerformanceInterceptor

    return PerformanceInterceptor(backend=memory_backend)

"""Tests for the PerfHook SDK singleton."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import ModuleType

import pytest

from perfhook.backends.memory import InMemoryMeasurementBackend
from perfhook.backends.opentelemetry import OpenTelemetryBackend
from perfhook.core.config import InterceptorConfig
from perfhook.core.key_strategy import CounterKeyStrategy, RandomKeyStrategy
from perfhook.core.logger import get_log_level, set_log_level
from perfhook.core.sdk import ENV_DISABLED, ENV_LOG_LEVEL, PerfHook
from perfhook.instrumentation.base import replace_method
from perfhook.instrumentation.registry import install_hooks, register_patch


@pytest.fixture(autouse=True)
def fresh_sdk(monkeypatch, temp_dir, original_cwd):
    """Run each test from an empty project with a fresh singleton."""
    monkeypatch.delenv(ENV_DISABLED, raising=False)
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)
    (temp_dir / "pyproject.toml").touch()
    os.chdir(temp_dir)
    PerfHook.reset()
    yield
    PerfHook.reset()
    set_log_level("info")


def write_config(root: Path, content: str) -> None:
    (root / ".perfhook").mkdir()
    (root / ".perfhook" / "config.yaml").write_text(content)


def initialize(**kwargs) -> PerfHook:
    kwargs.setdefault("instrument_requests", False)
    kwargs.setdefault("instrument_httpx", False)
    return PerfHook.initialize(**kwargs)


class TestPerfHookSingleton:
    """Tests for singleton behavior."""

    def test_get_instance_returns_singleton(self):
        assert PerfHook.get_instance() is PerfHook.get_instance()

    def test_interceptor_is_none_before_initialize(self):
        assert PerfHook.get_instance().interceptor is None


class TestPerfHookInitialize:
    """Tests for PerfHook.initialize."""

    def test_builds_interceptor_with_given_backend_and_config(self):
        backend = InMemoryMeasurementBackend()
        config = InterceptorConfig(key_strategy=CounterKeyStrategy())

        sdk = initialize(backend=backend, config=config)

        assert sdk.interceptor is not None
        assert sdk.interceptor.backend is backend
        assert sdk.interceptor.config is config

    def test_defaults_to_opentelemetry_backend(self):
        sdk = initialize()

        assert isinstance(sdk.interceptor.backend, OpenTelemetryBackend)
        assert isinstance(sdk.interceptor.config.key_strategy, RandomKeyStrategy)

    def test_second_initialize_is_noop(self):
        first_backend = InMemoryMeasurementBackend()
        sdk = initialize(backend=first_backend)

        initialize(backend=InMemoryMeasurementBackend())

        assert sdk.interceptor.backend is first_backend

    def test_disabled_via_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_DISABLED, "true")

        sdk = initialize(backend=InMemoryMeasurementBackend())

        assert sdk.interceptor is None

    def test_disabled_via_config_file(self, temp_dir):
        write_config(temp_dir, "interceptor:\n  enabled: false\n")

        sdk = initialize(backend=InMemoryMeasurementBackend())

        assert sdk.interceptor is None

    def test_key_strategy_from_config_file(self, temp_dir):
        write_config(temp_dir, "interceptor:\n  key_strategy: counter\n")

        sdk = initialize(backend=InMemoryMeasurementBackend())

        assert isinstance(sdk.interceptor.config.key_strategy, CounterKeyStrategy)

    def test_unknown_key_strategy_in_config_file_falls_back_to_random(self, temp_dir, caplog):
        write_config(temp_dir, "interceptor:\n  key_strategy: uuid\n")

        sdk = initialize(backend=InMemoryMeasurementBackend())

        assert sdk.interceptor is not None
        assert isinstance(sdk.interceptor.config.key_strategy, RandomKeyStrategy)
        assert "Invalid interceptor.key_strategy" in caplog.text

    def test_log_level_precedence(self, temp_dir, monkeypatch):
        write_config(temp_dir, "log_level: error\n")
        monkeypatch.setenv(ENV_LOG_LEVEL, "warn")

        initialize(backend=InMemoryMeasurementBackend(), log_level="debug")
        assert get_log_level() == "debug"

        PerfHook.reset()
        initialize(backend=InMemoryMeasurementBackend())
        assert get_log_level() == "warn"

        PerfHook.reset()
        monkeypatch.delenv(ENV_LOG_LEVEL)
        initialize(backend=InMemoryMeasurementBackend())
        assert get_log_level() == "error"

    def test_invalid_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "loud")

        initialize(backend=InMemoryMeasurementBackend())

        assert get_log_level() == "info"

    def test_installs_selected_instrumentations(self, mocker):
        install_hooks = mocker.patch("perfhook.instrumentation.registry.install_hooks")

        sdk = PerfHook.initialize(
            backend=InMemoryMeasurementBackend(), instrument_requests=True, instrument_httpx=False
        )

        assert [type(i).__name__ for i in sdk.instrumentations] == ["RequestsInstrumentation"]
        install_hooks.assert_called_once()

    def test_config_file_selects_instrumentations(self, temp_dir, mocker):
        mocker.patch("perfhook.instrumentation.registry.install_hooks")
        write_config(temp_dir, "instrumentations:\n  requests: false\n  httpx: true\n")

        sdk = PerfHook.initialize(backend=InMemoryMeasurementBackend())

        assert [type(i).__name__ for i in sdk.instrumentations] == ["HttpxInstrumentation"]

    def test_reset_undoes_installed_patches(self, monkeypatch):
        class FakeSession:
            def request(self, method, url):
                return "original"

        fake_module = ModuleType("perfhook_fake_sdk_client")
        fake_module.Session = FakeSession
        monkeypatch.setitem(sys.modules, fake_module.__name__, fake_module)

        def patch(module):
            return replace_method(module.Session, "request", lambda self, method, url: "patched")

        register_patch(fake_module.__name__, patch, owner="FakeInstrumentation")
        install_hooks()
        sdk = PerfHook.get_instance()
        assert sdk.patched_modules == [fake_module.__name__]
        assert FakeSession().request("GET", "/") == "patched"

        PerfHook.reset()

        assert FakeSession().request("GET", "/") == "original"
        assert PerfHook.get_instance().patched_modules == []

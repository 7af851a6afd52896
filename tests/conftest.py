"""Shared pytest fixtures for tracing bootstrap."""

import logging
from typing import Any, Callable, Iterator

import pytest
import structlog
from opentelemetry import propagate, trace
from opentelemetry.util._once import Once


def _reset_tracer_provider() -> None:
    # The API only allows one registration per process
    trace._TRACER_PROVIDER_SET_ONCE = Once()
    trace._TRACER_PROVIDER = None


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset environment variables and settings cache for each test."""
    # Clear settings cache to prevent test pollution
    from tracing_bootstrap.settings import get_settings

    get_settings.cache_clear()
    monkeypatch.setenv("ENVIRONMENT", "testing")
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_tracing_globals() -> Iterator[None]:
    """Restore global tracer provider, propagator and logging after each test."""
    original_textmap = propagate.get_global_textmap()
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    _reset_tracer_provider()

    yield

    _reset_tracer_provider()
    propagate.set_global_textmap(original_textmap)
    structlog.reset_defaults()
    root.handlers[:] = root_handlers
    root.setLevel(root_level)


@pytest.fixture
def base_config() -> dict[str, Any]:
    """Service identity shared by tracing configurations."""
    return {
        "service_name": "serviceName",
        "service_version": "serviceVersion",
        "deployment_environment": "projectID",
    }


@pytest.fixture
def reset_tracer_provider() -> Callable[[], None]:
    """Allow a test to register a second tracer provider."""
    return _reset_tracer_provider

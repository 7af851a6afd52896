"""Settings and configuration access.

This module provides a clean interface for accessing application settings.
Settings are automatically loaded from .env file via pydantic-settings.

Usage:
    Basic usage:
        >>> from tracing_bootstrap.settings import get_settings
        >>> settings = get_settings()
        >>> print(settings.service_name)
        tracing-bootstrap

    Build the bootstrapper input:
        >>> config = get_settings().to_tracing_config()

    Access nested config:
        >>> settings = get_settings()
        >>> print(settings.tracing.sampler_ratio)
        1.0

    Testing with custom settings:
        >>> import pytest
        >>> def test_example(monkeypatch):
        ...     monkeypatch.setenv("TRACING__STDOUT_EXPORTER_ENABLED", "true")
        ...     get_settings.cache_clear()  # Clear cache
        ...     settings = get_settings()
        ...     assert settings.tracing.stdout_exporter_enabled is True
"""

from functools import lru_cache

from .config import Settings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Priority order (highest to lowest):
        1. Environment variables
        2. .env file in project root
        3. Default values from config.py

    Returns:
        Settings: Cached settings instance with validated configuration

    Note:
        In tests, call get_settings.cache_clear() after changing environment
        variables to force reload of settings.
    """
    return Settings()


# Convenience exports
__all__ = ["Settings", "get_settings"]

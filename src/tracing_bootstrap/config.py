"""Configuration management using Pydantic.

This module provides type-safe configuration with validation.
``TracingConfig`` is the programmatic input to the bootstrapper; optional
fields are left as ``None`` and filled by ``TracingConfig.with_defaults()``.
``Settings`` loads the same values from the environment and a .env file.
"""

from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.trace.sampling import ALWAYS_ON, Sampler
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .propagators import PropagationFormat, build_propagator, default_propagator
from .samplers import SamplerName, build_sampler

# Find .env file in project root (parent of src/)
_PACKAGE_DIR = Path(__file__).parent
_PROJECT_ROOT = _PACKAGE_DIR.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_OTLP_COLLECTOR_HTTP_ENDPOINT = "opentelemetry-collector:80"
DEFAULT_OTLP_COLLECTOR_TIMEOUT = timedelta(seconds=30)
DEFAULT_STDOUT_EXPORTER_ENABLED = False


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ResolvedTracingConfig(BaseModel):
    """Tracing configuration with every field populated.

    Only produced by ``TracingConfig.with_defaults()``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_name: str
    service_version: str
    deployment_environment: str

    otlp_exporter_enabled: bool
    otlp_collector_http_endpoint: str
    otlp_collector_timeout: timedelta

    stdout_exporter_enabled: bool

    propagator: TextMapPropagator
    sampler: Sampler


class TracingConfig(BaseModel):
    """Tracing configuration as supplied by the caller.

    Unset optional fields take these values in ``with_defaults()``:

    - ``otlp_collector_http_endpoint``: ``opentelemetry-collector:80``
    - ``otlp_collector_timeout``: 30 seconds
    - ``stdout_exporter_enabled``: ``False``
    - ``propagator``: W3C trace context + baggage
    - ``sampler``: always on

    Example:
        >>> config = TracingConfig(
        ...     service_name="orders",
        ...     service_version="1.2.0",
        ...     deployment_environment="staging",
        ...     otlp_exporter_enabled=True,
        ... )
        >>> config.with_defaults().otlp_collector_timeout.total_seconds()
        30.0
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_name: str
    service_version: str
    deployment_environment: str

    otlp_exporter_enabled: bool = False
    otlp_collector_http_endpoint: str | None = None
    otlp_collector_timeout: timedelta | None = None

    stdout_exporter_enabled: bool | None = None

    propagator: TextMapPropagator | None = None
    sampler: Sampler | None = None

    @field_validator("otlp_collector_http_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str | None) -> str | None:
        """Reject blank endpoints."""
        if v is not None and not v.strip():
            raise ValueError("otlp_collector_http_endpoint must not be blank")
        return v.strip() if v is not None else v

    @field_validator("otlp_collector_timeout")
    @classmethod
    def validate_timeout(cls, v: timedelta | None) -> timedelta | None:
        """Reject zero and negative timeouts."""
        if v is not None and v <= timedelta(0):
            raise ValueError("otlp_collector_timeout must be positive")
        return v

    def with_defaults(self) -> ResolvedTracingConfig:
        """Return a fully populated copy of this configuration."""
        return ResolvedTracingConfig(
            service_name=self.service_name,
            service_version=self.service_version,
            deployment_environment=self.deployment_environment,
            otlp_exporter_enabled=self.otlp_exporter_enabled,
            otlp_collector_http_endpoint=(
                self.otlp_collector_http_endpoint or DEFAULT_OTLP_COLLECTOR_HTTP_ENDPOINT
            ),
            otlp_collector_timeout=self.otlp_collector_timeout or DEFAULT_OTLP_COLLECTOR_TIMEOUT,
            stdout_exporter_enabled=(
                DEFAULT_STDOUT_EXPORTER_ENABLED
                if self.stdout_exporter_enabled is None
                else self.stdout_exporter_enabled
            ),
            # If a propagator has not been provided then we default to W3C trace context/baggage
            propagator=self.propagator if self.propagator is not None else default_propagator(),
            # Always sample is not recommended for production
            sampler=self.sampler if self.sampler is not None else ALWAYS_ON,
        )


class TracingSettings(BaseModel):
    """Tracing settings expressible as environment variables.

    Loaded under the ``TRACING__`` prefix, e.g. ``TRACING__SAMPLER=always_off``.
    """

    model_config = ConfigDict(frozen=True)

    otlp_exporter_enabled: bool = False
    otlp_collector_http_endpoint: str | None = None
    otlp_collector_timeout_secs: Annotated[int, Field(gt=0)] | None = None
    stdout_exporter_enabled: bool | None = None
    propagation_format: PropagationFormat | None = None
    sampler: SamplerName | None = None
    sampler_ratio: Annotated[float, Field(ge=0.0, le=1.0)] = 1.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in project root (if it exists)
    3. Default values (lowest priority)

    The .env file is located at: <project_root>/.env
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Basic settings
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

    # Service identity, attached to every span
    service_name: str = "tracing-bootstrap"
    service_version: str = "0.1.0"

    tracing: TracingSettings = Field(default_factory=TracingSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: Any) -> Environment:
        """Validate and convert environment string."""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING

    def to_tracing_config(self) -> TracingConfig:
        """Build the bootstrapper input from these settings.

        Unset tracing options stay ``None`` so the bootstrapper defaults apply.

        Raises:
            ConfigurationError: If the propagation format or sampler is invalid
        """
        tracing = self.tracing
        timeout = (
            timedelta(seconds=tracing.otlp_collector_timeout_secs)
            if tracing.otlp_collector_timeout_secs is not None
            else None
        )
        return TracingConfig(
            service_name=self.service_name,
            service_version=self.service_version,
            deployment_environment=self.environment.value,
            otlp_exporter_enabled=tracing.otlp_exporter_enabled,
            otlp_collector_http_endpoint=tracing.otlp_collector_http_endpoint,
            otlp_collector_timeout=timeout,
            stdout_exporter_enabled=tracing.stdout_exporter_enabled,
            propagator=(
                build_propagator(tracing.propagation_format)
                if tracing.propagation_format is not None
                else None
            ),
            sampler=(
                build_sampler(tracing.sampler, tracing.sampler_ratio)
                if tracing.sampler is not None
                else None
            ),
        )

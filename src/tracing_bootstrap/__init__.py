"""Wire an application into OpenTelemetry tracing."""

from .config import ResolvedTracingConfig, TracingConfig
from .exceptions import (
    ConfigurationError,
    ExporterError,
    ResourceError,
    TracingBootstrapError,
)
from .propagators import B3_PROPAGATOR, PropagationFormat, build_propagator
from .samplers import SamplerName, build_sampler
from .tracing import TracingSetup, configure_tracing, get_tracer

__version__ = "0.1.0"

__all__ = [
    "B3_PROPAGATOR",
    "ConfigurationError",
    "ExporterError",
    "PropagationFormat",
    "ResolvedTracingConfig",
    "ResourceError",
    "SamplerName",
    "TracingBootstrapError",
    "TracingConfig",
    "TracingSetup",
    "build_propagator",
    "build_sampler",
    "configure_tracing",
    "get_tracer",
]

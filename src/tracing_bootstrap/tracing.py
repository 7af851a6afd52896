"""OpenTelemetry distributed tracing configuration.

``configure_tracing`` is the composition root: it builds the resource,
exporter, batch processor and provider, then registers the provider and
propagator process-wide.

It is meant to be called exactly once, early, during single-threaded
startup. Registration mutates global state without synchronisation.
"""

from typing import Callable, NamedTuple

from opentelemetry import trace
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import ResolvedTracingConfig, TracingConfig
from .exceptions import ConfigurationError, ResourceError, TracingBootstrapError
from .exporters import build_span_exporter
from .logger import LogContext, get_logger

logger = get_logger(__name__)


class TracingSetup(NamedTuple):
    """Configured provider and the routine that flushes and releases it.

    Unpacks as ``provider, shutdown = configure_tracing(config)``.
    ``shutdown`` must be called once, at graceful termination.
    """

    provider: TracerProvider
    shutdown: Callable[[], None]


def build_resource(config: ResolvedTracingConfig) -> Resource:
    """Create the resource describing this application.

    Raises:
        ResourceError: If the resource cannot be created
    """
    try:
        return Resource.create(
            {
                "service.name": config.service_name,
                "service.version": config.service_version,
                "deployment.environment": config.deployment_environment,
            }
        )
    except Exception as e:
        raise ResourceError(
            "Failed to create tracing resource",
            service_name=config.service_name,
            error=str(e),
        ) from e


def _ensure_no_registered_provider() -> None:
    # The API accepts a single tracer provider registration per process
    current = trace.get_tracer_provider()
    if isinstance(current, TracerProvider):
        raise ConfigurationError(
            "A tracer provider is already registered; configure tracing once per process",
            stage="provider",
            registered=type(current).__name__,
        )


def configure_tracing(config: TracingConfig) -> TracingSetup:
    """Configure OpenTelemetry tracing.

    Args:
        config: Tracing configuration; unset optional fields take defaults

    Returns:
        TracingSetup: Provider handle and shutdown routine

    Raises:
        ConfigurationError: If a tracer provider is already registered
        ResourceError: If the resource descriptor cannot be built
        ExporterError: If no exporter is enabled or it cannot be built

    Example:
        >>> from tracing_bootstrap.config import TracingConfig
        >>> from tracing_bootstrap.tracing import configure_tracing
        >>> provider, shutdown = configure_tracing(
        ...     TracingConfig(
        ...         service_name="orders",
        ...         service_version="1.2.0",
        ...         deployment_environment="staging",
        ...         stdout_exporter_enabled=True,
        ...     )
        ... )
        >>> shutdown()
    """
    resolved = config.with_defaults()

    with LogContext(logger, service_name=resolved.service_name) as log:
        # Nothing global is touched until both resource and exporter exist
        try:
            _ensure_no_registered_provider()
            resource = build_resource(resolved)
            exporter = build_span_exporter(resolved)
        except TracingBootstrapError as e:
            log.error("tracing_bootstrap_failed", stage=e.stage, error=str(e))
            raise

        # Register the trace exporter with a TracerProvider, using
        # a batch span processor to aggregate spans before export
        provider = TracerProvider(resource=resource, sampler=resolved.sampler)
        provider.add_span_processor(BatchSpanProcessor(exporter))

        trace.set_tracer_provider(provider)

        set_global_textmap(resolved.propagator)

        log.info(
            "tracing_configured",
            exporter=type(exporter).__name__,
            propagator=type(resolved.propagator).__name__,
            sampler=resolved.sampler.get_description(),
            service_version=resolved.service_version,
            deployment_environment=resolved.deployment_environment,
        )

    def shutdown() -> None:
        flushed = provider.force_flush()
        if not flushed:
            logger.warning("tracing_flush_incomplete", service_name=resolved.service_name)
        provider.shutdown()
        logger.info("tracing_shutdown", service_name=resolved.service_name)

    return TracingSetup(provider, shutdown)


def get_tracer(name: str, provider: TracerProvider | None = None) -> trace.Tracer:
    """Get a tracer instance.

    Args:
        name: Tracer name (typically module name)
        provider: Provider to use; the global provider when omitted

    Returns:
        Tracer: OpenTelemetry tracer instance

    Example:
        >>> from tracing_bootstrap.tracing import get_tracer
        >>> tracer = get_tracer(__name__, provider)
        >>> with tracer.start_as_current_span("operation"):
        ...     pass
    """
    return trace.get_tracer(name, tracer_provider=provider)


__all__ = [
    "TracingSetup",
    "build_resource",
    "configure_tracing",
    "get_tracer",
]

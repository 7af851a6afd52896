"""Unit tests for the tracing bootstrapper."""

from typing import Any, Callable

import pytest
from opentelemetry import propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import ALWAYS_OFF, ALWAYS_ON
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from structlog.testing import capture_logs

from tracing_bootstrap import tracing as tracing_module
from tracing_bootstrap.config import TracingConfig
from tracing_bootstrap.exceptions import ConfigurationError, ExporterError, ResourceError
from tracing_bootstrap.propagators import B3_PROPAGATOR
from tracing_bootstrap.tracing import TracingSetup, build_resource, configure_tracing, get_tracer


@pytest.mark.unit
class TestPropagatorRegistration:
    """Test suite for global propagator registration."""

    def test_default_propagator_is_w3c(self, base_config: dict[str, Any]) -> None:
        """Test that W3C trace context/baggage is registered when no propagator is given."""
        _, shutdown = configure_tracing(TracingConfig(**base_config, stdout_exporter_enabled=True))

        propagator = propagate.get_global_textmap()
        assert isinstance(propagator, CompositePropagator)
        assert [type(p) for p in propagator._propagators] == [
            TraceContextTextMapPropagator,
            W3CBaggagePropagator,
        ]
        assert {"traceparent", "tracestate", "baggage"} <= propagator.fields

        shutdown()

    def test_b3_propagator_replaces_default(
        self, base_config: dict[str, Any], reset_tracer_provider: Callable[[], None]
    ) -> None:
        """Test that a supplied propagator replaces the default one."""
        _, shutdown = configure_tracing(TracingConfig(**base_config, stdout_exporter_enabled=True))
        shutdown()
        reset_tracer_provider()

        _, shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True, propagator=B3_PROPAGATOR)
        )

        assert propagate.get_global_textmap() is B3_PROPAGATOR

        shutdown()


@pytest.mark.unit
class TestProviderRegistration:
    """Test suite for the configured tracer provider."""

    def test_returns_tracing_setup(self, base_config: dict[str, Any]) -> None:
        """Test that configure_tracing returns a provider and shutdown routine."""
        setup = configure_tracing(TracingConfig(**base_config, stdout_exporter_enabled=True))

        assert isinstance(setup, TracingSetup)
        assert isinstance(setup.provider, TracerProvider)
        assert callable(setup.shutdown)

        setup.shutdown()

    def test_provider_registered_globally(self, base_config: dict[str, Any]) -> None:
        """Test that the provider becomes the process-wide provider."""
        provider, shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True)
        )

        assert trace.get_tracer_provider() is provider

        shutdown()

    def test_resource_describes_service(self, base_config: dict[str, Any]) -> None:
        """Test that spans are tagged with service name, version and environment."""
        provider, shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True)
        )

        attributes = provider.resource.attributes
        assert attributes["service.name"] == "serviceName"
        assert attributes["service.version"] == "serviceVersion"
        assert attributes["deployment.environment"] == "projectID"

        shutdown()

    def test_default_sampler_is_always_on(self, base_config: dict[str, Any]) -> None:
        """Test that every span is sampled by default."""
        provider, shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True)
        )

        assert provider.sampler is ALWAYS_ON

        shutdown()

    def test_custom_sampler_is_installed(self, base_config: dict[str, Any]) -> None:
        """Test that a supplied sampler decides span recording."""
        provider, shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True, sampler=ALWAYS_OFF)
        )

        span = get_tracer(__name__, provider).start_span("dropped")
        assert span.is_recording() is False
        span.end()

        shutdown()

    def test_second_configure_is_rejected(self, base_config: dict[str, Any]) -> None:
        """Test that configuring twice fails and leaves the first registration in place."""
        first, first_shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True)
        )
        textmap = propagate.get_global_textmap()

        with capture_logs() as logs:
            with pytest.raises(ConfigurationError) as exc_info:
                configure_tracing(
                    TracingConfig(**base_config, stdout_exporter_enabled=True, propagator=B3_PROPAGATOR)
                )

        assert exc_info.value.stage == "provider"
        assert trace.get_tracer_provider() is first
        assert propagate.get_global_textmap() is textmap
        events = [log["event"] for log in logs]
        assert "tracing_bootstrap_failed" in events
        assert "tracing_configured" not in events

        first_shutdown()

    def test_configure_after_shutdown_is_rejected(self, base_config: dict[str, Any]) -> None:
        """Test that a shut down provider is not silently kept as the global one."""
        first, first_shutdown = configure_tracing(
            TracingConfig(**base_config, stdout_exporter_enabled=True)
        )
        first_shutdown()

        with pytest.raises(ConfigurationError):
            configure_tracing(TracingConfig(**base_config, stdout_exporter_enabled=True))

        assert trace.get_tracer_provider() is first


@pytest.mark.unit
class TestStdoutExporter:
    """Configure with only the stdout exporter enabled."""

    def test_spans_are_pretty_printed(
        self, base_config: dict[str, Any], capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that finished spans are printed as indented JSON on shutdown."""
        provider, shutdown = configure_tracing(
            TracingConfig(
                **base_config,
                otlp_exporter_enabled=False,
                stdout_exporter_enabled=True,
            )
        )

        with get_tracer(__name__, provider).start_as_current_span("work"):
            pass
        shutdown()

        out = capsys.readouterr().out
        assert '    "name": "work",' in out
        assert '"service.name": "serviceName"' in out

    def test_configure_logs_event(self, base_config: dict[str, Any]) -> None:
        """Test that a successful configuration is logged."""
        with capture_logs() as logs:
            _, shutdown = configure_tracing(
                TracingConfig(**base_config, stdout_exporter_enabled=True)
            )
            shutdown()

        events = {log["event"]: log for log in logs}
        assert events["tracing_configured"]["exporter"] == "ConsoleSpanExporter"
        assert events["tracing_configured"]["service_name"] == "serviceName"
        assert "tracing_shutdown" in events


@pytest.mark.unit
class TestOtlpExporter:
    """Configure with the OTLP exporter enabled."""

    def test_configure_and_shutdown(self, base_config: dict[str, Any]) -> None:
        """Test that shutdown force-flushes, then shuts the provider down."""
        provider, shutdown = configure_tracing(
            TracingConfig(
                **base_config,
                otlp_exporter_enabled=True,
                otlp_collector_http_endpoint="collector:4318",
            )
        )
        calls: list[str] = []
        force_flush = provider.force_flush
        provider_shutdown = provider.shutdown

        def record_flush(*args: Any, **kwargs: Any) -> bool:
            calls.append("force_flush")
            return force_flush(*args, **kwargs)

        def record_shutdown() -> None:
            calls.append("shutdown")
            provider_shutdown()

        provider.force_flush = record_flush  # type: ignore[method-assign]
        provider.shutdown = record_shutdown  # type: ignore[method-assign]

        shutdown()

        assert calls == ["force_flush", "shutdown"]

    def test_otlp_wins_over_stdout(self, base_config: dict[str, Any]) -> None:
        """Test that the stdout exporter is not used when OTLP is enabled."""
        with capture_logs() as logs:
            _, shutdown = configure_tracing(
                TracingConfig(
                    **base_config,
                    otlp_exporter_enabled=True,
                    stdout_exporter_enabled=True,
                )
            )
            shutdown()

        configured = next(log for log in logs if log["event"] == "tracing_configured")
        assert configured["exporter"] == "OTLPSpanExporter"


@pytest.mark.unit
class TestFailures:
    """Test suite for fatal bootstrap failures."""

    def test_no_exporter_enabled(self, base_config: dict[str, Any]) -> None:
        """Test that neither exporter enabled fails before any registration."""
        textmap = propagate.get_global_textmap()

        with pytest.raises(ExporterError) as exc_info:
            configure_tracing(TracingConfig(**base_config))

        assert exc_info.value.stage == "exporter"
        assert "No span exporter enabled" in str(exc_info.value)
        assert not isinstance(trace.get_tracer_provider(), TracerProvider)
        assert propagate.get_global_textmap() is textmap

    def test_resource_failure(
        self, base_config: dict[str, Any], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a resource failure is reported as the resource stage."""

        def boom(*args: Any, **kwargs: Any) -> Resource:
            raise RuntimeError("detector failed")

        monkeypatch.setattr(tracing_module.Resource, "create", boom)

        with capture_logs() as logs:
            with pytest.raises(ResourceError) as exc_info:
                configure_tracing(TracingConfig(**base_config, stdout_exporter_enabled=True))

        assert exc_info.value.stage == "resource"
        assert "detector failed" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert not isinstance(trace.get_tracer_provider(), TracerProvider)
        failed = next(log for log in logs if log["event"] == "tracing_bootstrap_failed")
        assert failed["stage"] == "resource"


@pytest.mark.unit
class TestHelpers:
    """Test suite for build_resource and get_tracer."""

    def test_build_resource(self, base_config: dict[str, Any]) -> None:
        """Test that build_resource merges service identity into the SDK resource."""
        resource = build_resource(TracingConfig(**base_config).with_defaults())

        assert resource.attributes["service.name"] == "serviceName"
        assert "telemetry.sdk.name" in resource.attributes

    def test_get_tracer_defaults_to_global(self, base_config: dict[str, Any]) -> None:
        """Test that get_tracer without a provider uses the registered one."""
        _, shutdown = configure_tracing(TracingConfig(**base_config, stdout_exporter_enabled=True))

        span = get_tracer(__name__).start_span("global")
        assert span.is_recording() is True
        span.end()

        shutdown()

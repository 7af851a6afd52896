"""Span exporter selection.

OTLP over HTTP takes precedence over the stdout exporter. With neither
enabled there is nothing to export to, which is a configuration error.
"""

import os
import sys

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SpanExporter

from .config import ResolvedTracingConfig
from .exceptions import ExporterError
from .logger import get_logger, log_function_call

logger = get_logger(__name__)

OTLP_TRACES_PATH = "/v1/traces"


def otlp_traces_url(endpoint: str) -> str:
    """Turn a collector ``host:port`` into the plain HTTP traces URL.

    A bare ``host:port`` is always contacted over plain HTTP. An endpoint
    that carries an explicit scheme keeps it, so ``https://`` opts into TLS
    and overrides the plain HTTP default. Only the traces path is appended
    when missing.

    Example:
        >>> otlp_traces_url("collector:4318")
        'http://collector:4318/v1/traces'
    """
    url = endpoint if "://" in endpoint else f"http://{endpoint}"
    url = url.rstrip("/")
    if not url.endswith(OTLP_TRACES_PATH):
        url += OTLP_TRACES_PATH
    return url


def _pretty_format(span: ReadableSpan) -> str:
    return span.to_json(indent=4) + os.linesep


@log_function_call(logger)
def build_span_exporter(config: ResolvedTracingConfig) -> SpanExporter:
    """Build the span exporter selected by the configuration.

    Args:
        config: Resolved tracing configuration

    Returns:
        SpanExporter: OTLP HTTP exporter or pretty printing stdout exporter

    Raises:
        ExporterError: If no exporter is enabled or construction fails
    """
    if config.otlp_exporter_enabled:
        endpoint = otlp_traces_url(config.otlp_collector_http_endpoint)
        timeout = config.otlp_collector_timeout.total_seconds()
        try:
            exporter: SpanExporter = OTLPSpanExporter(endpoint=endpoint, timeout=timeout)
        except Exception as e:
            raise ExporterError(
                "Failed to create OTLP span exporter",
                endpoint=endpoint,
                error=str(e),
            ) from e
        logger.debug("span_exporter_created", exporter="otlp_http", endpoint=endpoint, timeout_s=timeout)
        return exporter

    if config.stdout_exporter_enabled:
        try:
            # Bind the current sys.stdout, not the one seen at import time
            exporter = ConsoleSpanExporter(out=sys.stdout, formatter=_pretty_format)
        except Exception as e:
            raise ExporterError("Failed to create stdout span exporter", error=str(e)) from e
        logger.debug("span_exporter_created", exporter="stdout")
        return exporter

    raise ExporterError(
        "No span exporter enabled; enable the OTLP or the stdout exporter",
        otlp_exporter_enabled=config.otlp_exporter_enabled,
        stdout_exporter_enabled=config.stdout_exporter_enabled,
    )


__all__ = ["build_span_exporter", "otlp_traces_url"]

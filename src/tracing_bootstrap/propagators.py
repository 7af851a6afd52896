"""Context propagation formats.

W3C trace context plus W3C baggage is the default. B3 is offered as an
alternative for infrastructure that rewrites or drops ``traceparent``
headers; it is passed through untouched by such proxies.
"""

from enum import Enum

from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagators.b3 import B3MultiFormat, B3SingleFormat
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from .exceptions import ConfigurationError


class PropagationFormat(str, Enum):
    """Supported propagation formats, named as in ``OTEL_PROPAGATORS``."""

    TRACECONTEXT = "tracecontext"
    B3 = "b3"
    B3MULTI = "b3multi"


# B3 propagator that can be used instead of the default W3C trace context/baggage
B3_PROPAGATOR: TextMapPropagator = B3MultiFormat()


def default_propagator() -> TextMapPropagator:
    """Build the default W3C trace context + baggage composite."""
    return CompositePropagator(
        [
            TraceContextTextMapPropagator(),
            W3CBaggagePropagator(),
        ]
    )


def build_propagator(fmt: PropagationFormat | str) -> TextMapPropagator:
    """Build a propagator for a named format.

    Args:
        fmt: Format name or ``PropagationFormat`` member

    Returns:
        TextMapPropagator: Propagator implementing the format

    Raises:
        ConfigurationError: If the format is unknown

    Example:
        >>> from tracing_bootstrap.propagators import build_propagator
        >>> build_propagator("b3multi") is B3_PROPAGATOR
        True
    """
    try:
        fmt = PropagationFormat(fmt.lower() if isinstance(fmt, str) else fmt)
    except ValueError as e:
        raise ConfigurationError(
            "Unknown propagation format",
            propagation_format=fmt,
            supported=[f.value for f in PropagationFormat],
        ) from e

    if fmt is PropagationFormat.TRACECONTEXT:
        return default_propagator()
    if fmt is PropagationFormat.B3:
        return B3SingleFormat()
    return B3_PROPAGATOR


__all__ = [
    "B3_PROPAGATOR",
    "PropagationFormat",
    "build_propagator",
    "default_propagator",
]

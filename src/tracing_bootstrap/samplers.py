"""Sampling policies by name."""

from enum import Enum

from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    Sampler,
    TraceIdRatioBased,
)

from .exceptions import ConfigurationError


class SamplerName(str, Enum):
    """Sampler names, as accepted by ``OTEL_TRACES_SAMPLER``."""

    ALWAYS_ON = "always_on"
    ALWAYS_OFF = "always_off"
    TRACEIDRATIO = "traceidratio"
    PARENTBASED_ALWAYS_ON = "parentbased_always_on"
    PARENTBASED_ALWAYS_OFF = "parentbased_always_off"
    PARENTBASED_TRACEIDRATIO = "parentbased_traceidratio"


def build_sampler(name: SamplerName | str, ratio: float = 1.0) -> Sampler:
    """Build an SDK sampler.

    Args:
        name: Sampler name or ``SamplerName`` member
        ratio: Sampling probability for the ratio based samplers

    Returns:
        Sampler: Configured SDK sampler

    Raises:
        ConfigurationError: If the name is unknown or the ratio is out of range
    """
    try:
        name = SamplerName(name.lower() if isinstance(name, str) else name)
    except ValueError as e:
        raise ConfigurationError(
            "Unknown sampler",
            sampler=name,
            supported=[s.value for s in SamplerName],
        ) from e

    if not 0.0 <= ratio <= 1.0:
        raise ConfigurationError("Sampler ratio must be within [0, 1]", ratio=ratio)

    if name is SamplerName.ALWAYS_ON:
        return ALWAYS_ON
    if name is SamplerName.ALWAYS_OFF:
        return ALWAYS_OFF
    if name is SamplerName.TRACEIDRATIO:
        return TraceIdRatioBased(ratio)
    if name is SamplerName.PARENTBASED_ALWAYS_ON:
        return ParentBased(ALWAYS_ON)
    if name is SamplerName.PARENTBASED_ALWAYS_OFF:
        return ParentBased(ALWAYS_OFF)
    return ParentBased(TraceIdRatioBased(ratio))


__all__ = ["SamplerName", "build_sampler"]

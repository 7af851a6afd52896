"""Exception hierarchy for tracing bootstrap failures.

Every error raised while wiring the tracing SDK derives from
``TracingBootstrapError`` and carries keyword context, including the
``stage`` that failed.
"""

from typing import Any


class TracingBootstrapError(Exception):
    """Base exception for tracing bootstrap.

    All custom exceptions should inherit from this class.
    Supports additional context via keyword arguments.
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize exception with message and context.

        Args:
            message: Error message
            **context: Additional context as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation including context."""
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    @property
    def stage(self) -> str | None:
        """Bootstrap stage that failed, if known."""
        return self.context.get("stage")


class ConfigurationError(TracingBootstrapError):
    """Raised when tracing configuration is invalid."""

    pass


class ResourceError(TracingBootstrapError):
    """Raised when the resource descriptor cannot be built."""

    def __init__(self, message: str, **context: Any) -> None:
        context.setdefault("stage", "resource")
        super().__init__(message, **context)


class ExporterError(TracingBootstrapError):
    """Raised when no span exporter can be built."""

    def __init__(self, message: str, **context: Any) -> None:
        context.setdefault("stage", "exporter")
        super().__init__(message, **context)


__all__ = [
    "TracingBootstrapError",
    "ConfigurationError",
    "ResourceError",
    "ExporterError",
]

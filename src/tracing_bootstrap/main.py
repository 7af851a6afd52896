"""Main module for tracing bootstrap."""

import asyncio

from .logger import get_logger
from .logging_config import configure_logging_from_settings
from .settings import get_settings
from .tracing import configure_tracing, get_tracer

logger = get_logger(__name__)


async def main() -> None:
    """Main async entry point.

    Configures tracing from the environment, records a startup span and
    shuts tracing down again.
    """
    # Settings are automatically loaded from .env file via pydantic-settings
    settings = get_settings()
    configure_logging_from_settings()

    provider, shutdown = configure_tracing(settings.to_tracing_config())
    try:
        tracer = get_tracer(__name__, provider)
        with tracer.start_as_current_span("startup") as span:
            span.set_attribute("app.debug", settings.debug)
            logger.info(
                "application_started",
                environment=settings.environment.value,
                debug=settings.debug,
            )
    finally:
        shutdown()


if __name__ == "__main__":
    asyncio.run(main())

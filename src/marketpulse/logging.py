"""structlog setup for the metrics engine.

Every aggregation binds the token it is fetching into structlog contextvars,
so all provider warnings raised during that fan-out carry the token id
without threading it through each client call.
"""

import logging

import structlog

# Third-party loggers that emit per-request lines during a nine-call fan-out
QUIET_LOGGERS = ("ccxt", "aiohttp", "asyncio")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Route structlog and stdlib logging through one root handler.

    Args:
        log_level: Root level name (AppSettings.log_level).
        log_format: "console" for development or "json" for machine-readable
            output (AppSettings.log_format).

    Calling this again replaces the previous handler rather than adding one.
    Transport loggers (ccxt, aiohttp) are held at WARNING regardless of
    ``log_level`` so a DEBUG run shows the engine's own events only.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # stdlib records from third-party libraries get the same fields
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)

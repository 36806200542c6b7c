"""Structured logging for flowdesk.

Everything logs through structlog on top of the standard library root
logger. ``configure_logging`` runs with defaults on import and may be
called again, e.g. by ``open_backend`` with the application config; the
latest call wins for both the level and the renderer.
"""

import logging
import sys
from typing import Any

import structlog

__all__ = [
    "configure_logging",
    "get_logger",
]

# Driver loggers kept at WARNING whatever the application level
DRIVER_LOGGERS = ("motor", "pymongo", "redis")

_handler: logging.Handler | None = None


def _level_number(level: int | str) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelNamesMapping().get(level.strip().upper())
    if number is None:
        raise ValueError(f"Unknown log level '{level}'")
    return number


def _build_processors(json_output: bool, add_timestamp: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors.append(structlog.processors.StackInfoRenderer())

    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        )
    return processors


def _install_handler(level: int) -> None:
    """Attach flowdesk's stdout handler once and apply the level to the root logger."""
    global _handler
    root = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(_handler)
    root.setLevel(level)


def configure_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the root logger.

    Args:
        level: Logging level, as a number or a name such as "warning"
        json_output: Render JSON lines instead of the console format
        add_timestamp: Prefix entries with a UTC ISO timestamp

    Raises:
        ValueError: If level is an unknown level name
    """
    number = _level_number(level)

    # Loggers are not cached so that reconfiguring reaches those already bound
    structlog.configure(
        processors=_build_processors(json_output, add_timestamp),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _install_handler(number)

    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(max(number, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger; pass ``__name__`` of the calling module."""
    return structlog.get_logger(name)


configure_logging()

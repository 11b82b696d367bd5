"""Structured logging configuration for heatsheet.

Usage:
    from heatsheet.logging import get_logger, configure_logging

    configure_logging()                 # level and format from Settings
    configure_logging(level="DEBUG")    # e.g. the CLI's --verbose

    logger = get_logger(__name__)
    logger.info("entry_placed", event_number=3, heat=1, lane=4)

Level, format and environment come from heatsheet.config.Settings
(LOG_LEVEL, LOG_FORMAT, ENVIRONMENT). Without LOG_FORMAT, production logs
JSON and everything else logs to the console renderer.

Pydantic values passed as log fields (an EntryError, a list of them) are
logged as their JSON dump, so a rejected run can log the errors it returns.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from pydantic import BaseModel

from heatsheet.config import LogFormat, Settings, get_settings


def _resolve_format(settings: Settings) -> LogFormat:
    if settings.log_format is not None:
        return settings.log_format
    return LogFormat.JSON if settings.is_production else LogFormat.CONSOLE


def _resolve_level(level: str | None, settings: Settings) -> int:
    name = (level or settings.log_level).upper()
    return getattr(logging, name, logging.INFO)


def _environment_adder(environment: str) -> structlog.typing.Processor:
    def add_environment(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["environment"] = environment
        return event_dict

    return add_environment


def dump_models(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Render pydantic values, and lists of them, as plain dicts."""
    for key, value in event_dict.items():
        if isinstance(value, BaseModel):
            event_dict[key] = value.model_dump(mode="json", exclude_none=True)
        elif isinstance(value, list) and value and all(isinstance(v, BaseModel) for v in value):
            event_dict[key] = [v.model_dump(mode="json", exclude_none=True) for v in value]
    return event_dict


def configure_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Call once at startup (API lifespan or CLI callback).

    Args:
        level: Overrides Settings.log_level
        stream: Where log lines go; stdout unless given
    """
    settings = get_settings()
    log_format = _resolve_format(settings)
    log_level = _resolve_level(level, settings)

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _environment_adder(settings.environment.value),
        dump_models,
    ]

    if log_format == LogFormat.JSON:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=stream or sys.stdout, level=log_level)
    # basicConfig is a no-op once handlers exist; the level must still apply
    logging.getLogger().setLevel(log_level)

    # Supabase client chatter
    for noisy in ("httpx", "httpcore", "supabase", "postgrest"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module

    Returns:
        A configured structlog logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent log lines.

    Used to tag a whole reconciliation run, e.g. bind_context(meet_id="m1").
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()

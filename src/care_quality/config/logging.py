"""
Logging configuration for the care quality engine.

Standard library logging carries the handlers (rich console in development,
JSON lines in production, optional rotating file); structlog renders the
key/value events emitted throughout the package.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings, get_settings

# structlog renders the full event; handlers only add the line.
_MESSAGE_FORMAT = "%(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure application logging.

    Args:
        settings: Settings to apply; defaults to the cached application settings
    """
    settings = settings or get_settings()

    _configure_stdlib_logging(settings)
    _configure_structured_logging(settings)

    logger = get_logger("config.logging")
    logger.info(
        "Logging configuration applied",
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        environment=settings.environment,
    )


def _configure_stdlib_logging(settings: Settings) -> None:
    log_level = getattr(logging, settings.log_level, logging.INFO)
    handlers: list[logging.Handler] = []

    if settings.is_development and settings.log_format == "text":
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=True,
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        console_handler.setFormatter(logging.Formatter(_MESSAGE_FORMAT))
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(_MESSAGE_FORMAT))
    console_handler.setLevel(log_level)
    handlers.append(console_handler)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if settings.log_rotation:
            file_handler: logging.Handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=_parse_size(settings.log_max_size),
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
        else:
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(_MESSAGE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO if settings.is_development else logging.WARNING)
    if not settings.debug:
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def _configure_structured_logging(settings: Settings) -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _add_environment_processor,
    ]

    if settings.log_format == "text":
        processors.extend([structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=False)])
    else:
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, settings.log_level, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _add_environment_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    settings = get_settings()
    event_dict["environment"] = settings.environment
    event_dict["app_version"] = settings.app_version
    return event_dict


def _parse_size(size_str: str) -> int:
    """
    Parse size string to bytes.

    Args:
        size_str: Size string like "100MB", "1GB", etc.

    Returns:
        int: Size in bytes
    """
    size_str = size_str.upper().strip()

    if size_str.endswith("KB"):
        return int(size_str[:-2]) * 1024
    elif size_str.endswith("MB"):
        return int(size_str[:-2]) * 1024 * 1024
    elif size_str.endswith("GB"):
        return int(size_str[:-2]) * 1024 * 1024 * 1024
    else:
        return int(size_str)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)

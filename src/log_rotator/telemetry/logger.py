"""Structured logging configuration using structlog.

This module configures structlog for structured JSON logging with:
- JSON formatter for file output
- Pretty-printed console output for debugging
- UTC timestamps
- File rotation for log management
- Component and event tracking
"""

import logging
import logging.handlers
import os
import pathlib
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_FILE_NAME = "rotation.jsonl"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> str:
    """Get log level before settings can be loaded.

    Reads the same APP_LOG_LEVEL variable as AppConfig. Unknown values fall
    back to INFO rather than failing logging setup.

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    from log_rotator.config.validators import validate_log_level  # noqa: PLC0415

    try:
        return validate_log_level(os.getenv("APP_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    except ValueError:
        return DEFAULT_LOG_LEVEL


def _get_log_dir() -> pathlib.Path:
    """Get log directory path.

    Returns:
        Path to telemetry/logs directory.
    """
    try:
        from log_rotator.config.settings import get_settings  # noqa: PLC0415

        return pathlib.Path(str(get_settings().log_dir))
    except Exception:
        # Settings failed to load; fall back to <project root>/telemetry/logs
        project_root = pathlib.Path(__file__).parent.parent.parent.parent
        return project_root / "telemetry" / "logs"


def _add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add UTC timestamp to log event.

    Args:
        logger: The logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with timestamp added.
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _component_from_name(logger_name: str) -> str:
    # "log_rotator.rotation.runner" -> "runner"
    if "." in logger_name:
        return logger_name.split(".")[-1]
    return logger_name or "unknown"


def _add_component_from_event_dict(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name to log event from event_dict logger name.

    Runs after add_logger_name has stored the logger name, for both structlog
    events and foreign stdlib records.

    Args:
        logger: The structlog logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with component added.
    """
    event_dict["component"] = _component_from_name(event_dict.get("logger", ""))
    return event_dict


def _foreign_pre_chain() -> list[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        _add_component_from_event_dict,
    ]


def _configure_file_handler(log_dir: pathlib.Path) -> logging.handlers.RotatingFileHandler:
    """Configure rotating file handler for JSON logs.

    Args:
        log_dir: Directory for log files.

    Returns:
        Configured RotatingFileHandler.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / LOG_FILE_NAME),
        maxBytes=20 * 1024 * 1024,  # 20 MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_foreign_pre_chain(),
        )
    )
    return handler


def _configure_console_handler() -> logging.StreamHandler[Any]:
    """Configure console handler for pretty-printed logs.

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            foreign_pre_chain=_foreign_pre_chain(),
        )
    )
    return handler


def configure_logging() -> None:
    """Configure structlog for structured logging.

    This function should be called once at application startup to set up
    structured logging with JSON file output and pretty-printed console output.
    """
    log_level = _get_log_level()
    log_dir = _get_log_dir()

    # Root logger accepts all levels; individual handlers gate output.
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    configured_level = getattr(logging, log_level, logging.INFO)

    # File handler keeps INFO+ events regardless of the console level
    file_handler = _configure_file_handler(log_dir)
    file_handler.setLevel(min(logging.INFO, configured_level))
    root_logger.addHandler(file_handler)

    console_handler = _configure_console_handler()
    console_handler.setLevel(configured_level)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component_from_event_dict,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured structlog logger instance.

    Example:
        >>> from log_rotator.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("rotation_job_applied", job_name="folder/job", rule_index=0)
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)

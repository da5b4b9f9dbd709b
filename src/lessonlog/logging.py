"""Structured logging for the lesson-log engine using structlog.

Console output while editing locally, JSON lines when run unattended.
Modules log through get_logger(); only the CLI scripts print.
"""

import logging
import sys

import structlog

from src.lessonlog.config import LessonLogConfig


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog processors and the output renderer.

    Args:
        json_output: If True, render JSON lines. If False, console format.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging (tenacity, python-docx) to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    logging.getLogger().handlers = []
    logging.getLogger().addHandler(logging.StreamHandler(sys.stderr))


def setup_logging_from_config(config: LessonLogConfig) -> None:
    """Configure logging from the log_json/log_level settings."""
    setup_logging(json_output=config.log_json, log_level=config.log_level)


def bind_teacher_context(teacher_name: str, week: int) -> None:
    """Attach the active teacher and week to every log line in this context."""
    structlog.contextvars.bind_contextvars(teacher=teacher_name, week=week)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound with the module name.

    Args:
        name: Logger name (typically __name__ from calling module).

    Returns:
        Configured structlog logger.
    """
    return structlog.get_logger(name)

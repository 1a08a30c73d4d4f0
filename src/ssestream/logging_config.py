"""Structured logging via structlog, optionally mirrored to an hourly rotating file."""

from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

import structlog

# Handlers added by the last setup_logging call, replaced on the next one
_installed_handlers: list[logging.Handler] = []


def setup_logging(log_dir: str | None = None, log_level: str = "INFO") -> str | None:
    """Configure structlog JSON output to stderr, plus hourly rotating files under ``log_dir``.

    Rendered lines go through stdlib handlers, so the rotating handler is the
    only writer of the log file. Returns the path of the JSON lines file, or
    ``None`` when only stderr is used.
    """
    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root_logger.setLevel(log_level)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(log_level)
    _installed_handlers.append(stderr_handler)

    log_path: str | None = None
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, "ssestream.jsonl")

        file_handler = TimedRotatingFileHandler(
            filename=log_path,
            when="H",
            interval=1,
            backupCount=168,  # 7 days of hourly logs
            utc=True,
        )
        file_handler.setLevel(log_level)
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level)
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return log_path

# Copyright 2025 Graveyard Jokes Studios
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging configuration for the studio media catalog.

Environment Variables:
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
    LOG_FORMAT: Output format (console, json, cloudwatch, auto). Default: auto
    LOG_FILE: Optional file path for log output. Default: None (stderr only)

Example:
    from studiocatalog.logging import configure_structlog, get_logger

    configure_structlog()
    logger = get_logger(__name__)
    logger.info("media_listing_resolved", prefix="video-logs", entries=4)
"""

import logging
import os
import sys
from typing import Any, List

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer


def _cloudwatch_processor(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Rename fields to the CloudWatch Logs Insights conventions.

    - 'event' becomes 'message'
    - 'timestamp' becomes '@timestamp'
    - 'level' is uppercased
    """
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")

    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")

    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()

    return event_dict


def get_log_level() -> int:
    """Get log level from environment variable.

    Returns:
        Logging level constant from logging module (e.g., logging.INFO)
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_log_format() -> str:
    """Get log format from environment variable.

    Formats:
        - console: Colored output for development
        - json: JSON output for production
        - cloudwatch: JSON with AWS CloudWatch field names
        - auto: console if TTY, json otherwise (default)

    Returns:
        Format string: 'console', 'json' or 'cloudwatch'
    """
    format_str = os.getenv("LOG_FORMAT", "auto").lower()
    if format_str == "auto":
        return "console" if sys.stderr.isatty() else "json"
    return format_str


def _build_processors(log_format: str) -> List[Any]:
    shared_processors: List[Any] = [
        # Pulls in request_id/endpoint bound by the HTTP middleware
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "console":
        return shared_processors + [ConsoleRenderer(colors=True)]
    if log_format == "cloudwatch":
        return shared_processors + [_cloudwatch_processor, JSONRenderer()]
    # Unknown formats render as JSON
    return shared_processors + [JSONRenderer()]


def configure_structlog() -> None:
    """Configure structlog based on environment variables.

    Call once at startup (the CLI group or create_app_from_env) before any
    log events are emitted. Output goes to stderr, plus a rotating file
    when LOG_FILE is set.
    """
    log_level = get_log_level()
    processors = _build_processors(get_log_format())
    log_file = os.getenv("LOG_FILE")

    if log_file:
        from logging.handlers import RotatingFileHandler
        from pathlib import Path

        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(log_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

        # 20MB per file, 5 backups
        file_handler = RotatingFileHandler(log_file, maxBytes=20 * 1024 * 1024, backupCount=5)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)

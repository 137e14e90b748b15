"""Structured logging for ingestion runs.

Events are rendered as JSON lines by default so a run can be grepped per
test case. `console` rendering is meant for interactive runs next to the
rich progress output.
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any, Literal

import structlog

LogFormat = Literal["json", "console"]

_QUIET_LOGGERS = ("urllib3", "pymongo")


def resolve_level(level: int | str) -> int:
    """Map a level name such as "debug" to its number; unknown names mean INFO."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, *, log_format: LogFormat = "json") -> None:
    numeric_level = resolve_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Any
    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer(default=str)

    handler = logging.StreamHandler(sys.stderr if log_format == "console" else sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer]
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def record_context(testcase_id: str, position: int, total: int) -> AbstractContextManager[Any]:
    """Attach the current test case to every event logged inside the block."""

    return structlog.contextvars.bound_contextvars(testcase_id=testcase_id, record=f"{position}/{total}")


def get_logger(name: str) -> structlog.stdlib.BoundLogger[Any]:
    return structlog.get_logger(name)

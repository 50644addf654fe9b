"""Structlog setup for a server whose stdout belongs to the MCP protocol.

Every console line goes to stderr. Lines read
``<time> LEVEL logger: event key=value ...``; values containing whitespace
are quoted so argv fragments stay readable.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .config import get_settings

_CONFIGURED = False

# The MCP SDK and its HTTP stack log every request at INFO.
_QUIET_LOGGERS = ("mcp", "fastmcp", "httpx", "uvicorn.access", "sse_starlette")


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%Y-%m-%dT%H:%M:%S", utc=True),
        structlog.processors.format_exc_info,
    ]


def _format_value(value: Any) -> str:
    text = str(value)
    if not text or any(char.isspace() for char in text):
        return repr(text)
    return text


def _render_line(_: Any, __: str, event_dict: EventDict) -> str:
    timestamp = event_dict.pop("timestamp", "")
    level = str(event_dict.pop("level", "info")).upper()
    name = event_dict.pop("logger", "") or "root"
    event = event_dict.pop("event", "")
    exception = event_dict.pop("exception", None)

    fields = " ".join(
        f"{key}={_format_value(value)}"
        for key, value in sorted(event_dict.items())
        if value is not None
    )
    line = f"{timestamp} {level:<7} {name}: {event}"
    if fields:
        line = f"{line} {fields}"
    if exception:
        line = f"{line}\n{exception}"
    return line


def configure_logging() -> None:
    """Route structlog and stdlib logging through one stderr formatter."""

    global _CONFIGURED
    if _CONFIGURED and logging.getLogger().handlers:
        return

    settings = get_settings()
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _render_line,
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = (settings.log_file or "").strip()
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    root = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(settings.log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _CONFIGURED = True


def get_logger(*args: Any, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring logging on first use."""

    configure_logging()
    return structlog.get_logger(*args, **kwargs)

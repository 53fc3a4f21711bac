"""structlog setup for the upload service.

Debug runs print one pipe-separated line per event with an icon in front of
the message. Other runs emit orjson-encoded JSON lines carrying the request
correlation id.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

import orjson
import structlog
from asgi_correlation_id import correlation_id
from beartype import beartype

from app.core.settings import settings

MAX_EVENT_LENGTH = 80
CONSOLE_FIELDS = ("timestamp", "level", "event", "filename", "lineno")


class LoggerError(Exception):
    """Raised when a log call carries an unknown icon."""


class LogIcon(StrEnum):
    """Icons shown before console messages, one per kind of upload event."""

    DEFAULT = "📋"
    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    START = "🚀"
    COMPLETE = "✨"
    ADAPTER = "🔌"
    STORAGE = "💾"
    HEALTHCHECK = "❤️"
    VALIDATION = "✓"
    UPLOAD = "📤"
    FORBIDDEN = "🚫"
    OVERSIZE = "🐘"


@dataclass(frozen=True)
class LoggerConfig:
    debug: bool = settings.DEBUG
    name: str = settings.API_NAME
    level: str = "INFO"


def add_correlation_id(_logger, _method: str, event_dict: dict) -> dict:
    if request_id := correlation_id.get():
        event_dict["correlation_id"] = request_id
    return event_dict


class UploadEventFormatter:
    """Uppercase the message, cap it at ``MAX_EVENT_LENGTH`` and resolve its ``icon``."""

    def __init__(self, show_icon: bool) -> None:
        self.show_icon = show_icon

    @beartype
    def __call__(self, _logger, _method: str, event_dict: dict) -> dict:
        raw_icon = event_dict.pop("icon", LogIcon.DEFAULT)
        try:
            icon = LogIcon(raw_icon)
        except ValueError as ex:
            raise LoggerError(f"Unknown log icon {raw_icon!r}, use a LogIcon member") from ex

        message = str(event_dict.get("event", ""))[:MAX_EVENT_LENGTH].upper()
        event_dict["event"] = f"{icon.value} {message}" if self.show_icon else message
        return event_dict


def render_console(_logger, _method: str, event_dict: dict) -> str:
    """``timestamp | LEVEL | EVENT | key=value | file:line``, skipping empty parts."""
    location = f"{event_dict['filename']}:{event_dict.get('lineno', '')}" if event_dict.get("filename") else ""
    extras = " | ".join(f"{key}={value}" for key, value in event_dict.items() if key not in CONSOLE_FIELDS)
    parts = (
        event_dict.get("timestamp", ""),
        str(event_dict.get("level", "info")).upper(),
        event_dict.get("event", ""),
        extras,
        location,
    )
    return " | ".join(part for part in parts if part)


def build_processors(config: LoggerConfig) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME, structlog.processors.CallsiteParameter.LINENO],
            additional_ignores=["logger"],
        ),
        UploadEventFormatter(show_icon=config.debug),
    ]
    if config.debug:
        return [*processors, render_console]
    return [
        *processors,
        add_correlation_id,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(serializer=orjson.dumps),
    ]


def configure_logging(config: LoggerConfig) -> None:
    structlog.configure(
        processors=build_processors(config),
        logger_factory=structlog.PrintLoggerFactory() if config.debug else structlog.BytesLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(config.level)),
        cache_logger_on_first_use=True,
    )


_config = LoggerConfig()
configure_logging(_config)

logger = structlog.get_logger(_config.name)

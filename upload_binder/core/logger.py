import logging
from dataclasses import dataclass, field
from enum import StrEnum

import orjson
import structlog
from asgi_correlation_id import correlation_id
from beartype import beartype

from upload_binder.core.settings import settings


class LoggerError(Exception):
    """Exception for logger related issues."""


class LogIcon(StrEnum):
    """Icon mappings for upload binding log events."""

    DEFAULT = "📋"
    START = "🚀"
    SUCCESS = "✅"
    WARNING = "⚠️"
    ERROR = "❌"
    ADAPTER = "🔌"
    UPLOAD = "📤"


@dataclass
class LoggerConfig:
    """Logger configuration read from settings."""
    debug: bool = field(default_factory=lambda: settings.DEBUG)
    app_name: str = field(default_factory=lambda: settings.API_NAME)
    log_level: str = field(default_factory=lambda: settings.LOG_LEVEL)

    @property
    def level(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


def add_correlation_id(logger, method_name: str, event_dict: dict) -> dict:
    """Add correlation_id to event_dict if present in context."""
    if request_id := correlation_id.get():
        event_dict["correlation_id"] = request_id
    return event_dict


class IconProcessor:
    """
    Resolve the ``icon`` kwarg of a log call.

    The icon must be a LogIcon member (or its value). It is dropped from the
    event fields and, in debug mode only, prefixed to the message.
    """

    def __init__(self, debug: bool) -> None:
        self.debug = debug

    @beartype
    def __call__(self, logger, name: str, event_dict: dict) -> dict:
        try:
            icon = LogIcon(event_dict.pop("icon", LogIcon.DEFAULT))
        except ValueError as err:
            raise LoggerError("Wrong Icon chosen, please choose a valid LogIcon enum member") from err

        if self.debug:
            event_dict["event"] = f"{icon.value} {event_dict.get('event', '')}"
        return event_dict


def dev_pipeline_renderer(logger, name: str, event_dict: dict) -> str:
    """Render log events as pipe-separated fields, extras last before the callsite."""
    fixed = ("timestamp", "level", "event")
    location = ":".join(str(event_dict[k]) for k in ("filename", "lineno") if k in event_dict)
    extras = " | ".join(
        f"{k}={v}" for k, v in event_dict.items() if k not in fixed and k not in ("filename", "lineno")
    )
    parts = [
        event_dict.get("timestamp", ""),
        str(event_dict.get("level", "info")).upper(),
        event_dict.get("event", ""),
        extras,
        location,
    ]
    return " | ".join(filter(None, parts))


def build_processors(config: LoggerConfig) -> list:
    """Processor chain: shared enrichment, then a dev or JSON renderer."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
            additional_ignores=["logger"]
        ),
        IconProcessor(debug=config.debug),
    ]

    if config.debug:
        return processors + [dev_pipeline_renderer]
    return processors + [
        add_correlation_id,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(serializer=orjson.dumps),
    ]


def setup_logging(config: LoggerConfig) -> None:
    """Configure structlog for the service."""
    structlog.configure(
        processors=build_processors(config),
        logger_factory=structlog.PrintLoggerFactory() if config.debug else structlog.BytesLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(config.level),
        cache_logger_on_first_use=True,
    )


_default_config = LoggerConfig()
setup_logging(_default_config)

logger = structlog.get_logger().bind(app=_default_config.app_name)

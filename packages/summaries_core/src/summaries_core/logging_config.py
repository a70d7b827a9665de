import logging
import logging.config
import sys

import structlog
from opentelemetry import trace
from structlog.types import EventDict, Processor

# Libraries that log every outbound request or pool event at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "pymongo", "motor")


def add_opentelemetry_ids(_, __, event_dict: EventDict) -> EventDict:
    """
    Adds trace_id and span_id to the log record if a trace is active.
    """
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = trace.format_trace_id(span_context.trace_id)
        event_dict["span_id"] = trace.format_span_id(span_context.span_id)
    return event_dict


def service_info_adder(service_name: str, environment: str) -> Processor:
    """Returns a processor stamping every event with the service name and environment."""

    def add_service_info(_, __, event_dict: EventDict) -> EventDict:
        event_dict["service"] = service_name
        event_dict["env"] = environment
        return event_dict

    return add_service_info


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    event_dict.pop("color_message", None)
    return event_dict


def _build_renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_structlog(
    json_logs: bool = False,
    log_level: str = "INFO",
    service_name: str = "ai-summaries",
    environment: str = "development",
):
    """
    Configure structlog and route stdlib logging through the same processors.

    Safe to call more than once; the last call wins.
    """
    level = log_level.upper()
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        service_info_adder(service_name, environment),
        add_opentelemetry_ids,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    loggers: dict = {
        "": {"handlers": ["default"], "level": level, "propagate": True},
        "uvicorn": {"handlers": [], "level": level, "propagate": True},
        "uvicorn.error": {"handlers": [], "level": level, "propagate": True},
        "uvicorn.access": {"handlers": [], "propagate": False},
    }
    for name in NOISY_LOGGERS:
        loggers[name] = {"handlers": [], "level": "WARNING", "propagate": True}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": "structlog.stdlib.ProcessorFormatter",
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _build_renderer(json_logs),
                    ],
                    "foreign_pre_chain": shared_processors,
                },
            },
            "handlers": {
                "default": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": loggers,
        }
    )

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        structlog.get_logger("uncaught_exception").error(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = handle_exception

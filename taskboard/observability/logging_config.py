"""
Structured logging: structlog + contextvars (trace_id / user bound per request)
- development: coloured console output
- production: JSON lines, each tagged with the service name
"""

import logging
import sys

import structlog


def add_app_name(app_name: str):
    """Processor stamping every event with the service name (app=...)"""

    def processor(logger, method_name, event_dict):
        event_dict.setdefault("app", app_name)
        return event_dict

    return processor


def setup_logging(env: str = "development", level: str = "INFO", app_name: str = "taskboard") -> None:
    """Initialise structured logging"""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if env == "production":
        shared_processors.append(add_app_name(app_name))
        shared_processors.append(structlog.processors.format_exc_info)
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn / SQLAlchemy stdlib loggers
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    # RequestLoggerMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

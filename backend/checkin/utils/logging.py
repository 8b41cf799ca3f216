# /checkin/utils/logging.py

import logging
import sys
import structlog
from checkin.config.settings import settings

# This utility sets up structured logging (JSON outside development) so that
# every check-in log line, including those from the engine's stdlib loggers,
# carries the session and flow it belongs to.

# Marks the handler we install so a second setup call does not add another
_HANDLER_NAME = "checkin-structlog"


def setup_logging():
    """
    Configures structured logging using structlog, integrated with Python's
    standard logging so module loggers and Uvicorn share one output.
    Safe to call more than once.
    """
    # Shared processors; contextvars carry the session_id/flow_id bound per request
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Human-readable output while developing, JSON everywhere else
    if settings.environment == "development":
        final_processor = structlog.dev.ConsoleRenderer()
    else:
        final_processor = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Standard logging records go through the same processors
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=final_processor,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Engine debug lines (skips, rejected answers) only show in development
    default_level = "DEBUG" if settings.environment == "development" else "INFO"
    root_logger.setLevel((settings.log_level or default_level).upper())

    # Silence overly verbose libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def bind_session_context(session_id: str, flow_id: str = None):
    """Attach session identifiers to every log line for the rest of this request."""
    context = {"session_id": session_id}
    if flow_id:
        context["flow_id"] = flow_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)

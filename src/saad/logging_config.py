"""structlog setup shared by the API and the CLI.

Application modules log through ``logging.getLogger(__name__)``; records are
rendered by structlog, so request context bound here (trace id, project id)
appears on every line emitted while a request is being handled.
"""

import logging
import sys

import structlog

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib logging through structlog.

    Args:
        log_level: debug, info, warning or error.
        json_output: one JSON object per line (deployments) instead of the
            colored console renderer (local mode).
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        # Store failures are logged with exc_info; JSON needs the traceback as text.
        render_chain = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render_chain = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render_chain],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, project_id: str | None = None) -> None:
    """Bind the trace id, and the project id once a route knows it."""
    if project_id:
        structlog.contextvars.bind_contextvars(trace_id=trace_id, project_id=project_id)
    else:
        structlog.contextvars.bind_contextvars(trace_id=trace_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()

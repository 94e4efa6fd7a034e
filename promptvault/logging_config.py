import logging
import sys
import uuid

import structlog
from flask import request
from structlog.types import Processor


def configure_logging(log_level: str = "INFO", is_debug: bool = False):
    """
    Configure structured logging for the entire application.

    - In debug mode, it uses a human-readable console renderer.
    - In production, it uses a JSON renderer.
    """

    # Standard logging still carries Flask, werkzeug and SQLAlchemy output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.dict_tracebacks,
        structlog.processors.UnicodeDecoder(),
    ]

    if is_debug:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        final_processor = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            final_processor,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    log_mode = "development (console)" if is_debug else "production (JSON)"
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured in {log_mode} mode with level: {log_level.upper()}")


def init_request_logging(app):
    """Bind per-request fields so every log line of a request can be correlated."""

    @app.before_request
    def _bind_request_context():
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex,
            method=request.method,
            path=request.path,
        )

    @app.teardown_request
    def _clear_request_context(exc=None):
        structlog.contextvars.clear_contextvars()

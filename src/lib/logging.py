"""
Structured logging for StudyFlow.

One structlog pipeline sits in front of the root stdlib handler, so
module loggers from ``logging.getLogger(__name__)`` and structlog
loggers render the same way: console lines with STUDYFLOW_DEV_MODE=1,
JSON lines otherwise.

Every HTTP request binds ``request_id``, ``method`` and ``path`` into
structlog's context variables (see request_context()), so service logs
written while handling a plan or chat call carry the request they
belong to.

Usage:
    from src.lib.logging import setup_logging

    setup_logging()  # once, before the app is built
"""

import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

REQUEST_ID_HEADER = "X-Request-ID"

# Third-party loggers that only matter at WARNING and above
_QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "uvicorn.access")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(dev_mode: bool) -> structlog.types.Processor:
    if dev_mode:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(dev_mode: bool | None = None, log_level: str | None = None) -> None:
    """
    Route structlog and stdlib logging through one formatter on stderr.

    Args:
        dev_mode: Console rendering when True (defaults to STUDYFLOW_DEV_MODE)
        log_level: Root level name (defaults to LOG_LEVEL, then INFO)
    """
    if dev_mode is None:
        dev_mode = os.environ.get("STUDYFLOW_DEV_MODE") == "1"
    level = getattr(logging, (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if not dev_mode:
        # JSON lines carry the traceback as a string field
        final.append(structlog.processors.format_exc_info)
    final.append(_renderer(dev_mode))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=final)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def request_context(
    method: str, path: str, request_id: str | None = None
) -> Iterator[str]:
    """
    Bind request fields into the logging context for the duration of a request.

    Args:
        method: HTTP method
        path: Request path
        request_id: Caller-supplied id (a fresh one is generated if missing)

    Yields:
        The request id in effect
    """
    rid = request_id or uuid.uuid4().hex
    tokens = structlog.contextvars.bind_contextvars(request_id=rid, method=method, path=path)
    try:
        yield rid
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


__all__ = ["REQUEST_ID_HEADER", "request_context", "setup_logging"]

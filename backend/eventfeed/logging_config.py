import logging
import os
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional
from uuid import uuid4

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(request_id)s - %(message)s"
MAX_LOG_SIZE_BYTES = 64 * 1024 * 1024

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Adds the current request ID to every record passing through a handler.

    The ID lives in a context variable so concurrent requests do not share it.
    """

    @property
    def current_request_id(self) -> Optional[str]:
        return _request_id.get()

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = self.current_request_id or ""
        return True

    def set_request_id(self, request_id: Optional[str]):
        _request_id.set(request_id)


class RequestIdContextManager:
    """Sets a fresh request ID on enter and clears it on exit."""

    def __init__(self, request_id_filter: RequestIdFilter):
        self.request_id_filter = request_id_filter
        self.request_id = None

    def __enter__(self):
        self.request_id = uuid4().hex[:10]
        self.request_id_filter.set_request_id(self.request_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.request_id_filter.set_request_id(None)


request_id_filter = RequestIdFilter()


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """Configure the ``eventfeed`` logger tree. Safe to call more than once."""
    logger = logging.getLogger("eventfeed")
    logger.setLevel(level.upper())

    if getattr(logger, "_eventfeed_configured", False):
        return logger

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    console.addFilter(request_id_filter)
    logger.addHandler(console)

    if log_dir:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "eventfeed.log"), maxBytes=MAX_LOG_SIZE_BYTES, backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.addFilter(request_id_filter)
        logger.addHandler(file_handler)

    logger._eventfeed_configured = True
    return logger

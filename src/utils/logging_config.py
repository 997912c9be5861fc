"""Centralized logging configuration with environment variable support."""

import os
import logging
import sys
from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "property-pros-backend"


class ContextFilter(logging.Filter):
    """Stamps every record with the service name and the current request's correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        # imported here: src.utils.logging imports this module
        from src.utils.logging import get_correlation_id

        record.service = SERVICE_NAME
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id()
        return True


class LoggingConfig:
    """Centralized logging configuration."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "1000"))
    LOG_CORRELATION_ID_HEADER = os.environ.get("LOG_CORRELATION_ID_HEADER", "X-Correlation-ID")

    # Supabase SDK and its HTTP stack log every request at INFO
    QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "h2", "supabase", "postgrest", "gotrue")

    _configured = False

    @classmethod
    def setup_logging(cls, force: bool = False) -> None:
        """Install the stdout handler once per process (every function module calls this)."""
        if cls._configured and not force:
            return

        level = getattr(logging, cls.LOG_LEVEL, logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.addFilter(ContextFilter())

        if cls.LOG_FORMAT == "json":
            handler.setFormatter(JsonFormatter(
                "%(timestamp)s %(levelname)s %(name)s %(service)s %(correlation_id)s %(message)s",
                timestamp=True,
            ))
        else:
            handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(correlation_id)s] %(name)s %(levelname)s: %(message)s"
            ))
        root_logger.addHandler(handler)

        for name in cls.QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        cls._configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)

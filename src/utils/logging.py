"""Structured logging: correlation IDs, bound context fields, timing and ID masking.

Services log through ``get_structured_logger(__name__)`` and pass fields as
keyword arguments::

    logger.info("Report draft created", job_id=job_id, draft_id=draft_id)

Fields bound with ``log_context`` are added to every record logged inside
the block, in addition to the correlation ID.
"""

import hashlib
import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, MutableMapping, Optional

from src.utils.logging_config import LoggingConfig, get_logger

_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_bound_fields_var: ContextVar[dict[str, Any]] = ContextVar("log_fields", default={})


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return f"req_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> Optional[str]:
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: Optional[str]) -> None:
    _correlation_id_var.set(correlation_id)


@contextmanager
def correlation_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Run a request under ``correlation_id`` (or a fresh one)."""
    token = _correlation_id_var.set(correlation_id or generate_correlation_id())
    try:
        yield _correlation_id_var.get()
    finally:
        _correlation_id_var.reset(token)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Attach ``fields`` to every structured log record emitted inside the block."""
    token = _bound_fields_var.set({**_bound_fields_var.get(), **fields})
    try:
        yield
    finally:
        _bound_fields_var.reset(token)


def mask_user_id(user_id: Optional[str]) -> Optional[str]:
    """Shorten a profile UUID to a stable, non-reversible tag when masking is on."""
    if not user_id or not LoggingConfig.LOG_MASK_SENSITIVE or len(user_id) <= 12:
        return user_id
    digest = hashlib.sha256(user_id.encode()).hexdigest()[:8]
    return f"{user_id[:4]}...{digest}"


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter taking record fields as keyword arguments."""

    _LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel")

    def __init__(self, logger: logging.Logger):
        super().__init__(logger, {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        passthrough = {k: kwargs.pop(k) for k in self._LOGGING_KWARGS if k in kwargs}
        extra = dict(_bound_fields_var.get())
        correlation_id = get_correlation_id()
        if correlation_id:
            extra["correlation_id"] = correlation_id
        extra.update(kwargs.pop("extra", None) or {})
        extra.update(kwargs)
        return msg, {**passthrough, "extra": extra}


def get_structured_logger(name: str) -> StructuredLogger:
    return StructuredLogger(get_logger(name))


@contextmanager
def log_timing(
    operation: str,
    logger: Optional[StructuredLogger] = None,
    threshold_ms: Optional[float] = None,
    **fields: Any,
) -> Iterator[None]:
    """Log how long the block took, with a warning past the slow-operation threshold."""
    logger = logger or get_structured_logger(__name__)
    threshold = threshold_ms if threshold_ms is not None else LoggingConfig.LOG_SLOW_OPERATION_THRESHOLD_MS
    outcome = "ok"
    started = time.perf_counter()
    try:
        yield
    except BaseException:
        outcome = "error"
        raise
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug(
            f"{operation} finished",
            operation=operation,
            outcome=outcome,
            processing_time_ms=elapsed_ms,
            **fields
        )
        if elapsed_ms > threshold:
            logger.warning(
                f"Slow operation: {operation}",
                operation=operation,
                outcome=outcome,
                processing_time_ms=elapsed_ms,
                threshold_ms=threshold,
                **fields
            )

"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID and property context management for request tracing
- Structured logging formatter for consistent log output
- Helper functions for availability load and selection logging

Usage:
    from booking_calendar.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In engine code:
    logger = get_logger(__name__)
    logger.info("Availability loaded", extra={"property_id": "prop-001"})
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_property_id: ContextVar[str | None] = ContextVar("property_id", default=None)

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def generate_correlation_id() -> str:
    """Generate a new correlation ID.

    Returns:
        UUID-based correlation ID string
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


def set_property_id(property_id: str | None) -> None:
    """Scope log records of the current context to a property."""
    _property_id.set(property_id or None)


def get_property_id() -> str | None:
    """Get the property the current context is scoped to."""
    return _property_id.get()


def clear_property_id() -> None:
    """Clear the property context."""
    _property_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id (and the scoped property_id) to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation-id"
        property_id = get_property_id()
        if property_id and not getattr(record, "property_id", None):
            record.property_id = property_id
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log output with correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "no-correlation-id"

        base = super().format(record)

        # Correlation ID prefix for easy grep/filtering
        property_id = getattr(record, "property_id", None) or get_property_id()
        if property_id:
            return f"[{record.correlation_id}] [property={property_id}] {base}"
        return f"[{record.correlation_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def configure_logging(level: str = "INFO") -> None:
    """Install a structured stdout handler on the root logger.

    Args:
        level: Log level name (unknown names fall back to INFO)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers on repeated configuration
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(DEFAULT_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    root_logger.addHandler(handler)


def log_availability_load(
    logger: logging.Logger,
    operation: str,
    *,
    property_id: str | None = None,
    generation: int | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log an availability load step with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "load_started", "load_settled")
        property_id: Property the load is scoped to
        generation: Load request number (later requests win)
        result: Outcome (success, discarded, cancelled, error)
        error: Error message if the load failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if property_id:
        context["property_id"] = property_id
    if generation is not None:
        context["generation"] = generation
    if result:
        context["result"] = result
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Availability load: {operation}"]
    for key, value in context.items():
        if key != "operation":
            msg_parts.append(f"{key}={value}")

    message = " | ".join(msg_parts)

    if error or result == "error":
        logger.error(message, extra=context)
    elif result in ("discarded", "cancelled"):
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_selection_change(
    logger: logging.Logger,
    *,
    start_date: str,
    end_date: str,
    state: str,
    **extra: Any,
) -> None:
    """Log a selection change with structured context.

    Args:
        logger: Logger instance
        start_date: New check-in date (YYYY-MM-DD or empty)
        end_date: New check-out date (YYYY-MM-DD or empty)
        state: Selection state after the change
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "start_date": start_date,
        "end_date": end_date,
        "selection_state": state,
    }
    context.update(extra)

    message = (
        f"Selection changed: {start_date or '-'} -> {end_date or '-'} | state={state}"
    )
    logger.info(message, extra=context)

"""Structured logging utilities with context support."""

import functools
import logging
import threading
import uuid
from typing import Any, Callable, Dict, Optional

# Thread-local storage for log context
_thread_local = threading.local()


def generate_correlation_id() -> str:
    """
    Generate a unique correlation ID for tracking one report request.

    Returns:
        UUID string to use as correlation ID
    """
    return str(uuid.uuid4())


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently attached to log records."""
    return dict(getattr(_thread_local, "context", {}))


class LogContext:
    """
    Context manager for adding structured fields to log records.

    Fields are stored in thread-local storage and added to every record
    emitted inside the block by the handlers set up in configure_logging().

    Example:
        with LogContext(project_id="p-1"):
            logger.info("Composing project financials")
            # Record carries project_id="p-1"
    """

    def __init__(self, **kwargs):
        self.fields = kwargs
        self.previous_context: Optional[Dict[str, Any]] = None

    def __enter__(self):
        if not hasattr(_thread_local, "context"):
            _thread_local.context = {}

        self.previous_context = _thread_local.context.copy()
        _thread_local.context.update(self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.previous_context is not None:
            _thread_local.context = self.previous_context
        else:
            _thread_local.context = {}


class _ContextFilter(logging.Filter):
    """Logging filter that adds context fields to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(_thread_local, "context"):
            for key, value in _thread_local.context.items():
                setattr(record, key, value)
        return True


def log_function_call(
    func: Optional[Callable] = None, *, level: str = "DEBUG"
) -> Callable:
    """
    Decorator to log function entry and exit, and any exception raised.

    Args:
        func: Function to decorate (when used without arguments)
        level: Log level for entry and exit records

    Returns:
        Decorated function

    Example:
        @log_function_call
        def project_financials(self, project_id):
            ...

        @log_function_call(level="INFO")
        def accounts_overview(self):
            ...
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())
            logger.log(log_level, f"Entering {f.__name__}")
            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(f"Exception in {f.__name__}: {type(e).__name__}: {e}")
                raise
            logger.log(log_level, f"Exiting {f.__name__}")
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)

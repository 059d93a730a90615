"""
Instrumentation for service-layer operations.

Every public service operation runs inside track_operation, which logs its
start and outcome with the elapsed time and feeds the Prometheus
service_operation_duration_seconds histogram.
"""

import time
from contextlib import contextmanager
from functools import wraps
from filmclub.exceptions import FilmClubError
from filmclub.logging_config import get_logger
from filmclub.metrics import observe_operation

logger = get_logger(__name__)


def log_operation(
    operation: str,
    status: str,
    **extra_context
):
    """
    Log a service operation event.

    Args:
        operation: Operation name (e.g., "toggle_recommendation")
        status: "started", "completed", "rejected" or "failed"
        **extra_context: Additional context to log
    """
    if status == "failed":
        log_level = logger.error
    elif status == "rejected":
        log_level = logger.warning
    else:
        log_level = logger.info

    log_level(
        "service_operation",
        operation=operation,
        status=status,
        **extra_context
    )


def _outcome(error):
    if error is None:
        return "completed"
    # Domain errors map to 4xx responses
    if isinstance(error, FilmClubError):
        return "rejected"
    return "failed"


@contextmanager
def track_operation(operation: str, **extra_context):
    """
    Context manager to track a service operation.

    A FilmClubError is logged as "rejected" at warning level; any other
    exception is "failed" at error level. Both are re-raised.

    Example:
        with track_operation("toggle_recommendation", movie_id=1):
            ...
    """
    start_time = time.time()

    log_operation(operation, "started", **extra_context)

    error = None
    try:
        yield
    except Exception as e:
        error = e
        raise
    finally:
        duration = time.time() - start_time
        observe_operation(operation, duration, success=error is None)

        log_operation(
            operation,
            _outcome(error),
            duration_ms=round(duration * 1000, 2),
            error=str(error) if error else None,
            error_type=type(error).__name__ if error else None,
            **extra_context
        )


def tracked(operation: str):
    """
    Decorator form of track_operation, named after the operation.

    Usage:
        @tracked("get_all_genres")
        def get_all_genres(self):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with track_operation(operation):
                return func(*args, **kwargs)
        return wrapper
    return decorator

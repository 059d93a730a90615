"""
Flask middleware for structured logging.

This module provides Flask middleware to:
- Inject request_id and member_id into logging context
- Log HTTP request/response details
- Track request duration and status codes
"""

import time
from flask import Flask, request, g
from filmclub.logging_config import get_logger
from filmclub.logging_context import (
    set_request_id,
    set_member_id,
    clear_context,
)
from filmclub.metrics import http_requests_total, http_request_duration_seconds

logger = get_logger(__name__)


def init_logging_middleware(app: Flask):
    """
    Initialize logging middleware for Flask application.

    Args:
        app: Flask application instance
    """

    @app.before_request
    def before_request_logging():
        """Set up logging context before each request."""
        request_id = set_request_id(request.headers.get('X-Request-ID'))
        g.request_id = request_id
        g.request_start_time = time.time()

        member_id = request.args.get('memberId')
        if member_id:
            set_member_id(member_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
            user_agent=request.headers.get('User-Agent', 'Unknown'),
        )

    @app.after_request
    def after_request_logging(response):
        """
        Log request completion and record HTTP metrics.

        Args:
            response: Flask response object

        Returns:
            Response with the X-Request-ID header set
        """
        duration = None
        if hasattr(g, 'request_start_time'):
            duration = time.time() - g.request_start_time

        # url_rule keeps label cardinality bounded (no raw IDs)
        endpoint = request.url_rule.rule if request.url_rule else 'unmatched'
        http_requests_total.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
        if duration is not None:
            http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(duration)

        logger.info(
            "request_completed",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2) if duration is not None else None,
        )

        if hasattr(g, 'request_id'):
            response.headers['X-Request-ID'] = g.request_id

        return response

    @app.teardown_request
    def teardown_request_logging(exception=None):
        """
        Clean up logging context after request.

        Args:
            exception: Exception if request failed
        """
        if exception:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.path,
                error=str(exception),
                exc_info=True,
            )

        clear_context()

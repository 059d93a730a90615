"""
Prometheus metrics for the FilmClub application.

This module provides metrics collection for HTTP traffic, service operation
latency, and the recommendation workflow.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


# API Request Metrics
http_requests_total = Counter(
    'filmclub_http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'filmclub_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Service Layer Metrics
service_operation_duration_seconds = Histogram(
    'filmclub_service_operation_duration_seconds',
    'Service operation duration in seconds',
    ['operation', 'status']  # status: success, error
)

# Recommendation Metrics
recommendation_toggles_total = Counter(
    'filmclub_recommendation_toggles_total',
    'Total number of completed recommendation toggles',
    ['action']  # added, removed
)

duplicate_recommendations_total = Counter(
    'filmclub_duplicate_recommendations_total',
    'Total number of recommendation inserts rejected by the uniqueness constraint'
)

recommendation_count_drifts_total = Counter(
    'filmclub_recommendation_count_drifts_total',
    'Total number of movie counters found out of sync with the ledger'
)

# Catalog Metrics
movies_created_total = Counter(
    'filmclub_movies_created_total',
    'Total number of movies added to the catalog'
)


def track_recommendation_toggle(action):
    """
    Record a completed toggle.

    Args:
        action: 'added' or 'removed'
    """
    recommendation_toggles_total.labels(action=action).inc()


def track_duplicate_recommendation():
    """Record a recommendation insert that lost a race."""
    duplicate_recommendations_total.inc()


def track_count_drift(count=1):
    """Record counters found out of sync by a reconciliation run."""
    recommendation_count_drifts_total.inc(count)


def track_movie_created():
    movies_created_total.inc()


def observe_operation(operation, duration, success=True):
    """
    Record the duration of a service operation.

    Args:
        operation: Operation name (e.g., 'toggle_recommendation')
        duration: Duration in seconds
        success: Whether the operation completed without raising
    """
    status = 'success' if success else 'error'
    service_operation_duration_seconds.labels(operation=operation, status=status).observe(duration)


def get_metrics():
    """
    Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics_text, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST

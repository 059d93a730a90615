"""
structlog setup for FilmClub.

Log lines are JSON unless FLASK_ENV=development or DEBUG=1, in which case
they are rendered for the console. Every event carries the service name and
environment, and passes through scrub_sensitive_data before rendering.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

REDACTED = "[REDACTED]"

# Redacted wholesale, whatever the value type
SENSITIVE_FIELD_NAMES = {
    "password", "secret", "secret_key", "token", "authorization",
    "database_url", "sqlalchemy_database_uri",
}

# Member IDs are opaque and may look like e-mail addresses
SAFE_FIELD_NAMES = {"request_id", "member_id", "movie_id", "event", "timestamp", "level"}

STRING_SCRUBBERS = [
    (re.compile(r'Bearer\s+[A-Za-z0-9_\-.]+', re.IGNORECASE), 'Bearer ' + REDACTED),
    # user:password@ in connection strings
    (re.compile(r'(://[^:/\s@]+:)[^@\s]+(@)'), r'\1' + REDACTED + r'\2'),
    (re.compile(r'((?:password|secret[_\-]?key)["\s:=]+)[^\s",]+', re.IGNORECASE), r'\1' + REDACTED),
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL_REDACTED]'),
]


def scrub_sensitive_data(value: Any, key: Optional[str] = None) -> Any:
    """Return a copy of value with secrets and e-mail addresses redacted."""
    if isinstance(value, dict):
        return {k: scrub_sensitive_data(v, k) for k, v in value.items()}
    if isinstance(value, list):
        return [scrub_sensitive_data(item, key) for item in value]

    name = key.lower() if key else None
    if name in SAFE_FIELD_NAMES:
        return value
    if name in SENSITIVE_FIELD_NAMES:
        return REDACTED
    if isinstance(value, str):
        for pattern, replacement in STRING_SCRUBBERS:
            value = pattern.sub(replacement, value)
    return value


def add_app_context(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    event_dict["service"] = "filmclub"
    event_dict["environment"] = os.getenv("FILMCLUB_ENV", "local")
    return event_dict


def add_scrubbing(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    return scrub_sensitive_data(event_dict)


def configure_structlog():
    """Install the processor chain; safe to call again after env changes."""
    is_dev = os.getenv("FLASK_ENV") == "development" or os.getenv("DEBUG") == "1"
    renderer = structlog.dev.ConsoleRenderer() if is_dev else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_app_context,
            add_scrubbing,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


configure_structlog()

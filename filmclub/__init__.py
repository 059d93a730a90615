"""
FilmClub - movie catalog with member recommendations

A Flask-based API for browsing a movie catalog and toggling per-member
recommendations, keeping each movie's recommendation counter in step with
the recommendation ledger.
"""

__version__ = "1.0.0"

# Export the error taxonomy for external use
from .exceptions import (
    FilmClubError,
    ErrorCode,
    MovieNotFoundError,
    DuplicateRecommendationError,
    InvalidArgumentError,
    MissingParameterError,
    TypeMismatchError,
)

__all__ = [
    "FilmClubError",
    "ErrorCode",
    "MovieNotFoundError",
    "DuplicateRecommendationError",
    "InvalidArgumentError",
    "MissingParameterError",
    "TypeMismatchError",
]

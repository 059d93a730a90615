"""
Error taxonomy for the FilmClub catalog.

Every error raised by the service layer carries a machine-readable code and
the HTTP status it maps to. The Flask error handlers in filmclub.errors turn
them into {code, message, path, timestamp} responses.

Error Taxonomy:
- MovieNotFoundError: referenced movie ID has no record (404)
- DuplicateRecommendationError: a recommendation for the (movie, member) pair
  already exists, usually because a concurrent request inserted it first (409)
- InvalidArgumentError: a value was present but unusable (400)
- MissingParameterError: a required query parameter was absent (400)
- TypeMismatchError: a query parameter could not be parsed (400)
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Machine-readable error codes returned to clients."""
    MOVIE_NOT_FOUND = "MOVIE_NOT_FOUND"
    DUPLICATE_RECOMMENDATION = "DUPLICATE_RECOMMENDATION"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DATA_INTEGRITY_VIOLATION = "DATA_INTEGRITY_VIOLATION"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class FilmClubError(Exception):
    """Base exception for all catalog errors."""

    def __init__(self, message: str, error_code: ErrorCode, status_code: int = 500):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error_code.value


class MovieNotFoundError(FilmClubError):
    """The referenced movie does not exist."""

    def __init__(self, movie_id: Optional[int] = None, message: Optional[str] = None):
        self.movie_id = movie_id
        if message is None:
            message = f"영화를 찾을 수 없습니다. ID: {movie_id}"
        super().__init__(message, ErrorCode.MOVIE_NOT_FOUND, 404)


class DuplicateRecommendationError(FilmClubError):
    """The member already has a recommendation row for this movie."""

    def __init__(self, movie_id: int, member_id: str):
        self.movie_id = movie_id
        self.member_id = member_id
        super().__init__(
            f"이미 추천한 영화입니다. 영화 ID: {movie_id}, 회원 ID: {member_id}",
            ErrorCode.DUPLICATE_RECOMMENDATION,
            409,
        )


class InvalidArgumentError(FilmClubError):
    """A supplied value is not acceptable."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_ARGUMENT, 400)


class MissingParameterError(FilmClubError):
    """A required request parameter is missing."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"필수 파라미터 누락: {parameter}", ErrorCode.MISSING_PARAMETER, 400)


class TypeMismatchError(FilmClubError):
    """A request parameter has the wrong type."""

    def __init__(self, parameter: str, expected_type: str):
        self.parameter = parameter
        self.expected_type = expected_type
        super().__init__(
            f"타입 불일치: {parameter}는 {expected_type} 타입이어야 합니다",
            ErrorCode.TYPE_MISMATCH,
            400,
        )

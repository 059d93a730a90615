"""
Flask error handlers for the FilmClub API.

Every failure leaves the API as {code, message, path, timestamp} with the
status the error maps to.
"""

from flask import Flask, jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from filmclub.exceptions import ErrorCode, FilmClubError
from filmclub.logging_config import get_logger
from filmclub.models import db
from filmclub.schemas import ErrorResponse

logger = get_logger(__name__)


def error_response(code: str, message: str, status_code: int):
    body = ErrorResponse(code=code, message=message, path=request.path)
    return jsonify(body.to_dict()), status_code


def register_error_handlers(app: Flask):
    """
    Register the API error handlers on a Flask application.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(FilmClubError)
    def handle_filmclub_error(error: FilmClubError):
        logger.warning(
            "request_rejected",
            code=error.code,
            status_code=error.status_code,
            error=error.message,
        )
        return error_response(error.code, error.message, error.status_code)

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        messages = []
        for detail in error.errors():
            field = ".".join(str(part) for part in detail.get("loc", ()))
            message = detail.get("msg", "")
            # field_validator messages arrive as "Value error, ..."
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            messages.append(f"{field}: {message}" if field else message)

        logger.warning("request_validation_failed", errors=messages)
        return error_response(ErrorCode.VALIDATION_ERROR.value, "; ".join(messages), 400)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        db.session.rollback()
        logger.warning("data_integrity_violation", error=str(error.orig))
        return error_response(
            ErrorCode.DATA_INTEGRITY_VIOLATION.value,
            "데이터 무결성 제약 조건을 위반했습니다.",
            409,
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        code = (error.name or "HTTP_ERROR").upper().replace(" ", "_")
        logger.info("http_error", status_code=error.code, code=code)
        return error_response(code, error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        db.session.rollback()
        logger.error(
            "unhandled_exception",
            error=str(error),
            error_type=type(error).__name__,
            exc_info=True,
        )
        return error_response(
            ErrorCode.INTERNAL_SERVER_ERROR.value,
            "서버 내부 오류가 발생했습니다.",
            500,
        )

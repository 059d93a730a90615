from flask import Blueprint, Response, current_app, jsonify, request

from filmclub.exceptions import (
    InvalidArgumentError,
    MissingParameterError,
    TypeMismatchError,
)
from filmclub.metrics import get_metrics
from filmclub.models import fits_integer_column
from filmclub.schemas import MovieCreateRequest
from filmclub.services.movie_service import get_movie_service
from filmclub.services.recommendation_service import get_recommendation_coordinator

bp = Blueprint("movies", __name__)


def _int_arg(name, default):
    """Read an integer query parameter, falling back to default when absent."""
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise TypeMismatchError(name, "int")
    if not fits_integer_column(value):
        raise TypeMismatchError(name, "int")
    return value


def _page_args():
    """Read and bound-check the page and size query parameters."""
    page = _int_arg("page", 0)
    size = _int_arg("size", current_app.config["DEFAULT_PAGE_SIZE"])
    max_size = current_app.config["MAX_PAGE_SIZE"]

    if page < 0:
        raise InvalidArgumentError("page는 0 이상이어야 합니다")
    if size < 1 or size > max_size:
        raise InvalidArgumentError(f"size는 1 이상 {max_size} 이하여야 합니다")
    return page, size


def _member_id():
    return request.args.get("memberId")


@bp.route("/movies", methods=["POST"])
def create_movie():
    """
    POST /api/movies
    Add a movie to the catalog.

    Expected JSON body:
    {
        "title": "Inception",
        "genre": "Sci-Fi",
        "releaseDate": "2010-07-16",
        "description": "...",
        "posterUrl": "https://..."
    }
    """
    # Missing or malformed JSON fails validation as a non-dict body
    data = request.get_json(silent=True)
    movie_request = MovieCreateRequest.model_validate(data, from_attributes=False)
    movie = get_movie_service().create_movie(movie_request)
    return jsonify(movie.to_dict()), 201


@bp.route("/movies", methods=["GET"])
def get_all_movies():
    """
    GET /api/movies?page=0&size=10&sort=createdAt&direction=desc&memberId=...
    """
    page, size = _page_args()
    result = get_movie_service().get_all_movies(
        page=page,
        size=size,
        sort=request.args.get("sort", "createdAt"),
        direction=request.args.get("direction", "desc"),
        member_id=_member_id(),
    )
    return jsonify(result.to_dict())


@bp.route("/movies/genres", methods=["GET"])
def get_all_genres():
    return jsonify(get_movie_service().get_all_genres())


@bp.route("/movies/genre/<genre>", methods=["GET"])
def get_movies_by_genre(genre):
    page, size = _page_args()
    result = get_movie_service().get_movies_by_genre(genre, page=page, size=size, member_id=_member_id())
    return jsonify(result.to_dict())


@bp.route("/movies/search", methods=["GET"])
def search_movies():
    """
    GET /api/movies/search?keyword=nolan
    Title or genre contains the keyword, ignoring case.
    """
    keyword = request.args.get("keyword")
    if keyword is None:
        raise MissingParameterError("keyword")

    page, size = _page_args()
    result = get_movie_service().search_movies(keyword, page=page, size=size, member_id=_member_id())
    return jsonify(result.to_dict())


@bp.route("/movies/recommended", methods=["GET"])
def get_recommended_movies():
    page, size = _page_args()
    result = get_movie_service().get_recommended_movies(page=page, size=size, member_id=_member_id())
    return jsonify(result.to_dict())


@bp.route("/movies/top-recommended", methods=["GET"])
def get_top_recommended_movies():
    limit = _int_arg("limit", current_app.config["TOP_RECOMMENDED_LIMIT"])
    max_limit = current_app.config["MAX_PAGE_SIZE"]
    if limit > max_limit:
        raise InvalidArgumentError(f"limit은 {max_limit} 이하여야 합니다")
    movies = get_movie_service().get_top_recommended_movies(limit=limit, member_id=_member_id())
    return jsonify([movie.to_dict() for movie in movies])


@bp.route("/movies/<int:movie_id>", methods=["GET"])
def get_movie(movie_id):
    movie = get_movie_service().get_movie_by_id(movie_id, member_id=_member_id())
    return jsonify(movie.to_dict())


@bp.route("/movies/<int:movie_id>/recommend", methods=["POST"])
def toggle_recommendation(movie_id):
    """
    POST /api/movies/<movie_id>/recommend?memberId=...
    Recommend the movie, or withdraw the recommendation if the member
    already made one.

    Returns:
    {
        "movieId": 1,
        "recommendationCount": 6,
        "recommended": true,
        "message": "영화 추천이 추가되었습니다."
    }
    """
    member_id = _member_id()
    if member_id is None:
        raise MissingParameterError("memberId")

    result = get_recommendation_coordinator().toggle_recommendation(movie_id, member_id)
    return jsonify(result.to_dict())


@bp.route("/movies/<int:movie_id>/recommend/check", methods=["GET"])
def check_recommendation(movie_id):
    """
    GET /api/movies/<movie_id>/recommend/check?memberId=...
    Bare JSON boolean; false for anonymous callers.
    """
    recommended = get_recommendation_coordinator().is_recommended_by_user(movie_id, _member_id())
    return jsonify(recommended)


@bp.route("/metrics", methods=["GET"])
def metrics():
    """
    GET /api/metrics
    Expose Prometheus metrics for monitoring.

    Returns metrics in Prometheus text format including:
    - HTTP request counts and durations
    - Service operation durations
    - Recommendation toggles and duplicate conflicts
    - Movies created

    Member IDs are never used as label values; only aggregated statistics
    are returned.
    """
    metrics_text, content_type = get_metrics()
    return Response(metrics_text, mimetype=content_type)

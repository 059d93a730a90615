"""
Catalog operations for the FilmClub API.

Creates movies and serves the listing, search and lookup endpoints. Every
movie handed back to a caller goes through the recommendation coordinator so
it carries recommended_by_current_user for the requesting member.
"""

from typing import List, Optional

from filmclub.exceptions import InvalidArgumentError, MovieNotFoundError
from filmclub.logging_config import get_logger
from filmclub.logging_metrics import track_operation, tracked
from filmclub.metrics import track_movie_created
from filmclub.models import fits_integer_column, Movie
from filmclub.repositories import MovieRepository, unit_of_work
from filmclub.schemas import MovieCreateRequest, MoviePage, MovieResponse
from filmclub.services.recommendation_service import (
    RecommendationCoordinator,
    get_recommendation_coordinator,
)

logger = get_logger(__name__)

# Wire name -> column
SORT_FIELDS = {
    "title": Movie.title,
    "genre": Movie.genre,
    "releaseDate": Movie.release_date,
    "recommendationCount": Movie.recommendation_count,
    "createdAt": Movie.created_at,
}


class MovieService:
    """Catalog reads and writes, decorated with recommendation state."""

    def __init__(
        self,
        movie_repository: Optional[MovieRepository] = None,
        coordinator: Optional[RecommendationCoordinator] = None,
    ):
        self.movies = movie_repository or MovieRepository()
        self.coordinator = coordinator or get_recommendation_coordinator()

    def create_movie(self, request: MovieCreateRequest) -> MovieResponse:
        """
        Add a movie with a zero recommendation counter.

        Raises:
            InvalidArgumentError: a movie with the same title (ignoring case) exists
        """
        with track_operation("create_movie", title=request.title):
            with unit_of_work():
                if self.movies.exists_by_title_ignore_case(request.title):
                    logger.warning("movie_title_exists", title=request.title)
                    raise InvalidArgumentError(f"동일한 제목의 영화가 이미 존재합니다: {request.title}")

                movie = self.movies.add(Movie(
                    title=request.title,
                    genre=request.genre,
                    release_date=request.release_date,
                    description=request.description,
                    poster_url=request.poster_url,
                    recommendation_count=0,
                ))

        track_movie_created()
        logger.info("movie_created", movie_id=movie.id, title=movie.title)
        return MovieResponse.from_entity(movie)

    def get_all_movies(
        self,
        page: int = 0,
        size: int = 10,
        sort: str = "createdAt",
        direction: str = "desc",
        member_id: Optional[str] = None,
    ) -> MoviePage:
        """
        One page of the whole catalog.

        Args:
            page: 0-based page number
            size: Page size
            sort: One of SORT_FIELDS
            direction: 'asc' or 'desc' (anything but 'asc' sorts descending)
            member_id: Caller, for recommended_by_current_user
        """
        column = SORT_FIELDS.get(sort)
        if column is None:
            raise InvalidArgumentError(
                f"정렬 기준은 {', '.join(SORT_FIELDS)} 중 하나여야 합니다: {sort}"
            )
        if (direction or "").lower() == "asc":
            order_by = (column.asc(), Movie.id.asc())
        else:
            order_by = (column.desc(), Movie.id.desc())

        with track_operation("get_all_movies", page=page, size=size, sort=sort, direction=direction):
            stmt = self.movies.select_all().order_by(*order_by)
            return self._page(stmt, page, size, member_id)

    def get_movies_by_genre(self, genre: str, page: int = 0, size: int = 10,
                            member_id: Optional[str] = None) -> MoviePage:
        """Movies whose genre contains `genre`, ignoring case."""
        with track_operation("get_movies_by_genre", genre=genre, page=page, size=size):
            stmt = self.movies.select_by_genre_containing(genre).order_by(Movie.id.asc())
            return self._page(stmt, page, size, member_id)

    def search_movies(self, keyword: str, page: int = 0, size: int = 10,
                      member_id: Optional[str] = None) -> MoviePage:
        """Movies whose title or genre contains `keyword`, ignoring case."""
        if not keyword or not keyword.strip():
            raise InvalidArgumentError("검색어는 필수입니다")
        keyword = keyword.strip()
        with track_operation("search_movies", keyword=keyword, page=page, size=size):
            stmt = self.movies.select_by_title_or_genre_containing(keyword).order_by(Movie.id.asc())
            return self._page(stmt, page, size, member_id)

    def get_recommended_movies(self, page: int = 0, size: int = 10,
                               member_id: Optional[str] = None) -> MoviePage:
        """The catalog ordered by recommendation count, highest first."""
        with track_operation("get_recommended_movies", page=page, size=size):
            stmt = self.movies.select_ordered_by_recommendation_count()
            return self._page(stmt, page, size, member_id)

    def get_top_recommended_movies(self, limit: int = 5,
                                   member_id: Optional[str] = None) -> List[MovieResponse]:
        """The `limit` most recommended movies, newest first among ties."""
        if limit < 1:
            raise InvalidArgumentError("limit은 1 이상이어야 합니다")
        with track_operation("get_top_recommended_movies", limit=limit):
            movies = self.movies.find_top_by_recommendation_count(limit)
            return self.coordinator.decorate_with_recommendation_state(movies, member_id)

    def get_movie_by_id(self, movie_id: int, member_id: Optional[str] = None) -> MovieResponse:
        """
        Raises:
            MovieNotFoundError: no movie with movie_id
        """
        with track_operation("get_movie_by_id", movie_id=movie_id):
            movie = self.movies.find_by_id(movie_id)
            if movie is None:
                raise MovieNotFoundError(movie_id)
            return self.coordinator.decorate_with_recommendation_state([movie], member_id)[0]

    @tracked("get_all_genres")
    def get_all_genres(self) -> List[str]:
        return self.movies.find_all_distinct_genres()

    def _page(self, stmt, page: int, size: int, member_id: Optional[str]) -> MoviePage:
        if page < 0:
            raise InvalidArgumentError("page는 0 이상이어야 합니다")
        if size < 1:
            raise InvalidArgumentError("size는 1 이상이어야 합니다")
        if not fits_integer_column(page * size):
            raise InvalidArgumentError(f"page가 너무 큽니다: {page}")

        movies, total = self.movies.paginate(stmt, page, size)
        content = self.coordinator.decorate_with_recommendation_state(movies, member_id)
        return MoviePage.build(content, total_elements=total, number=page, size=size)


_movie_service = None


def get_movie_service() -> MovieService:
    """
    Get or create the global movie service.
    """
    global _movie_service

    if _movie_service is None:
        _movie_service = MovieService()

    return _movie_service

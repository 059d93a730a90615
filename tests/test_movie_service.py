"""
Tests for catalog operations in MovieService.
"""

import pytest

from filmclub.exceptions import InvalidArgumentError, MovieNotFoundError
from filmclub.metrics import movies_created_total
from filmclub.models import Movie
from filmclub.schemas import MovieCreateRequest
from filmclub.services.movie_service import MovieService


@pytest.fixture
def service(test_app):
    return MovieService()


class TestCreateMovie:

    def test_creates_with_zero_counter(self, service):
        created = movies_created_total._value.get()

        movie = service.create_movie(MovieCreateRequest(
            title="Inception",
            genre="Sci-Fi",
            release_date="2010-07-16",
            poster_url="https://example.com/inception.jpg",
        ))

        assert movie.id is not None
        assert movie.title == "Inception"
        assert movie.recommendation_count == 0
        assert movie.recommended_by_current_user is False
        assert movie.created_at is not None
        assert Movie.query.count() == 1
        assert movies_created_total._value.get() == created + 1

    def test_duplicate_title_ignoring_case_rejected(self, service, make_movie):
        make_movie(title="Inception")

        with pytest.raises(InvalidArgumentError):
            service.create_movie(MovieCreateRequest(title="inception"))

        assert Movie.query.count() == 1


class TestGetAllMovies:

    def test_default_sort_is_newest_first(self, service, make_movie):
        first = make_movie(title="Old")
        second = make_movie(title="New")

        page = service.get_all_movies()

        # Equal created_at timestamps fall back to id desc
        assert [m.id for m in page.content] == [second.id, first.id]
        assert page.total_elements == 2

    def test_sort_by_title_ascending(self, service, make_movie):
        make_movie(title="Memento")
        make_movie(title="Heat")
        make_movie(title="Up")

        page = service.get_all_movies(sort="title", direction="asc")

        assert [m.title for m in page.content] == ["Heat", "Memento", "Up"]

    def test_sort_by_recommendation_count(self, service, make_movie):
        make_movie(title="Low", recommendation_count=1)
        make_movie(title="High", recommendation_count=5)

        page = service.get_all_movies(sort="recommendationCount", direction="desc")

        assert [m.title for m in page.content] == ["High", "Low"]

    def test_unknown_sort_field_rejected(self, service):
        with pytest.raises(InvalidArgumentError):
            service.get_all_movies(sort="director")

    def test_pagination_metadata(self, service, make_movie):
        for i in range(5):
            make_movie(title=f"Movie {i}")

        page = service.get_all_movies(page=1, size=2)

        assert len(page.content) == 2
        assert page.total_elements == 5
        assert page.total_pages == 3
        assert page.number == 1
        assert page.size == 2
        assert page.first is False
        assert page.last is False

    @pytest.mark.parametrize("page, size", [(-1, 10), (0, 0)])
    def test_invalid_page_or_size_rejected(self, service, page, size):
        with pytest.raises(InvalidArgumentError):
            service.get_all_movies(page=page, size=size)

    def test_content_is_decorated_for_member(self, service, make_movie):
        liked = make_movie(title="Inception", recommended_by=["alice"])
        make_movie(title="Memento")

        page = service.get_all_movies(sort="title", direction="asc", member_id="alice")

        flags = {m.id: m.recommended_by_current_user for m in page.content}
        assert flags[liked.id] is True
        assert list(flags.values()).count(True) == 1


class TestFiltering:

    def test_movies_by_genre(self, service, make_movie):
        make_movie(title="Inception", genre="Sci-Fi")
        make_movie(title="Heat", genre="Crime")

        page = service.get_movies_by_genre("sci-fi")

        assert [m.title for m in page.content] == ["Inception"]

    def test_search_by_title_or_genre(self, service, make_movie):
        make_movie(title="Dramatic Heights", genre="Thriller")
        make_movie(title="Heat", genre="Drama")
        make_movie(title="Up", genre="Animation")

        page = service.search_movies("drama")

        assert {m.title for m in page.content} == {"Dramatic Heights", "Heat"}

    def test_blank_keyword_rejected(self, service):
        with pytest.raises(InvalidArgumentError):
            service.search_movies("   ")

    def test_recommended_movies_ordered_by_counter(self, service, make_movie):
        make_movie(title="Low", recommended_by=["a"])
        make_movie(title="High", recommended_by=["a", "b", "c"])
        make_movie(title="None")

        page = service.get_recommended_movies()

        assert [m.title for m in page.content] == ["High", "Low", "None"]
        assert [m.recommendation_count for m in page.content] == [3, 1, 0]

    def test_top_recommended_respects_limit(self, service, make_movie):
        make_movie(title="Low", recommendation_count=1)
        make_movie(title="High", recommendation_count=9)
        make_movie(title="Mid", recommendation_count=4)

        top = service.get_top_recommended_movies(limit=2, member_id="alice")

        assert [m.title for m in top] == ["High", "Mid"]

    def test_top_recommended_rejects_non_positive_limit(self, service):
        with pytest.raises(InvalidArgumentError):
            service.get_top_recommended_movies(limit=0)

    def test_all_genres(self, service, make_movie):
        make_movie(title="A", genre="Drama")
        make_movie(title="B", genre="Action")
        make_movie(title="C", genre="Drama")

        assert service.get_all_genres() == ["Action", "Drama"]


class TestGetMovieById:

    def test_returns_decorated_movie(self, service, make_movie):
        movie = make_movie(recommended_by=["alice"])

        assert service.get_movie_by_id(movie.id, member_id="alice").recommended_by_current_user is True
        assert service.get_movie_by_id(movie.id, member_id="bob").recommended_by_current_user is False
        assert service.get_movie_by_id(movie.id).recommended_by_current_user is False

    def test_missing_movie_raises_not_found(self, service):
        with pytest.raises(MovieNotFoundError):
            service.get_movie_by_id(9999)

    def test_out_of_range_id_raises_not_found(self, service):
        with pytest.raises(MovieNotFoundError):
            service.get_movie_by_id(2 ** 64)


def test_page_offset_beyond_integer_range_rejected(test_app):
    with pytest.raises(InvalidArgumentError):
        MovieService().get_all_movies(page=2 ** 62, size=10)

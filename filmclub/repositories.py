"""
Data access for the catalog store and the recommendation ledger.

MovieRepository and RecommendationRepository only read and write their own
table. Keeping the movie counter equal to the ledger row count is the
recommendation coordinator's job, done inside unit_of_work().
"""

from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import case, func, or_, select, update

from filmclub.models import db, fits_integer_column, Movie, MovieRecommendation, utcnow


@contextmanager
def unit_of_work():
    """
    Commit everything done inside the block as one transaction, or nothing.

    Any exception rolls the session back and is re-raised unchanged.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


class MovieRepository:
    """Catalog store: the movies table."""

    def find_by_id(self, movie_id: int, for_update: bool = False) -> Optional[Movie]:
        """
        Load a movie by primary key.

        With for_update the row is locked until the transaction ends
        (SELECT ... FOR UPDATE on dialects that support it) and the identity
        map is bypassed so the caller sees the committed row.

        IDs outside the column's integer range match nothing.
        """
        if not fits_integer_column(movie_id):
            return None
        if for_update:
            return db.session.get(Movie, movie_id, with_for_update=True, populate_existing=True)
        return db.session.get(Movie, movie_id)

    def exists_by_title_ignore_case(self, title: str) -> bool:
        stmt = select(Movie.id).where(func.lower(Movie.title) == title.lower()).limit(1)
        return db.session.execute(stmt).first() is not None

    def add(self, movie: Movie) -> Movie:
        db.session.add(movie)
        db.session.flush()
        return movie

    def current_recommendation_count(self, movie_id: int) -> int:
        """Read the counter straight from the database."""
        stmt = select(Movie.recommendation_count).where(Movie.id == movie_id)
        return db.session.execute(stmt).scalar_one()

    def increment_recommendation_count(self, movie_id: int) -> int:
        """
        Add one to the stored counter with a single UPDATE and return the new value.
        """
        self._update_count(movie_id, Movie.recommendation_count + 1)
        return self.current_recommendation_count(movie_id)

    def decrement_recommendation_count(self, movie_id: int) -> int:
        """
        Subtract one from the stored counter, flooring at zero, and return the new value.
        """
        floored = case((Movie.recommendation_count > 0, Movie.recommendation_count - 1), else_=0)
        self._update_count(movie_id, floored)
        return self.current_recommendation_count(movie_id)

    def set_recommendation_count(self, movie_id: int, count: int) -> None:
        self._update_count(movie_id, count)

    def _update_count(self, movie_id: int, value) -> None:
        db.session.execute(
            update(Movie)
            .where(Movie.id == movie_id)
            .values(recommendation_count=value, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )

    def all_recommendation_counts(self) -> List[Tuple[int, int]]:
        """(movie_id, recommendation_count) for every movie, by id."""
        stmt = select(Movie.id, Movie.recommendation_count).order_by(Movie.id)
        return [(row.id, row.recommendation_count) for row in db.session.execute(stmt)]

    def select_all(self):
        return select(Movie)

    def select_by_genre_containing(self, genre: str):
        return select(Movie).where(func.lower(Movie.genre).contains(genre.lower(), autoescape=True))

    def select_by_title_or_genre_containing(self, keyword: str):
        keyword = keyword.lower()
        return select(Movie).where(or_(
            func.lower(Movie.title).contains(keyword, autoescape=True),
            func.lower(Movie.genre).contains(keyword, autoescape=True),
        ))

    def select_ordered_by_recommendation_count(self):
        return select(Movie).order_by(Movie.recommendation_count.desc(), Movie.id.asc())

    def find_top_by_recommendation_count(self, limit: int) -> List[Movie]:
        stmt = (
            select(Movie)
            .order_by(Movie.recommendation_count.desc(), Movie.created_at.desc(), Movie.id.desc())
            .limit(limit)
        )
        return list(db.session.scalars(stmt))

    def find_all_distinct_genres(self) -> List[str]:
        stmt = select(Movie.genre).where(Movie.genre.isnot(None)).distinct().order_by(Movie.genre)
        return list(db.session.scalars(stmt))

    def paginate(self, stmt, page: int, size: int) -> Tuple[List[Movie], int]:
        """
        Run a select for one 0-based page.

        Returns:
            Tuple of (movies on the page, total number of matching movies)
        """
        pagination = db.paginate(stmt, page=page + 1, per_page=size, max_per_page=None, error_out=False, count=True)
        return list(pagination.items), pagination.total or 0


class RecommendationRepository:
    """Recommendation ledger: the movie_recommendations table."""

    def find_by_movie_and_member(self, movie_id: int, member_id: str) -> Optional[MovieRecommendation]:
        stmt = select(MovieRecommendation).where(
            MovieRecommendation.movie_id == movie_id,
            MovieRecommendation.member_id == member_id,
        )
        return db.session.scalars(stmt).first()

    def exists_by_movie_and_member(self, movie_id: int, member_id: str) -> bool:
        if not fits_integer_column(movie_id):
            return False
        stmt = select(MovieRecommendation.id).where(
            MovieRecommendation.movie_id == movie_id,
            MovieRecommendation.member_id == member_id,
        ).limit(1)
        return db.session.execute(stmt).first() is not None

    def add(self, movie_id: int, member_id: str) -> MovieRecommendation:
        """
        Insert a ledger row and flush it.

        Raises:
            sqlalchemy.exc.IntegrityError: the (movie_id, member_id) pair already exists
        """
        recommendation = MovieRecommendation.create(movie_id, member_id)
        db.session.add(recommendation)
        db.session.flush()
        return recommendation

    def delete(self, recommendation: MovieRecommendation) -> None:
        db.session.delete(recommendation)
        db.session.flush()

    def counts_by_movie(self) -> Dict[int, int]:
        """Ledger row count per movie, for movies with at least one row."""
        stmt = (
            select(MovieRecommendation.movie_id, func.count(MovieRecommendation.id))
            .group_by(MovieRecommendation.movie_id)
        )
        return {movie_id: count for movie_id, count in db.session.execute(stmt)}

    def recommended_movie_ids(self, member_id: str, movie_ids: Iterable[int]) -> Set[int]:
        """
        Which of movie_ids the member has recommended, in one query.
        """
        movie_ids = list(movie_ids)
        if not movie_ids:
            return set()
        stmt = select(MovieRecommendation.movie_id).where(
            MovieRecommendation.member_id == member_id,
            MovieRecommendation.movie_id.in_(movie_ids),
        )
        return set(db.session.scalars(stmt))

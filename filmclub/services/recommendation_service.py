"""
Recommendation coordinator for the FilmClub catalog.

The coordinator is the only code that writes recommendation state. Each
toggle inserts or deletes one ledger row and moves the movie's counter by
one inside a single transaction, with the movie row locked, so the counter
always equals the number of ledger rows for that movie.

Concurrent inserts for the same (movie, member) pair that slip past the
existence check are stopped by the ledger's unique constraint and reported
as DuplicateRecommendationError. They are never retried here: by the time
the caller sees the error the correct toggle action has changed to remove.
"""

from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from filmclub.exceptions import (
    DuplicateRecommendationError,
    InvalidArgumentError,
    MovieNotFoundError,
)
from filmclub.logging_config import get_logger
from filmclub.logging_metrics import track_operation
from filmclub.metrics import (
    track_count_drift,
    track_duplicate_recommendation,
    track_recommendation_toggle,
)
from filmclub.models import Movie, MovieRecommendation
from filmclub.repositories import MovieRepository, RecommendationRepository, unit_of_work
from filmclub.schemas import CountDrift, MovieResponse, RecommendationResponse

logger = get_logger(__name__)

MEMBER_ID_MAX_LENGTH = MovieRecommendation.__table__.c.member_id.type.length


class RecommendationCoordinator:
    """Toggles and queries per-member movie recommendations."""

    def __init__(
        self,
        movie_repository: Optional[MovieRepository] = None,
        recommendation_repository: Optional[RecommendationRepository] = None,
    ):
        self.movies = movie_repository or MovieRepository()
        self.recommendations = recommendation_repository or RecommendationRepository()

    def toggle_recommendation(self, movie_id: int, member_id: str) -> RecommendationResponse:
        """
        Flip member_id's recommendation of movie_id.

        Args:
            movie_id: ID of an existing movie
            member_id: Non-blank opaque member identifier

        Returns:
            RecommendationResponse with the movie's new counter and whether the
            member now recommends it

        Raises:
            InvalidArgumentError: member_id is blank or too long
            MovieNotFoundError: no movie with movie_id
            DuplicateRecommendationError: a concurrent request inserted the same
                (movie, member) row first
        """
        member_id = self._require_member_id(member_id)

        with track_operation("toggle_recommendation", movie_id=movie_id, member_id=member_id):
            with unit_of_work():
                # Row lock serializes toggles on the same movie
                movie = self.movies.find_by_id(movie_id, for_update=True)
                if movie is None:
                    raise MovieNotFoundError(movie_id)

                existing = self.recommendations.find_by_movie_and_member(movie_id, member_id)
                if existing is not None:
                    self.recommendations.delete(existing)
                    count = self.movies.decrement_recommendation_count(movie_id)
                    result = RecommendationResponse.removed(movie_id, count)
                else:
                    try:
                        self.recommendations.add(movie_id, member_id)
                    except IntegrityError as e:
                        track_duplicate_recommendation()
                        logger.warning(
                            "duplicate_recommendation_rejected",
                            movie_id=movie_id,
                            member_id=member_id,
                            error=str(e.orig),
                        )
                        raise DuplicateRecommendationError(movie_id, member_id) from e
                    count = self.movies.increment_recommendation_count(movie_id)
                    result = RecommendationResponse.added(movie_id, count)

        action = "added" if result.recommended else "removed"
        track_recommendation_toggle(action)
        logger.info(
            "recommendation_toggled",
            movie_id=movie_id,
            member_id=member_id,
            action=action,
            recommendation_count=result.recommendation_count,
        )
        return result

    def is_recommended_by_user(self, movie_id: int, member_id: Optional[str]) -> bool:
        """
        Whether member_id has recommended movie_id.

        Anonymous callers (member_id None or blank) are never recommenders and
        do not hit the ledger.
        """
        if member_id is None or not member_id.strip():
            return False
        return self.recommendations.exists_by_movie_and_member(movie_id, member_id.strip())

    def decorate_with_recommendation_state(
        self,
        movies: Iterable[Movie],
        member_id: Optional[str],
    ) -> List[MovieResponse]:
        """
        Convert movies to responses carrying recommended_by_current_user.

        One ledger query covers the whole batch; none is made for anonymous
        callers.
        """
        movies = list(movies)
        recommended_ids = set()
        if movies and member_id is not None and member_id.strip():
            recommended_ids = self.recommendations.recommended_movie_ids(
                member_id.strip(), [movie.id for movie in movies]
            )
        return [MovieResponse.from_entity(movie, movie.id in recommended_ids) for movie in movies]

    def reconcile_recommendation_counts(self, repair: bool = False) -> List[CountDrift]:
        """
        Compare every movie's counter with its ledger row count.

        Args:
            repair: Rewrite drifted counters from the ledger

        Returns:
            One CountDrift per movie whose counter disagreed with the ledger
        """
        drifts = []
        with track_operation("reconcile_recommendation_counts", repair=repair):
            with unit_of_work():
                ledger_counts = self.recommendations.counts_by_movie()
                for movie_id, stored_count in self.movies.all_recommendation_counts():
                    ledger_count = ledger_counts.get(movie_id, 0)
                    if stored_count == ledger_count:
                        continue
                    if repair:
                        self.movies.set_recommendation_count(movie_id, ledger_count)
                    drifts.append(CountDrift(
                        movie_id=movie_id,
                        stored_count=stored_count,
                        ledger_count=ledger_count,
                        repaired=repair,
                    ))

        if drifts:
            track_count_drift(len(drifts))
            logger.warning(
                "recommendation_count_drift",
                drift_count=len(drifts),
                movie_ids=[drift.movie_id for drift in drifts],
                repaired=repair,
            )
        return drifts

    @staticmethod
    def _require_member_id(member_id: Optional[str]) -> str:
        if member_id is None or not member_id.strip():
            raise InvalidArgumentError("회원 ID는 필수입니다")
        member_id = member_id.strip()
        if len(member_id) > MEMBER_ID_MAX_LENGTH:
            raise InvalidArgumentError(f"회원 ID는 {MEMBER_ID_MAX_LENGTH}자를 초과할 수 없습니다")
        return member_id


_coordinator = None


def get_recommendation_coordinator() -> RecommendationCoordinator:
    """
    Get or create the global recommendation coordinator.
    """
    global _coordinator

    if _coordinator is None:
        _coordinator = RecommendationCoordinator()

    return _coordinator

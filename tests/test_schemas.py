"""
Tests for Pydantic schemas and camelCase serialization.
"""

import unittest
import os
import sys
from datetime import datetime, timezone

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pydantic import ValidationError

from filmclub.models import Movie
from filmclub.schemas import (
    MovieCreateRequest,
    MovieResponse,
    RecommendationResponse,
    MoviePage,
    ErrorResponse,
    CountDrift,
)


class TestMovieCreateRequest(unittest.TestCase):

    def test_accepts_camel_case_keys(self):
        request = MovieCreateRequest.model_validate({
            'title': 'Inception',
            'releaseDate': '2010-07-16',
            'posterUrl': 'https://example.com/p.jpg',
        })

        self.assertEqual(request.release_date, '2010-07-16')
        self.assertEqual(request.poster_url, 'https://example.com/p.jpg')

    def test_accepts_snake_case_names(self):
        request = MovieCreateRequest(title='Inception', release_date='2010')
        self.assertEqual(request.release_date, '2010')

    def test_title_is_stripped(self):
        self.assertEqual(MovieCreateRequest(title='  Heat  ').title, 'Heat')

    def test_blank_title_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            MovieCreateRequest(title='   ')
        self.assertIn('영화 제목은 필수입니다', str(ctx.exception))

    def test_missing_title_rejected(self):
        with self.assertRaises(ValidationError):
            MovieCreateRequest.model_validate({'genre': 'Drama'})

    def test_length_limits(self):
        with self.assertRaises(ValidationError):
            MovieCreateRequest(title='x' * 256)
        with self.assertRaises(ValidationError):
            MovieCreateRequest(title='Heat', genre='x' * 101)
        with self.assertRaises(ValidationError):
            MovieCreateRequest(title='Heat', description='x' * 2001)


class TestMovieResponse(unittest.TestCase):

    def test_from_entity_with_flag(self):
        movie = Movie(
            id=3,
            title='Heat',
            genre='Crime',
            recommendation_count=2,
            created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

        data = MovieResponse.from_entity(movie, recommended_by_current_user=True).to_dict()

        self.assertEqual(data['id'], 3)
        self.assertEqual(data['recommendationCount'], 2)
        self.assertTrue(data['recommendedByCurrentUser'])
        self.assertEqual(data['releaseDate'], None)
        self.assertTrue(data['createdAt'].startswith('2024-01-02T03:04:05'))

    def test_negative_count_rejected(self):
        with self.assertRaises(ValidationError):
            MovieResponse(id=1, title='Heat', recommendation_count=-1)


class TestRecommendationResponse(unittest.TestCase):

    def test_added_and_removed_messages(self):
        added = RecommendationResponse.added(1, 1).to_dict()
        removed = RecommendationResponse.removed(1, 0).to_dict()

        self.assertEqual(added, {
            'movieId': 1,
            'recommendationCount': 1,
            'recommended': True,
            'message': '영화 추천이 추가되었습니다.',
        })
        self.assertFalse(removed['recommended'])
        self.assertEqual(removed['message'], '영화 추천이 취소되었습니다.')


class TestMoviePage(unittest.TestCase):

    def test_build_middle_page(self):
        page = MoviePage.build([], total_elements=25, number=1, size=10)

        self.assertEqual(page.total_pages, 3)
        self.assertFalse(page.first)
        self.assertFalse(page.last)

    def test_build_last_page(self):
        page = MoviePage.build([], total_elements=25, number=2, size=10)
        self.assertTrue(page.last)

    def test_build_empty(self):
        data = MoviePage.build([], total_elements=0, number=0, size=10).to_dict()

        self.assertEqual(data['totalPages'], 0)
        self.assertEqual(data['totalElements'], 0)
        self.assertTrue(data['first'])
        self.assertTrue(data['last'])


class TestErrorAndDriftSchemas(unittest.TestCase):

    def test_error_response_has_timestamp(self):
        data = ErrorResponse(code='MOVIE_NOT_FOUND', message='없음', path='/api/movies/1').to_dict()

        self.assertEqual(set(data), {'code', 'message', 'path', 'timestamp'})
        self.assertIsNotNone(data['timestamp'])

    def test_count_drift_camel_case(self):
        data = CountDrift(movie_id=1, stored_count=3, ledger_count=1).to_dict()

        self.assertEqual(data, {'movieId': 1, 'storedCount': 3, 'ledgerCount': 1, 'repaired': False})


if __name__ == '__main__':
    unittest.main()

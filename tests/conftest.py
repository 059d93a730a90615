import pytest
import os
import sys

# Add parent directory to path so we can import filmclub module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from filmclub.app import create_app
from filmclub.models import db, Movie, MovieRecommendation


@pytest.fixture(scope='function')
def test_app():
    """Create a fresh Flask app on in-memory SQLite for each test."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SECRET_KEY': 'test-secret-key',
    })

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(test_app):
    return test_app.test_client()


@pytest.fixture
def make_movie(test_app):
    """Factory that persists a movie, optionally with existing recommenders."""

    def _make_movie(title="Inception", genre="Sci-Fi", recommended_by=(), **fields):
        movie = Movie(title=title, genre=genre, **fields)
        db.session.add(movie)
        db.session.flush()
        for member_id in recommended_by:
            db.session.add(MovieRecommendation.create(movie.id, member_id))
        if recommended_by and 'recommendation_count' not in fields:
            movie.recommendation_count = len(recommended_by)
        db.session.commit()
        return movie

    return _make_movie


@pytest.fixture
def counts(test_app):
    """Return (stored counter, ledger row count) for a movie, read from the database."""

    def _counts(movie_id):
        db.session.expire_all()
        stored = db.session.execute(
            db.select(Movie.recommendation_count).where(Movie.id == movie_id)
        ).scalar_one()
        ledger = MovieRecommendation.query.filter_by(movie_id=movie_id).count()
        return stored, ledger

    return _counts

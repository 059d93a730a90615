"""
Database models for the FilmClub catalog.

This module defines SQLAlchemy models for the two persistent stores:
- Movie: catalog record carrying the denormalized recommendation counter
- MovieRecommendation: ledger row recording that a member recommended a movie
"""

from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone

db = SQLAlchemy()

# Signed 64-bit range of an INTEGER column; larger Python ints cannot be bound
SQL_INTEGER_MIN = -(2 ** 63)
SQL_INTEGER_MAX = 2 ** 63 - 1


def utcnow():
    return datetime.now(timezone.utc)


def fits_integer_column(value):
    return SQL_INTEGER_MIN <= value <= SQL_INTEGER_MAX


class Movie(db.Model):
    """
    A movie in the catalog.

    recommendation_count mirrors the number of MovieRecommendation rows
    pointing at this movie. Only the recommendation coordinator writes it,
    always through SQL UPDATEs.
    """
    __tablename__ = 'movies'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    genre = db.Column(db.String(100), nullable=True, index=True)
    release_date = db.Column(db.String(20), nullable=True)
    description = db.Column(db.Text, nullable=True)
    poster_url = db.Column(db.String(500), nullable=True)

    recommendation_count = db.Column(db.Integer, default=0, server_default='0', nullable=False, index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint('recommendation_count >= 0', name='ck_movies_recommendation_count_non_negative'),
    )

    def __repr__(self):
        return f'<Movie {self.id}: {self.title}>'


class MovieRecommendation(db.Model):
    """
    Ledger row: member_id recommended movie_id.

    Rows are inserted on recommend and deleted on un-recommend, never updated.
    """
    __tablename__ = 'movie_recommendations'

    id = db.Column(db.Integer, primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey('movies.id'), nullable=False, index=True)
    member_id = db.Column(db.String(50), nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # One recommendation per member per movie
    __table_args__ = (
        db.UniqueConstraint('movie_id', 'member_id', name='unique_recommendation'),
    )

    @classmethod
    def create(cls, movie_id, member_id):
        return cls(movie_id=movie_id, member_id=member_id)

    def __repr__(self):
        return f'<MovieRecommendation movie={self.movie_id} member={self.member_id}>'

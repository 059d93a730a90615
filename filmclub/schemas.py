"""
Data schemas for the FilmClub API.

This module defines Pydantic models for request validation and response
serialization. Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone


RECOMMENDATION_ADDED = "추가"
RECOMMENDATION_REMOVED = "취소"


class CamelModel(BaseModel):
    """Base model that reads snake_case or camelCase and writes camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class MovieCreateRequest(CamelModel):
    """
    Payload for adding a movie to the catalog.
    """
    title: str = Field(..., description="Movie title", min_length=1, max_length=255)
    genre: Optional[str] = Field(None, description="Genre (e.g., 'Action')", max_length=100)
    release_date: Optional[str] = Field(None, description="Release date (e.g., '2010-07-16')", max_length=20)
    description: Optional[str] = Field(None, description="Plot summary", max_length=2000)
    poster_url: Optional[str] = Field(None, description="Poster image URL", max_length=500)

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        """Reject titles made only of whitespace."""
        if not v.strip():
            raise ValueError('영화 제목은 필수입니다')
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Inception",
                "genre": "Sci-Fi",
                "releaseDate": "2010-07-16",
                "description": "A thief who steals corporate secrets through dream-sharing technology...",
                "posterUrl": "https://example.com/inception.jpg"
            }
        }
    )


class MovieResponse(CamelModel):
    """
    A catalog movie as returned to clients, decorated with the caller's
    recommendation state.
    """
    id: int
    title: str
    genre: Optional[str] = None
    release_date: Optional[str] = None
    description: Optional[str] = None
    poster_url: Optional[str] = None
    recommendation_count: int = Field(0, ge=0)
    recommended_by_current_user: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, movie, recommended_by_current_user: bool = False) -> "MovieResponse":
        response = cls.model_validate(movie)
        response.recommended_by_current_user = recommended_by_current_user
        return response


class RecommendationResponse(CamelModel):
    """
    Outcome of a recommendation toggle.
    """
    movie_id: int
    recommendation_count: int = Field(..., ge=0)
    recommended: bool
    message: str

    @classmethod
    def success(cls, movie_id: int, recommendation_count: int, recommended: bool, action: str) -> "RecommendationResponse":
        return cls(
            movie_id=movie_id,
            recommendation_count=recommendation_count,
            recommended=recommended,
            message=f"영화 추천이 {action}되었습니다.",
        )

    @classmethod
    def added(cls, movie_id: int, recommendation_count: int) -> "RecommendationResponse":
        return cls.success(movie_id, recommendation_count, True, RECOMMENDATION_ADDED)

    @classmethod
    def removed(cls, movie_id: int, recommendation_count: int) -> "RecommendationResponse":
        return cls.success(movie_id, recommendation_count, False, RECOMMENDATION_REMOVED)


class MoviePage(CamelModel):
    """
    One page of movies. Page numbers start at 0.
    """
    content: List[MovieResponse] = Field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    number: int = 0
    size: int = 0
    first: bool = True
    last: bool = True

    @classmethod
    def build(cls, content: List[MovieResponse], total_elements: int, number: int, size: int) -> "MoviePage":
        total_pages = (total_elements + size - 1) // size if size else 0
        return cls(
            content=content,
            total_elements=total_elements,
            total_pages=total_pages,
            number=number,
            size=size,
            first=number == 0,
            last=number >= total_pages - 1,
        )


class ErrorResponse(CamelModel):
    """
    Body of every error response.
    """
    code: str
    message: str
    path: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CountDrift(CamelModel):
    """
    A movie whose stored counter disagrees with its ledger row count.
    """
    movie_id: int
    stored_count: int
    ledger_count: int
    repaired: bool = False

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..recommendations.vocabulary import EXPERIENCE_TAGS, REVIEW_CATEGORIES


class ReviewCreate(BaseModel):
    place_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    ratings: dict[str, int] = Field(..., description="Rating category -> 1..5")
    tags: list[str] = Field(default_factory=list)
    comment: str | None = Field(default=None, max_length=2000)
    sentiment: Literal["positive", "neutral", "negative"] | None = None
    visit_date: date | None = None

    @field_validator("ratings")
    @classmethod
    def _check_ratings(cls, value: dict[str, int]) -> dict[str, int]:
        if not value:
            raise ValueError("at least one rating is required")
        for category, rating in value.items():
            if category not in REVIEW_CATEGORIES:
                raise ValueError(f"unknown rating category: {category}")
            if not 1 <= rating <= 5:
                raise ValueError(f"rating for {category} must be between 1 and 5")
        return value

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        invalid = [t for t in value if t not in EXPERIENCE_TAGS]
        if invalid:
            raise ValueError(f"invalid tags: {', '.join(invalid)}")
        return list(dict.fromkeys(value))


class Review(ReviewCreate):
    id: str
    created_at: datetime

    @property
    def average_rating(self) -> float:
        return sum(self.ratings.values()) / len(self.ratings)


class ReviewResponse(BaseModel):
    status: str
    review_id: str
    total_reviews: int

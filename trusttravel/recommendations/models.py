from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from ..profiles.models import UserProfile

BudgetTier = Literal["low", "medium", "high"]


class Destination(BaseModel):
    area: str = Field(default="", description="Destination area id, e.g. trento-city")
    region: str = "trento"


class DateIntent(BaseModel):
    type: Literal["now", "custom"] = "custom"
    start_date: date | None = None
    end_date: date | None = None
    is_flexible: bool = True
    reference_time: datetime = Field(
        default_factory=datetime.now,
        description="Local time the plan is evaluated at; only read for type='now'",
    )


class TravelPlan(BaseModel):
    destination: Destination
    dates: DateIntent = Field(default_factory=DateIntent)
    travel_type: str | None = Field(default=None, description="solo / date / family / friends / business")
    experience_tags: list[str] = Field(default_factory=list, max_length=3)
    special_needs: list[str] = Field(default_factory=list)
    categories: list[str] | None = Field(default=None, description="Explicit category filter")
    budget: str | None = Field(default=None, description="Budget ceiling: low / medium / high")


class ProfileRequest(BaseModel):
    """Recommendation request built from a long-term profile instead of a plan."""

    profile: UserProfile
    area: str
    categories: list[str] | None = None


class OpeningWindow(BaseModel):
    open_hour: int = Field(..., ge=0, le=24)
    close_hour: int = Field(..., ge=0, le=24)


class Place(BaseModel):
    id: str
    name: str
    category: str
    area: str
    city: str = "Trento"
    budget: BudgetTier = "medium"
    tags: list[str] = Field(default_factory=list)
    supports: list[str] = Field(default_factory=list, description="Special needs the place caters for")
    opening_hours: list[OpeningWindow] = Field(default_factory=list)
    address: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    average_rating: float | None = None
    review_count: int = 0


class PlaceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    area: str = Field(..., min_length=1)
    city: str = "Trento"
    budget: BudgetTier = "medium"
    tags: list[str] = Field(default_factory=list)
    supports: list[str] = Field(default_factory=list)
    opening_hours: list[OpeningWindow] = Field(default_factory=list)
    address: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class ScoreBreakdown(BaseModel):
    tag_score: float
    category_bonus: float
    timing_bonus: float
    social_bonus: float
    quality_bonus: float = 0.0


class RecommendedPlace(BaseModel):
    place: Place
    score: float
    matched_tags: list[str]
    breakdown: ScoreBreakdown
    trusted_reviewers: list[str] = Field(default_factory=list)
    reason: str | None = None


class RecommendationQuery(BaseModel):
    travel_plan: TravelPlan
    user_id: str | None = Field(default=None, description="Enables social bias when set")
    limit: int = Field(default=20, ge=1, le=50)


class ProfileRecommendationQuery(BaseModel):
    user_id: str = Field(..., min_length=1)
    area: str = Field(..., min_length=1)
    categories: list[str] | None = None
    use_social: bool = True
    limit: int = Field(default=20, ge=1, le=50)


class RecommendationResponse(BaseModel):
    recommendations: list[RecommendedPlace]
    total_candidates: int
    social_bias_enabled: bool = False

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from ..recommendations.vocabulary import BUDGET_TIERS, normalize_term


class UserProfile(BaseModel):
    """Long-term travel preferences of one user.

    List fields are ``None`` when the user never answered and ``[]`` when they
    explicitly chose nothing; the two are scored differently.
    """

    user_id: str = Field(..., min_length=1)
    first_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    age_group: str | None = None
    activities: list[str] | None = None
    place_types: list[str] | None = None
    food_preferences: list[str] | None = None
    food_restrictions: list[str] | None = None
    places_to_avoid: list[str] | None = None
    personality_traits: list[str] | None = None
    trip_style: str | None = None
    budget_level: str | None = Field(default=None, description="low / medium / high")
    travel_with: str | None = Field(default=None, description="solo / date / family / friends / business")
    updated_at: datetime | None = None

    @field_validator(
        "activities",
        "place_types",
        "food_preferences",
        "food_restrictions",
        "places_to_avoid",
        "personality_traits",
    )
    @classmethod
    def _dedupe(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        seen: list[str] = []
        for item in value:
            item = item.strip()
            if item and item not in seen:
                seen.append(item)
        return seen


class ProfileUpdate(BaseModel):
    """Body of ``PUT /profiles/{user_id}``; the user id comes from the path."""

    first_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    age_group: str | None = None
    activities: list[str] | None = None
    place_types: list[str] | None = None
    food_preferences: list[str] | None = None
    food_restrictions: list[str] | None = None
    places_to_avoid: list[str] | None = None
    personality_traits: list[str] | None = None
    trip_style: str | None = None
    budget_level: str | None = None
    travel_with: str | None = None

    @field_validator("budget_level")
    @classmethod
    def _check_budget(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return value
        tier = normalize_term(value)
        if tier not in BUDGET_TIERS:
            raise ValueError(f"budget_level must be one of: {', '.join(BUDGET_TIERS)}")
        return tier


class FieldSuggestion(BaseModel):
    field: str
    section: str
    weight: int
    reason: str
    deep_link: str


class ProfileScoreResult(BaseModel):
    total_score: int = Field(..., ge=0, le=100)
    section_scores: dict[str, int]
    completed_fields: list[str]
    missing_fields: list[str]
    is_complete: bool
    next_suggestion: FieldSuggestion | None = None


class CompletionMessage(BaseModel):
    title: str
    description: str
    button_text: str

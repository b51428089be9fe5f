from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any

from .models import Review, ReviewCreate

_reviews: list[Review] = []


def _sentiment_for(average: float) -> str:
    if average >= 4.0:
        return "positive"
    if average <= 2.0:
        return "negative"
    return "neutral"


def record_review(body: ReviewCreate) -> Review:
    data = body.model_dump()
    if data["sentiment"] is None:
        data["sentiment"] = _sentiment_for(sum(body.ratings.values()) / len(body.ratings))
    review = Review(id=uuid.uuid4().hex, created_at=datetime.now(timezone.utc), **data)
    _reviews.append(review)
    return review


def get_reviews(place_id: str | None = None) -> list[Review]:
    if place_id is None:
        return list(_reviews)
    return [r for r in _reviews if r.place_id == place_id]


def review_counts() -> dict[str, int]:
    """Number of reviews written by each user."""
    counts: dict[str, int] = defaultdict(int)
    for r in _reviews:
        counts[r.user_id] += 1
    return dict(counts)


def place_aggregates() -> dict[str, dict[str, Any]]:
    """Per place: average rating, review count and the union of review tags."""
    ratings: dict[str, list[float]] = defaultdict(list)
    tags: dict[str, set[str]] = defaultdict(set)
    for r in _reviews:
        ratings[r.place_id].append(r.average_rating)
        tags[r.place_id].update(r.tags)
    return {
        place_id: {
            "average_rating": round(sum(values) / len(values), 1),
            "review_count": len(values),
            "tags": sorted(tags[place_id]),
        }
        for place_id, values in ratings.items()
    }


def clear_reviews() -> None:
    _reviews.clear()

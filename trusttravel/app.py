from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import REVIEW, get_events, record_event
from .catalog.cache import get_cache_stats, invalidate
from .catalog.data_store import add_place, get_place, list_areas
from .profiles.models import (
    CompletionMessage,
    FieldSuggestion,
    ProfileScoreResult,
    ProfileUpdate,
    UserProfile,
)
from .profiles.scoring import completion_message, score, should_show_banner, suggest_next_field
from .profiles.store import get_profile, save_profile
from .recommendations.engine import InvalidRequest
from .recommendations.models import (
    Place,
    PlaceCreate,
    ProfileRecommendationQuery,
    RecommendationQuery,
    RecommendationResponse,
)
from .recommendations.service import ProfileNotFound, get_profile_recommendations, get_recommendations
from .recommendations.vocabulary import (
    BUDGET_TIERS,
    EXPERIENCE_TAGS,
    PLACE_CATEGORIES,
    SPECIAL_NEEDS,
    TRAVEL_TYPES,
    rating_categories_for,
    review_flow,
)
from .reviews.models import Review, ReviewCreate, ReviewResponse
from .reviews.store import get_reviews, record_review
from .social.models import ConnectionRequest
from .social.store import AlreadyConnected, connect, connections_of, disconnect, mutual_status

logger = logging.getLogger(__name__)

app = FastAPI(title="TrustTravel Recommendation API", version="1.0.0")


def _place_or_404(place_id: str) -> Place:
    place = get_place(place_id)
    if place is None:
        raise HTTPException(status_code=404, detail="Place not found")
    return place


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "areas": list_areas(),
        "categories": list(PLACE_CATEGORIES),
        "experience_tags": list(EXPERIENCE_TAGS),
        "travel_types": list(TRAVEL_TYPES),
        "special_needs": list(SPECIAL_NEEDS),
        "budget_tiers": list(BUDGET_TIERS),
    }


# ── Recommendations ──────────────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(body: RecommendationQuery) -> RecommendationResponse:
    try:
        return get_recommendations(body)
    except InvalidRequest as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/recommendations/profile", response_model=RecommendationResponse)
def profile_recommendations(body: ProfileRecommendationQuery) -> RecommendationResponse:
    try:
        return get_profile_recommendations(body)
    except ProfileNotFound as exc:
        raise HTTPException(status_code=404, detail="Profile not found") from exc
    except InvalidRequest as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# ── Profiles ─────────────────────────────────────────────────────────────


@app.get("/profiles/{user_id}", response_model=UserProfile)
def read_profile(user_id: str) -> UserProfile:
    profile = get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@app.put("/profiles/{user_id}", response_model=UserProfile)
def write_profile(user_id: str, body: ProfileUpdate) -> UserProfile:
    return save_profile(user_id, body)


@app.get("/profiles/{user_id}/score")
def profile_score(user_id: str) -> dict:
    # A user without a profile scores 0 rather than 404.
    profile = get_profile(user_id)
    result: ProfileScoreResult = score(profile)
    message: CompletionMessage = completion_message(profile)
    return {
        **result.model_dump(),
        "show_banner": should_show_banner(profile),
        "message": message.model_dump(),
    }


@app.get("/profiles/{user_id}/next-field", response_model=FieldSuggestion | None)
def profile_next_field(user_id: str) -> FieldSuggestion | None:
    return suggest_next_field(get_profile(user_id))


# ── Places ───────────────────────────────────────────────────────────────


@app.post("/places", response_model=Place, status_code=201)
def create_place(body: PlaceCreate) -> Place:
    try:
        return add_place(body)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/places/{place_id}", response_model=Place)
def read_place(place_id: str) -> Place:
    return _place_or_404(place_id)


@app.get("/places/{place_id}/review-flow")
def place_review_flow(place_id: str) -> dict:
    place = _place_or_404(place_id)
    return {"place_id": place.id, "category": place.category, **review_flow(place.category)}


@app.get("/places/{place_id}/reviews", response_model=list[Review])
def place_reviews(place_id: str) -> list[Review]:
    _place_or_404(place_id)
    return get_reviews(place_id)


# ── Reviews ──────────────────────────────────────────────────────────────


@app.post("/reviews", response_model=ReviewResponse, status_code=201)
def submit_review(body: ReviewCreate) -> ReviewResponse:
    place = _place_or_404(body.place_id)

    allowed = set(rating_categories_for(place.category))
    inapplicable = sorted(set(body.ratings).difference(allowed))
    if inapplicable:
        raise HTTPException(
            status_code=422,
            detail=f"Rating categories not applicable to a {place.category}: {', '.join(inapplicable)}",
        )

    review = record_review(body)
    # Aggregates feed candidate slices and the trust graph
    invalidate()
    record_event(REVIEW, {"place_id": place.id, "user_id": body.user_id, "sentiment": review.sentiment})
    logger.info("Review %s recorded for place %s", review.id, place.id)

    return ReviewResponse(
        status="recorded",
        review_id=review.id,
        total_reviews=len(get_reviews(place.id)),
    )


# ── Trust connections ────────────────────────────────────────────────────


@app.post("/connections", status_code=201)
def create_connection(body: ConnectionRequest) -> dict:
    try:
        connect(body.source_user, body.target_user, body.trust_level)
    except AlreadyConnected as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"status": "connected", **mutual_status(body.source_user, body.target_user)}


@app.delete("/connections")
def delete_connection(source_user: str, target_user: str) -> dict:
    if not disconnect(source_user, target_user):
        raise HTTPException(status_code=404, detail="Connection not found")
    return {"status": "disconnected"}


@app.get("/connections/{user_id}")
def list_connections(user_id: str) -> dict:
    links = connections_of(user_id)
    mutual = sorted(set(links["trusts"]) & set(links["trusted_by"]))
    return {"user_id": user_id, **links, "mutual": mutual}


# ── Operations ───────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()

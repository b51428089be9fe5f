from __future__ import annotations

import logging
import time
from typing import Any

from ..analytics.store import PROFILE_SEARCH, SEARCH, record_event
from ..catalog.data_store import get_candidates
from ..llm.groq_client import explain_recommendations, template_reason
from ..profiles.store import get_profile
from ..social.store import load_graph
from .engine import ANONYMOUS, Requester, WithUser, recommend
from .models import (
    ProfileRecommendationQuery,
    ProfileRequest,
    RecommendationQuery,
    RecommendationResponse,
    RecommendedPlace,
)

logger = logging.getLogger(__name__)


class ProfileNotFound(LookupError):
    pass


def _requester(user_id: str | None) -> Requester:
    if not user_id:
        return ANONYMOUS
    return WithUser(user_id=user_id, graph=load_graph(user_id))


def _with_reasons(items: list[RecommendedPlace], preferences: dict[str, Any]) -> list[RecommendedPlace]:
    """Attach one-line reasons; order is never touched."""
    llm_reasons = explain_recommendations(
        preferences,
        [
            {
                "id": item.place.id,
                "name": item.place.name,
                "category": item.place.category,
                "budget": item.place.budget,
                "matched_tags": item.matched_tags,
                "trusted_reviewers": item.trusted_reviewers,
            }
            for item in items
        ],
    )
    return [
        item.model_copy(update={
            "reason": llm_reasons.get(item.place.id)
            or template_reason(item.matched_tags, item.trusted_reviewers),
        })
        for item in items
    ]


def get_recommendations(query: RecommendationQuery) -> RecommendationResponse:
    """Rank places for a travel plan. ``InvalidRequest`` propagates to the caller."""
    start_time = time.time()
    plan = query.travel_plan

    candidates = get_candidates(plan.destination.area, plan.categories) if plan.destination.area else []
    requester = _requester(query.user_id)
    ranked = recommend(plan, candidates, requester=requester, limit=query.limit)

    items = _with_reasons(ranked, {
        "area": plan.destination.area,
        "travel_type": plan.travel_type,
        "experience_tags": plan.experience_tags,
        "special_needs": plan.special_needs,
        "budget": plan.budget,
        "when": "right now" if plan.dates.type == "now" else plan.dates.start_date,
    })
    social = isinstance(requester, WithUser)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event(SEARCH, {
        "area": plan.destination.area,
        "travel_type": plan.travel_type,
        "experience_tags": plan.experience_tags,
        "special_needs": plan.special_needs,
        "date_type": plan.dates.type,
        "social_bias": social,
        "total_candidates": len(candidates),
        "results_returned": len(items),
        "response_time_ms": elapsed_ms,
    })
    logger.info(
        "Ranked %d of %d candidates in %s (%.1f ms)",
        len(items),
        len(candidates),
        plan.destination.area,
        elapsed_ms,
    )

    return RecommendationResponse(
        recommendations=items,
        total_candidates=len(candidates),
        social_bias_enabled=social,
    )


def get_profile_recommendations(query: ProfileRecommendationQuery) -> RecommendationResponse:
    """Rank places in an area from the user's stored profile instead of a plan."""
    start_time = time.time()
    profile = get_profile(query.user_id)
    if profile is None:
        raise ProfileNotFound(query.user_id)

    request = ProfileRequest(profile=profile, area=query.area, categories=query.categories)
    candidates = get_candidates(query.area, query.categories)
    requester = _requester(query.user_id if query.use_social else None)
    ranked = recommend(request, candidates, requester=requester, limit=query.limit)

    items = _with_reasons(ranked, {
        "area": query.area,
        "travel_type": profile.travel_with,
        "experience_tags": (profile.activities or []) + (profile.place_types or []),
        "budget": profile.budget_level,
    })
    social = isinstance(requester, WithUser)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event(PROFILE_SEARCH, {
        "area": query.area,
        "travel_type": profile.travel_with,
        "social_bias": social,
        "total_candidates": len(candidates),
        "results_returned": len(items),
        "response_time_ms": elapsed_ms,
    })

    return RecommendationResponse(
        recommendations=items,
        total_candidates=len(candidates),
        social_bias_enabled=social,
    )

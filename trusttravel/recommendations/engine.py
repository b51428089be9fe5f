"""
Recommendation engine.

Ranks an already-fetched list of candidate places against a travel plan (or a
long-term profile). Pure computation: no storage, network or logging; the
same inputs always produce the same ranked output.

Pipeline: hard filters -> tag/category score -> timing term ("now" plans)
-> review quality (matched places only) -> bounded social bonus
(identified requesters only) -> rank by (score desc, place id).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from ..social.graph import SocialGraph
from .config import DEFAULT_RECOMMENDER_CONFIG, RecommenderConfig
from .models import Place, ProfileRequest, RecommendedPlace, ScoreBreakdown, TravelPlan
from .timing import is_open_at
from .vocabulary import (
    BUDGET_RANK,
    DESTINATION_AREAS,
    EXPERIENCE_TAGS,
    GATING_NEEDS,
    PLACE_CATEGORIES,
    SPECIAL_NEEDS,
    TAG_WEIGHTS,
    TRAVEL_TYPE_CONTEXT,
    normalize_term,
)


class InvalidRequest(ValueError):
    """The plan or profile handed to the engine cannot be ranked against."""


@dataclass(frozen=True)
class Anonymous:
    """Requester without identity: social bias is skipped entirely."""


@dataclass(frozen=True)
class WithUser:
    user_id: str
    graph: SocialGraph


Requester = Union[Anonymous, WithUser]

ANONYMOUS = Anonymous()

_VEGETARIAN_RESTRICTIONS = frozenset({"vegetarian", "vegan"})


@dataclass(frozen=True)
class _Criteria:
    area: str
    desired_tags: frozenset[str]
    categories: frozenset[str]
    budget_ceiling: str | None
    needs: frozenset[str]
    avoid_categories: frozenset[str]
    now: datetime | None


# ---------------------------------------------------------------------------
# Request normalisation
# ---------------------------------------------------------------------------


def _check_area(area: str | None) -> str:
    if not area:
        raise InvalidRequest("a destination area is required")
    if area not in DESTINATION_AREAS:
        raise InvalidRequest(f"unknown destination area: {area}")
    return area


def _check_categories(categories: list[str] | None) -> frozenset[str]:
    values = frozenset(categories or ())
    unknown = sorted(values.difference(PLACE_CATEGORIES))
    if unknown:
        raise InvalidRequest(f"unknown categories: {', '.join(unknown)}")
    return values


def _criteria_from_plan(plan: TravelPlan) -> _Criteria:
    area = _check_area(plan.destination.area)

    if not plan.travel_type:
        raise InvalidRequest("a travel type is required")
    if plan.travel_type not in TRAVEL_TYPE_CONTEXT:
        raise InvalidRequest(f"unknown travel type: {plan.travel_type}")

    unknown_tags = sorted(set(plan.experience_tags).difference(EXPERIENCE_TAGS))
    if unknown_tags:
        raise InvalidRequest(f"unknown experience tags: {', '.join(unknown_tags)}")

    unknown_needs = sorted(set(plan.special_needs).difference(SPECIAL_NEEDS))
    if unknown_needs:
        raise InvalidRequest(f"unknown special needs: {', '.join(unknown_needs)}")

    if plan.budget is not None and plan.budget not in BUDGET_RANK:
        raise InvalidRequest(f"unknown budget tier: {plan.budget}")

    categories = _check_categories(plan.categories)
    if not plan.experience_tags and not categories:
        raise InvalidRequest("at least one experience tag or category is required")

    desired = frozenset(plan.experience_tags) | frozenset(TRAVEL_TYPE_CONTEXT[plan.travel_type])
    return _Criteria(
        area=area,
        desired_tags=desired,
        categories=categories,
        budget_ceiling=plan.budget,
        needs=frozenset(plan.special_needs),
        avoid_categories=frozenset(),
        now=plan.dates.reference_time if plan.dates.type == "now" else None,
    )


def _criteria_from_profile(request: ProfileRequest) -> _Criteria:
    area = _check_area(request.area)
    categories = _check_categories(request.categories)
    profile = request.profile

    terms: list[str] = []
    for values in (
        profile.activities,
        profile.place_types,
        profile.personality_traits,
        profile.food_preferences,
    ):
        terms.extend(normalize_term(v) for v in values or ())
    tags = {t for t in terms if t in TAG_WEIGHTS}

    budget = normalize_term(profile.budget_level or "") or None
    if budget is not None and budget not in BUDGET_RANK:
        raise InvalidRequest(f"unknown budget tier in profile: {profile.budget_level}")
    if budget == "low":
        tags.add("budget-friendly")
    elif budget == "high":
        tags.add("luxury")

    if not tags and not categories:
        raise InvalidRequest("the profile yields no experience tags; pass categories instead")

    travel_with = normalize_term(profile.travel_with or "")
    tags.update(TRAVEL_TYPE_CONTEXT.get(travel_with, ()))

    restrictions = {normalize_term(r) for r in profile.food_restrictions or ()}
    needs = frozenset({"vegetarian"}) if restrictions & _VEGETARIAN_RESTRICTIONS else frozenset()
    avoid = frozenset(normalize_term(p) for p in profile.places_to_avoid or ()) & frozenset(PLACE_CATEGORIES)

    return _Criteria(
        area=area,
        desired_tags=frozenset(tags),
        categories=categories,
        budget_ceiling=budget,
        needs=needs,
        avoid_categories=avoid,
        now=None,
    )


def _criteria(request: TravelPlan | ProfileRequest) -> _Criteria:
    if isinstance(request, TravelPlan):
        return _criteria_from_plan(request)
    if isinstance(request, ProfileRequest):
        return _criteria_from_profile(request)
    raise InvalidRequest(f"unsupported request type: {type(request).__name__}")


# ---------------------------------------------------------------------------
# Scoring steps
# ---------------------------------------------------------------------------


def _passes_hard_filters(place: Place, criteria: _Criteria) -> bool:
    if criteria.budget_ceiling is not None:
        if BUDGET_RANK[place.budget] > BUDGET_RANK[criteria.budget_ceiling]:
            return False

    if place.category in criteria.avoid_categories:
        return False

    for need in criteria.needs:
        if need not in GATING_NEEDS:
            continue
        scope = GATING_NEEDS[need]
        if scope is not None and place.category not in scope:
            continue
        if need not in place.supports:
            return False

    return True


def _matched_tags(place: Place, desired: frozenset[str]) -> list[str]:
    matched = {t for t in place.tags if t in desired}
    return sorted(matched, key=lambda t: (-TAG_WEIGHTS[t], t))


def _max_base_score(criteria: _Criteria, config: RecommenderConfig) -> float:
    bonus = config.category_bonus if criteria.categories else 0.0
    return sum(TAG_WEIGHTS[t] for t in criteria.desired_tags) + bonus


# Popularity outweighs raw rating quality 20:15.
_POPULARITY_SHARE = 0.20 / 0.35
_QUALITY_SHARE = 0.15 / 0.35


def _popularity(place: Place, config: RecommenderConfig) -> float:
    if place.review_count < config.popular_review_count or place.average_rating is None:
        return 0.0
    if place.average_rating < config.popularity_rating_floor:
        return 0.1
    volume = min(place.review_count / config.full_popularity_reviews, 1.0)
    boost = 0.2 if place.average_rating >= 4.0 else 0.0
    return min(volume + boost, 1.0)


def _quality_bonus(place: Place, config: RecommenderConfig) -> float:
    """Bounded review signal in [0, quality_weight]; unreviewed places get 0."""
    if not place.review_count or place.average_rating is None:
        return 0.0
    quality = place.average_rating / 5.0
    return config.quality_weight * (
        _POPULARITY_SHARE * _popularity(place, config) + _QUALITY_SHARE * quality
    )


def _social_bonus(
    place: Place,
    connections: dict[str, float],
    graph: SocialGraph,
    cap: float,
    config: RecommenderConfig,
) -> tuple[float, list[str]]:
    raw = 0.0
    reviewers: set[str] = set()
    for endorsement in graph.endorsements_for(place.id):
        strength = connections.get(endorsement.user_id)
        if strength is None:
            continue
        reviewers.add(endorsement.user_id)
        reviews = graph.review_counts.get(endorsement.user_id, 0)
        credibility = min(1.0, reviews / config.credible_review_count)
        raw += strength * endorsement.score * credibility
    return min(cap, config.social_weight * raw), sorted(reviewers)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def recommend(
    request: TravelPlan | ProfileRequest,
    candidates: list[Place],
    requester: Requester = ANONYMOUS,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
    limit: int | None = None,
) -> list[RecommendedPlace]:
    """Rank *candidates* for *request*.

    Raises ``InvalidRequest`` for malformed input; an empty candidate list or
    a fully filtered one yields ``[]``.
    """
    criteria = _criteria(request)
    if limit is not None and limit < 1:
        raise InvalidRequest("limit must be positive")
    max_results = limit or config.max_results

    social: tuple[dict[str, float], SocialGraph, float] | None = None
    if isinstance(requester, WithUser):
        cap = config.social_cap_fraction * _max_base_score(criteria, config)
        social = (requester.graph.connections_of(requester.user_id), requester.graph, cap)

    scored: list[tuple[float, str, RecommendedPlace]] = []
    for place in candidates:
        if not _passes_hard_filters(place, criteria):
            continue

        matched = _matched_tags(place, criteria.desired_tags)
        tag_score = sum(TAG_WEIGHTS[t] for t in matched)
        category_bonus = config.category_bonus if place.category in criteria.categories else 0.0
        timing_bonus = 0.0
        if criteria.now is not None and is_open_at(place, criteria.now):
            timing_bonus = config.timing_bonus

        quality_bonus = _quality_bonus(place, config) if matched else 0.0

        social_bonus = 0.0
        trusted: list[str] = []
        if social is not None and matched:
            connections, graph, cap = social
            social_bonus, trusted = _social_bonus(place, connections, graph, cap, config)

        total = tag_score + category_bonus + timing_bonus + quality_bonus + social_bonus
        item = RecommendedPlace(
            place=place,
            score=round(total, 4),
            matched_tags=matched,
            breakdown=ScoreBreakdown(
                tag_score=round(tag_score, 4),
                category_bonus=category_bonus,
                timing_bonus=timing_bonus,
                social_bonus=round(social_bonus, 4),
                quality_bonus=round(quality_bonus, 4),
            ),
            trusted_reviewers=trusted,
        )
        scored.append((total, place.id, item))

    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [item for _, _, item in scored[:max_results]]

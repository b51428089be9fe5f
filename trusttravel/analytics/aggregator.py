from __future__ import annotations

from collections import Counter
from typing import Any

from ..reviews.store import get_reviews
from .store import PROFILE_SEARCH, SEARCH


def _rate(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] in (SEARCH, PROFILE_SEARCH)]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top areas
    area_counter: Counter[str] = Counter()
    for s in searches:
        area_counter[s.get("area") or "unknown"] += 1
    top_areas = [{"name": n, "count": c} for n, c in area_counter.most_common(10)]

    # Top experience tags (plan searches only)
    tag_counter: Counter[str] = Counter()
    for s in searches:
        for t in s.get("experience_tags", []) or []:
            tag_counter[t] += 1
    top_tags = [{"name": n, "count": c} for n, c in tag_counter.most_common(10)]

    # Travel type usage
    travel_types = Counter(s["travel_type"] for s in searches if s.get("travel_type"))

    social = sum(1 for s in searches if s.get("social_bias"))
    empty = sum(1 for s in searches if s.get("results_returned", 0) == 0)
    now_plans = sum(1 for s in searches if s.get("date_type") == "now")

    # Review summary
    reviews = get_reviews()
    sentiments = Counter(r.sentiment for r in reviews)

    return {
        "total_searches": total,
        "profile_searches": sum(1 for s in searches if s["type"] == PROFILE_SEARCH),
        "avg_response_time_ms": avg_time,
        "top_areas": top_areas,
        "top_experience_tags": top_tags,
        "travel_type_usage": dict(travel_types),
        "social_bias_rate": _rate(social, total),
        "empty_result_rate": _rate(empty, total),
        "now_plan_rate": _rate(now_plans, total),
        "review_summary": {
            "total": len(reviews),
            "positive": sentiments.get("positive", 0),
            "neutral": sentiments.get("neutral", 0),
            "negative": sentiments.get("negative", 0),
        },
    }

from __future__ import annotations

from fastapi.testclient import TestClient

from trusttravel.analytics.aggregator import compute_analytics
from trusttravel.analytics.store import clear_events, get_events, record_event
from trusttravel.app import app
from trusttravel.reviews.store import clear_reviews

client = TestClient(app)

PLAN = {
    "destination": {"area": "trento-city"},
    "travel_type": "date",
    "experience_tags": ["romantic"],
}


def test_analytics_returns_empty_initially():
    clear_events()
    clear_reviews()
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_searches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["review_summary"]["total"] == 0


def test_analytics_tracks_search():
    clear_events()
    client.post("/recommendations", json={"travel_plan": PLAN})
    body = client.get("/analytics").json()
    assert body["total_searches"] == 1
    assert body["avg_response_time_ms"] >= 0
    assert any(a["name"] == "trento-city" for a in body["top_areas"])
    assert body["top_experience_tags"] == [{"name": "romantic", "count": 1}]
    assert body["travel_type_usage"] == {"date": 1}


def test_analytics_ignores_rejected_requests():
    clear_events()
    client.post("/recommendations", json={"travel_plan": {**PLAN, "travel_type": None}})

    assert get_events() == []


def test_analytics_rates():
    clear_events()
    client.post("/recommendations", json={"travel_plan": PLAN, "user_id": "anna"})
    client.post("/recommendations", json={"travel_plan": {**PLAN, "dates": {"type": "now"}}})
    client.post("/recommendations", json={"travel_plan": {
        **PLAN,
        "destination": {"area": "nature-hike"},
        "special_needs": ["accessibility"],
    }})
    body = client.get("/analytics").json()

    assert body["total_searches"] == 3
    assert body["social_bias_rate"] == 33.3
    assert body["empty_result_rate"] == 33.3
    assert body["now_plan_rate"] == 33.3


def test_compute_analytics_counts_profile_searches():
    clear_reviews()
    events = [
        {"type": "search", "area": "nature-easy", "results_returned": 2, "response_time_ms": 4.0},
        {"type": "profile_search", "area": "nature-easy", "results_returned": 0, "response_time_ms": 2.0},
        {"type": "review", "place_id": "ne-001"},
    ]

    result = compute_analytics(events)

    assert result["total_searches"] == 2
    assert result["profile_searches"] == 1
    assert result["avg_response_time_ms"] == 3.0
    assert result["top_areas"] == [{"name": "nature-easy", "count": 2}]
    assert result["empty_result_rate"] == 50.0


def test_record_event_filters_by_type():
    clear_events()
    record_event("search", {"area": "trento-city"})
    record_event("review", {"place_id": "trn-001"})

    assert len(get_events()) == 2
    assert [e["area"] for e in get_events("search")] == ["trento-city"]

from unittest.mock import patch

from fastapi.testclient import TestClient

from trusttravel.app import app
from trusttravel.catalog.cache import clear_cache
from trusttravel.catalog.data_store import reset_catalog
from trusttravel.reviews.store import clear_reviews
from trusttravel.social.store import clear_links

client = TestClient(app)


def _reset():
    clear_reviews()
    clear_links()
    reset_catalog()
    clear_cache()


def _plan(**overrides) -> dict:
    plan = {
        "destination": {"area": "trento-city"},
        "dates": {"type": "custom"},
        "travel_type": "date",
        "experience_tags": ["exceptional-food"],
    }
    plan.update(overrides)
    return plan


def _ids(body: dict) -> list[str]:
    return [item["place"]["id"] for item in body["recommendations"]]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata_lists_vocabulary():
    body = client.get("/metadata").json()

    assert "trento-city" in {a["id"] for a in body["areas"]}
    assert "scenic-beauty" in body["experience_tags"]
    assert body["travel_types"] == ["solo", "date", "family", "friends", "business"]
    assert body["budget_tiers"] == ["low", "medium", "high"]


def test_recommendations_returns_ranked_places():
    _reset()
    resp = client.post("/recommendations", json={"travel_plan": _plan()})
    assert resp.status_code == 200
    body = resp.json()

    assert body["total_candidates"] == 13
    assert body["social_bias_enabled"] is False
    assert _ids(body)[:2] == ["trn-003", "trn-001"]
    assert body["recommendations"][0]["score"] == 8.0
    assert all(item["reason"] for item in body["recommendations"])


def test_recommendations_score_ordering():
    _reset()
    body = client.post("/recommendations", json={"travel_plan": _plan(), "limit": 10}).json()

    scores = [item["score"] for item in body["recommendations"]]
    assert len(scores) == 10
    assert scores == sorted(scores, reverse=True)


def test_recommendations_respect_budget_ceiling():
    _reset()
    body = client.post("/recommendations", json={"travel_plan": _plan(budget="medium")}).json()

    assert "trn-003" not in _ids(body)
    assert _ids(body)[0] == "trn-001"
    assert all(item["place"]["budget"] != "high" for item in body["recommendations"])


def test_recommendations_category_filter_narrows_candidates():
    _reset()
    body = client.post(
        "/recommendations",
        json={"travel_plan": _plan(experience_tags=[], categories=["museum"])},
    ).json()

    assert body["total_candidates"] == 2
    assert sorted(_ids(body)) == ["trn-006", "trn-007"]


def test_now_plan_boosts_open_places():
    _reset()
    plan = _plan(
        travel_type="friends",
        experience_tags=["authentic-local"],
        dates={"type": "now", "reference_time": "2026-06-12T22:00:00"},
    )
    body = client.post("/recommendations", json={"travel_plan": plan}).json()

    by_id = {item["place"]["id"]: item for item in body["recommendations"]}
    assert by_id["trn-004"]["breakdown"]["timing_bonus"] == 0.4
    assert by_id["trn-005"]["breakdown"]["timing_bonus"] == 0.0
    assert _ids(body)[0] == "trn-004"


def test_recommendations_rejects_unknown_area():
    _reset()
    resp = client.post("/recommendations", json={"travel_plan": _plan(destination={"area": "atlantis"})})

    assert resp.status_code == 400


def test_recommendations_rejects_missing_travel_type():
    _reset()
    resp = client.post("/recommendations", json={"travel_plan": _plan(travel_type=None)})

    assert resp.status_code == 400
    assert "travel type" in resp.json()["detail"]


def test_recommendations_validation_rejects_too_many_tags():
    resp = client.post(
        "/recommendations",
        json={"travel_plan": _plan(experience_tags=["romantic", "relaxing", "luxury", "intimate"])},
    )
    assert resp.status_code == 422


def test_recommendations_validation_rejects_bad_limit():
    resp = client.post("/recommendations", json={"travel_plan": _plan(), "limit": 0})
    assert resp.status_code == 422


def test_recommendations_empty_when_everything_filtered():
    _reset()
    plan = _plan(destination={"area": "nature-hike"}, special_needs=["accessibility"], experience_tags=["scenic-beauty"])
    resp = client.post("/recommendations", json={"travel_plan": plan})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total_candidates"] == 3
    assert body["recommendations"] == []


def test_trusted_reviews_lift_a_place():
    _reset()
    client.post("/connections", json={"source_user": "anna", "target_user": "marco"})
    client.post("/connections", json={"source_user": "marco", "target_user": "anna"})
    for _ in range(3):
        resp = client.post("/reviews", json={
            "place_id": "trn-001",
            "user_id": "marco",
            "ratings": {"food-quality": 5, "service": 5, "atmosphere": 5},
        })
        assert resp.status_code == 201

    anonymous = client.post("/recommendations", json={"travel_plan": _plan()}).json()
    personal = client.post("/recommendations", json={"travel_plan": _plan(), "user_id": "anna"}).json()

    assert _ids(anonymous)[:2] == ["trn-003", "trn-001"]
    assert _ids(personal)[:2] == ["trn-001", "trn-003"]
    assert personal["social_bias_enabled"] is True
    top = personal["recommendations"][0]
    assert top["trusted_reviewers"] == ["marco"]
    assert top["breakdown"]["social_bonus"] == 2.0
    assert top["place"]["review_count"] == 3


@patch("trusttravel.recommendations.service.explain_recommendations")
def test_llm_reasons_never_reorder(mock_explain):
    _reset()
    mock_explain.return_value = {"trn-001": "Cosy osteria right by the Duomo."}

    body = client.post("/recommendations", json={"travel_plan": _plan()}).json()

    assert _ids(body)[:2] == ["trn-003", "trn-001"]
    assert body["recommendations"][1]["reason"] == "Cosy osteria right by the Duomo."
    assert body["recommendations"][0]["reason"].startswith("Matches ")

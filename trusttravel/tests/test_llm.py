import json
from unittest.mock import MagicMock, patch

from trusttravel.llm.config import LLMConfig
from trusttravel.llm.groq_client import explain_recommendations, template_reason

SAMPLE_PLACES = [
    {"id": "trn-003", "name": "Ristorante Belvedere", "category": "restaurant", "budget": "high",
     "matched_tags": ["exceptional-food", "scenic-beauty", "romantic"], "trusted_reviewers": []},
    {"id": "trn-001", "name": "Osteria del Duomo", "category": "restaurant", "budget": "medium",
     "matched_tags": ["exceptional-food", "romantic"], "trusted_reviewers": ["marco"]},
]

SAMPLE_PREFERENCES = {
    "area": "trento-city",
    "travel_type": "date",
    "experience_tags": ["exceptional-food"],
}

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)


def _mock_groq_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@patch("trusttravel.llm.groq_client.Groq")
def test_explain_returns_reasons(mock_groq_cls):
    llm_response = json.dumps({
        "reasons": [
            {"id": "trn-001", "reason": "A friend you trust loved this osteria."},
            {"id": "trn-003", "reason": "Fine dining with a view for a special evening."},
        ]
    })
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(llm_response)

    result = explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=ENABLED_CONFIG)

    assert result == {
        "trn-001": "A friend you trust loved this osteria.",
        "trn-003": "Fine dining with a view for a special evening.",
    }


@patch("trusttravel.llm.groq_client.Groq")
def test_explain_drops_unknown_ids(mock_groq_cls):
    llm_response = json.dumps({
        "reasons": [
            {"id": "trn-999", "reason": "Invented place."},
            {"id": "trn-001", "reason": ""},
        ]
    })
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(llm_response)

    result = explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=ENABLED_CONFIG)

    assert result == {}


@patch("trusttravel.llm.groq_client.Groq")
def test_explain_prompt_lists_places(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response('{"reasons": []}')

    explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=ENABLED_CONFIG)

    kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
    user_message = kwargs["messages"][1]["content"]
    assert "Destination: trento-city" in user_message
    assert "| trn-001 | Osteria del Duomo |" in user_message
    assert kwargs["response_format"] == {"type": "json_object"}


@patch("trusttravel.llm.groq_client.Groq")
def test_explain_fallback_on_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    result = explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=ENABLED_CONFIG)

    assert result == {}


@patch("trusttravel.llm.groq_client.Groq")
def test_explain_fallback_on_bad_json(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("not valid json{{{")

    result = explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=ENABLED_CONFIG)

    assert result == {}


def test_explain_disabled():
    result = explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=DISABLED_CONFIG)

    assert result == {}


def test_explain_without_api_key():
    result = explain_recommendations(SAMPLE_PREFERENCES, SAMPLE_PLACES, config=LLMConfig(api_key=""))

    assert result == {}


def test_explain_empty_places():
    result = explain_recommendations(SAMPLE_PREFERENCES, [], config=ENABLED_CONFIG)

    assert result == {}


def test_template_reason():
    assert template_reason(["exceptional-food", "romantic"], []) == "Matches exceptional food, romantic."
    assert template_reason([], []) == "In your chosen area and category."
    assert template_reason(["romantic"], ["marco", "sara"]) == "Matches romantic; liked by 2 people you trust."

from __future__ import annotations

import json
import logging
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a travel assistant for the Trentino region. "
    "Given a traveller's plan and a list of places that have ALREADY been ranked, "
    "write a short, friendly one-sentence explanation of why each place fits the plan. "
    "Do not reorder, drop or invent places.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"reasons": [{"id": "<place_id>", "reason": "<one sentence>"}]}'
)


def _build_user_message(
    preferences: dict[str, Any],
    places: list[dict[str, Any]],
) -> str:
    lines = ["## Travel Plan"]
    if preferences.get("area"):
        lines.append(f"- Destination: {preferences['area']}")
    if preferences.get("travel_type"):
        lines.append(f"- Travelling: {preferences['travel_type']}")
    if preferences.get("experience_tags"):
        lines.append(f"- Looking for: {', '.join(preferences['experience_tags'])}")
    if preferences.get("special_needs"):
        lines.append(f"- Special needs: {', '.join(preferences['special_needs'])}")
    if preferences.get("budget"):
        lines.append(f"- Budget: {preferences['budget']}")
    if preferences.get("when"):
        lines.append(f"- When: {preferences['when']}")

    lines.append("\n## Ranked Places")
    lines.append("| ID | Name | Category | Budget | Matched tags | Trusted reviewers |")
    lines.append("|---|---|---|---|---|---|")
    for p in places:
        lines.append(
            f"| {p['id']} | {p['name']} | {p.get('category', '?')} | {p.get('budget', '?')} "
            f"| {', '.join(p.get('matched_tags', []))} | {len(p.get('trusted_reviewers', []))} |"
        )

    return "\n".join(lines)


def explain_recommendations(
    preferences: dict[str, Any],
    places: list[dict[str, Any]],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> dict[str, str]:
    """
    Ask the Groq LLM for a one-sentence reason per place.

    Returns a dict mapping place id -> reason string, restricted to the ids
    that were passed in. Returns empty dict on any failure (timeout, bad
    JSON, API error).
    """
    if not config.enabled or not config.api_key:
        return {}

    if not places:
        return {}

    places = places[: config.max_places]
    known_ids = {str(p["id"]) for p in places}

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": _build_user_message(preferences, places),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=0.3,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        parsed = json.loads(content)

        results: dict[str, str] = {}
        for item in parsed.get("reasons", []):
            pid = str(item.get("id", ""))
            reason = str(item.get("reason", "")).strip()
            if pid in known_ids and reason:
                results[pid] = reason

        return results

    except Exception:
        logger.warning("Groq LLM call failed, falling back to template reasons", exc_info=True)
        return {}


def template_reason(matched_tags: list[str], trusted_reviewers: list[str]) -> str:
    """Deterministic reason built from what the engine matched."""
    if matched_tags:
        shown = [t.replace("-", " ") for t in matched_tags[:3]]
        reason = "Matches " + ", ".join(shown)
    else:
        reason = "In your chosen area and category"
    if trusted_reviewers:
        n = len(trusted_reviewers)
        reason += f"; liked by {n} {'person' if n == 1 else 'people'} you trust"
    return reason + "."

"""
Profile completeness scoring.

Pure functions over a ``UserProfile``: no I/O, no state. The weight table
below is the only place field weights live; the score, the missing-field
list and the next-field suggestion all read from it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import CompletionMessage, FieldSuggestion, ProfileScoreResult, UserProfile


@dataclass(frozen=True)
class FieldRule:
    name: str
    weight: int
    step: int
    min_items: int | None = None  # None for scalar fields
    required: bool = False


@dataclass(frozen=True)
class Section:
    name: str
    reason: str
    fields: tuple[FieldRule, ...]

    @property
    def points(self) -> int:
        return sum(f.weight for f in self.fields)


# Declared in suggestion priority order.
SECTIONS: tuple[Section, ...] = (
    Section(
        name="basic_info",
        reason="Essential for personalized recommendations",
        fields=(
            FieldRule("first_name", 8, step=1, required=True),
            FieldRule("last_name", 8, step=1),
            FieldRule("gender", 7, step=1, required=True),
            FieldRule("age_group", 7, step=1, required=True),
        ),
    ),
    Section(
        name="preferences",
        reason="Core preferences for travel recommendations",
        fields=(
            FieldRule("activities", 13, step=2, min_items=2),
            FieldRule("place_types", 12, step=2, min_items=2),
        ),
    ),
    Section(
        name="food",
        reason="Important for practical travel planning",
        fields=(
            FieldRule("food_preferences", 8, step=3, min_items=1),
            FieldRule("food_restrictions", 6, step=4, min_items=0),
            FieldRule("places_to_avoid", 6, step=4, min_items=0),
        ),
    ),
    Section(
        name="personality",
        reason="Helps match your travel style",
        fields=(
            FieldRule("personality_traits", 8, step=5, min_items=1),
            FieldRule("trip_style", 7, step=5, required=True),
        ),
    ),
    Section(
        name="budget",
        reason="Useful for budget-appropriate suggestions",
        fields=(
            FieldRule("budget_level", 5, step=6, required=True),
            FieldRule("travel_with", 5, step=6),
        ),
    ),
)

SECTION_POINTS: dict[str, int] = {s.name: s.points for s in SECTIONS}
TOTAL_POINTS = sum(SECTION_POINTS.values())
if TOTAL_POINTS != 100:
    raise ValueError(f"profile field weights must sum to 100, got {TOTAL_POINTS}")

FIELD_RULES: dict[str, FieldRule] = {f.name: f for s in SECTIONS for f in s.fields}
REQUIRED_FIELDS: tuple[str, ...] = tuple(name for name, rule in FIELD_RULES.items() if rule.required)

BANNER_THRESHOLD = 80


def is_field_complete(rule: FieldRule, value: Any) -> bool:
    """Apply the completeness predicate of *rule* to a raw field value."""
    if rule.min_items is None:
        return isinstance(value, str) and bool(value.strip())
    return isinstance(value, list) and len(value) >= rule.min_items


def _field_value(profile: UserProfile | None, name: str) -> Any:
    if profile is None:
        return None
    return getattr(profile, name, None)


def _missing_rules(profile: UserProfile | None) -> list[tuple[Section, FieldRule]]:
    return [
        (section, rule)
        for section in SECTIONS
        for rule in section.fields
        if not is_field_complete(rule, _field_value(profile, rule.name))
    ]


def suggest_next_field(profile: UserProfile | None) -> FieldSuggestion | None:
    """Return the incomplete field worth the most points, or ``None``.

    Equal weights resolve by section order, then by declared field order.
    """
    best: tuple[Section, FieldRule] | None = None
    for section, rule in _missing_rules(profile):
        if best is None or rule.weight > best[1].weight:
            best = (section, rule)

    if best is None:
        return None

    section, rule = best
    return FieldSuggestion(
        field=rule.name,
        section=section.name,
        weight=rule.weight,
        reason=section.reason,
        deep_link=f"/profile?step={rule.step}#{rule.name}",
    )


def score(profile: UserProfile | None) -> ProfileScoreResult:
    """Compute the weighted completeness of *profile* (0-100)."""
    section_scores: dict[str, int] = {}
    completed: list[str] = []
    missing: list[str] = []

    for section in SECTIONS:
        earned = 0
        for rule in section.fields:
            if is_field_complete(rule, _field_value(profile, rule.name)):
                earned += rule.weight
                completed.append(rule.name)
            else:
                missing.append(rule.name)
        section_scores[section.name] = earned

    is_complete = profile is not None and all(name in completed for name in REQUIRED_FIELDS)

    return ProfileScoreResult(
        total_score=sum(section_scores.values()),
        section_scores=section_scores,
        completed_fields=completed,
        missing_fields=missing,
        is_complete=is_complete,
        next_suggestion=suggest_next_field(profile),
    )


def should_show_banner(profile: UserProfile | None) -> bool:
    if profile is None:
        return True
    result = score(profile)
    return result.total_score < BANNER_THRESHOLD or not result.is_complete


def completion_message(profile: UserProfile | None) -> CompletionMessage:
    """Pick the encouragement copy shown next to the completeness chip."""
    if profile is None:
        return CompletionMessage(
            title="Welcome! Let's set up your profile",
            description=(
                "Create your travel profile to get personalized recommendations "
                "and connect with fellow travelers."
            ),
            button_text="Get Started",
        )

    result = score(profile)
    pct = result.total_score
    missing = result.missing_fields

    if pct == 100:
        return CompletionMessage(
            title="Your profile looks amazing!",
            description="Consider adding more details to help travelers discover you better.",
            button_text="Enhance Profile",
        )
    if pct >= BANNER_THRESHOLD:
        return CompletionMessage(
            title=f"Almost there! {pct}% complete",
            description="Add a few more details to unlock the full TrustTravel experience.",
            button_text="Complete Profile",
        )

    shown = ", ".join(name.replace("_", " ") for name in missing[:2])
    extra = f" and {len(missing) - 2} more" if len(missing) > 2 else ""
    return CompletionMessage(
        title="Complete your profile for better matches",
        description=f"Missing: {shown}{extra}",
        button_text="Complete Profile",
    )

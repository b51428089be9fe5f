"""
Controlled vocabulary shared by places, reviews, plans and the engine.

Every category, experience tag, area and special need used anywhere in the
service is declared here. Do not introduce synonyms elsewhere.
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Place categories
# ---------------------------------------------------------------------------

FOOD_CATEGORIES: tuple[str, ...] = ("restaurant", "bar", "coffee-shop", "fast-food")

SERVICE_CATEGORIES: tuple[str, ...] = (
    "hotel",
    "hostel",
    "shopping",
    "museum",
    "club",
    "theater",
    "music-venue",
    "spa-wellness",
    "adventure-activity",
    "water-activity",
    "sports-facility",
    "attraction",
    "event-venue",
)

EXPERIENCE_CATEGORIES: tuple[str, ...] = (
    "park",
    "beach",
    "hiking-trail",
    "viewpoint",
    "religious-site",
    "historical-site",
    "transport-hub",
    "vacation-rental",
)

PLACE_CATEGORIES: tuple[str, ...] = FOOD_CATEGORIES + SERVICE_CATEGORIES + EXPERIENCE_CATEGORIES

OUTDOOR_CATEGORIES: frozenset[str] = frozenset({"park", "viewpoint", "hiking-trail", "beach"})

# ---------------------------------------------------------------------------
# Experience tags and their weights
# ---------------------------------------------------------------------------

SOCIAL_CONTEXT_TAGS = ("romantic", "family-friendly", "friends-group", "solo-friendly")
VALUE_TAGS = (
    "unique-architecture",
    "exceptional-food",
    "cultural-immersion",
    "scenic-beauty",
    "historical-significance",
)
ATMOSPHERE_TAGS = ("relaxing", "energetic", "intimate", "authentic-local")
PRACTICAL_TAGS = (
    "budget-friendly",
    "luxury",
    "crowd-level-low",
    "crowd-level-high",
    "quick-visit",
    "extended-stay",
)

EXPERIENCE_TAGS: tuple[str, ...] = SOCIAL_CONTEXT_TAGS + VALUE_TAGS + ATMOSPHERE_TAGS + PRACTICAL_TAGS

# What makes a place special outweighs who it suits, which outweighs how it feels.
TAG_WEIGHTS: dict[str, float] = {
    **{tag: 3.0 for tag in VALUE_TAGS},
    **{tag: 2.0 for tag in SOCIAL_CONTEXT_TAGS},
    **{tag: 1.5 for tag in ATMOSPHERE_TAGS},
    **{tag: 1.0 for tag in PRACTICAL_TAGS},
}

MIN_TAG_WEIGHT: float = min(TAG_WEIGHTS.values())

# ---------------------------------------------------------------------------
# Destinations, travel types, special needs, budgets
# ---------------------------------------------------------------------------

DESTINATION_CATEGORIES: dict[str, tuple[str, ...]] = {
    "trento-city": (
        "restaurant", "bar", "coffee-shop", "fast-food",
        "museum", "theater", "music-venue", "historical-site",
        "shopping", "hotel", "park", "hiking-trail", "viewpoint",
        "adventure-activity", "sports-facility", "spa-wellness",
    ),
    "historic-villages": (
        "historical-site", "religious-site", "museum",
        "restaurant", "coffee-shop", "hotel", "attraction",
    ),
    "nature-easy": ("park", "viewpoint", "beach", "hiking-trail", "coffee-shop", "restaurant"),
    "nature-hike": ("hiking-trail", "viewpoint", "adventure-activity", "park", "attraction"),
}

DESTINATION_AREAS: tuple[str, ...] = tuple(DESTINATION_CATEGORIES)

TRAVEL_TYPE_CONTEXT: dict[str, tuple[str, ...]] = {
    "solo": ("solo-friendly", "authentic-local", "cultural-immersion"),
    "date": ("romantic", "intimate", "scenic-beauty"),
    "family": ("family-friendly", "crowd-level-low", "budget-friendly"),
    "friends": ("friends-group", "energetic", "crowd-level-high"),
    "business": ("luxury", "quick-visit"),
}

TRAVEL_TYPES: tuple[str, ...] = tuple(TRAVEL_TYPE_CONTEXT)

SPECIAL_NEEDS: tuple[str, ...] = ("special-occasion", "vegetarian", "accessibility", "pets", "off-grid")

# need -> categories where a place must declare support; None means every category
GATING_NEEDS: dict[str, frozenset[str] | None] = {
    "accessibility": None,
    "pets": None,
    "vegetarian": frozenset(FOOD_CATEGORIES),
}

BUDGET_TIERS: tuple[str, ...] = ("low", "medium", "high")
BUDGET_RANK: dict[str, int] = {tier: i for i, tier in enumerate(BUDGET_TIERS)}

# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

REVIEW_CATEGORIES: tuple[str, ...] = ("overall", "atmosphere", "service", "food-quality")
REVIEW_SENTIMENTS: tuple[str, ...] = ("positive", "neutral", "negative")

_SUGGESTED_TAGS: dict[str, tuple[str, ...]] = {
    "restaurant": (
        "family-friendly", "romantic", "friends-group", "budget-friendly",
        "luxury", "exceptional-food", "intimate", "energetic",
    ),
    "bar": (
        "energetic", "friends-group", "romantic", "intimate",
        "authentic-local", "crowd-level-high", "extended-stay",
    ),
    "beach": (
        "relaxing", "scenic-beauty", "family-friendly", "friends-group",
        "crowd-level-high", "crowd-level-low", "extended-stay",
    ),
    "museum": (
        "historical-significance", "cultural-immersion", "family-friendly",
        "solo-friendly", "unique-architecture", "quick-visit",
    ),
}


def normalize_term(value: str) -> str:
    """Lower-case and hyphenate a free-form label ("Scenic Beauty" -> "scenic-beauty")."""
    return "-".join(value.strip().lower().replace("_", " ").split())


def rating_categories_for(category: str) -> list[str]:
    if category in FOOD_CATEGORIES:
        return ["food-quality", "service", "atmosphere"]
    if category in SERVICE_CATEGORIES:
        return ["overall", "service"]
    return ["overall"]


def review_flow(category: str) -> dict:
    """Describe what a review form should ask for a place of *category*."""
    asks_price = category in FOOD_CATEGORIES
    return {
        "rating_categories": rating_categories_for(category),
        "requires_price": asks_price,
        "price_label": "How much did you spend per person?" if asks_price else None,
        "suggested_tags": list(_SUGGESTED_TAGS.get(category, ())),
    }

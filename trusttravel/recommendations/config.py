from __future__ import annotations

from dataclasses import dataclass

from .vocabulary import MIN_TAG_WEIGHT


@dataclass(frozen=True)
class RecommenderConfig:
    max_results: int = 20
    category_bonus: float = 0.5
    timing_bonus: float = 0.4
    social_weight: float = 2.0
    social_cap_fraction: float = 0.3
    credible_review_count: int = 3
    # Review quality/popularity, only for places matching at least one tag
    quality_weight: float = 0.5
    popular_review_count: int = 2
    full_popularity_reviews: int = 20
    popularity_rating_floor: float = 3.5

    def __post_init__(self) -> None:
        # A place matching no tag must stay below any place matching one.
        if self.category_bonus + self.timing_bonus >= MIN_TAG_WEIGHT:
            raise ValueError(
                "category_bonus + timing_bonus must stay below the smallest tag weight "
                f"({MIN_TAG_WEIGHT})"
            )
        if not 0.0 <= self.quality_weight < MIN_TAG_WEIGHT:
            raise ValueError(f"quality_weight must be within [0, {MIN_TAG_WEIGHT})")
        if not 0.0 <= self.social_cap_fraction <= 1.0:
            raise ValueError("social_cap_fraction must be within [0, 1]")
        if min(self.max_results, self.credible_review_count, self.full_popularity_reviews) < 1:
            raise ValueError("max_results, credible_review_count and full_popularity_reviews must be positive")


DEFAULT_RECOMMENDER_CONFIG = RecommenderConfig()

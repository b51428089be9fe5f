from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pydantic import BaseModel, Field


class TrustEdge(BaseModel):
    """Undirected trust between two users; ``strength`` grows with mutuality."""

    user_a: str
    user_b: str
    strength: float = Field(..., ge=0.0, le=1.0)

    def other(self, user_id: str) -> str | None:
        if user_id == self.user_a:
            return self.user_b
        if user_id == self.user_b:
            return self.user_a
        return None


@dataclass(frozen=True)
class Endorsement:
    user_id: str
    score: float  # 0 (1-star) .. 1 (5-star)


@dataclass(frozen=True)
class SocialGraph:
    """Read-only snapshot of the trust graph around one requester."""

    edges: tuple[TrustEdge, ...] = ()
    endorsements: Mapping[str, tuple[Endorsement, ...]] = field(default_factory=dict)
    review_counts: Mapping[str, int] = field(default_factory=dict)

    def connections_of(self, user_id: str) -> dict[str, float]:
        """Map each connection of *user_id* to the strongest edge towards it."""
        result: dict[str, float] = {}
        for edge in self.edges:
            other = edge.other(user_id)
            if other is None or other == user_id:
                continue
            result[other] = max(result.get(other, 0.0), edge.strength)
        return result

    def endorsements_for(self, place_id: str) -> tuple[Endorsement, ...]:
        return tuple(self.endorsements.get(place_id, ()))

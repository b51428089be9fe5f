from __future__ import annotations

import logging
from collections import defaultdict

from ..reviews.store import get_reviews, review_counts
from .graph import Endorsement, SocialGraph, TrustEdge

logger = logging.getLogger(__name__)

# (source_user, target_user) -> trust level in (0, 1]
_links: dict[tuple[str, str], float] = {}


class AlreadyConnected(ValueError):
    pass


def connect(source_user: str, target_user: str, trust_level: float = 1.0) -> None:
    if source_user == target_user:
        raise ValueError("Cannot connect to yourself")
    if not 0.0 < trust_level <= 1.0:
        raise ValueError("trust_level must be within (0, 1]")
    if (source_user, target_user) in _links:
        raise AlreadyConnected("Already connected to this user")
    _links[(source_user, target_user)] = trust_level
    logger.info("Trust link %s -> %s (%.2f)", source_user, target_user, trust_level)


def disconnect(source_user: str, target_user: str) -> bool:
    return _links.pop((source_user, target_user), None) is not None


def is_connected(source_user: str, target_user: str) -> bool:
    return (source_user, target_user) in _links


def mutual_status(user_id: str, other_user: str) -> dict[str, bool]:
    outgoing = is_connected(user_id, other_user)
    incoming = is_connected(other_user, user_id)
    return {
        "i_connected_to_them": outgoing,
        "they_connected_to_me": incoming,
        "is_mutual": outgoing and incoming,
    }


def connections_of(user_id: str) -> dict[str, list[str]]:
    trusts = sorted(t for (s, t) in _links if s == user_id)
    trusted_by = sorted(s for (s, t) in _links if t == user_id)
    return {"trusts": trusts, "trusted_by": trusted_by}


def build_edges(user_id: str) -> tuple[TrustEdge, ...]:
    """Undirected edges around *user_id*; a one-way link counts half."""
    levels: dict[str, list[float]] = defaultdict(lambda: [0.0, 0.0])
    for (source, target), level in _links.items():
        if source == user_id:
            levels[target][0] = level
        elif target == user_id:
            levels[source][1] = level
    return tuple(
        TrustEdge(user_a=user_id, user_b=other, strength=(out + inc) / 2)
        for other, (out, inc) in sorted(levels.items())
    )


def load_graph(user_id: str) -> SocialGraph:
    """Snapshot the trust graph and the connections' reviews for *user_id*."""
    edges = build_edges(user_id)
    connected = {edge.other(user_id) for edge in edges}

    ratings: dict[tuple[str, str], list[float]] = defaultdict(list)
    for review in get_reviews():
        if review.user_id in connected:
            ratings[(review.place_id, review.user_id)].append(review.average_rating)

    endorsements: dict[str, list[Endorsement]] = defaultdict(list)
    for (place_id, reviewer), values in sorted(ratings.items()):
        average = sum(values) / len(values)
        endorsements[place_id].append(Endorsement(user_id=reviewer, score=(average - 1.0) / 4.0))

    logger.info(
        "Loaded trust graph for %s: %d connections, %d endorsed places",
        user_id,
        len(edges),
        len(endorsements),
    )
    return SocialGraph(
        edges=edges,
        endorsements={k: tuple(v) for k, v in endorsements.items()},
        review_counts=review_counts(),
    )


def clear_links() -> None:
    _links.clear()

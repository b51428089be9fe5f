from __future__ import annotations

import logging
from datetime import datetime, timezone

from .models import ProfileUpdate, UserProfile

logger = logging.getLogger(__name__)

_profiles: dict[str, UserProfile] = {}


def get_profile(user_id: str) -> UserProfile | None:
    return _profiles.get(user_id)


def save_profile(user_id: str, update: ProfileUpdate) -> UserProfile:
    """Replace the stored profile for *user_id*; concurrent writers: last one wins."""
    profile = UserProfile(
        user_id=user_id,
        updated_at=datetime.now(timezone.utc),
        **update.model_dump(),
    )
    _profiles[user_id] = profile
    logger.info("Saved profile for user %s", user_id)
    return profile


def clear_profiles() -> None:
    _profiles.clear()

from __future__ import annotations

from datetime import datetime

from .models import Place
from .vocabulary import OUTDOOR_CATEGORIES

# Typical hours used when a place declares none: [open, close) in local hours.
_CATEGORY_HOURS: dict[str, tuple[tuple[int, int], ...]] = {
    "coffee-shop": ((7, 21),),
    "restaurant": ((12, 16), (19, 24)),
    "bar": ((18, 24),),
    "museum": ((9, 19),),
    "theater": ((9, 19),),
    "shopping": ((9, 19),),
}


def _in_window(hour: int, open_hour: int, close_hour: int) -> bool:
    if open_hour == close_hour:
        return True
    if open_hour < close_hour:
        return open_hour <= hour < close_hour
    # wraps past midnight
    return hour >= open_hour or hour < close_hour


def is_open_at(place: Place, when: datetime) -> bool:
    """Whether *place* can be visited at *when* (local time)."""
    if place.opening_hours:
        windows = [(w.open_hour, w.close_hour) for w in place.opening_hours]
    elif place.category in OUTDOOR_CATEGORIES:
        return True
    else:
        windows = list(_CATEGORY_HOURS.get(place.category, ()))
    return any(_in_window(when.hour, o, c) for o, c in windows)

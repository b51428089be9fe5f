from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from .config import DEFAULT_CATALOG_CONFIG

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0


def _make_key(namespace: str, params: dict) -> str:
    normalized = json.dumps({"ns": namespace, **params}, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(namespace: str, params: dict, ttl: int = DEFAULT_CATALOG_CONFIG.cache_ttl) -> Any | None:
    global _hits, _misses
    key = _make_key(namespace, params)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(namespace: str, params: dict, value: Any) -> None:
    _cache[_make_key(namespace, params)] = {"value": value, "created_at": time.time()}


def invalidate() -> None:
    """Drop every entry but keep the hit/miss counters (catalog or reviews changed)."""
    _cache.clear()


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0

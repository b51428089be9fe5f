from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CatalogConfig:
    places_path: Path = Path(__file__).resolve().parent.parent / "data" / "places.csv"
    cache_ttl: int = 300  # seconds


DEFAULT_CATALOG_CONFIG = CatalogConfig()

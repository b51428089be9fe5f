from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

import pandas as pd

from ..recommendations.vocabulary import (
    DESTINATION_AREAS,
    EXPERIENCE_TAGS,
    PLACE_CATEGORIES,
    SPECIAL_NEEDS,
    normalize_term,
)
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "category",
    "area",
    "city",
    "budget",
    "tags",
    "supports",
    "opening_hours",
    "address",
    "latitude",
    "longitude",
    "description",
]

_BUDGET_LABELS = {
    "low": ("low", "free", "budget", "cheap", "$", "€", "1"),
    "medium": ("medium", "moderate", "mid", "mid-range", "$$", "€€", "2"),
    "high": ("high", "expensive", "luxury", "premium", "$$$", "$$$$", "€€€", "€€€€", "3", "4"),
}
_BUDGET_BY_LABEL = {label: tier for tier, labels in _BUDGET_LABELS.items() for label in labels}

# "9-18" or "9:00-18:00"; minutes must be :00
_HOURS_RE = re.compile(r"^(\d{1,2})(?::00)?-(\d{1,2})(?::00)?$")


def _normalize_budget(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "medium"
    return _BUDGET_BY_LABEL.get(normalize_term(str(value)), "medium")


def _as_terms(value: object) -> list[str]:
    """Accept a list or a comma-separated string; return normalized terms."""
    if isinstance(value, (list, tuple)):
        items = value
    elif isinstance(value, str):
        items = value.split(",")
    else:
        return []
    return [normalize_term(str(v)) for v in items if str(v).strip()]


def _filter_terms(value: object, allowed: tuple[str, ...]) -> str:
    kept = [t for t in dict.fromkeys(_as_terms(value)) if t in allowed]
    return ",".join(kept)


def _window(open_hour: object, close_hour: object) -> str | None:
    """Canonical ``"open-close"`` for whole hours within 0-24, else ``None``."""
    try:
        o, c = int(open_hour), int(close_hour)
    except (TypeError, ValueError):
        return None
    if not (0 <= o <= 24 and 0 <= c <= 24):
        return None
    return f"{o}-{c}"


def _normalize_hours(value: object) -> str:
    """Accept ``"9-18;19-23"``, ``"9:00-18:00"`` or a list of ``{"open": 9, "close": 18}`` windows.

    Windows that cannot be read as whole hours in 0-24 are dropped.
    """
    raw: list[tuple[object, object]] = []
    if isinstance(value, str):
        for chunk in value.replace(" ", "").split(";"):
            if not chunk:
                continue
            match = _HOURS_RE.match(chunk)
            raw.append(match.groups() if match else (chunk, None))
    elif isinstance(value, list):
        for w in value:
            if isinstance(w, dict):
                raw.append((w.get("open"), w.get("close")))
            else:
                raw.append((w, None))
    else:
        return ""

    windows = []
    for open_hour, close_hour in raw:
        window = _window(open_hour, close_hour)
        if window is None:
            logger.warning("Dropping unreadable opening window: %r", (open_hour, close_hour))
            continue
        windows.append(window)
    return ";".join(windows)


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Execute the place ingestion pipeline.

    Steps:
    - Load the raw JSON export.
    - Map raw fields into the canonical place schema, keeping only known
      categories and areas and vocabulary tags.
    - Persist cleaned data as CSV for the catalog.
    """

    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    df = pd.read_json(config.raw_path, orient="records")

    # Exports from different sources name the same field differently.
    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    def _column(candidates: List[str], default: object = "") -> pd.Series:
        col = _first_present(candidates)
        if col is None:
            return pd.Series([default] * len(df), index=df.index, dtype=object)
        return df[col]

    canonical = pd.DataFrame(index=df.index)
    canonical["name"] = _column(["name", "title", "place_name"]).fillna("").astype(str).str.strip()
    canonical["category"] = _column(["category", "type", "kind"]).fillna("").astype(str).map(normalize_term)
    canonical["area"] = _column(["area", "destination", "zone"]).fillna("").astype(str).map(normalize_term)
    canonical["city"] = _column(["city", "town", "municipality"], "Trento").fillna("Trento")
    canonical["budget"] = _column(["budget", "price_level", "price"], None).apply(_normalize_budget)
    canonical["tags"] = _column(["tags", "experience_tags"], None).apply(
        lambda v: _filter_terms(v, EXPERIENCE_TAGS)
    )
    canonical["supports"] = _column(["supports", "amenities", "special_needs"], None).apply(
        lambda v: _filter_terms(v, SPECIAL_NEEDS)
    )
    canonical["opening_hours"] = _column(["opening_hours", "hours"], None).apply(_normalize_hours)
    canonical["address"] = _column(["address", "street"])
    canonical["latitude"] = pd.to_numeric(_column(["latitude", "lat"], None), errors="coerce")
    canonical["longitude"] = pd.to_numeric(_column(["longitude", "lng", "lon"], None), errors="coerce")
    canonical["description"] = _column(["description", "summary"])

    valid = (
        canonical["name"].ne("")
        & canonical["category"].isin(PLACE_CATEGORIES)
        & canonical["area"].isin(DESTINATION_AREAS)
    )
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropping %d raw rows with no name or an unknown category/area", dropped)
    canonical = canonical.loc[valid].reset_index(drop=True)

    raw_ids = _first_present(["id", "place_id"])
    if raw_ids:
        canonical["id"] = df.loc[valid, raw_ids].astype(str).to_numpy()
    else:
        canonical["id"] = [f"{area[:3]}-{i + 1:03d}" for i, area in enumerate(canonical["area"])]

    # Ensure all expected columns exist and order them
    canonical = canonical[CANONICAL_COLUMNS]

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d places to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    path = run_ingestion()
    print(f"Ingestion complete. Catalog saved to: {path}")

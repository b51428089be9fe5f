from __future__ import annotations

import logging
import uuid
from pathlib import Path

import pandas as pd

from ..recommendations.models import OpeningWindow, Place, PlaceCreate
from ..recommendations.vocabulary import (
    DESTINATION_AREAS,
    DESTINATION_CATEGORIES,
    EXPERIENCE_TAGS,
    PLACE_CATEGORIES,
    SPECIAL_NEEDS,
)
from ..reviews.store import place_aggregates
from .cache import cache_get, cache_set, invalidate
from .config import DEFAULT_CATALOG_CONFIG

logger = logging.getLogger(__name__)

_df: pd.DataFrame | None = None
_places_path: Path = DEFAULT_CATALOG_CONFIG.places_path


def _split(value: object) -> list[str]:
    if not isinstance(value, str):
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def _parse_hours(value: object) -> list[dict]:
    """Parse ``"12-15;19-23"`` into opening windows."""
    if not isinstance(value, str):
        return []
    windows = []
    for chunk in value.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        open_hour, _, close_hour = chunk.partition("-")
        windows.append({"open_hour": int(open_hour), "close_hour": int(close_hour)})
    return windows


def _optional(value: object) -> object | None:
    return None if pd.isna(value) else value


def _load(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"id": str})

    # Pre-parse list columns once
    df["tags_list"] = df["tags"].apply(_split)
    df["supports_list"] = df["supports"].apply(_split)
    df["hours_list"] = df["opening_hours"].apply(_parse_hours)

    df["budget"] = df["budget"].fillna("medium").str.lower()
    df["city"] = df["city"].fillna("Trento")

    logger.info("Loaded %d places from %s", len(df), path)
    return df


def set_places_path(path: Path) -> None:
    """Point the catalog at another CSV; the next read reloads it."""
    global _places_path
    _places_path = Path(path)
    reset_catalog()


def reset_catalog() -> None:
    global _df
    _df = None
    invalidate()


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory place DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = _load(_places_path)
    return _df


def _row_to_place(row: pd.Series, aggregates: dict[str, dict]) -> Place:
    agg = aggregates.get(row["id"], {})
    tags = list(row["tags_list"])
    tags.extend(t for t in agg.get("tags", ()) if t not in tags)
    return Place(
        id=row["id"],
        name=row["name"],
        category=row["category"],
        area=row["area"],
        city=row["city"],
        budget=row["budget"],
        tags=tags,
        supports=list(row["supports_list"]),
        opening_hours=[OpeningWindow(**w) for w in row["hours_list"]],
        address=_optional(row.get("address")),
        description=_optional(row.get("description")),
        latitude=_optional(row.get("latitude")),
        longitude=_optional(row.get("longitude")),
        average_rating=agg.get("average_rating"),
        review_count=agg.get("review_count", 0),
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_candidates(area: str, categories: list[str] | None = None) -> list[Place]:
    """Places in *area*, optionally restricted to *categories*, with review data merged."""
    params = {"area": area, "categories": sorted(categories or [])}
    cached = cache_get("candidates", params)
    if cached is not None:
        return cached

    df = get_dataframe()
    mask = df["area"] == area
    if categories:
        mask = mask & df["category"].isin(categories)

    aggregates = place_aggregates()
    places = [_row_to_place(row, aggregates) for _, row in df.loc[mask].iterrows()]
    cache_set("candidates", params, places)
    return places


def get_place(place_id: str) -> Place | None:
    df = get_dataframe()
    rows = df.loc[df["id"] == place_id]
    if rows.empty:
        return None
    return _row_to_place(rows.iloc[0], place_aggregates())


def list_areas() -> list[dict]:
    df = get_dataframe()
    counts = df.groupby("area").size().to_dict()
    return [
        {
            "id": area,
            "categories": list(DESTINATION_CATEGORIES[area]),
            "place_count": int(counts.get(area, 0)),
        }
        for area in DESTINATION_AREAS
    ]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def _validate(body: PlaceCreate) -> None:
    if body.category not in PLACE_CATEGORIES:
        raise ValueError(f"Unknown category: {body.category}")
    if body.area not in DESTINATION_AREAS:
        raise ValueError(f"Unknown area: {body.area}")
    unknown_tags = sorted(set(body.tags).difference(EXPERIENCE_TAGS))
    if unknown_tags:
        raise ValueError(f"Unknown experience tags: {', '.join(unknown_tags)}")
    unknown_needs = sorted(set(body.supports).difference(SPECIAL_NEEDS))
    if unknown_needs:
        raise ValueError(f"Unknown special needs: {', '.join(unknown_needs)}")


def add_place(body: PlaceCreate) -> Place:
    """Append a place to the in-memory catalog and invalidate cached slices."""
    global _df
    _validate(body)
    df = get_dataframe()

    place_id = f"{body.area[:3]}-{uuid.uuid4().hex[:8]}"
    row = {
        "id": place_id,
        "name": body.name.strip(),
        "category": body.category,
        "area": body.area,
        "city": body.city,
        "budget": body.budget,
        "tags": ",".join(body.tags),
        "supports": ",".join(body.supports),
        "opening_hours": ";".join(f"{w.open_hour}-{w.close_hour}" for w in body.opening_hours),
        "address": body.address,
        "latitude": body.latitude,
        "longitude": body.longitude,
        "description": body.description,
        "tags_list": list(dict.fromkeys(body.tags)),
        "supports_list": list(dict.fromkeys(body.supports)),
        "hours_list": [w.model_dump() for w in body.opening_hours],
    }
    _df = pd.concat([df, pd.DataFrame([row])], ignore_index=True)
    invalidate()

    logger.info("Added place %s (%s) in %s", place_id, body.category, body.area)
    return _row_to_place(pd.Series(row), {})

import json
from pathlib import Path

import pandas as pd

from trusttravel.catalog.config import DEFAULT_CATALOG_CONFIG
from trusttravel.catalog.data_store import get_candidates, reset_catalog, set_places_path
from trusttravel.data_ingestion.config import IngestionConfig
from trusttravel.data_ingestion.ingest import CANONICAL_COLUMNS, run_ingestion

RAW_PLACES = [
    {
        "place_id": "raw-1",
        "title": "Osteria Test",
        "type": "Restaurant",
        "destination": "Trento City",
        "town": "Trento",
        "price_level": "$$$",
        "experience_tags": ["Exceptional Food", "romantic", "haunted"],
        "amenities": "vegetarian, wifi",
        "hours": [{"open": 12, "close": 15}, {"open": 19, "close": 23}],
        "lat": 46.07,
        "lng": 11.12,
    },
    {
        "place_id": "raw-2",
        "title": "Lake Beach",
        "type": "beach",
        "destination": "nature-easy",
        "price_level": "free",
        "experience_tags": "relaxing,scenic-beauty",
    },
    {
        "place_id": "raw-3",
        "title": "Spaceport",
        "type": "spaceport",
        "destination": "trento-city",
    },
    {
        "place_id": "raw-4",
        "title": "Somewhere Else",
        "type": "park",
        "destination": "milan",
    },
]


def _run(tmp_path: Path) -> pd.DataFrame:
    raw_path = tmp_path / "raw" / "places.json"
    raw_path.parent.mkdir(parents=True)
    raw_path.write_text(json.dumps(RAW_PLACES))
    cfg = IngestionConfig(raw_path=raw_path, processed_data_dir=tmp_path / "processed")

    output_path = run_ingestion(config=cfg)

    assert output_path.is_file(), "Processed CSV should be created"
    return pd.read_csv(output_path, dtype={"id": str})


def test_run_ingestion_writes_canonical_columns(tmp_path: Path):
    df = _run(tmp_path)

    assert list(df.columns) == CANONICAL_COLUMNS
    assert list(df["id"]) == ["raw-1", "raw-2"]


def test_run_ingestion_normalizes_vocabulary(tmp_path: Path):
    df = _run(tmp_path).set_index("id")

    osteria = df.loc["raw-1"]
    assert osteria["category"] == "restaurant"
    assert osteria["area"] == "trento-city"
    assert osteria["budget"] == "high"
    assert osteria["tags"] == "exceptional-food,romantic"
    assert osteria["supports"] == "vegetarian"
    assert osteria["opening_hours"] == "12-15;19-23"

    beach = df.loc["raw-2"]
    assert beach["budget"] == "low"
    assert beach["tags"] == "relaxing,scenic-beauty"
    assert beach["city"] == "Trento"


def test_ingested_catalog_loads(tmp_path: Path):
    _run(tmp_path)
    try:
        set_places_path(tmp_path / "processed" / "places.csv")
        [beach] = get_candidates("nature-easy")
        assert beach.name == "Lake Beach"
        assert beach.opening_hours == []
    finally:
        set_places_path(DEFAULT_CATALOG_CONFIG.places_path)
        reset_catalog()


def test_run_ingestion_drops_unreadable_hours(tmp_path: Path, caplog):
    raw = [
        {"name": "Cafe", "category": "coffee-shop", "area": "trento-city", "hours": "9:00-18:00"},
        {"name": "Shut", "category": "bar", "area": "trento-city", "hours": "closed"},
        {"name": "Late", "category": "bar", "area": "trento-city", "hours": "18-2;20-30"},
        {"name": "Odd", "category": "bar", "area": "trento-city", "hours": [{"open": "x", "close": 3}]},
    ]
    raw_path = tmp_path / "places.json"
    raw_path.write_text(json.dumps(raw))
    cfg = IngestionConfig(raw_path=raw_path, processed_data_dir=tmp_path / "processed")

    with caplog.at_level("WARNING", logger="trusttravel.data_ingestion.ingest"):
        output_path = run_ingestion(config=cfg)

    df = pd.read_csv(output_path, keep_default_na=False).set_index("name")
    assert df.loc["Cafe", "opening_hours"] == "9-18"
    assert df.loc["Shut", "opening_hours"] == ""
    assert df.loc["Late", "opening_hours"] == "18-2"
    assert df.loc["Odd", "opening_hours"] == ""
    assert "unreadable opening window" in caplog.text

    try:
        set_places_path(output_path)
        by_name = {p.name: p for p in get_candidates("trento-city")}
        assert [(w.open_hour, w.close_hour) for w in by_name["Cafe"].opening_hours] == [(9, 18)]
        assert by_name["Shut"].opening_hours == []
    finally:
        set_places_path(DEFAULT_CATALOG_CONFIG.places_path)
        reset_catalog()

from dataclasses import dataclass
from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the place ingestion pipeline.
    """

    raw_path: Path = _DATA_DIR / "raw" / "places.json"
    processed_data_dir: Path = _DATA_DIR
    processed_filename: str = "places.csv"

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()

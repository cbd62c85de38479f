"""
Annual tide prediction ingestion.

One run fetches a station's annual document, decodes it, stamps every record
with an absolute timestamp and replaces the station table with the result.
The database is only touched once every record has been normalized.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .core import NOAAClient
from .errors import StoreError, TideCrawlerError
from .predictions import PredictionSet, decode_predictions, normalize_predictions
from .predictions.normalizer import DEFAULT_ABBREVIATION, DEFAULT_ZONE
from .store import PredictionStore

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Outcome of one ingestion run."""
    station_id: str
    records: Optional[PredictionSet] = None
    rows_written: int = 0
    failed_stage: Optional[str] = None
    error: Optional[TideCrawlerError] = None

    @property
    def succeeded(self) -> bool:
        return self.failed_stage is None


def run_ingestion(
    client: NOAAClient,
    store: Optional[PredictionStore],
    station_id: str,
    abbreviation: str = DEFAULT_ABBREVIATION,
    zone: str = DEFAULT_ZONE
) -> IngestResult:
    """
    Run fetch, decode, normalize and store for one station.

    Args:
        client: Client used to download the annual document
        store: Destination store. None stops after normalization (dry run).
        station_id: NOAA station identifier
        abbreviation: Zone abbreviation the published times are parsed with
        zone: Named zone the timestamps are placed in

    Returns:
        IngestResult. On failure ``failed_stage`` names the stage that raised
        and no later stage has run.
    """
    result = IngestResult(station_id=station_id)

    try:
        raw = client.fetch_annual_predictions(station_id)
        result.records = decode_predictions(raw)
        normalize_predictions(result.records, abbreviation=abbreviation, zone=zone)
        logger.info(f"Number of items is: {len(result.records)}")

        if store is None:
            logger.info("Dry run, skipping database")
            return result

        store.ping()
        result.rows_written = store.replace_predictions(result.records)

        stored = store.count_rows()
        if stored != len(result.records):
            raise StoreError(f"Table holds {stored} rows, expected {len(result.records)}")
    except TideCrawlerError as e:
        logger.error(f"Ingestion failed during {e.stage}: {e}")
        result.failed_stage = e.stage
        result.error = e

    return result

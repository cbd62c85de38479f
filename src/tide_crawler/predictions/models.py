"""
Data model for annual tide predictions.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Iterator, List, Optional

import pandas as pd


@dataclass
class TidePrediction:
    """A single predicted high or low tide."""
    date: str  # YYYY/MM/DD as published
    day: str  # Day-of-week label, display only
    time: str  # 12-hour local time, e.g. "3:47 AM"
    prediction_ft: float
    prediction_cm: float
    high_low: str  # "H" or "L"
    timestamp: Optional[datetime] = None  # Filled in by the normalizer

    def __str__(self) -> str:
        parts = [self.date, self.day, self.time, self.high_low]
        if self.timestamp is not None:
            utc = self.timestamp.astimezone(timezone.utc)
            # Unix date layout, e.g. "Tue Mar  1 11:47:00 UTC 2016"
            parts.append(f"{utc:%a %b} {utc.day:2d} {utc:%H:%M:%S} UTC {utc.year}")
        return " ".join(parts)


@dataclass
class PredictionSet:
    """Ordered predictions for one station, in document order."""
    records: List[TidePrediction] = field(default_factory=list)
    station_id: Optional[str] = None
    station_name: Optional[str] = None
    timezone_label: Optional[str] = None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TidePrediction]:
        return iter(self.records)

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten the predictions into a DataFrame, one row per tide."""
        columns = [
            'timestamp', 'date', 'day', 'time',
            'prediction_ft', 'prediction_cm', 'high_low'
        ]
        df = pd.DataFrame.from_records(
            [asdict(record) for record in self.records],
            columns=columns
        )
        if self.station_id:
            df['station_id'] = self.station_id
        if self.station_name:
            df['station_name'] = self.station_name
        return df

"""NOAA Annual Tide Prediction Crawler."""

from .errors import (
    TideCrawlerError,
    ConfigError,
    FetchError,
    DecodeError,
    TimeParseError,
    StoreError,
)
from .pipeline import IngestResult, run_ingestion

__version__ = "0.2.0"
__all__ = [
    'TideCrawlerError',
    'ConfigError',
    'FetchError',
    'DecodeError',
    'TimeParseError',
    'StoreError',
    'IngestResult',
    'run_ingestion'
]

"""
Exception types for the tide crawler.

Every error names the ingestion stage it came from so a caller can tell a
failed download apart from a failed insert without parsing messages.
"""

from typing import Optional

import requests

STAGE_CONFIG = "config"
STAGE_FETCH = "fetch"
STAGE_DECODE = "decode"
STAGE_NORMALIZE = "normalize"
STAGE_STORE = "store"


class TideCrawlerError(Exception):
    """Base exception for all tide crawler failures."""

    stage = "unknown"

    def __init__(self, message: str, stage: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Error message
            stage: Optional stage override. Defaults to the class stage.
        """
        self.message = message
        if stage is not None:
            self.stage = stage
        super().__init__(self.message)


class ConfigError(TideCrawlerError):
    """Raised when settings or database credentials are unusable."""

    stage = STAGE_CONFIG


class FetchError(TideCrawlerError):
    """Exception raised when the NOAA prediction request fails."""

    stage = STAGE_FETCH

    def __init__(self, message: str, response: Optional[requests.Response] = None):
        """Initialize the error.

        Args:
            message: Error message
            response: Optional response object that caused the error
        """
        self.response = response
        super().__init__(message)


class DecodeError(TideCrawlerError):
    """Raised when the prediction document cannot be transcoded or parsed."""

    stage = STAGE_DECODE


class TimeParseError(TideCrawlerError):
    """Raised when a record's date and time cannot be resolved to an instant."""

    stage = STAGE_NORMALIZE


class StoreError(TideCrawlerError):
    """Raised when a database statement fails."""

    stage = STAGE_STORE

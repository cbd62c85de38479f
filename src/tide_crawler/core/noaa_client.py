"""
NOAA client for downloading annual tide prediction documents.
"""

from typing import Optional
import logging

import requests

from ..errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://tidesandcurrents.noaa.gov/noaatidepredictions/NOAATidesFacade.jsp"


class NOAAClient:
    """Client for the NOAA Tides & Currents prediction download service."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        datatype: str = "Annual XML",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """Initialize the NOAA client.

        Args:
            base_url: URL of the prediction download facade
            datatype: Published product to request. Defaults to "Annual XML".
            timeout: Seconds to wait for the server before giving up
            session: Optional requests session to reuse
        """
        self.base_url = base_url
        self.datatype = datatype
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_annual_predictions(self, station_id: str) -> bytes:
        """
        Download the annual tide prediction document for a station.

        Args:
            station_id: 7-digit NOAA station identifier

        Returns:
            Raw response body. The document declares its own encoding, so it
            is returned undecoded.

        Raises:
            FetchError: If the request fails, returns a non-2xx status or has
                an empty body
        """
        if not station_id:
            raise FetchError("Station ID is required")

        params = {
            'datatype': self.datatype,
            'Stationid': station_id,
            'text': 'datafiles',
        }
        logger.info("Fetching data...")
        logger.debug(f"Making request to URL: {self.base_url}")
        logger.debug(f"Request parameters: {params}")

        try:
            response = self._session.get(self.base_url, params=params, timeout=self.timeout)
            logger.debug(f"Response status code: {response.status_code}")
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching data for station {station_id}: {e}")
            raise FetchError(
                f"Failed to fetch annual predictions: {e}",
                response=getattr(e, 'response', None)
            )

        if not 200 <= response.status_code < 300:
            logger.error(f"Fetch returned unanticipated HTTP code: {response.status_code}")
            raise FetchError(
                f"Unexpected HTTP status {response.status_code} for station {station_id}",
                response=response
            )

        body = response.content
        if not body:
            raise FetchError("Prediction response body was empty", response=response)

        logger.info("Fetch successful. Processing data...")
        logger.debug(f"Received {len(body)} bytes")
        return body

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

"""
NOAA Core Functionality.

This module provides the client for downloading prediction documents from
NOAA Tides & Currents.
"""

from .noaa_client import NOAAClient, DEFAULT_BASE_URL

__all__ = [
    'NOAAClient',
    'DEFAULT_BASE_URL'
]

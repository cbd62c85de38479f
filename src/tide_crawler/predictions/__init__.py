"""
Tide prediction handling.

This module turns a downloaded annual prediction document into timestamped
records:
- Data model for single predictions and ordered prediction sets
- Charset-aware decoding of the NOAA XML document
- Normalization of published local times to absolute timestamps
"""

from .models import TidePrediction, PredictionSet
from .decoder import decode_predictions
from .normalizer import normalize_prediction, normalize_predictions, parse_timestamp

__all__ = [
    'TidePrediction',
    'PredictionSet',
    'decode_predictions',
    'normalize_prediction',
    'normalize_predictions',
    'parse_timestamp'
]

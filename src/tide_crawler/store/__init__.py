"""
Prediction storage.

Owns the destination table: drop, create and ordered insert of a station's
predictions.
"""

from .prediction_store import PredictionStore, build_table, DEFAULT_TABLE_NAME

__all__ = [
    'PredictionStore',
    'build_table',
    'DEFAULT_TABLE_NAME'
]

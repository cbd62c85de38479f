"""
Timestamp normalization for tide predictions.

NOAA publishes each prediction as a calendar date plus a 12-hour local time.
The year is part of the date text, so every record resolves on its own.
A record's wall-clock reading is combined with the configured zone
abbreviation, parsed, and then placed in the named zone so the UTC offset is
the one in force on that date (PST in winter, PDT in summer).
"""

import logging
import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import TimeParseError
from .models import PredictionSet, TidePrediction

logger = logging.getLogger(__name__)

DEFAULT_ABBREVIATION = "PST"
DEFAULT_ZONE = "America/Los_Angeles"

# e.g. "2016/03/01 3:47 AM PST"; %I accepts hours without a leading zero
DATE_TIME_FORMAT = "%Y/%m/%d %I:%M %p"

# Minutes are always two digits, which strptime alone does not enforce
_CLOCK_TIME = re.compile(r"\d{1,2}:\d{2} [AaPp][Mm]")


def load_zone(zone: str) -> ZoneInfo:
    """Look up a named timezone, raising TimeParseError if it is unknown."""
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimeParseError(f"Unknown timezone {zone!r}: {e}")


def parse_timestamp(
    date: str,
    time: str,
    abbreviation: str = DEFAULT_ABBREVIATION,
    zone: str = DEFAULT_ZONE
) -> datetime:
    """
    Resolve a published date and time to an aware datetime.

    Args:
        date: Date as published, "YYYY/MM/DD"
        time: Local time as published, "h:mm AM" or "h:mm PM"
        abbreviation: Zone abbreviation the source times are labelled with
        zone: IANA zone whose rules give the offset for the date

    Returns:
        Timezone-aware datetime in ``zone``

    Raises:
        TimeParseError: If the text doesn't match the layout or the zone is unknown
    """
    rawtime = f"{date} {time} {abbreviation}"
    if not _CLOCK_TIME.fullmatch(time):
        raise TimeParseError(f"Error processing rawtime {rawtime!r}: bad clock time")

    # The abbreviation only has to match; its offset is ambiguous across DST
    layout = f"{DATE_TIME_FORMAT} {abbreviation.replace('%', '%%')}"
    try:
        parsed = datetime.strptime(rawtime, layout)
    except ValueError as e:
        raise TimeParseError(f"Error processing rawtime {rawtime!r}: {e}")

    return parsed.replace(tzinfo=load_zone(zone))


def normalize_prediction(
    record: TidePrediction,
    abbreviation: str = DEFAULT_ABBREVIATION,
    zone: str = DEFAULT_ZONE
) -> TidePrediction:
    """Backfill ``record.timestamp`` from its date and time and return it."""
    record.timestamp = parse_timestamp(record.date, record.time, abbreviation, zone)
    return record


def normalize_predictions(
    prediction_set: PredictionSet,
    abbreviation: str = DEFAULT_ABBREVIATION,
    zone: str = DEFAULT_ZONE
) -> PredictionSet:
    """
    Normalize every record of a set in document order.

    Stops at the first record that fails; no record is skipped.
    """
    load_zone(zone)
    for record in prediction_set:
        normalize_prediction(record, abbreviation, zone)
        logger.debug(str(record))
    return prediction_set

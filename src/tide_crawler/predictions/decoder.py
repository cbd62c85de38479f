"""
Decoder for NOAA annual tide prediction XML.

NOAA publishes the annual files in ISO-8859-1, not UTF-8. The document is
transcoded using the label in its own XML declaration before the structure
is parsed. Each ``datainfo/data/item`` element becomes one TidePrediction:

    <item>
      <date>2016/03/01</date>
      <day>Tue</day>
      <time>3:47 AM</time>
      <predictions_in_ft>5.2</predictions_in_ft>
      <predictions_in_cm>158</predictions_in_cm>
      <highlow>H</highlow>
    </item>
"""

import codecs
import logging
import math
import re
import xml.etree.ElementTree as ET
from typing import Tuple

from ..errors import DecodeError
from .models import PredictionSet, TidePrediction

logger = logging.getLogger(__name__)

ITEM_PATH = "data/item"

# Element name -> TidePrediction attribute
TEXT_FIELDS = {
    'date': 'date',
    'day': 'day',
    'time': 'time',
    'highlow': 'high_low',
}
NUMERIC_FIELDS = {
    'predictions_in_ft': 'prediction_ft',
    'predictions_in_cm': 'prediction_cm',
}

_XML_DECLARATION = re.compile(rb'^\s*<\?xml\b[^>]*\?>')
_ENCODING_LABEL = re.compile(rb'encoding\s*=\s*["\']([A-Za-z0-9._:-]+)["\']')


def transcode(raw: bytes) -> Tuple[str, str]:
    """
    Decode raw document bytes using the encoding named in the XML declaration.

    Args:
        raw: Document bytes as downloaded

    Returns:
        Tuple of (document text without its XML declaration, codec name used)

    Raises:
        DecodeError: If the label names no known codec or the bytes don't
            decode with it
    """
    label = 'utf-8'
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    declaration = _XML_DECLARATION.match(raw)
    if declaration:
        match = _ENCODING_LABEL.search(declaration.group(0))
        if match:
            label = match.group(1).decode('ascii')

    try:
        codec = codecs.lookup(label)
    except LookupError:
        raise DecodeError(f"Unknown document encoding: {label}")

    try:
        text = raw.decode(codec.name)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Document is not valid {codec.name}: {e}")

    # The text is no longer in the declared encoding
    if declaration:
        text = text.lstrip()[len(declaration.group(0).strip()):]
    logger.debug(f"Transcoded {len(raw)} bytes from {codec.name}")
    return text, codec.name


def _parse_item(item: ET.Element, position: int) -> TidePrediction:
    values = {}
    for tag, attr in TEXT_FIELDS.items():
        values[attr] = (item.findtext(tag) or '').strip()

    for tag, attr in NUMERIC_FIELDS.items():
        text = (item.findtext(tag) or '').strip()
        try:
            values[attr] = float(text)
        except ValueError:
            raise DecodeError(f"Item {position}: {tag} is not a number: {text!r}")
        if not math.isfinite(values[attr]):
            raise DecodeError(f"Item {position}: {tag} is not a finite number: {text!r}")

    return TidePrediction(**values)


def decode_predictions(raw: bytes) -> PredictionSet:
    """
    Decode an annual prediction document into an ordered PredictionSet.

    Args:
        raw: Document bytes as returned by NOAAClient.fetch_annual_predictions

    Returns:
        PredictionSet with one record per item, in document order

    Raises:
        DecodeError: On an unknown encoding, malformed XML or a non-numeric
            height
    """
    text, _ = transcode(raw)

    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DecodeError(f"Malformed prediction XML: {e}")

    records = [
        _parse_item(item, position)
        for position, item in enumerate(root.findall(ITEM_PATH), start=1)
    ]

    prediction_set = PredictionSet(
        records=records,
        station_id=(root.findtext('stationid') or '').strip() or None,
        station_name=(root.findtext('stationname') or '').strip() or None,
        timezone_label=(root.findtext('timezone') or '').strip() or None,
    )
    logger.info(
        f"Decoded {len(prediction_set)} predictions for station "
        f"{prediction_set.station_id} ({prediction_set.station_name}), "
        f"times in {prediction_set.timezone_label}"
    )
    return prediction_set

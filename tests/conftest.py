import os
import sys

import pytest
from sqlalchemy import create_engine, event

# Add the src directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

STATION_ID = "9414275"

SAMPLE_ITEMS = [
    ("2016/03/01", "Tue", "3:47 AM", "5.2", "158", "H"),
    ("2016/03/01", "Tue", "10:02 AM", "0.9", "27", "L"),
    ("2016/03/01", "Tue", "12:00 PM", "4.1", "125", "H"),
    ("2016/03/02", "Wed", "12:00 AM", "1.3", "40", "L"),
]


def build_annual_xml(items, station_name="Ocean Beach, Outer Coast", encoding="ISO-8859-1"):
    """Build an annual prediction document the way NOAA publishes it."""
    body = "".join(
        "<item>"
        f"<date>{date}</date>"
        f"<day>{day}</day>"
        f"<time>{time}</time>"
        f"<predictions_in_ft>{ft}</predictions_in_ft>"
        f"<predictions_in_cm>{cm}</predictions_in_cm>"
        f"<highlow>{highlow}</highlow>"
        "</item>\n"
        for date, day, time, ft, cm, highlow in items
    )
    document = (
        f'<?xml version="1.0" encoding="{encoding}" ?>\n'
        "<datainfo>\n"
        "<origin>NOAA/NOS/CO-OPS</origin>\n"
        "<disclaimer>Predictions © NOAA/NOS/CO-OPS</disclaimer>\n"
        f"<stationid>{STATION_ID}</stationid>\n"
        f"<stationname>{station_name}</stationname>\n"
        "<timezone>LST/LDT</timezone>\n"
        "<datum>MLLW</datum>\n"
        f"<data>\n{body}</data>\n"
        "</datainfo>\n"
    )
    return document.encode(encoding)


@pytest.fixture
def annual_xml():
    """Sample ISO-8859-1 annual prediction document."""
    return build_annual_xml(SAMPLE_ITEMS)


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine with transactional DDL."""
    engine = create_engine(f"sqlite:///{tmp_path / 'tides.db'}")

    # pysqlite opens transactions lazily and not before DDL; let SQLAlchemy do it
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    yield engine
    engine.dispose()


@pytest.fixture
def make_annual_xml():
    """Factory for annual prediction documents with custom items."""
    return build_annual_xml


@pytest.fixture
def sample_items():
    return list(SAMPLE_ITEMS)

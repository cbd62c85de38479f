"""
Relational store for tide predictions.

A station's table always holds exactly one dataset. Each run drops the table,
recreates it and inserts every prediction in order, all inside one
transaction, so a failure part way through leaves the previous dataset in
place.

The ``datetime`` column is ``timestamp with time zone`` rather than a plain
``timestamp``: rows hold an absolute instant, and PostgreSQL would otherwise
reinterpret aware values in the session zone. Readers expecting Pacific wall
clock time can use ``datetime AT TIME ZONE 'America/Los_Angeles'``.
"""

import logging
from typing import Iterable, List, Optional, Union

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    REAL,
    String,
    Table,
    create_engine,
    func,
    select,
    text,
)
from sqlalchemy.engine import Connection, Engine, Row, URL
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StoreError
from ..predictions.models import TidePrediction

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "tides"


def build_table(table_name: str = DEFAULT_TABLE_NAME, metadata: Optional[MetaData] = None) -> Table:
    """Define the prediction table layout."""
    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column("uid", Integer, primary_key=True, autoincrement=True),
        Column("datetime", DateTime(timezone=True), nullable=False),
        Column("date", String(16), nullable=False),
        Column("day", String(16)),
        Column("time", String(16), nullable=False),
        Column("predictionft", REAL),
        Column("predictioncm", Integer),  # Whole centimetres only
        Column("highlow", String(16)),
    )


def _row_values(record: TidePrediction) -> dict:
    return {
        "datetime": record.timestamp,
        "date": record.date,
        "day": record.day,
        "time": record.time,
        "predictionft": record.prediction_ft,
        "predictioncm": int(record.prediction_cm),
        "highlow": record.high_low,
    }


class PredictionStore:
    """Owns the prediction table and the engine used to reach it."""

    def __init__(self, engine: Engine, table_name: str = DEFAULT_TABLE_NAME):
        """Initialize the store.

        Args:
            engine: SQLAlchemy engine for the destination database
            table_name: Name of the prediction table
        """
        self.engine = engine
        self.table = build_table(table_name)

    @classmethod
    def from_url(cls, url: Union[str, URL], table_name: str = DEFAULT_TABLE_NAME) -> "PredictionStore":
        """Create a store with its own engine for the given database URL."""
        return cls(create_engine(url), table_name=table_name)

    def __enter__(self) -> "PredictionStore":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()

    def ping(self) -> None:
        """Check that the database is reachable.

        Raises:
            StoreError: If a connection can't be established
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Could not establish connection with the database: {e}")
            raise StoreError(f"Could not establish connection with the database: {e}")

    def drop_table(self, conn: Connection) -> None:
        """Drop the prediction table. A missing table is not an error."""
        logger.debug(f"Dropping table {self.table.name}")
        self.table.drop(conn, checkfirst=True)

    def create_table(self, conn: Connection) -> None:
        """Create the prediction table from scratch."""
        logger.debug(f"Creating table {self.table.name}")
        self.table.create(conn)

    def insert(self, conn: Connection, record: TidePrediction) -> None:
        """Insert one prediction as one row."""
        conn.execute(self.table.insert().values(**_row_values(record)))

    def replace_predictions(self, records: Iterable[TidePrediction]) -> int:
        """
        Replace the table contents with the given predictions.

        Args:
            records: Normalized predictions, inserted in iteration order

        Returns:
            Number of rows inserted

        Raises:
            StoreError: If any statement fails. The transaction is rolled back
                and the previous dataset is kept.
        """
        count = 0
        try:
            with self.engine.begin() as conn:
                self.drop_table(conn)
                self.create_table(conn)
                for record in records:
                    self.insert(conn, record)
                    count += 1
        except SQLAlchemyError as e:
            logger.error(f"Database error after {count} inserts, rolled back: {e}")
            raise StoreError(f"Failed to replace predictions in {self.table.name}: {e}")

        logger.info(f"Inserted {count} rows into {self.table.name}")
        return count

    def fetch_rows(self) -> List[Row]:
        """Return every stored row in insertion order."""
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(select(self.table).order_by(self.table.c.uid)))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read {self.table.name}: {e}")

    def count_rows(self) -> int:
        """Return the number of stored rows."""
        try:
            with self.engine.connect() as conn:
                return conn.execute(select(func.count()).select_from(self.table)).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count rows in {self.table.name}: {e}")

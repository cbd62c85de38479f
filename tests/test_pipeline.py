"""Tests for the ingestion pipeline."""

from datetime import datetime
from unittest.mock import Mock

import pytest
import responses
from sqlalchemy import inspect

from tide_crawler.core.noaa_client import NOAAClient
from tide_crawler.errors import DecodeError, FetchError, StoreError
from tide_crawler.pipeline import run_ingestion
from tide_crawler.store.prediction_store import PredictionStore

TEST_URL = "https://tides.test/noaatidepredictions/NOAATidesFacade.jsp"
STATION_ID = "9414275"


@pytest.fixture
def client():
    return NOAAClient(base_url=TEST_URL, timeout=5)


@pytest.fixture
def store(engine):
    return PredictionStore(engine)


class TestRunIngestion:
    """Test suite for run_ingestion."""

    @responses.activate
    def test_end_to_end(self, client, store, annual_xml, sample_items):
        responses.add(responses.GET, TEST_URL, body=annual_xml, status=200)

        result = run_ingestion(client, store, STATION_ID)

        assert result.succeeded
        assert result.failed_stage is None
        assert result.rows_written == len(sample_items)
        rows = store.fetch_rows()
        assert len(rows) == len(sample_items)
        assert [(row.date, row.time) for row in rows] == [
            (date, time) for date, _, time, _, _, _ in sample_items
        ]

    @responses.activate
    def test_scenario_row(self, client, store, make_annual_xml):
        raw = make_annual_xml([("2016/03/01", "Tue", "3:47 AM", "5.2", "158", "H")])
        responses.add(responses.GET, TEST_URL, body=raw, status=200)

        run_ingestion(client, store, STATION_ID)
        row = store.fetch_rows()[0]

        assert row.datetime.replace(tzinfo=None) == datetime(2016, 3, 1, 3, 47)
        assert row.predictionft == pytest.approx(5.2)
        assert row.predictioncm == 158
        assert row.highlow == "H"

    @responses.activate
    def test_twice_gives_same_rows(self, client, store, annual_xml):
        responses.add(responses.GET, TEST_URL, body=annual_xml, status=200)

        run_ingestion(client, store, STATION_ID)
        first = [tuple(row)[1:] for row in store.fetch_rows()]
        run_ingestion(client, store, STATION_ID)
        second = [tuple(row)[1:] for row in store.fetch_rows()]

        assert first == second

    @responses.activate
    def test_http_error_skips_decode_and_store(self, client):
        responses.add(responses.GET, TEST_URL, status=500)
        store = Mock(spec=PredictionStore)

        result = run_ingestion(client, store, STATION_ID)

        assert not result.succeeded
        assert result.failed_stage == "fetch"
        assert isinstance(result.error, FetchError)
        assert result.records is None
        assert store.method_calls == []

    def test_decode_error_skips_store(self):
        client = Mock(spec=NOAAClient)
        client.fetch_annual_predictions.return_value = b"<datainfo><data>"
        store = Mock(spec=PredictionStore)

        result = run_ingestion(client, store, STATION_ID)

        assert result.failed_stage == "decode"
        assert isinstance(result.error, DecodeError)
        assert store.method_calls == []

    def test_bad_time_inserts_nothing(self, make_annual_xml, store, engine):
        client = Mock(spec=NOAAClient)
        client.fetch_annual_predictions.return_value = make_annual_xml([
            ("2016/03/01", "Tue", "3:47 AM", "5.2", "158", "H"),
            ("2016/03/01", "Tue", "", "0.9", "27", "L"),
            ("2016/03/01", "Tue", "4:15 PM", "4.6", "140", "H"),
        ])

        result = run_ingestion(client, store, STATION_ID)

        assert result.failed_stage == "normalize"
        assert result.rows_written == 0
        assert not inspect(engine).has_table("tides")

    def test_store_error_reported(self, annual_xml):
        client = Mock(spec=NOAAClient)
        client.fetch_annual_predictions.return_value = annual_xml
        store = Mock(spec=PredictionStore)
        store.replace_predictions.side_effect = StoreError("insert failed")

        result = run_ingestion(client, store, STATION_ID)

        assert result.failed_stage == "store"
        assert len(result.records) == 4
        store.ping.assert_called_once()

    def test_dry_run(self, annual_xml):
        client = Mock(spec=NOAAClient)
        client.fetch_annual_predictions.return_value = annual_xml

        result = run_ingestion(client, None, STATION_ID)

        assert result.succeeded
        assert result.rows_written == 0
        assert all(record.timestamp is not None for record in result.records)

    @pytest.mark.parametrize("cm", ["inf", "nan", "1e400"])
    def test_non_finite_height_fails_decode(self, make_annual_xml, cm):
        client = Mock(spec=NOAAClient)
        client.fetch_annual_predictions.return_value = make_annual_xml([
            ("2016/03/01", "Tue", "3:47 AM", "5.2", cm, "H"),
        ])
        store = Mock(spec=PredictionStore)

        result = run_ingestion(client, store, STATION_ID)

        assert result.failed_stage == "decode"
        assert isinstance(result.error, DecodeError)
        assert store.method_calls == []

    def test_row_count_mismatch_fails_store(self, annual_xml):
        client = Mock(spec=NOAAClient)
        client.fetch_annual_predictions.return_value = annual_xml
        store = Mock(spec=PredictionStore)
        store.replace_predictions.return_value = 4
        store.count_rows.return_value = 3

        result = run_ingestion(client, store, STATION_ID)

        assert result.failed_stage == "store"
        assert isinstance(result.error, StoreError)

"""Tests for Kite envelope parsers and record mappers."""

from datetime import datetime
from decimal import Decimal

import pytest

from integrations.exceptions import KiteDataError
from integrations.kite_protocol import HoldingRecord
from integrations.kite_mappers import (
    extract_records,
    map_holding,
    map_order,
    map_position,
    parse_holdings,
    parse_orders,
    parse_positions,
)
from tests.fixtures import (
    SAMPLE_HOLDINGS_RESPONSE,
    SAMPLE_ORDERS_RESPONSE,
    SAMPLE_POSITIONS_RESPONSE,
)


class TestExtractRecords:
    def test_returns_list_under_path(self):
        assert extract_records({"data": [{"a": 1}]}, "data") == [{"a": 1}]

    def test_nested_path(self):
        assert extract_records({"data": {"net": [{"a": 1}]}}, "data", "net") == [{"a": 1}]

    @pytest.mark.parametrize(
        "envelope",
        [
            {},
            {"data": None},
            {"data": {}},
            {"data": "nothing"},
            {"status": "success"},
        ],
    )
    def test_missing_or_non_list_is_empty(self, envelope):
        assert extract_records(envelope, "data") == []

    def test_nested_path_through_non_object_is_empty(self):
        assert extract_records({"data": []}, "data", "net") == []

    @pytest.mark.parametrize("envelope", [None, [], "text", 42])
    def test_non_object_envelope_raises(self, envelope):
        with pytest.raises(KiteDataError, match="envelope"):
            extract_records(envelope, "data")


class TestParsers:
    def test_parse_holdings(self):
        assert len(parse_holdings(SAMPLE_HOLDINGS_RESPONSE)) == 1

    def test_parse_positions_reads_net_only(self):
        envelope = {"data": {"net": [{"tradingsymbol": "A"}], "day": [{"tradingsymbol": "B"}]}}
        assert parse_positions(envelope) == [{"tradingsymbol": "A"}]

    def test_parse_positions_sample(self):
        assert len(parse_positions(SAMPLE_POSITIONS_RESPONSE)) == 2

    def test_parse_orders(self):
        assert len(parse_orders(SAMPLE_ORDERS_RESPONSE)) == 2


class TestMapHolding:
    def test_maps_all_fields(self):
        record = map_holding(SAMPLE_HOLDINGS_RESPONSE["data"][0])

        assert record.trading_symbol == "INFY"
        assert record.exchange == "NSE"
        assert record.isin == "INE009A01021"
        assert record.quantity == 10
        assert record.average_price == Decimal("1450.00")
        assert record.last_price == Decimal("1500.00")
        assert record.pnl == Decimal("500.00")
        assert record.product == "CNC"

    def test_record_holds_only_normalized_fields(self):
        assert map_holding(SAMPLE_HOLDINGS_RESPONSE["data"][0]) == HoldingRecord(
            trading_symbol="INFY",
            exchange="NSE",
            isin="INE009A01021",
            quantity=10,
            average_price=Decimal("1450.00"),
            last_price=Decimal("1500.00"),
            pnl=Decimal("500.00"),
            product="CNC",
        )

    def test_missing_pnl_is_zero(self):
        raw = dict(SAMPLE_HOLDINGS_RESPONSE["data"][0])
        del raw["pnl"]

        assert map_holding(raw).pnl == Decimal("0")

    def test_missing_numeric_fields_default_to_zero(self):
        record = map_holding({"tradingsymbol": "TCS"})

        assert record.quantity == 0
        assert record.average_price == Decimal("0")
        assert record.last_price == Decimal("0")
        assert record.exchange is None

    def test_missing_symbol_raises(self):
        with pytest.raises(KiteDataError, match="tradingsymbol"):
            map_holding({"quantity": 1})

    def test_non_object_raises(self):
        with pytest.raises(KiteDataError):
            map_holding(["INFY"])

    def test_bad_number_raises(self):
        with pytest.raises(KiteDataError, match="average_price"):
            map_holding({"tradingsymbol": "INFY", "average_price": "n/a"})


class TestMapPosition:
    def test_maps_pnl_split(self):
        record = map_position(SAMPLE_POSITIONS_RESPONSE["data"]["net"][1])

        assert record.trading_symbol == "SBIN"
        assert record.product == "MIS"
        assert record.quantity == 0
        assert record.buy_quantity == 100
        assert record.sell_quantity == 100
        assert record.last_price == Decimal("620.35")
        assert record.unrealised_pnl == Decimal("0")
        assert record.realised_pnl == Decimal("150.25")


class TestMapOrder:
    def test_maps_fields_and_timestamp(self):
        record = map_order(SAMPLE_ORDERS_RESPONSE["data"][0])

        assert record.order_id == "240115000000001"
        assert record.transaction_type == "BUY"
        assert record.order_type == "LIMIT"
        assert record.quantity == 10
        assert record.price == Decimal("1450")
        assert record.status == "COMPLETE"
        assert record.order_timestamp == datetime(2024, 1, 15, 9, 15, 32)

    def test_numeric_order_id_becomes_string(self):
        assert map_order({"order_id": 151220000000000}).order_id == "151220000000000"

    def test_missing_timestamp_is_none(self):
        assert map_order({"order_id": "1"}).order_timestamp is None

    def test_missing_order_id_raises(self):
        with pytest.raises(KiteDataError, match="order_id"):
            map_order({"tradingsymbol": "INFY"})

    def test_bad_timestamp_raises(self):
        with pytest.raises(KiteDataError):
            map_order({"order_id": "1", "order_timestamp": "yesterday"})

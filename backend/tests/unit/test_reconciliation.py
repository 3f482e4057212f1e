"""Tests for the reconciliation strategies."""

from decimal import Decimal

from integrations.kite_protocol import HoldingRecord, OrderRecord, PositionRecord
from models import KiteHolding, KiteOrder, KitePosition
from repositories.holding_repository import HoldingRepository
from repositories.order_repository import OrderRepository
from repositories.position_repository import PositionRepository
from services.reconciliation import ReconcileStats, ReplaceAll, UpsertByKey


def _holding(symbol, quantity=1):
    return HoldingRecord(
        trading_symbol=symbol,
        exchange="NSE",
        isin=None,
        quantity=quantity,
        average_price=Decimal("10"),
        last_price=Decimal("12"),
        pnl=Decimal("2"),
        product="CNC",
    )


def _position(symbol, product="MIS"):
    return PositionRecord(
        trading_symbol=symbol,
        exchange="NSE",
        product=product,
        quantity=1,
        buy_quantity=1,
        sell_quantity=0,
        average_price=Decimal("100"),
        last_price=Decimal("101"),
        pnl=Decimal("1"),
        unrealised_pnl=Decimal("1"),
        realised_pnl=Decimal("0"),
    )


def _order(order_id, status="OPEN"):
    return OrderRecord(
        order_id=order_id,
        trading_symbol="INFY",
        exchange="NSE",
        transaction_type="BUY",
        order_type="LIMIT",
        product="CNC",
        quantity=1,
        price=Decimal("1450"),
        status=status,
        order_timestamp=None,
    )


class TestReconcileStats:
    def test_processed_counts_writes(self):
        assert ReconcileStats(created=2, updated=3, deleted=7).processed == 5


class TestUpsertByKey:
    def test_inserts_new_records(self, db, user):
        stats = UpsertByKey(HoldingRepository).apply(db, user, [_holding("A"), _holding("B")])

        assert stats == ReconcileStats(created=2, updated=0, deleted=0)
        assert db.query(KiteHolding).count() == 2

    def test_updates_existing_records(self, db, user):
        strategy = UpsertByKey(HoldingRepository)
        strategy.apply(db, user, [_holding("A", quantity=1)])

        stats = strategy.apply(db, user, [_holding("A", quantity=9), _holding("B")])

        assert stats.created == 1
        assert stats.updated == 1
        assert db.query(KiteHolding).filter_by(trading_symbol="A").one().quantity == 9

    def test_duplicate_key_in_one_batch_updates(self, db, user):
        stats = UpsertByKey(HoldingRepository).apply(
            db, user, [_holding("A", quantity=1), _holding("A", quantity=4)]
        )

        assert stats.created == 1
        assert stats.updated == 1
        assert db.query(KiteHolding).one().quantity == 4

    def test_never_deletes(self, db, user):
        strategy = UpsertByKey(HoldingRepository)
        strategy.apply(db, user, [_holding("A"), _holding("B")])

        stats = strategy.apply(db, user, [])

        assert stats.deleted == 0
        assert db.query(KiteHolding).count() == 2

    def test_same_symbol_for_two_users(self, db, user, other_user):
        strategy = UpsertByKey(HoldingRepository)
        strategy.apply(db, user, [_holding("A")])
        stats = strategy.apply(db, other_user, [_holding("A")])

        assert stats.created == 1
        assert db.query(KiteHolding).count() == 2

    def test_orders_keyed_by_order_id(self, db, user):
        strategy = UpsertByKey(OrderRepository)
        strategy.apply(db, user, [_order("1"), _order("2")])

        stats = strategy.apply(db, user, [_order("2", status="COMPLETE")])

        assert stats.updated == 1
        assert db.query(KiteOrder).filter_by(order_id="2").one().status == "COMPLETE"


class TestReplaceAll:
    def test_name(self):
        assert ReplaceAll(PositionRepository).name == "replace_all"
        assert UpsertByKey(HoldingRepository).name == "upsert_by_key"

    def test_replaces_user_rows(self, db, user):
        strategy = ReplaceAll(PositionRepository)
        strategy.apply(db, user, [_position("A"), _position("B")])

        stats = strategy.apply(db, user, [_position("C")])

        assert stats == ReconcileStats(created=1, updated=0, deleted=2)
        assert [p.trading_symbol for p in db.query(KitePosition).all()] == ["C"]

    def test_leaves_other_users_alone(self, db, user, other_user):
        strategy = ReplaceAll(PositionRepository)
        strategy.apply(db, other_user, [_position("X")])

        strategy.apply(db, user, [])

        assert db.query(KitePosition).filter_by(user_id=other_user.id).count() == 1

    def test_allows_duplicate_symbols(self, db, user):
        stats = ReplaceAll(PositionRepository).apply(
            db, user, [_position("A", "MIS"), _position("A", "NRML")]
        )

        assert stats.created == 2
        assert db.query(KitePosition).count() == 2

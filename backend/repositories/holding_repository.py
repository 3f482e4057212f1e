"""Holding repository."""

from sqlalchemy.orm import Session

from integrations.kite_protocol import HoldingRecord
from models import KiteHolding, User, utc_now


class HoldingRepository:
    """Repository for KiteHolding rows, keyed by (user, trading_symbol)."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def natural_key(self, record: HoldingRecord) -> str:
        return record.trading_symbol

    def find_by_key(self, user: User, trading_symbol: str) -> KiteHolding | None:
        """Get the user's holding for a trading symbol, if any."""
        return (
            self.db.query(KiteHolding)
            .filter_by(user_id=user.id, trading_symbol=trading_symbol)
            .first()
        )

    def insert(self, user: User, record: HoldingRecord) -> KiteHolding:
        holding = KiteHolding(user_id=user.id)
        self._apply(holding, record)
        self.db.add(holding)
        self.db.flush()  # Later lookups in the same batch must see it
        return holding

    def update(self, user: User, existing: KiteHolding, record: HoldingRecord) -> KiteHolding:
        existing.user_id = user.id
        self._apply(existing, record)
        return existing

    def delete_all_for_user(self, user: User) -> int:
        count = self.db.query(KiteHolding).filter_by(user_id=user.id).delete(
            synchronize_session=False
        )
        self.db.flush()
        return count

    def list_for_user(self, user: User) -> list[KiteHolding]:
        return (
            self.db.query(KiteHolding)
            .filter_by(user_id=user.id)
            .order_by(KiteHolding.trading_symbol)
            .all()
        )

    @staticmethod
    def _apply(holding: KiteHolding, record: HoldingRecord) -> None:
        holding.trading_symbol = record.trading_symbol
        holding.exchange = record.exchange
        holding.isin = record.isin
        holding.quantity = record.quantity
        holding.average_price = record.average_price
        holding.last_price = record.last_price
        holding.pnl = record.pnl
        holding.product = record.product
        holding.synced_at = utc_now()

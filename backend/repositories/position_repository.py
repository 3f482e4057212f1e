"""Position repository."""

from sqlalchemy.orm import Session

from integrations.kite_protocol import PositionRecord
from models import KitePosition, User, utc_now


class PositionRepository:
    """Repository for KitePosition rows.

    Positions have no natural key, so only the replace-all operations are
    provided.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, user: User, record: PositionRecord) -> KitePosition:
        position = KitePosition(
            user_id=user.id,
            trading_symbol=record.trading_symbol,
            exchange=record.exchange,
            product=record.product,
            quantity=record.quantity,
            buy_quantity=record.buy_quantity,
            sell_quantity=record.sell_quantity,
            average_price=record.average_price,
            last_price=record.last_price,
            pnl=record.pnl,
            unrealised_pnl=record.unrealised_pnl,
            realised_pnl=record.realised_pnl,
            synced_at=utc_now(),
        )
        self.db.add(position)
        return position

    def delete_all_for_user(self, user: User) -> int:
        count = self.db.query(KitePosition).filter_by(user_id=user.id).delete(
            synchronize_session=False
        )
        self.db.flush()
        return count

    def list_for_user(self, user: User) -> list[KitePosition]:
        return (
            self.db.query(KitePosition)
            .filter_by(user_id=user.id)
            .order_by(KitePosition.trading_symbol, KitePosition.product)
            .all()
        )

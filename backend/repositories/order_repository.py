"""Order repository."""

from sqlalchemy.orm import Session

from integrations.kite_protocol import OrderRecord
from models import KiteOrder, User, utc_now


class OrderRepository:
    """Repository for KiteOrder rows, keyed by Kite's order_id."""

    def __init__(self, db: Session):
        self.db = db

    def natural_key(self, record: OrderRecord) -> str:
        return record.order_id

    def find_by_key(self, user: User, order_id: str) -> KiteOrder | None:
        """Get an order by Kite order id.

        Order ids are unique across all users, so ``user`` does not
        narrow the lookup.
        """
        return self.db.query(KiteOrder).filter_by(order_id=order_id).first()

    def insert(self, user: User, record: OrderRecord) -> KiteOrder:
        order = KiteOrder(user_id=user.id)
        self._apply(order, record)
        self.db.add(order)
        self.db.flush()
        return order

    def update(self, user: User, existing: KiteOrder, record: OrderRecord) -> KiteOrder:
        existing.user_id = user.id
        self._apply(existing, record)
        return existing

    def delete_all_for_user(self, user: User) -> int:
        count = self.db.query(KiteOrder).filter_by(user_id=user.id).delete(
            synchronize_session=False
        )
        self.db.flush()
        return count

    def list_for_user(self, user: User) -> list[KiteOrder]:
        """Orders newest first; orders without a timestamp sort last."""
        return (
            self.db.query(KiteOrder)
            .filter_by(user_id=user.id)
            .order_by(KiteOrder.order_timestamp.is_(None), KiteOrder.order_timestamp.desc())
            .all()
        )

    @staticmethod
    def _apply(order: KiteOrder, record: OrderRecord) -> None:
        order.order_id = record.order_id
        order.trading_symbol = record.trading_symbol
        order.exchange = record.exchange
        order.transaction_type = record.transaction_type
        order.order_type = record.order_type
        order.product = record.product
        order.quantity = record.quantity
        order.price = record.price
        order.status = record.status
        order.order_timestamp = record.order_timestamp
        order.synced_at = utc_now()

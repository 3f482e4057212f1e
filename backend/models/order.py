"""KiteOrder model - an order placed through Kite."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class KiteOrder(Base):
    """An order synced from Kite, keyed by Kite's globally unique order_id."""

    __tablename__ = "kite_orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    order_id = Column(String, nullable=False, unique=True)
    trading_symbol = Column(String, nullable=True)
    exchange = Column(String, nullable=True)
    transaction_type = Column(String, nullable=True)  # "BUY" | "SELL"
    order_type = Column(String, nullable=True)  # "MARKET" | "LIMIT" | "SL" | "SL-M"
    product = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    status = Column(String, nullable=True)
    order_timestamp = Column(DateTime, nullable=True)
    synced_at = Column(DateTime, default=utc_now)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    user = relationship("User", back_populates="orders")

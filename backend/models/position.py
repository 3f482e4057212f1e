"""KitePosition model - an open (net) position for the trading day."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class KitePosition(Base):
    """A net position synced from Kite.

    Positions have no stable external key, so a user's whole set is
    deleted and recreated on every sync.
    """

    __tablename__ = "kite_positions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    trading_symbol = Column(String, nullable=False)
    exchange = Column(String, nullable=True)
    product = Column(String, nullable=True)  # e.g. "MIS", "NRML"
    quantity = Column(Integer, nullable=False, default=0)
    buy_quantity = Column(Integer, nullable=False, default=0)
    sell_quantity = Column(Integer, nullable=False, default=0)
    average_price = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    last_price = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    pnl = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    unrealised_pnl = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    realised_pnl = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    synced_at = Column(DateTime, default=utc_now)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    user = relationship("User", back_populates="positions")

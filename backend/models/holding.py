"""KiteHolding model - a long-term holding in a user's demat account."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class KiteHolding(Base):
    """A holding synced from Kite.

    At most one row exists per (user, trading_symbol); re-syncing updates
    the row in place and keeps its ``id``.
    """

    __tablename__ = "kite_holdings"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "trading_symbol",
            name="uix_kite_holding_user_symbol",
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    trading_symbol = Column(String, nullable=False)
    exchange = Column(String, nullable=True)
    isin = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    average_price = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    last_price = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    pnl = Column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    product = Column(String, nullable=True)  # e.g. "CNC"
    synced_at = Column(DateTime, default=utc_now)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    user = relationship("User", back_populates="holdings")

"""User model - an account holder and their Kite Connect credentials."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class User(Base):
    """A user whose brokerage state is synced from Kite Connect.

    The ``kite_*`` columns are the account credential: written when the
    login callback completes and overwritten on re-authentication.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String, nullable=False, unique=True)
    kite_access_token = Column(String, nullable=True)
    kite_token_expiry = Column(DateTime, nullable=True)
    kite_user_id = Column(String, nullable=True)  # Kite's own client ID (e.g. "AB1234")
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    holdings = relationship("KiteHolding", back_populates="user")
    positions = relationship("KitePosition", back_populates="user")
    orders = relationship("KiteOrder", back_populates="user")
    sync_log_entries = relationship("SyncLogEntry", back_populates="user")

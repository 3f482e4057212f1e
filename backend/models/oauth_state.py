"""OAuthState model - correlates a Kite login callback with its user."""

from sqlalchemy import Column, DateTime, ForeignKey, String

from database import Base
from models.utils import utc_now


class OAuthState(Base):
    """An outstanding login redirect.

    The ``state`` token travels to Kite in ``redirect_params`` and comes
    back on the callback; the row is deleted once the callback consumes it.
    """

    __tablename__ = "oauth_states"

    state = Column(String, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utc_now)

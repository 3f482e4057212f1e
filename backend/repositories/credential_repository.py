"""Credential repository - users and their Kite access tokens."""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from models import User

logger = logging.getLogger(__name__)


def _as_naive_utc(dt: datetime) -> datetime:
    # SQLite drops tzinfo on the way back, so compare in naive UTC
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


class CredentialRepository:
    """Reads and writes the Kite credential stored on each user."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> User | None:
        return self.db.query(User).filter_by(id=user_id).first()

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter_by(username=username).first()

    def create_user(self, username: str) -> User:
        user = User(username=username)
        self.db.add(user)
        self.db.flush()
        return user

    def list_users(self) -> list[User]:
        """All users, oldest first."""
        return self.db.query(User).order_by(User.created_at, User.id).all()

    @staticmethod
    def get_access_token(user: User) -> str | None:
        return user.kite_access_token or None

    def save_access_token(
        self,
        user: User,
        access_token: str,
        expires_at: datetime | None,
        kite_user_id: str | None = None,
    ) -> User:
        """Store (or overwrite) the user's access token and expiry."""
        user.kite_access_token = access_token
        user.kite_token_expiry = expires_at
        if kite_user_id:
            user.kite_user_id = kite_user_id
        self.db.flush()
        logger.info("Stored Kite access token for user %s (expires %s)", user.username, expires_at)
        return user

    def clear_access_token(self, user: User) -> None:
        user.kite_access_token = None
        user.kite_token_expiry = None
        self.db.flush()

    @staticmethod
    def has_valid_token(user: User, now: datetime | None = None) -> bool:
        """True if the user holds a token whose expiry is still in the future.

        A token stored without an expiry counts as valid.
        """
        if not user.kite_access_token:
            return False
        if user.kite_token_expiry is None:
            return True
        now = now or datetime.now(timezone.utc)
        return _as_naive_utc(user.kite_token_expiry) > _as_naive_utc(now)

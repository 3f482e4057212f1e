"""Kite login service - login redirects and token persistence."""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from integrations.exceptions import ErrorCategory, KiteAuthError, categorize
from integrations.kite_auth import SESSION_LIFETIME, KiteAuthClient
from models import SyncStatus, User
from repositories.credential_repository import CredentialRepository
from repositories.oauth_state_repository import OAuthStateRepository
from services.sync_pipeline import SyncOutcome

logger = logging.getLogger(__name__)


class KiteAuthService:
    """Drives the Kite login round trip for a user.

    1. :meth:`start_login` remembers a fresh ``state`` for the
       user and returns the Kite login URL.
    2. Kite redirects back with ``request_token`` and ``state``;
       :meth:`complete_login` exchanges the token and stores it.
    """

    def __init__(self, auth_client: Optional[KiteAuthClient] = None):
        self._auth_client = auth_client

    @property
    def auth_client(self) -> KiteAuthClient:
        if self._auth_client is None:
            self._auth_client = KiteAuthClient()
        return self._auth_client

    def build_authorization_url(self, state: str) -> str:
        """Login URL for a caller-supplied ``state``."""
        return self.auth_client.build_authorization_url(state)

    def start_login(self, db: Session, user: User) -> tuple[str, str]:
        """Create a login state for ``user``.

        Returns:
            ``(state, login_url)``
        """
        state = secrets.token_urlsafe(24)
        OAuthStateRepository(db).create(user, state)
        db.commit()
        logger.info("Kite login started for user %s", user.username)
        return state, self.build_authorization_url(state)

    def get_authorization_url(self, db: Session, user: User) -> str:
        return self.start_login(db, user)[1]

    def exchange_token(
        self, request_token: str, api_secret: Optional[str] = None
    ) -> dict[str, str]:
        """Exchange a request token without storing anything.

        Raises:
            KiteAuthError: If the exchange fails.
        """
        session = self.auth_client.exchange_request_token(request_token, api_secret)
        tokens = {"access_token": session.access_token}
        if session.user_id:
            tokens["user_id"] = session.user_id
        return tokens

    def complete_login(
        self,
        db: Session,
        request_token: str,
        state: str,
        now: Optional[datetime] = None,
    ) -> SyncOutcome:
        """Finish the login callback: resolve ``state``, exchange, persist.

        The access token is stored with an expiry of now + one day. On any
        failure nothing is persisted and a FAILED outcome is returned.
        """
        states = OAuthStateRepository(db)
        credentials = CredentialRepository(db)

        mapping = states.get(state) if state else None
        if mapping is None:
            logger.warning("Kite login callback with unknown state")
            return SyncOutcome.failure("Kite authentication failed: invalid state", ErrorCategory.AUTH)

        user = credentials.get_user(mapping.user_id)
        if user is None:
            logger.warning("Kite login state %s points at a missing user", state)
            return SyncOutcome.failure("Kite authentication failed: user not found", ErrorCategory.AUTH)

        try:
            session = self.auth_client.exchange_request_token(request_token)
        except KiteAuthError as exc:
            logger.error("Kite login failed for user %s: %s", user.username, exc, exc_info=True)
            return SyncOutcome.failure(f"Kite authentication failed: {exc}", categorize(exc))

        now = now or datetime.now(timezone.utc)
        try:
            credentials.save_access_token(
                user,
                session.access_token,
                expires_at=now + SESSION_LIFETIME,
                kite_user_id=session.user_id,
            )
            states.delete(mapping)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Could not store Kite token for user %s", user.username, exc_info=True)
            return SyncOutcome.failure(
                f"Kite authentication failed: could not store token: {exc}",
                ErrorCategory.STORAGE,
            )

        return SyncOutcome(status=SyncStatus.SUCCESS, message="Kite authentication successful")

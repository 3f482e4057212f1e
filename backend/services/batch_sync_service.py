"""Batch sync service - syncs every authenticated user in turn."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from repositories.credential_repository import CredentialRepository
from services.sync_pipeline import SyncOutcome
from services.sync_service import KiteSyncService

logger = logging.getLogger(__name__)


@dataclass
class BatchSyncResult:
    """Summary of one batch run."""

    users_total: int = 0
    users_synced: int = 0
    users_failed: int = 0
    users_skipped: int = 0
    outcomes: dict[str, list[SyncOutcome]] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


class BatchSyncService:
    """Runs the holdings, positions and orders syncs for all users.

    Users are processed strictly one after another. Users without an
    access token are skipped; a failure for one user never stops the batch.
    """

    def __init__(self, sync_service: Optional[KiteSyncService] = None):
        self._sync_service = sync_service

    @property
    def sync_service(self) -> KiteSyncService:
        if self._sync_service is None:
            self._sync_service = KiteSyncService()
        return self._sync_service

    def run(self, db: Session, usernames: Optional[list[str]] = None) -> BatchSyncResult:
        """Sync every known user (or only ``usernames`` if given).

        Args:
            db: Database session
            usernames: Optional allow-list of usernames to sync

        Returns:
            Per-user outcomes and counts
        """
        users = CredentialRepository(db).list_users()
        if usernames is not None:
            wanted = set(usernames)
            users = [u for u in users if u.username in wanted]

        result = BatchSyncResult(users_total=len(users))
        logger.info("Batch sync started for %d users", len(users))

        for user in users:
            # Cache for the error handler, the session may be unusable there
            user_id = user.id
            username = user.username

            if not user.kite_access_token:
                logger.debug("Skipping user %s: no Kite access token", username)
                result.users_skipped += 1
                continue

            logger.info("Syncing Kite data for user %s", username)
            try:
                outcomes = self.sync_service.sync_all(db, user)
            except Exception as e:
                logger.error(
                    "Unexpected error syncing Kite data for user %s: %s",
                    username, e, exc_info=True,
                )
                db.rollback()
                result.users_failed += 1
                result.errors.append(f"{username}: {e}")
                continue

            result.outcomes[user_id] = outcomes
            failed = [o for o in outcomes if not o.succeeded]
            if failed:
                result.users_failed += 1
                for outcome in failed:
                    logger.warning("User %s: %s", username, outcome.message)
                    result.errors.append(f"{username}: {outcome.message}")
            else:
                result.users_synced += 1

        logger.info(
            "Batch sync completed: %d synced, %d failed, %d skipped",
            result.users_synced, result.users_failed, result.users_skipped,
        )
        return result

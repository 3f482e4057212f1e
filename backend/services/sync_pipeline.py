"""Generic fetch -> parse -> map -> reconcile -> log pipeline.

One :class:`EntitySyncPipeline` exists per Kite resource type. Running it
for a user is one *sync unit*: it is recorded in the sync log, its storage
writes are applied atomically, and it always returns a
:class:`SyncOutcome` instead of raising.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from integrations.exceptions import (
    ErrorCategory,
    KiteAuthError,
    StorageError,
    SyncError,
    categorize,
)
from integrations.kite_protocol import ResourceFetcher
from models import SyncLogEntry, SyncResourceType, SyncStatus, User
from repositories.sync_log_repository import SyncLogRepository
from services.reconciliation import ReconcileStats, ReconciliationStrategy

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

_LABELS = {
    SyncResourceType.HOLDING: "Holdings",
    SyncResourceType.POSITION: "Positions",
    SyncResourceType.ORDER: "Orders",
}


@dataclass
class SyncOutcome:
    """Structured result of one sync unit.

    ``error_category`` is set only for failures and tells the caller which
    kind of error (auth, remote, parse, storage) caused it.
    """

    status: SyncStatus
    record_count: int = 0
    message: str = ""
    resource_type: SyncResourceType | None = None
    error_category: ErrorCategory | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SyncStatus.SUCCESS

    @classmethod
    def success(
        cls, record_count: int, message: str, resource_type: SyncResourceType | None = None
    ) -> "SyncOutcome":
        return cls(
            status=SyncStatus.SUCCESS,
            record_count=record_count,
            message=message,
            resource_type=resource_type,
        )

    @classmethod
    def failure(
        cls,
        message: str,
        error_category: ErrorCategory,
        resource_type: SyncResourceType | None = None,
    ) -> "SyncOutcome":
        return cls(
            status=SyncStatus.FAILED,
            record_count=0,
            message=message,
            resource_type=resource_type,
            error_category=error_category,
        )


class EntitySyncPipeline(Generic[RecordT]):
    """Syncs one Kite resource type for one user at a time.

    Args:
        resource_type: Which resource this pipeline covers (for the log).
        fetcher: Called with the user's access token; returns the decoded
            JSON envelope.
        parser: Extracts the list of raw records from the envelope.
        mapper: Converts one raw record into a normalized record.
        strategy: Merges the normalized records into storage.
        sync_log_factory: Builds the sync log repository for a session.
    """

    def __init__(
        self,
        resource_type: SyncResourceType,
        fetcher: ResourceFetcher,
        parser: Callable[[Any], list],
        mapper: Callable[[Any], RecordT],
        strategy: ReconciliationStrategy,
        sync_log_factory: Callable[[Session], SyncLogRepository] = SyncLogRepository,
    ):
        self.resource_type = resource_type
        self._fetcher = fetcher
        self._parser = parser
        self._mapper = mapper
        self._strategy = strategy
        self._sync_log_factory = sync_log_factory

    @property
    def label(self) -> str:
        return _LABELS.get(self.resource_type, self.resource_type.value.title())

    def run(self, db: Session, user: User) -> SyncOutcome:
        """Run one sync unit and commit its result.

        Never raises: every failure is logged, written to the sync log as
        FAILED and returned as a FAILED outcome.
        """
        sync_log = self._sync_log_factory(db)
        try:
            entry = sync_log.start(user, self.resource_type)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "%s sync for user %s could not be logged: %s",
                self.label, user.id, exc, exc_info=True,
            )
            return SyncOutcome.failure(
                f"{self.label} sync failed: could not record sync start: {exc}",
                ErrorCategory.STORAGE,
                self.resource_type,
            )

        logger.info("%s sync started for user %s", self.label, user.id)

        try:
            stats = self._execute(db, user)
        except SyncError as exc:
            logger.warning(
                "%s sync failed for user %s (%s): %s",
                self.label, user.id, exc.category.value, exc, exc_info=True,
            )
            return self._fail(db, sync_log, entry, user, exc)
        except Exception as exc:
            logger.error(
                "Unexpected error during %s sync for user %s: %s",
                self.label.lower(), user.id, exc, exc_info=True,
            )
            return self._fail(db, sync_log, entry, user, exc)

        message = f"{self.label} synced successfully ({stats.processed} records)"
        try:
            sync_log.complete(entry, SyncStatus.SUCCESS, record_count=stats.processed)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "%s sync for user %s could not be committed: %s",
                self.label, user.id, exc, exc_info=True,
            )
            return SyncOutcome.failure(
                f"{self.label} sync failed: could not commit results: {exc}",
                ErrorCategory.STORAGE,
                self.resource_type,
            )

        logger.info(
            "%s sync completed for user %s via %s: %d records (%d new, %d updated, %d deleted)",
            self.label, user.id, self._strategy.name,
            stats.processed, stats.created, stats.updated, stats.deleted,
        )
        return SyncOutcome.success(stats.processed, message, self.resource_type)

    def _execute(self, db: Session, user: User) -> ReconcileStats:
        access_token = user.kite_access_token
        if not access_token:
            raise KiteAuthError("not authenticated")

        envelope = self._fetcher(access_token)
        raw_records = self._parser(envelope)
        records = [self._mapper(raw) for raw in raw_records]
        logger.debug("%s: %d records fetched for user %s", self.label, len(records), user.id)

        # Savepoint: either every write of this unit lands or none does
        try:
            with db.begin_nested():
                return self._strategy.apply(db, user, records)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to store {self.label.lower()}: {exc}") from exc

    def _fail(
        self,
        db: Session,
        sync_log: SyncLogRepository,
        entry: SyncLogEntry,
        user: User,
        exc: Exception,
    ) -> SyncOutcome:
        message = f"{self.label} sync failed: {exc}"
        try:
            sync_log.complete(entry, SyncStatus.FAILED, record_count=0, error_message=str(exc))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.error(
                "Could not record failed %s sync for user %s",
                self.label.lower(), user.id, exc_info=True,
            )
        return SyncOutcome.failure(message, categorize(exc), self.resource_type)

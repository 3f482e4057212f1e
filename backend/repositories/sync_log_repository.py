"""Sync log repository - the append-only sync outcome ledger."""

import logging

from sqlalchemy.orm import Session

from models import SyncLogEntry, SyncResourceType, SyncStatus, User, utc_now

logger = logging.getLogger(__name__)


class SyncLogRepository:
    """Records the start and outcome of each sync unit."""

    def __init__(self, db: Session):
        self.db = db

    def start(self, user: User, resource_type: SyncResourceType) -> SyncLogEntry:
        """Open a RUNNING entry for a sync that is about to begin."""
        entry = SyncLogEntry(
            user_id=user.id,
            resource_type=resource_type.value,
            status=SyncStatus.RUNNING.value,
            record_count=0,
            started_at=utc_now(),
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def complete(
        self,
        entry: SyncLogEntry,
        status: SyncStatus,
        record_count: int = 0,
        error_message: str | None = None,
    ) -> SyncLogEntry:
        """Close an entry with its final outcome.

        Raises:
            ValueError: If ``status`` is RUNNING or the entry is already
                complete.
        """
        if status == SyncStatus.RUNNING:
            raise ValueError("A sync log entry cannot be completed as RUNNING")
        if entry.is_complete:
            raise ValueError(f"Sync log entry {entry.id} is already complete ({entry.status})")
        entry.status = status.value
        entry.record_count = record_count
        entry.error_message = error_message
        entry.completed_at = utc_now()
        self.db.flush()
        return entry

    def list_for_user(
        self,
        user: User,
        resource_type: SyncResourceType | None = None,
        limit: int = 50,
    ) -> list[SyncLogEntry]:
        """Most recent entries first."""
        query = self.db.query(SyncLogEntry).filter_by(user_id=user.id)
        if resource_type is not None:
            query = query.filter_by(resource_type=resource_type.value)
        return query.order_by(SyncLogEntry.started_at.desc()).limit(limit).all()

"""Tests for SyncLogRepository."""

from datetime import datetime, timedelta

import pytest

from models import SyncLogEntry, SyncResourceType, SyncStatus
from repositories.sync_log_repository import SyncLogRepository


class TestSyncLogRepository:
    def test_start_creates_running_entry(self, db, user):
        entry = SyncLogRepository(db).start(user, SyncResourceType.HOLDING)

        assert entry.id is not None
        assert entry.status == "RUNNING"
        assert entry.resource_type == "HOLDING"
        assert entry.record_count == 0
        assert entry.started_at is not None
        assert entry.completed_at is None
        assert not entry.is_complete

    def test_complete_success(self, db, user):
        repo = SyncLogRepository(db)
        entry = repo.start(user, SyncResourceType.ORDER)

        repo.complete(entry, SyncStatus.SUCCESS, record_count=4)

        assert entry.status == "SUCCESS"
        assert entry.record_count == 4
        assert entry.completed_at is not None
        assert entry.is_complete

    def test_complete_failure_records_error(self, db, user):
        repo = SyncLogRepository(db)
        entry = repo.start(user, SyncResourceType.POSITION)

        repo.complete(entry, SyncStatus.FAILED, error_message="HTTP 500")

        assert entry.status == "FAILED"
        assert entry.error_message == "HTTP 500"
        assert entry.record_count == 0

    def test_cannot_complete_as_running(self, db, user):
        repo = SyncLogRepository(db)
        entry = repo.start(user, SyncResourceType.HOLDING)

        with pytest.raises(ValueError, match="RUNNING"):
            repo.complete(entry, SyncStatus.RUNNING)

    def test_cannot_complete_twice(self, db, user):
        repo = SyncLogRepository(db)
        entry = repo.start(user, SyncResourceType.HOLDING)
        repo.complete(entry, SyncStatus.SUCCESS, record_count=1)

        with pytest.raises(ValueError, match="already complete"):
            repo.complete(entry, SyncStatus.FAILED, error_message="late")

        assert entry.status == "SUCCESS"
        assert entry.error_message is None

    def test_list_for_user_newest_first(self, db, user, other_user):
        repo = SyncLogRepository(db)
        base = datetime(2024, 1, 15, 3, 0)
        for offset, resource_type in enumerate(
            [SyncResourceType.HOLDING, SyncResourceType.POSITION, SyncResourceType.ORDER]
        ):
            entry = repo.start(user, resource_type)
            entry.started_at = base + timedelta(minutes=offset)
        repo.start(other_user, SyncResourceType.HOLDING)
        db.commit()

        entries = repo.list_for_user(user)

        assert [e.resource_type for e in entries] == ["ORDER", "POSITION", "HOLDING"]

    def test_list_for_user_filters_and_limits(self, db, user):
        repo = SyncLogRepository(db)
        for _ in range(3):
            repo.start(user, SyncResourceType.HOLDING)
        repo.start(user, SyncResourceType.ORDER)
        db.commit()

        assert len(repo.list_for_user(user, resource_type=SyncResourceType.HOLDING)) == 3
        assert len(repo.list_for_user(user, limit=2)) == 2
        assert db.query(SyncLogEntry).count() == 4

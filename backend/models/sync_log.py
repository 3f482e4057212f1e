"""SyncLogEntry model - records the outcome of each sync invocation."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class SyncResourceType(str, Enum):
    """Kind of Kite resource a sync unit covers."""

    HOLDING = "HOLDING"
    POSITION = "POSITION"
    ORDER = "ORDER"


class SyncStatus(str, Enum):
    """Lifecycle status of a sync log entry."""

    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class SyncLogEntry(Base):
    """A log entry for one sync of one resource type for one user.

    Created as ``RUNNING`` when the sync starts and completed exactly once
    with ``SUCCESS`` or ``FAILED``. Completed entries are never modified.
    """

    __tablename__ = "sync_log_entries"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    resource_type = Column(String, nullable=False)  # SyncResourceType value
    status = Column(String, nullable=False, default=SyncStatus.RUNNING.value)
    record_count = Column(Integer, default=0)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime, nullable=False, default=utc_now)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="sync_log_entries")

    @property
    def is_complete(self) -> bool:
        return self.status != SyncStatus.RUNNING.value

"""Shared column defaults for the Kite ORM models."""

import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    """Primary key default: a random UUID4 as a 36-character string."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Timestamp default: the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)

"""SQLAlchemy ORM models."""

from .holding import KiteHolding
from .oauth_state import OAuthState
from .order import KiteOrder
from .position import KitePosition
from .sync_log import SyncLogEntry, SyncResourceType, SyncStatus
from .user import User
from .utils import generate_uuid, utc_now

__all__ = ["KiteHolding", "KiteOrder", "KitePosition", "OAuthState", "SyncLogEntry", "SyncResourceType", "SyncStatus", "User", "generate_uuid", "utc_now"]

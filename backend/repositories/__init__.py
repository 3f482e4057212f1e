"""Storage repositories.

Each repository wraps a SQLAlchemy session and exposes only the
operations the sync engine needs. Repositories ``flush()``; committing is
left to the caller.
"""

from repositories.base import EntityRepository
from repositories.credential_repository import CredentialRepository
from repositories.holding_repository import HoldingRepository
from repositories.oauth_state_repository import OAuthStateRepository
from repositories.order_repository import OrderRepository
from repositories.position_repository import PositionRepository
from repositories.sync_log_repository import SyncLogRepository

__all__ = [
    "CredentialRepository",
    "EntityRepository",
    "HoldingRepository",
    "OAuthStateRepository",
    "OrderRepository",
    "PositionRepository",
    "SyncLogRepository",
]

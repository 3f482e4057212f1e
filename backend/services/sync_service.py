"""Sync service - syncs Kite holdings, positions and orders per user."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from integrations.kite_client import KiteClient
from integrations.kite_mappers import (
    map_holding,
    map_order,
    map_position,
    parse_holdings,
    parse_orders,
    parse_positions,
)
from models import SyncResourceType, User
from repositories.holding_repository import HoldingRepository
from repositories.order_repository import OrderRepository
from repositories.position_repository import PositionRepository
from repositories.sync_log_repository import SyncLogRepository
from schemas import HoldingResponse, OrderResponse, PositionResponse, SyncLogEntryResponse
from services.reconciliation import ReplaceAll, UpsertByKey
from services.sync_pipeline import EntitySyncPipeline, SyncOutcome

logger = logging.getLogger(__name__)


class KiteSyncService:
    """Service for syncing a user's Kite account state into local storage.

    Each ``sync_*`` method is a fixed wiring of :class:`EntitySyncPipeline`:

    - holdings: ``/portfolio/holdings``, upserted by trading symbol
    - positions: ``/portfolio/positions`` (``net``), replaced wholesale
    - orders: ``/orders``, upserted by order id
    """

    def __init__(self, client: Optional[KiteClient] = None):
        """Initialize with an optional Kite client for dependency injection.

        Args:
            client: Kite API client. If None, a default client is created
                from settings on first use.
        """
        self._client = client
        self._pipelines: dict[SyncResourceType, EntitySyncPipeline] | None = None

    @property
    def client(self) -> KiteClient:
        """Get the Kite client, creating default if not provided."""
        if self._client is None:
            self._client = KiteClient()
        return self._client

    @property
    def pipelines(self) -> dict[SyncResourceType, EntitySyncPipeline]:
        if self._pipelines is None:
            self._pipelines = {
                SyncResourceType.HOLDING: EntitySyncPipeline(
                    SyncResourceType.HOLDING,
                    fetcher=lambda token: self.client.fetch_holdings(token),
                    parser=parse_holdings,
                    mapper=map_holding,
                    strategy=UpsertByKey(HoldingRepository),
                ),
                SyncResourceType.POSITION: EntitySyncPipeline(
                    SyncResourceType.POSITION,
                    fetcher=lambda token: self.client.fetch_positions(token),
                    parser=parse_positions,
                    mapper=map_position,
                    strategy=ReplaceAll(PositionRepository),
                ),
                SyncResourceType.ORDER: EntitySyncPipeline(
                    SyncResourceType.ORDER,
                    fetcher=lambda token: self.client.fetch_orders(token),
                    parser=parse_orders,
                    mapper=map_order,
                    strategy=UpsertByKey(OrderRepository),
                ),
            }
        return self._pipelines

    def sync_holdings(self, db: Session, user: User) -> SyncOutcome:
        return self.pipelines[SyncResourceType.HOLDING].run(db, user)

    def sync_positions(self, db: Session, user: User) -> SyncOutcome:
        return self.pipelines[SyncResourceType.POSITION].run(db, user)

    def sync_orders(self, db: Session, user: User) -> SyncOutcome:
        return self.pipelines[SyncResourceType.ORDER].run(db, user)

    def sync_all(self, db: Session, user: User) -> list[SyncOutcome]:
        """Sync holdings, then positions, then orders.

        The three are independent; the order only keeps logs readable.
        """
        return [
            self.sync_holdings(db, user),
            self.sync_positions(db, user),
            self.sync_orders(db, user),
        ]

    @staticmethod
    def get_holdings(db: Session, user: User) -> list[HoldingResponse]:
        return [HoldingResponse.model_validate(h) for h in HoldingRepository(db).list_for_user(user)]

    @staticmethod
    def get_positions(db: Session, user: User) -> list[PositionResponse]:
        return [PositionResponse.model_validate(p) for p in PositionRepository(db).list_for_user(user)]

    @staticmethod
    def get_orders(db: Session, user: User) -> list[OrderResponse]:
        return [OrderResponse.model_validate(o) for o in OrderRepository(db).list_for_user(user)]

    @staticmethod
    def get_sync_history(
        db: Session,
        user: User,
        resource_type: SyncResourceType | None = None,
        limit: int = 50,
    ) -> list[SyncLogEntryResponse]:
        """Most recent sync log entries for the user."""
        entries = SyncLogRepository(db).list_for_user(user, resource_type=resource_type, limit=limit)
        return [SyncLogEntryResponse.model_validate(e) for e in entries]

"""Pydantic schemas for synced Kite data and sync results."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class HoldingResponse(BaseModel):
    """A stored holding."""

    id: str
    trading_symbol: str
    exchange: Optional[str] = None
    isin: Optional[str] = None
    quantity: int
    average_price: Decimal
    last_price: Decimal
    pnl: Decimal
    product: Optional[str] = None
    synced_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PositionResponse(BaseModel):
    """A stored net position."""

    id: str
    trading_symbol: str
    exchange: Optional[str] = None
    product: Optional[str] = None
    quantity: int
    buy_quantity: int
    sell_quantity: int
    average_price: Decimal
    last_price: Decimal
    pnl: Decimal
    unrealised_pnl: Decimal
    realised_pnl: Decimal
    synced_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """A stored order."""

    id: str
    order_id: str
    trading_symbol: Optional[str] = None
    exchange: Optional[str] = None
    transaction_type: Optional[str] = None
    order_type: Optional[str] = None
    product: Optional[str] = None
    quantity: int
    price: Decimal
    status: Optional[str] = None
    order_timestamp: Optional[datetime] = None
    synced_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SyncResponse(BaseModel):
    """Result of a sync (or login) request as returned to callers."""

    status: str  # "SUCCESS" | "FAILED"
    message: str
    record_count: int = 0
    error_category: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome) -> "SyncResponse":
        return cls(
            status=outcome.status.value,
            message=outcome.message,
            record_count=outcome.record_count,
            error_category=outcome.error_category.value if outcome.error_category else None,
        )


class SyncLogEntryResponse(BaseModel):
    """A sync log entry."""

    id: str
    resource_type: str
    status: str
    record_count: int
    error_message: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

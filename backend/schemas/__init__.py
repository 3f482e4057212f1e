"""Pydantic schemas."""

from schemas.kite import (
    HoldingResponse,
    OrderResponse,
    PositionResponse,
    SyncLogEntryResponse,
    SyncResponse,
)

__all__ = [
    "HoldingResponse",
    "OrderResponse",
    "PositionResponse",
    "SyncLogEntryResponse",
    "SyncResponse",
]

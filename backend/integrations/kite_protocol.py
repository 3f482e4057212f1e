"""Normalized record types for Kite Connect data.

The mappers in :mod:`integrations.kite_mappers` turn raw JSON objects
into these dataclasses; repositories turn them into ORM rows.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

# Every Kite request must pin the API version.
KITE_VERSION_HEADER = {"X-Kite-Version": "3"}


@dataclass
class HoldingRecord:
    """A holding from ``GET /portfolio/holdings``."""

    trading_symbol: str
    exchange: str | None
    isin: str | None
    quantity: int
    average_price: Decimal
    last_price: Decimal
    pnl: Decimal
    product: str | None


@dataclass
class PositionRecord:
    """A net position from ``GET /portfolio/positions``."""

    trading_symbol: str
    exchange: str | None
    product: str | None
    quantity: int
    buy_quantity: int
    sell_quantity: int
    average_price: Decimal
    last_price: Decimal
    pnl: Decimal
    unrealised_pnl: Decimal
    realised_pnl: Decimal


@dataclass
class OrderRecord:
    """An order from ``GET /orders``."""

    order_id: str
    trading_symbol: str | None
    exchange: str | None
    transaction_type: str | None
    order_type: str | None
    product: str | None
    quantity: int
    price: Decimal
    status: str | None
    order_timestamp: datetime | None


@dataclass
class KiteSession:
    """Result of a successful request-token exchange."""

    access_token: str
    user_id: str | None = None


class ResourceFetcher(Protocol):
    """Fetches one Kite resource and returns its decoded JSON envelope."""

    def __call__(self, access_token: str) -> Any:
        ...

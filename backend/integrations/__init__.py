"""External API integrations.

This package contains:
- Kite client: HTTP access to the Kite Connect REST API
- Kite auth: login URL, checksum signing and request-token exchange
- Kite mappers: JSON envelope parsing and record normalization
- Exceptions: typed error hierarchy shared by the sync engine
"""

from integrations.kite_auth import KiteAuthClient, generate_checksum
from integrations.kite_client import KiteClient
from integrations.kite_protocol import (
    HoldingRecord,
    KiteSession,
    OrderRecord,
    PositionRecord,
)

__all__ = [
    "HoldingRecord",
    "KiteAuthClient",
    "KiteClient",
    "KiteSession",
    "OrderRecord",
    "PositionRecord",
    "generate_checksum",
]

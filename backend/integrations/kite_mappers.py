"""Parsers and mappers from Kite JSON payloads to normalized records.

Kite wraps every response in an envelope ``{"status": ..., "data": ...}``.
The parsers pull the record list out of the envelope; the mappers coerce
each raw record into a dataclass from :mod:`integrations.kite_protocol`.
"""

import logging
from typing import Any

from integrations.exceptions import KiteDataError
from integrations.kite_protocol import HoldingRecord, OrderRecord, PositionRecord
from integrations.parsing_utils import (
    parse_decimal,
    parse_int,
    parse_kite_timestamp,
    parse_text,
)

logger = logging.getLogger(__name__)


def extract_records(envelope: Any, *path: str) -> list[dict]:
    """Walk ``path`` into the envelope and return the record list found there.

    A missing key or a non-list payload yields an empty list, which is how
    Kite reports an empty portfolio.

    Raises:
        KiteDataError: If the envelope itself is not a JSON object.
    """
    if not isinstance(envelope, dict):
        raise KiteDataError(
            f"Expected a JSON object envelope, got {type(envelope).__name__}"
        )
    node: Any = envelope
    for key in path:
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    if not isinstance(node, list):
        if node is not None:
            logger.debug("Kite: %s is %s, treating as empty", ".".join(path), type(node).__name__)
        return []
    return node


def parse_holdings(envelope: Any) -> list[dict]:
    return extract_records(envelope, "data")


def parse_positions(envelope: Any) -> list[dict]:
    """Positions come back split into ``net`` and ``day``; only ``net`` is stored."""
    return extract_records(envelope, "data", "net")


def parse_orders(envelope: Any) -> list[dict]:
    return extract_records(envelope, "data")


def _require_object(raw: Any, kind: str) -> dict:
    if not isinstance(raw, dict):
        raise KiteDataError(f"Expected a JSON object for {kind}, got {type(raw).__name__}")
    return raw


def _require_text(raw: dict, key: str, kind: str) -> str:
    value = parse_text(raw.get(key))
    if value is None:
        raise KiteDataError(f"{kind} record is missing '{key}'")
    return value


def map_holding(raw: Any) -> HoldingRecord:
    """Map one ``/portfolio/holdings`` entry."""
    raw = _require_object(raw, "holding")
    return HoldingRecord(
        trading_symbol=_require_text(raw, "tradingsymbol", "Holding"),
        exchange=parse_text(raw.get("exchange")),
        isin=parse_text(raw.get("isin")),
        quantity=parse_int(raw.get("quantity"), "quantity"),
        average_price=parse_decimal(raw.get("average_price"), "average_price"),
        last_price=parse_decimal(raw.get("last_price"), "last_price"),
        pnl=parse_decimal(raw.get("pnl"), "pnl"),
        product=parse_text(raw.get("product")),
    )


def map_position(raw: Any) -> PositionRecord:
    """Map one ``/portfolio/positions`` ``net`` entry."""
    raw = _require_object(raw, "position")
    return PositionRecord(
        trading_symbol=_require_text(raw, "tradingsymbol", "Position"),
        exchange=parse_text(raw.get("exchange")),
        product=parse_text(raw.get("product")),
        quantity=parse_int(raw.get("quantity"), "quantity"),
        buy_quantity=parse_int(raw.get("buy_quantity"), "buy_quantity"),
        sell_quantity=parse_int(raw.get("sell_quantity"), "sell_quantity"),
        average_price=parse_decimal(raw.get("average_price"), "average_price"),
        last_price=parse_decimal(raw.get("last_price"), "last_price"),
        pnl=parse_decimal(raw.get("pnl"), "pnl"),
        unrealised_pnl=parse_decimal(raw.get("unrealised"), "unrealised"),
        realised_pnl=parse_decimal(raw.get("realised"), "realised"),
    )


def map_order(raw: Any) -> OrderRecord:
    """Map one ``/orders`` entry."""
    raw = _require_object(raw, "order")
    return OrderRecord(
        order_id=_require_text(raw, "order_id", "Order"),
        trading_symbol=parse_text(raw.get("tradingsymbol")),
        exchange=parse_text(raw.get("exchange")),
        transaction_type=parse_text(raw.get("transaction_type")),
        order_type=parse_text(raw.get("order_type")),
        product=parse_text(raw.get("product")),
        quantity=parse_int(raw.get("quantity"), "quantity"),
        price=parse_decimal(raw.get("price"), "price"),
        status=parse_text(raw.get("status")),
        order_timestamp=parse_kite_timestamp(raw.get("order_timestamp"), "order_timestamp"),
    )

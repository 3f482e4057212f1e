"""Test fixtures and sample data."""
import pytest
from datetime import datetime, timedelta, timezone

from models import User
from sqlalchemy.orm import Session


SAMPLE_HOLDINGS_RESPONSE = {
    "status": "success",
    "data": [
        {
            "tradingsymbol": "INFY",
            "exchange": "NSE",
            "isin": "INE009A01021",
            "quantity": 10,
            "average_price": "1450.00",
            "last_price": "1500.00",
            "pnl": "500.00",
            "product": "CNC",
        }
    ],
}

SAMPLE_POSITIONS_RESPONSE = {
    "status": "success",
    "data": {
        "net": [
            {
                "tradingsymbol": "NIFTY24JANFUT",
                "exchange": "NFO",
                "product": "NRML",
                "quantity": 50,
                "buy_quantity": 75,
                "sell_quantity": 25,
                "average_price": 21500.5,
                "last_price": 21600,
                "pnl": 5000,
                "unrealised": 5000,
                "realised": 0,
            },
            {
                "tradingsymbol": "SBIN",
                "exchange": "NSE",
                "product": "MIS",
                "quantity": 0,
                "buy_quantity": 100,
                "sell_quantity": 100,
                "average_price": 0,
                "last_price": 620.35,
                "pnl": 150.25,
                "unrealised": 0,
                "realised": 150.25,
            },
        ],
        "day": [],
    },
}

SAMPLE_ORDERS_RESPONSE = {
    "status": "success",
    "data": [
        {
            "order_id": "240115000000001",
            "tradingsymbol": "INFY",
            "exchange": "NSE",
            "transaction_type": "BUY",
            "order_type": "LIMIT",
            "product": "CNC",
            "quantity": 10,
            "price": 1450,
            "status": "COMPLETE",
            "order_timestamp": "2024-01-15 09:15:32",
        },
        {
            "order_id": "240115000000002",
            "tradingsymbol": "SBIN",
            "exchange": "NSE",
            "transaction_type": "SELL",
            "order_type": "MARKET",
            "product": "MIS",
            "quantity": 100,
            "price": 0,
            "status": "OPEN",
            "order_timestamp": "2024-01-15 10:02:11",
        },
    ],
}

SAMPLE_SESSION_RESPONSE = {
    "status": "success",
    "data": {
        "user_id": "AB1234",
        "user_name": "Test User",
        "access_token": "access_token_abc",
        "public_token": "public_token_xyz",
    },
}


def create_user(
    db: Session,
    username: str,
    access_token: str | None = None,
    expires_in: timedelta | None = timedelta(hours=12),
) -> User:
    """Create a user, optionally holding a Kite access token.

    This is a helper function (not a fixture) for tests that need several
    users.
    """
    expiry = None
    if access_token and expires_in is not None:
        expiry = datetime.now(timezone.utc) + expires_in
    user = User(
        username=username,
        kite_access_token=access_token,
        kite_token_expiry=expiry,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db: Session) -> User:
    """Create a user with a valid Kite access token."""
    return create_user(db, "alice", access_token="token_alice")


@pytest.fixture
def other_user(db: Session) -> User:
    """Create a second authenticated user."""
    return create_user(db, "bob", access_token="token_bob")


@pytest.fixture
def unauthenticated_user(db: Session) -> User:
    """Create a user that never linked Kite."""
    return create_user(db, "carol")

"""Shared value-coercion utilities for Kite API payloads.

Kite returns prices as JSON numbers or numeric strings, quantities as
integers, and timestamps as ``"YYYY-MM-DD HH:MM:SS"`` strings. These
helpers normalise those into ``Decimal``, ``int`` and ``datetime`` and
raise :class:`~integrations.exceptions.KiteDataError` on garbage.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from integrations.exceptions import KiteDataError

ZERO = Decimal("0")


def parse_decimal(value, field_name: str = "value") -> Decimal:
    """Coerce a JSON number or numeric string to ``Decimal``.

    Missing values (``None`` or an empty string) become zero. Floats go
    through ``str()`` so ``1450.1`` stays ``Decimal("1450.1")``.

    Raises:
        KiteDataError: If the value is not numeric.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise KiteDataError(f"Invalid decimal for {field_name}: {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise KiteDataError(f"Invalid decimal for {field_name}: {value!r}") from exc
    if not result.is_finite():
        raise KiteDataError(f"Invalid decimal for {field_name}: {value!r}")
    return result


def parse_int(value, field_name: str = "value") -> int:
    """Coerce a JSON number or numeric string to ``int``; missing becomes 0.

    Raises:
        KiteDataError: If the value is not a whole number.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise KiteDataError(f"Invalid integer for {field_name}: {value!r}")
    if isinstance(value, int):
        return value
    number = parse_decimal(value, field_name)
    if number != number.to_integral_value():
        raise KiteDataError(f"Invalid integer for {field_name}: {value!r}")
    return int(number)


def parse_text(value) -> str | None:
    """Return a stripped string, or ``None`` for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_kite_timestamp(value, field_name: str = "timestamp") -> datetime | None:
    """Parse a Kite ``"YYYY-MM-DD HH:MM:SS"`` timestamp.

    The space separator is replaced with ``T`` before ISO parsing. Kite
    timestamps are exchange-local (IST) and carry no offset, so the result
    is a naive datetime.

    Returns:
        The parsed datetime, or ``None`` if the value is missing/blank.

    Raises:
        KiteDataError: If the value is present but not a valid timestamp.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    value_str = str(value).strip()
    if not value_str:
        return None
    try:
        return datetime.fromisoformat(value_str.replace(" ", "T"))
    except ValueError as exc:
        raise KiteDataError(f"Invalid timestamp for {field_name}: {value!r}") from exc

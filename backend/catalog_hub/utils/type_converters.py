"""
Type converters — shared value conversion utilities.

The snapshot differ and the stores see the same field as "12.00", 12.0 or
Decimal("12"). Everything numeric goes through to_decimal so those compare
equal, while None, missing and "" collapse into a single "no value".
Version: 1.0.0
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert value to Decimal, returning None if blank or not numeric.

    Zero is a value, not blank.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps 19.99 from becoming 19.989999...
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return result if result.is_finite() else None


def to_int(value: Any) -> Optional[int]:
    """Convert value to int, returning None if invalid."""
    number = to_decimal(value)
    if number is None:
        return None
    return int(number)


def numbers_differ(left: Any, right: Any) -> bool:
    """Numeric-safe inequality with a shared blank sentinel."""
    return to_decimal(left) != to_decimal(right)


def to_json_value(value: Any) -> Any:
    """Make a value safe for a PostgREST JSON payload."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() and value.as_tuple().exponent >= 0 else float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value


def format_currency(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"


def extract_numeric_id(gid: Optional[str]) -> Optional[str]:
    """Trailing numeric id of a Shopify GID ("gid://shopify/Product/123" -> "123")."""
    if not gid:
        return None
    tail = str(gid).rstrip("/").rsplit("/", 1)[-1]
    return tail if tail.isdigit() else None

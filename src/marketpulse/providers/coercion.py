"""Coercion helpers for provider payloads.

Several feeds send numbers as strings ("0.00010000"), others as JSON numbers,
and any field may be missing or null. These helpers never raise: a value
that cannot be read as a finite number becomes None.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from marketpulse.exceptions import MalformedPayloadError
from marketpulse.models import Series, TimePoint


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a provider number (str, int, float) to a finite Decimal, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def to_timestamp_ms(value: Any, *, seconds: bool = False) -> int | None:
    """Coerce a provider timestamp to integer milliseconds, else None."""
    number = to_decimal(value)
    if number is None:
        return None
    if seconds:
        number *= 1000
    return int(number)


def dig(payload: Any, *keys: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing."""
    current = payload
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def require_list(payload: Any, operation: str) -> list:
    """Return payload if it is a list, else raise MalformedPayloadError."""
    if not isinstance(payload, list):
        raise MalformedPayloadError(
            f"{operation}: expected a list, got {type(payload).__name__}"
        )
    return payload


def build_series(
    rows: Iterable[Any],
    time_key: str,
    value_key: str,
    *,
    seconds: bool = False,
) -> Series:
    """Build an ascending series from a list of provider records.

    Records whose timestamp or value cannot be coerced are dropped. The
    result is sorted by timestamp regardless of the provider's order.
    """
    points = []
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        ts = to_timestamp_ms(row.get(time_key), seconds=seconds)
        value = to_decimal(row.get(value_key))
        if ts is None or value is None:
            continue
        points.append(TimePoint(timestamp_ms=ts, value=value))
    points.sort(key=lambda p: p.timestamp_ms)
    return tuple(points)


def build_pair_series(rows: Iterable[Any]) -> Series:
    """Build an ascending series from ``[timestamp_ms, value]`` pairs."""
    points = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            continue
        ts = to_timestamp_ms(row[0])
        value = to_decimal(row[1])
        if ts is None or value is None:
            continue
        points.append(TimePoint(timestamp_ms=ts, value=value))
    points.sort(key=lambda p: p.timestamp_ms)
    return tuple(points)

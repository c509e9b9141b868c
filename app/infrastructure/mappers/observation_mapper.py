from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from app.domain.entities.price_history import Observation


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not a valid integer value.")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        parsed = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"invalid integer value: {value!r}") from exc
    if parsed != parsed.to_integral_value():
        raise ValueError(f"invalid integer value: {value!r}")
    return int(parsed)


def map_row_to_observation(row: Mapping[str, Any]) -> Observation | None:
    timestamp = row.get("timestamp")
    cumulative = row.get("price0Cumulative")
    if timestamp is None or cumulative is None:
        return None
    cumulative_price = _to_int(cumulative)
    if cumulative_price < 0:
        raise ValueError("price0Cumulative must be non-negative.")
    return Observation(
        timestamp=_to_int(timestamp),
        cumulative_price=cumulative_price,
    )

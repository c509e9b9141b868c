from __future__ import annotations

from app.domain.entities.price_history import PERIOD_SECONDS, PricePeriod
from app.domain.exceptions import InvalidPeriodError


def resolve_period(period: PricePeriod | str) -> PricePeriod:
    if isinstance(period, PricePeriod):
        return period
    try:
        return PricePeriod(period)
    except ValueError as exc:
        supported = ", ".join(item.value for item in PricePeriod)
        raise InvalidPeriodError(f"period must be one of: {supported}.") from exc


def period_seconds(period: PricePeriod | str) -> int:
    return PERIOD_SECONDS[resolve_period(period)]


def window_start(period: PricePeriod | str, *, now: int) -> int:
    return int(now) - period_seconds(period)

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal

from app.domain.entities.price_history import (
    ORACLE_PRICE_SCALE,
    Observation,
    PriceHistory,
    PricePeriod,
    PricePoint,
    PriceStats,
)
from app.domain.exceptions import PriceHistoryInputError
from app.domain.services.price_window import window_start


VolumeLookup = Callable[[Observation], int]

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def filter_observations(observations: Iterable[Observation], start_time: int) -> list[Observation]:
    return [obs for obs in observations if obs.timestamp >= start_time]


def normalize_observation(
    observation: Observation,
    *,
    scale: int = ORACLE_PRICE_SCALE,
    volume: int = 0,
) -> PricePoint:
    """Scale a raw cumulative accumulator into a display price.

    Every sample is normalized on its own; no delta between consecutive
    accumulators is taken, so the value drifts with the accumulator.
    """
    if scale <= 0:
        raise PriceHistoryInputError("scale must be a positive integer.")
    if volume < 0:
        raise PriceHistoryInputError("volume must be non-negative.")
    price = Decimal(observation.cumulative_price) / Decimal(scale)
    return PricePoint(
        timestamp=int(observation.timestamp),
        price=price,
        price_usd=price,
        volume=int(volume),
    )


def sort_points(points: Iterable[PricePoint]) -> list[PricePoint]:
    return sorted(points, key=lambda point: point.timestamp)


def calculate_percent_change(first_price: Decimal, last_price: Decimal) -> Decimal:
    if first_price == 0:
        return _ZERO
    return (last_price - first_price) / first_price * _HUNDRED


def summarize_points(points: Sequence[PricePoint]) -> PriceStats:
    if not points:
        return PriceStats(
            min_price=_ZERO,
            max_price=_ZERO,
            average_price=_ZERO,
            total_volume=0,
            percent_change=_ZERO,
            current_price=_ZERO,
        )

    prices = [point.price for point in points]
    min_price = min(prices)
    max_price = max(prices)
    average_price = sum(prices, _ZERO) / Decimal(len(prices))
    # decimal rounding of the sum may push the mean past the extremes
    average_price = min(max(average_price, min_price), max_price)
    total_volume = sum((point.volume for point in points), 0)

    return PriceStats(
        min_price=min_price,
        max_price=max_price,
        average_price=average_price,
        total_volume=total_volume,
        percent_change=calculate_percent_change(prices[0], prices[-1]),
        current_price=prices[-1],
    )


def build_price_history(
    observations: Iterable[Observation],
    *,
    period: PricePeriod | str,
    now: int,
    scale: int = ORACLE_PRICE_SCALE,
    volume_lookup: VolumeLookup | None = None,
) -> PriceHistory:
    start_time = window_start(period, now=now)
    relevant = filter_observations(observations, start_time)
    points = sort_points(
        normalize_observation(
            obs,
            scale=scale,
            volume=volume_lookup(obs) if volume_lookup is not None else 0,
        )
        for obs in relevant
    )
    stats = summarize_points(points)
    return PriceHistory(
        points=tuple(points),
        min_price=stats.min_price,
        max_price=stats.max_price,
        average_price=stats.average_price,
        total_volume=stats.total_volume,
        percent_change=stats.percent_change,
        current_price=stats.current_price,
    )

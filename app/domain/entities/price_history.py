from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PricePeriod(str, Enum):
    ONE_HOUR = "1h"
    ONE_DAY = "24h"
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"


PERIOD_SECONDS: dict[PricePeriod, int] = {
    PricePeriod.ONE_HOUR: 3600,
    PricePeriod.ONE_DAY: 86400,
    PricePeriod.SEVEN_DAYS: 604800,
    PricePeriod.THIRTY_DAYS: 2592000,
}

# Fixed-point precision of the oracle accumulators.
ORACLE_PRICE_SCALE = 10**18


@dataclass(frozen=True)
class Observation:
    timestamp: int
    cumulative_price: int


@dataclass(frozen=True)
class PricePoint:
    timestamp: int
    price: Decimal
    price_usd: Decimal
    volume: int = 0


@dataclass(frozen=True)
class PriceStats:
    min_price: Decimal
    max_price: Decimal
    average_price: Decimal
    total_volume: int
    percent_change: Decimal
    current_price: Decimal


@dataclass(frozen=True)
class PriceHistory:
    points: tuple[PricePoint, ...]
    min_price: Decimal
    max_price: Decimal
    average_price: Decimal
    total_volume: int
    percent_change: Decimal
    current_price: Decimal

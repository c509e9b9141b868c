from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.price_history import PriceHistory, PricePeriod


@dataclass(frozen=True)
class GetPriceHistoryInput:
    pair_address: str | None
    token_in: str
    period: PricePeriod | str
    now: int | None = None


@dataclass(frozen=True)
class GetPriceHistoryOutput:
    pair_address: str
    token_in: str
    period: PricePeriod
    start_time: int
    now: int
    history: PriceHistory

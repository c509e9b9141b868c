from __future__ import annotations

from pydantic import BaseModel, Field


class PricePointResponse(BaseModel):
    timestamp: int
    price: str
    price_usd: str
    volume: str = Field(..., description="Raw integer volume, serialized as a string.")


class PriceHistoryStatsResponse(BaseModel):
    min: str
    max: str
    avg: str
    current: str
    percent_change: str
    total_volume: str


class PriceHistoryResponse(BaseModel):
    pair_address: str
    token_in: str
    period: str
    start_time: int
    now: int
    stats: PriceHistoryStatsResponse
    points: list[PricePointResponse]

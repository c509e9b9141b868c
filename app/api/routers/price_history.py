from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.auth import require_jwt
from app.api.deps import get_price_history_use_case
from app.api.schemas.price_history import (
    PriceHistoryResponse,
    PriceHistoryStatsResponse,
    PricePointResponse,
)
from app.application.dto.price_history import GetPriceHistoryInput
from app.application.use_cases.get_price_history import GetPriceHistoryUseCase
from app.domain.exceptions import InvalidPeriodError, MissingPairError, PriceHistoryInputError
from app.infrastructure.clients.oracle_subgraph_client import OracleRequestError

router = APIRouter()


@router.get("/v1/pairs/{pair_address}/price-history", response_model=PriceHistoryResponse)
def get_price_history(
    pair_address: str,
    token_in: str = Query(..., alias="tokenIn"),
    period: str = Query(default="24h"),
    now: int | None = Query(default=None),
    _token: str = Depends(require_jwt),
    use_case: GetPriceHistoryUseCase = Depends(get_price_history_use_case),
):
    try:
        result = use_case.execute(
            GetPriceHistoryInput(
                pair_address=pair_address,
                token_in=token_in,
                period=period,
                now=now,
            )
        )
    except (MissingPairError, InvalidPeriodError, PriceHistoryInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OracleRequestError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    history = result.history
    return PriceHistoryResponse(
        pair_address=result.pair_address,
        token_in=result.token_in,
        period=result.period.value,
        start_time=result.start_time,
        now=result.now,
        stats=PriceHistoryStatsResponse(
            min=str(history.min_price),
            max=str(history.max_price),
            avg=str(history.average_price),
            current=str(history.current_price),
            percent_change=str(history.percent_change),
            total_volume=str(history.total_volume),
        ),
        points=[
            PricePointResponse(
                timestamp=point.timestamp,
                price=str(point.price),
                price_usd=str(point.price_usd),
                volume=str(point.volume),
            )
            for point in history.points
        ],
    )

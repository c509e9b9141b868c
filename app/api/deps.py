from __future__ import annotations

from functools import lru_cache

from app.application.use_cases.get_price_history import GetPriceHistoryUseCase
from app.infrastructure.clients.cached_oracle_observations import CachedOracleObservations
from app.infrastructure.clients.oracle_subgraph_client import (
    OracleSubgraphClient,
    OracleSubgraphClientSettings,
)
from app.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_oracle_observations() -> CachedOracleObservations:
    settings = get_settings()
    client = OracleSubgraphClient(
        OracleSubgraphClientSettings(
            graph_url=settings.oracle_graph_url,
            api_key=settings.oracle_api_key,
            timeout_seconds=settings.oracle_timeout_seconds,
            max_retries=settings.oracle_max_retries,
            min_interval_ms=settings.oracle_min_interval_ms,
        )
    )
    return CachedOracleObservations(client, ttl_seconds=settings.price_history_stale_seconds)


def get_price_history_use_case() -> GetPriceHistoryUseCase:
    settings = get_settings()
    return GetPriceHistoryUseCase(
        oracle_port=_get_oracle_observations(),
        scale=settings.oracle_price_scale,
    )

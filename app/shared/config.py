from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    oracle_graph_url: str
    oracle_api_key: str
    oracle_timeout_seconds: float
    oracle_max_retries: int
    oracle_min_interval_ms: int
    oracle_price_scale: int
    price_history_stale_seconds: float
    log_level: str


def get_settings() -> Settings:
    return Settings(
        oracle_graph_url=_env("ORACLE_GRAPH_URL", ""),
        oracle_api_key=_env("ORACLE_API_KEY", ""),
        oracle_timeout_seconds=float(_env("ORACLE_TIMEOUT_SECONDS", "10")),
        oracle_max_retries=int(_env("ORACLE_MAX_RETRIES", "3")),
        oracle_min_interval_ms=int(_env("ORACLE_MIN_INTERVAL_MS", "0")),
        oracle_price_scale=int(_env("ORACLE_PRICE_SCALE", str(10**18))),
        price_history_stale_seconds=float(_env("PRICE_HISTORY_STALE_SECONDS", "60")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )

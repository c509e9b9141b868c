from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient
import pytest

from app.api.auth import require_jwt
from app.api.deps import get_price_history_use_case
from app.application.dto.price_history import GetPriceHistoryOutput
from app.domain.entities.price_history import PriceHistory, PricePeriod, PricePoint
from app.domain.exceptions import InvalidPeriodError
from app.infrastructure.clients.oracle_subgraph_client import OracleRequestError
from app.main import app


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    yield
    app.dependency_overrides.clear()


class FakeGetPriceHistoryUseCase:
    def __init__(self):
        self.last_command = None

    def execute(self, command):
        self.last_command = command
        point = PricePoint(
            timestamp=1700000000,
            price=Decimal("2"),
            price_usd=Decimal("2"),
            volume=10**24,
        )
        return GetPriceHistoryOutput(
            pair_address=command.pair_address,
            token_in=command.token_in,
            period=PricePeriod.ONE_DAY,
            start_time=1700000000 - 86400,
            now=1700000000,
            history=PriceHistory(
                points=(point,),
                min_price=Decimal("2"),
                max_price=Decimal("2"),
                average_price=Decimal("2"),
                total_volume=10**24,
                percent_change=Decimal("0"),
                current_price=Decimal("2"),
            ),
        )


class RaisingUseCase:
    def __init__(self, exc: Exception):
        self._exc = exc

    def execute(self, _command):
        raise self._exc


def test_router_returns_serialized_history():
    fake = FakeGetPriceHistoryUseCase()
    app.dependency_overrides[require_jwt] = lambda: "token"
    app.dependency_overrides[get_price_history_use_case] = lambda: fake

    client = TestClient(app)
    response = client.get(
        "/v1/pairs/0xpair/price-history",
        params={"tokenIn": "0xtoken", "period": "24h", "now": 1700000000},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["period"] == "24h"
    assert payload["start_time"] == 1700000000 - 86400
    assert payload["stats"]["current"] == "2"
    assert payload["stats"]["total_volume"] == str(10**24)
    assert payload["points"][0]["volume"] == str(10**24)
    assert fake.last_command.now == 1700000000
    assert fake.last_command.token_in == "0xtoken"


def test_router_maps_invalid_period_to_400():
    app.dependency_overrides[require_jwt] = lambda: "token"
    app.dependency_overrides[get_price_history_use_case] = lambda: RaisingUseCase(
        InvalidPeriodError("period must be one of: 1h, 24h, 7d, 30d.")
    )

    client = TestClient(app)
    response = client.get(
        "/v1/pairs/0xpair/price-history",
        params={"tokenIn": "0xtoken", "period": "2w"},
    )

    assert response.status_code == 400
    assert "period" in response.json()["detail"]


def test_router_maps_oracle_failure_to_502():
    app.dependency_overrides[require_jwt] = lambda: "token"
    app.dependency_overrides[get_price_history_use_case] = lambda: RaisingUseCase(
        OracleRequestError("Oracle request failed after retries: timeout")
    )

    client = TestClient(app)
    response = client.get(
        "/v1/pairs/0xpair/price-history",
        params={"tokenIn": "0xtoken"},
    )

    assert response.status_code == 502


def test_router_requires_bearer_token():
    client = TestClient(app)
    response = client.get(
        "/v1/pairs/0xpair/price-history",
        params={"tokenIn": "0xtoken"},
        headers={"Authorization": "Basic abc"},
    )

    assert response.status_code == 401

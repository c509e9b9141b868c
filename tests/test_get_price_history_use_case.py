from __future__ import annotations

from decimal import Decimal

import pytest

from app.application.dto.price_history import GetPriceHistoryInput
from app.application.use_cases.get_price_history import GetPriceHistoryUseCase
from app.domain.entities.price_history import Observation, PricePeriod
from app.domain.exceptions import InvalidPeriodError, MissingPairError

NOW = 1_700_000_000
SCALE = 10**18


class FakeOracleObservationPort:
    def __init__(self, observations: list[Observation]):
        self._observations = observations
        self.calls: list[str] = []

    def get_observations(self, *, pair_address: str) -> list[Observation]:
        self.calls.append(pair_address)
        return self._observations


class FailingOracleObservationPort:
    def get_observations(self, *, pair_address: str) -> list[Observation]:
        _ = pair_address
        raise ConnectionError("node unavailable")


class FakeVolumeLookupPort:
    def get_volume(self, *, pair_address: str, timestamp: int) -> int:
        _ = pair_address
        return timestamp % 10


def test_execute_builds_history_for_requested_window():
    port = FakeOracleObservationPort(
        [
            Observation(timestamp=NOW, cumulative_price=3 * SCALE),
            Observation(timestamp=NOW - 7200, cumulative_price=SCALE),
            Observation(timestamp=NOW - 1800, cumulative_price=2 * SCALE),
        ]
    )
    use_case = GetPriceHistoryUseCase(oracle_port=port)

    result = use_case.execute(
        GetPriceHistoryInput(pair_address="0xpair", token_in="0xtoken", period="1h", now=NOW)
    )

    assert port.calls == ["0xpair"]
    assert result.period is PricePeriod.ONE_HOUR
    assert result.start_time == NOW - 3600
    assert result.now == NOW
    assert [point.timestamp for point in result.history.points] == [NOW - 1800, NOW]
    assert result.history.current_price == Decimal("3")
    assert result.history.percent_change == Decimal("50")


def test_execute_uses_injected_clock_when_now_missing():
    port = FakeOracleObservationPort([Observation(timestamp=NOW, cumulative_price=SCALE)])
    use_case = GetPriceHistoryUseCase(oracle_port=port, clock=lambda: NOW)

    result = use_case.execute(
        GetPriceHistoryInput(pair_address="0xpair", token_in="0xtoken", period="24h")
    )

    assert result.now == NOW
    assert result.start_time == NOW - 86400


@pytest.mark.parametrize("pair_address", [None, "", "   "])
def test_missing_pair_fails_before_fetching(pair_address):
    port = FakeOracleObservationPort([])
    use_case = GetPriceHistoryUseCase(oracle_port=port)

    with pytest.raises(MissingPairError):
        use_case.execute(
            GetPriceHistoryInput(pair_address=pair_address, token_in="0xtoken", period="24h", now=NOW)
        )
    assert port.calls == []


def test_invalid_period_fails_before_fetching():
    port = FakeOracleObservationPort([])
    use_case = GetPriceHistoryUseCase(oracle_port=port)

    with pytest.raises(InvalidPeriodError):
        use_case.execute(
            GetPriceHistoryInput(pair_address="0xpair", token_in="0xtoken", period="90d", now=NOW)
        )
    assert port.calls == []


def test_oracle_errors_propagate_unchanged():
    use_case = GetPriceHistoryUseCase(oracle_port=FailingOracleObservationPort())

    with pytest.raises(ConnectionError, match="node unavailable"):
        use_case.execute(
            GetPriceHistoryInput(pair_address="0xpair", token_in="0xtoken", period="24h", now=NOW)
        )


def test_volume_port_populates_volume():
    port = FakeOracleObservationPort(
        [
            Observation(timestamp=NOW - 3, cumulative_price=SCALE),
            Observation(timestamp=NOW - 1, cumulative_price=SCALE),
        ]
    )
    use_case = GetPriceHistoryUseCase(oracle_port=port, volume_port=FakeVolumeLookupPort())

    result = use_case.execute(
        GetPriceHistoryInput(pair_address="0xpair", token_in="0xtoken", period="1h", now=NOW)
    )

    assert [point.volume for point in result.history.points] == [7, 9]
    assert result.history.total_volume == 16

from __future__ import annotations

from collections.abc import Callable
import logging
import time

from app.application.dto.price_history import GetPriceHistoryInput, GetPriceHistoryOutput
from app.application.ports.oracle_observation_port import OracleObservationPort
from app.application.ports.volume_lookup_port import VolumeLookupPort
from app.domain.entities.price_history import ORACLE_PRICE_SCALE, Observation
from app.domain.exceptions import MissingPairError, PriceHistoryInputError
from app.domain.services.price_history import build_price_history
from app.domain.services.price_window import resolve_period, window_start


logger = logging.getLogger(__name__)


def _wall_clock_seconds() -> int:
    return int(time.time())


class GetPriceHistoryUseCase:
    def __init__(
        self,
        *,
        oracle_port: OracleObservationPort,
        volume_port: VolumeLookupPort | None = None,
        clock: Callable[[], int] | None = None,
        scale: int = ORACLE_PRICE_SCALE,
    ):
        if scale <= 0:
            raise PriceHistoryInputError("scale must be a positive integer.")
        self._oracle_port = oracle_port
        self._volume_port = volume_port
        self._clock = clock or _wall_clock_seconds
        self._scale = scale

    def execute(self, command: GetPriceHistoryInput) -> GetPriceHistoryOutput:
        pair_address = (command.pair_address or "").strip()
        if not pair_address:
            raise MissingPairError("Pair is required to fetch price history.")
        period = resolve_period(command.period)
        now = int(command.now) if command.now is not None else int(self._clock())

        observations = self._oracle_port.get_observations(pair_address=pair_address)

        history = build_price_history(
            observations,
            period=period,
            now=now,
            scale=self._scale,
            volume_lookup=self._volume_lookup_for(pair_address),
        )
        start_time = window_start(period, now=now)

        logger.info(
            "get_price_history: computed pair=%s token_in=%s period=%s observations=%s points=%s",
            pair_address,
            command.token_in,
            period.value,
            len(observations),
            len(history.points),
        )
        return GetPriceHistoryOutput(
            pair_address=pair_address,
            token_in=command.token_in,
            period=period,
            start_time=start_time,
            now=now,
            history=history,
        )

    def _volume_lookup_for(self, pair_address: str) -> Callable[[Observation], int] | None:
        if self._volume_port is None:
            return None
        volume_port = self._volume_port

        def _lookup(obs: Observation) -> int:
            return volume_port.get_volume(pair_address=pair_address, timestamp=obs.timestamp)

        return _lookup

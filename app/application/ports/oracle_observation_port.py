from __future__ import annotations

from typing import Protocol

from app.domain.entities.price_history import Observation


class OracleObservationPort(Protocol):
    def get_observations(self, *, pair_address: str) -> list[Observation]:
        ...

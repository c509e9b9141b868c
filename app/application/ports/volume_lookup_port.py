from __future__ import annotations

from typing import Protocol


class VolumeLookupPort(Protocol):
    def get_volume(self, *, pair_address: str, timestamp: int) -> int:
        ...

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Lock
import time

from app.application.ports.oracle_observation_port import OracleObservationPort
from app.domain.entities.price_history import Observation


logger = logging.getLogger(__name__)


class CachedOracleObservations:
    """Staleness-window cache in front of an oracle observation port.

    Entries are keyed by the lower-cased pair address. Concurrent callers for
    the same pair wait on a per-pair lock, so only one of them reaches the
    inner port while the others reuse its result. Per-pair locks live only
    while a caller holds or waits on them, and expired entries are evicted on
    every write. Failed fetches are not cached.
    """

    def __init__(
        self,
        inner: OracleObservationPort,
        *,
        ttl_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._inner = inner
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[str, tuple[float, tuple[Observation, ...]]] = {}
        self._key_locks: dict[str, tuple[Lock, int]] = {}
        self._lock = Lock()

    def _cache_get(self, key: str) -> tuple[Observation, ...] | None:
        now = self._clock()
        with self._lock:
            cached = self._cache.get(key)
            if cached is None:
                return None
            expires_at, value = cached
            if expires_at <= now:
                self._cache.pop(key, None)
                return None
            return value

    def _cache_set(self, key: str, value: tuple[Observation, ...]) -> None:
        now = self._clock()
        with self._lock:
            expired = [item for item, (expires_at, _) in self._cache.items() if expires_at <= now]
            for item in expired:
                del self._cache[item]
            self._cache[key] = (now + self.ttl_seconds, value)

    def _acquire_key_lock(self, key: str) -> Lock:
        with self._lock:
            lock, waiters = self._key_locks.get(key, (None, 0))
            if lock is None:
                lock = Lock()
            self._key_locks[key] = (lock, waiters + 1)
        lock.acquire()
        return lock

    def _release_key_lock(self, key: str, lock: Lock) -> None:
        with self._lock:
            _, waiters = self._key_locks[key]
            if waiters <= 1:
                del self._key_locks[key]
            else:
                self._key_locks[key] = (lock, waiters - 1)
        lock.release()

    def get_observations(self, *, pair_address: str) -> list[Observation]:
        if self.ttl_seconds <= 0:
            return list(self._inner.get_observations(pair_address=pair_address))

        key = pair_address.strip().lower()
        cached = self._cache_get(key)
        if cached is not None:
            return list(cached)

        lock = self._acquire_key_lock(key)
        try:
            cached = self._cache_get(key)
            if cached is not None:
                return list(cached)
            value = tuple(self._inner.get_observations(pair_address=pair_address))
            self._cache_set(key, value)
        finally:
            self._release_key_lock(key, lock)

        logger.debug(
            "cached_oracle_observations: refreshed pair=%s observations=%s ttl_seconds=%s",
            key,
            len(value),
            self.ttl_seconds,
        )
        return list(value)

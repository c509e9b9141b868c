from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock
import time

import httpx

from app.domain.entities.price_history import Observation
from app.infrastructure.mappers.observation_mapper import map_row_to_observation


logger = logging.getLogger(__name__)


# Cursor pagination on timestamp; the oracle writes at most one observation
# per pair and timestamp.
OBSERVATIONS_QUERY = """
query PairObservations($pair: String!, $lastTimestamp: BigInt!, $pageSize: Int!) {
  oracleObservations(
    first: $pageSize,
    orderBy: timestamp,
    orderDirection: asc,
    where: { pair: $pair, timestamp_gt: $lastTimestamp }
  ) {
    timestamp
    price0Cumulative
    price1Cumulative
  }
}
"""


class OracleRequestError(RuntimeError):
    pass


class OraclePaginationStalledError(OracleRequestError):
    pass


@dataclass(frozen=True)
class OracleSubgraphClientSettings:
    graph_url: str
    api_key: str
    timeout_seconds: float
    max_retries: int
    min_interval_ms: int
    page_size: int = 1000


class OracleSubgraphClient:
    def __init__(self, settings: OracleSubgraphClientSettings):
        self._settings = settings
        self._lock = Lock()
        self._last_request_at = 0.0

    def get_observations(self, *, pair_address: str) -> list[Observation]:
        if not self._settings.graph_url:
            raise OracleRequestError("ORACLE_GRAPH_URL is not configured.")

        pair_id = pair_address.lower()
        page_size = max(1, self._settings.page_size)
        last_timestamp = -1
        pages = 0
        skipped_rows = 0
        observations: list[Observation] = []

        while True:
            payload = self._post_graphql(
                query=OBSERVATIONS_QUERY,
                variables={
                    "pair": pair_id,
                    "lastTimestamp": str(last_timestamp),
                    "pageSize": page_size,
                },
            )
            rows = (payload.get("data") or {}).get("oracleObservations") or []
            if not rows:
                break
            pages += 1

            page_max = last_timestamp
            for row in rows:
                try:
                    observation = map_row_to_observation(row)
                except ValueError as exc:
                    raise OracleRequestError(f"Malformed oracle observation: {exc}") from exc
                if observation is None:
                    skipped_rows += 1
                    continue
                observations.append(observation)
                page_max = max(page_max, observation.timestamp)

            if len(rows) < page_size:
                break
            if page_max <= last_timestamp:
                logger.warning(
                    "oracle_subgraph_client: pagination_stalled pair=%s page=%s last_timestamp=%s",
                    pair_id,
                    pages,
                    last_timestamp,
                )
                raise OraclePaginationStalledError(
                    f"Oracle pagination did not advance past timestamp {last_timestamp}."
                )
            last_timestamp = page_max

        if skipped_rows:
            logger.warning(
                "oracle_subgraph_client: skipped_incomplete_rows pair=%s skipped=%s",
                pair_id,
                skipped_rows,
            )
        logger.info(
            "oracle_subgraph_client: fetched_observations pair=%s fetched=%s pages=%s",
            pair_id,
            len(observations),
            pages,
        )
        return observations

    def _send(self, *, query: str, variables: dict) -> dict:
        headers = {"Authorization": f"Bearer {self._settings.api_key}"} if self._settings.api_key else {}
        with httpx.Client(timeout=self._settings.timeout_seconds) as client:
            response = client.post(
                self._settings.graph_url,
                json={"query": query, "variables": variables},
                headers=headers,
            )
            response.raise_for_status()
            payload = response.json()

        errors = payload.get("errors") or []
        if errors:
            raise OracleRequestError(" | ".join(str(err.get("message", err)) for err in errors))
        return payload

    def _post_graphql(self, *, query: str, variables: dict) -> dict:
        attempts = max(1, self._settings.max_retries)
        for attempt in range(1, attempts + 1):
            self._respect_rate_limit()
            try:
                return self._send(query=query, variables=variables)
            except (httpx.HTTPError, OracleRequestError, ValueError) as exc:
                if attempt == attempts:
                    raise OracleRequestError(
                        f"Oracle request failed after {attempts} attempts: {exc}"
                    ) from exc
                logger.warning(
                    "oracle_subgraph_client: graphql_retry attempt=%s/%s error=%s",
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(0.25 * 2 ** (attempt - 1))
        raise OracleRequestError("Oracle request was not attempted.")

    def _respect_rate_limit(self) -> None:
        min_interval = max(0, self._settings.min_interval_ms) / 1000
        if min_interval <= 0:
            return
        with self._lock:
            wait = self._last_request_at + min_interval - time.monotonic()
            if wait > 0:
                time.sleep(wait)
            self._last_request_at = time.monotonic()

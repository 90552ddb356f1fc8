from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any

import requests

from .errors import StoreError
from .records import DeleteRequest, SimulationRecord, SimulationRequest, parse_records

logger = logging.getLogger(__name__)

STORE_URL_ENV = "OPTIONS_PAYOFF_STORE_URL"


def jitter_sleep(base_s: float) -> float:
    """Apply random jitter to backoff sleeps."""
    return base_s * (0.7 + 0.6 * random.random())


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


@dataclass(frozen=True)
class SimulationStoreClient:
    """HTTP client for the remote saved-simulation store.

    - `save` POSTs a request payload as JSON.
    - `load` GETs the list of saved simulations.

    Retry policy:
    - Retries on HTTP 429 / 5xx and on timeouts / connection errors, with
      jittered exponential backoff capped at 30s.
    - Other HTTP 4xx responses fail fast.

    Exceptions:
    - Every failure surfaces as `StoreError`, with the original exception as
      `__cause__`.

    Session handling:
    - A shared `requests.Session` may be passed to reuse connections; if not,
      the client creates one per call and closes it.
    """

    base_url: str
    timeout_s: float = 30.0
    max_retries: int = 1
    backoff_s: float = 0.75

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be set")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.backoff_s < 0:
            raise ValueError("backoff_s must be >= 0")

    def _request(
        self,
        method: str,
        *,
        json_body: dict[str, Any] | None = None,
        session: requests.Session | None = None,
    ) -> requests.Response:
        created_session = session is None
        sess = session or requests.Session()
        last_err: Exception | None = None

        try:
            for attempt in range(self.max_retries + 1):
                try:
                    logger.debug(
                        "Store %s attempt=%d/%d url=%s",
                        method,
                        attempt + 1,
                        self.max_retries + 1,
                        self.base_url,
                    )
                    resp = sess.request(
                        method,
                        self.base_url,
                        json=json_body,
                        timeout=self.timeout_s,
                    )

                    if _is_retryable_status(resp.status_code):
                        if attempt >= self.max_retries:
                            resp.raise_for_status()
                        sleep_s = min(30.0, jitter_sleep(self.backoff_s * (2**attempt)))
                        logger.warning(
                            "Store retryable status=%s method=%s sleep_s=%.2f",
                            resp.status_code,
                            method,
                            sleep_s,
                        )
                        time.sleep(sleep_s)
                        continue

                    resp.raise_for_status()
                    return resp

                except requests.exceptions.HTTPError as e:
                    last_err = e
                    logger.error(
                        "Store HTTPError method=%s status=%s",
                        method,
                        getattr(e.response, "status_code", None),
                    )
                    break

                except (
                    requests.exceptions.Timeout,
                    requests.exceptions.ConnectionError,
                ) as e:
                    last_err = e
                    if attempt >= self.max_retries:
                        break
                    sleep_s = min(30.0, jitter_sleep(self.backoff_s * (2**attempt)))
                    logger.warning(
                        "Store transport error retrying method=%s sleep_s=%.2f err=%r",
                        method,
                        sleep_s,
                        e,
                    )
                    time.sleep(sleep_s)
        finally:
            if created_session:
                sess.close()

        raise StoreError(
            f"Store {method} failed: url={self.base_url}"
        ) from last_err

    def save(
        self,
        request: SimulationRequest | DeleteRequest,
        *,
        session: requests.Session | None = None,
    ) -> None:
        """Send a create/update/delete request."""
        payload = request.to_payload()
        self._request("POST", json_body=payload, session=session)
        logger.info("Store %s ok id=%s", request.action.value, request.id)

    def load(
        self,
        *,
        session: requests.Session | None = None,
    ) -> list[SimulationRecord]:
        """Fetch and parse every saved simulation."""
        resp = self._request("GET", session=session)
        try:
            payload = resp.json()
        except ValueError as e:
            raise StoreError("Store returned a non-JSON body") from e
        records = parse_records(payload)
        logger.info("Loaded %d saved simulations", len(records))
        return records

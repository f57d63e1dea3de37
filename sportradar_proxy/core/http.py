from __future__ import annotations
import logging
import time
from typing import Callable, Mapping, Optional, Sequence
import httpx

from .config import USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0
MAX_RETRIES = 3
RETRY_DELAYS = (1.0, 2.0, 4.0)  # seconds before retry 1, 2, 3


class UpstreamClient:
    """
    httpx client for the Sportradar host with the rate-limit retry policy.

    Only a 429 or a transport failure (no response at all) is retried, on the
    fixed ``retry_delays`` schedule. Every other status comes back as-is on
    the first attempt.
    """
    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str = USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delays: Sequence[float] = RETRY_DELAYS,
        sleep: Callable[[float], None] = time.sleep,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not retry_delays and max_retries:
            raise ValueError("retry_delays must not be empty when max_retries > 0")
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._delays = tuple(retry_delays)
        self._sleep = sleep
        self._http = httpx.Client(
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": user_agent},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def url_for(self, endpoint: str) -> str:
        # always a path on the configured host, never a caller-chosen host
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    def delay_for(self, attempt: int) -> float:
        return self._delays[min(attempt, len(self._delays) - 1)]

    def fetch(self, endpoint: str, params: Optional[Mapping[str, str]] = None) -> httpx.Response:
        """
        GET ``endpoint`` with up to ``max_retries`` retries.

        Returns the last response (2xx or not). Re-raises the last
        ``httpx.TransportError`` if no attempt got a response.
        """
        url = self.url_for(endpoint)
        attempt = 0
        while True:
            try:
                r = self._http.get(url, params=params or {})
            except httpx.TransportError as e:
                if attempt >= self._max_retries:
                    raise
                delay = self.delay_for(attempt)
                logger.warning("Request to %s failed (%s), retrying in %.1fs (attempt %d/%d)",
                               endpoint, type(e).__name__, delay, attempt + 1, self._max_retries)
            else:
                if r.status_code != 429 or attempt >= self._max_retries:
                    return r
                delay = self.delay_for(attempt)
                logger.warning("Rate limited on %s, retrying in %.1fs (attempt %d/%d)",
                               endpoint, delay, attempt + 1, self._max_retries)
            self._sleep(delay)
            attempt += 1

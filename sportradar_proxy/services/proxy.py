# sportradar_proxy/services/proxy.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from ..core.cache import ResponseCache, Scalar, cache_key, normalize_params
from ..core.config import Settings
from ..core.errors import ProxyError
from ..core.http import UpstreamClient

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity parse but cannot be served back as JSON
    raise ValueError(f"Upstream returned non-standard JSON constant {name}")


@dataclass(frozen=True)
class ProxyResult:
    payload: Any
    cache_hit: bool

    @property
    def cache_status(self) -> str:
        return "HIT" if self.cache_hit else "MISS"


class ProxyService:
    """
    Caching broker between the dashboard and the Sportradar API.

    Owns one ResponseCache and one UpstreamClient for the life of the
    process. The API key is attached here and nowhere else.
    """

    def __init__(
        self,
        cache: ResponseCache,
        upstream: UpstreamClient,
        api_key: Optional[str],
        *,
        coalesce: bool = True,
        allowed_prefixes: Sequence[str] = (),
    ):
        self.cache = cache
        self.upstream = upstream
        self._api_key = api_key
        self._coalesce = coalesce
        self._allowed = tuple(allowed_prefixes)
        self._inflight: Dict[str, Future] = {}
        self._inflight_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **upstream_kwargs: Any) -> "ProxyService":
        cache = ResponseCache(
            ttl_seconds=settings.cache_ttl_seconds,
            soft_capacity=settings.cache_soft_capacity,
        )
        upstream = UpstreamClient(
            settings.sportradar_base_url,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout_seconds,
            max_retries=settings.max_retries,
            retry_delays=settings.retry_delays_seconds,
            **upstream_kwargs,
        )
        return cls(
            cache,
            upstream,
            settings.sportradar_api_key,
            coalesce=settings.coalesce_requests,
            allowed_prefixes=settings.allowed_endpoint_prefixes,
        )

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key)

    def close(self) -> None:
        self.upstream.close()

    # ------------ public entry point ------------
    def handle(self, endpoint: Optional[str], params: Optional[Mapping[str, Scalar]] = None) -> ProxyResult:
        """
        Serve ``endpoint`` + ``params`` from cache or upstream.

        Raises ProxyError for every failure; nothing else escapes.
        """
        try:
            return self._handle(endpoint, params)
        except ProxyError:
            raise
        except Exception as e:
            logger.exception("Proxy error for %s", endpoint)
            raise ProxyError.internal(e, self._api_key) from e

    def _handle(self, endpoint: Optional[str], params: Optional[Mapping[str, Scalar]]) -> ProxyResult:
        if not self._api_key:
            raise ProxyError.missing_credential()
        if not endpoint:
            raise ProxyError.missing_endpoint()
        if self._allowed and not endpoint.startswith(self._allowed):
            raise ProxyError.endpoint_not_allowed(endpoint)

        key = cache_key(endpoint, params)
        entry = self.cache.get(key)
        if entry is not None:
            logger.info("Cache hit for %s", endpoint)
            self.cache.sweep()
            return ProxyResult(entry.payload, cache_hit=True)

        query = normalize_params(params)
        if self._coalesce:
            payload = self._fetch_coalesced(key, endpoint, query)
        else:
            payload = self._fetch_and_store(key, endpoint, query)
        return ProxyResult(payload, cache_hit=False)

    # ------------ miss path ------------
    def _fetch_coalesced(self, key: str, endpoint: str, query: Dict[str, str]) -> Any:
        with self._inflight_lock:
            pending = self._inflight.get(key)
            if pending is None:
                pending = Future()
                self._inflight[key] = pending
                leader = True
            else:
                leader = False

        if not leader:
            logger.debug("Joining in-flight request for %s", endpoint)
            return pending.result()

        try:
            # a request that finished just before we took the slot has already stored its payload
            entry = self.cache.get(key, record=False)
            payload = entry.payload if entry is not None else self._fetch_and_store(key, endpoint, query)
        except BaseException as e:
            pending.set_exception(e)
            raise
        else:
            pending.set_result(payload)
            return payload
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)

    def _fetch_and_store(self, key: str, endpoint: str, query: Dict[str, str]) -> Any:
        logger.info("Fetching: %s", endpoint)
        try:
            resp = self.upstream.fetch(endpoint, {**query, "api_key": self._api_key})
        except httpx.TransportError as e:
            logger.error("Upstream unreachable for %s: %s", endpoint, type(e).__name__)
            raise ProxyError.network(e, endpoint, self._api_key) from e

        if not resp.is_success:
            logger.error("API Error %s for %s", resp.status_code, endpoint)
            raise ProxyError.upstream(resp.status_code, resp.text, endpoint, self._api_key)

        payload = resp.json(parse_constant=_reject_constant)
        self.cache.put(key, payload)
        evicted = self.cache.sweep()
        if evicted:
            logger.debug("Evicted %d stale cache entries", evicted)
        return payload

"""
HTTP plumbing shared by the upstream feed fetchers.

Every fetcher honours the same contract: it returns validated data or
``None``. Transport errors, timeouts, non-success statuses and malformed
payloads are logged and degraded to absence; nothing propagates past the
fetcher and nothing is retried.
"""

from __future__ import annotations

import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx
from loguru import logger

from rpbands.core.data.cache.base import CacheStrategy
from rpbands.core.exceptions.base import FeedError
from rpbands.core.exceptions.codes import ErrorCode
from rpbands.core.monitoring.metrics import MetricsCollector, get_metrics_collector

T = TypeVar("T")


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    user_agent: str = "Mozilla/5.0 (compatible; rpbands/0.1.0)"
    max_redirects: int = 5
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")


class FeedHttpClient:
    """Lazily created ``httpx.AsyncClient`` shared by all fetchers."""

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.http_config = http_config or HttpConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "FeedHttpClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {
                "User-Agent": self.http_config.user_agent,
                "Accept": "application/json",
                **self.http_config.headers,
            }
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=self.http_config.max_redirects,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_json(self, url: str, *, timeout: float) -> Any:
        """GET ``url`` and decode the JSON body.

        Raises:
            FeedError: on non-success status.
            httpx.HTTPError: on transport failures and timeouts.
            ValueError: when the body is not valid JSON.
        """
        client = self._ensure_client()
        response = await client.get(url, timeout=httpx.Timeout(timeout))
        if not response.is_success:
            raise FeedError(
                f"HTTP request failed: {response.status_code}",
                feed_name=url,
                error_code=ErrorCode.FEED_UNAVAILABLE.value,
                status_code=response.status_code,
            )
        return response.json()


class FeedFetcher(Generic[T]):
    """Base class turning one upstream endpoint into fetch-or-``None``."""

    def __init__(
        self,
        client: FeedHttpClient,
        *,
        timeout: float,
        cache: CacheStrategy | None = None,
        cache_ttl: int = 0,
        metrics: MetricsCollector | None = None,
    ):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.client = client
        self.timeout = timeout
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._metrics = metrics

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics or get_metrics_collector()

    async def _fetch(
        self,
        feed: str,
        url: str,
        parser: Callable[[Any], T | None],
    ) -> T | None:
        started = time.perf_counter()
        result: T | None = None
        try:
            payload = await self.client.get_json(url, timeout=self.timeout)
        except httpx.TimeoutException:
            logger.bind(feed=feed, error_code=ErrorCode.FEED_TIMEOUT.value).warning(
                "Feed request timed out after {timeout}s", timeout=self.timeout
            )
        except FeedError as exc:
            logger.bind(feed=feed, error_code=exc.error_code).warning(
                "Feed returned status {status}", status=exc.status_code
            )
        except httpx.HTTPError as exc:
            logger.bind(feed=feed, error_code=ErrorCode.FEED_ERROR.value).warning(
                "Feed transport error: {error}", error=str(exc)
            )
        except ValueError as exc:
            logger.bind(feed=feed, error_code=ErrorCode.DATA_FORMAT_ERROR.value).warning(
                "Feed returned undecodable JSON: {error}", error=str(exc)
            )
        else:
            result = parser(payload)
            if result is None:
                logger.bind(feed=feed, error_code=ErrorCode.DATA_FORMAT_ERROR.value).warning(
                    "Feed payload failed validation"
                )

        self.metrics.observe_feed(feed, time.perf_counter() - started, success=result is not None)
        return result

    async def _cached(self, key: str, loader: Callable[[], Awaitable[T | None]]) -> T | None:
        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.bind(feed=key).debug("Feed served from cache")
                return cached

        result = await loader()
        if result is not None and self.cache is not None:
            await self.cache.set(key, result, self.cache_ttl)
        return result


def is_number(value: Any) -> bool:
    """True for finite ints and floats; booleans are rejected."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


__all__ = ["FeedFetcher", "FeedHttpClient", "HttpConfig", "is_number"]

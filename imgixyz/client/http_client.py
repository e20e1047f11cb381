"""
HTTP infrastructure layer with rate limiting and bearer authentication.

Provides:
- RateLimiter: Token bucket shared by every request of the process
- AuthenticatedRateLimitedTransport: httpx transport that waits for a permit,
  then injects the auth and JSON:API headers
- HTTPClient: Async HTTP client that maps transport failures to TransportError

This layer separates HTTP concerns (throttling, headers, transport errors)
from the source API semantics in ``imgixyz.client.sources``. There are no
retries here; a failed call surfaces immediately.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import httpx

from imgixyz.client.errors import DecodeError, TransportError
from imgixyz.client.schemas import MEDIA_TYPE
from imgixyz.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.imgix.com/api/v1/"


@dataclass
class RateLimiter:
    """
    Token bucket rate limiter.

    Grants one permit every ``interval_seconds`` with up to ``burst`` permits
    banked. Waiters are serialized by an asyncio lock, so concurrent callers
    are released one interval apart. An interval of 0 disables limiting.

    If a waiting task is cancelled, the CancelledError propagates out of
    ``acquire`` and no permit is consumed.

    Example:
        limiter = RateLimiter(interval_seconds=2.0, burst=1)
        await limiter.acquire()  # Returns immediately
        await limiter.acquire()  # Waits ~2 seconds
    """

    interval_seconds: float = 2.0
    burst: int = 1
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)
    _tokens: float = field(init=False, repr=False)
    _last_update: float = field(init=False, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        if self.burst < 1:
            raise ValueError("burst must be at least 1")
        self._tokens = float(self.burst)
        self._last_update = self.clock()

    async def acquire(self) -> float:
        """
        Wait until a permit is available, then consume it.

        Returns:
            Seconds spent waiting (0.0 when a permit was banked)
        """
        if self.interval_seconds <= 0:
            return 0.0

        async with self._lock:
            now = self.clock()
            elapsed = now - self._last_update
            self._last_update = now

            # Refill tokens based on elapsed time
            self._tokens = min(
                float(self.burst),
                self._tokens + elapsed / self.interval_seconds,
            )

            if self._tokens >= 1:
                self._tokens -= 1
                return 0.0

            wait_time = (1 - self._tokens) * self.interval_seconds
            logger.debug(f"Rate limited, waiting {wait_time:.2f}s")
            await self.sleep(wait_time)

            # The permit that accrued during the wait is spent by this caller
            self._last_update = self.clock()
            self._tokens = 0.0
            return wait_time


class AuthenticatedRateLimitedTransport(httpx.AsyncBaseTransport):
    """
    httpx transport wrapper applying the rate limit and imgix headers.

    Every request waits on the shared RateLimiter before anything is sent,
    then gets ``Authorization: Bearer <token>``, ``Accept`` and (for requests
    with a body) ``Content-Type`` set to the JSON:API media type.
    """

    def __init__(
        self,
        token: str,
        rate_limiter: RateLimiter,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token = token
        self._rate_limiter = rate_limiter
        self._transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        metrics = get_metrics()

        waited = await self._rate_limiter.acquire()
        metrics.record_rate_limit_wait(waited)

        request.headers["Authorization"] = f"Bearer {self._token}"
        request.headers["Accept"] = MEDIA_TYPE
        if request.method in ("POST", "PATCH", "PUT"):
            request.headers["Content-Type"] = MEDIA_TYPE

        start = time.monotonic()
        try:
            response = await self._transport.handle_async_request(request)
        except httpx.TransportError:
            metrics.record_request(request.method, "error")
            raise

        metrics.record_request(
            request.method,
            response.status_code,
            latency=time.monotonic() - start,
        )
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()


class HTTPClient:
    """
    Async HTTP client for the imgix management API.

    Features:
    - Shared token bucket rate limiting (injected, one per process)
    - Bearer token and JSON:API headers on every request
    - Transport failures raised as TransportError, no retries
    - Context manager for proper resource cleanup

    Example:
        limiter = RateLimiter(interval_seconds=2.0)
        async with HTTPClient("token", limiter) as client:
            response = await client.request("GET", "sources/42")
    """

    def __init__(
        self,
        token: str,
        rate_limiter: RateLimiter,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            token: imgix API token.
            rate_limiter: Process-wide limiter shared with other clients.
            base_url: API root, requests use paths relative to it.
            timeout: Request timeout in seconds.
            transport: Underlying transport (defaults to httpx's HTTP transport).
        """
        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=AuthenticatedRateLimitedTransport(
                token=token,
                rate_limiter=rate_limiter,
                transport=transport,
            ),
        )

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send one request and return the response, whatever its status.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            params: Query parameters
            json_body: JSON:API document to send

        Returns:
            httpx.Response (status is interpreted by the caller)

        Raises:
            TransportError: On connection, timeout, protocol or redirect failures
            DecodeError: If the body cannot be content-decoded (e.g. corrupt gzip)
        """
        content = json.dumps(json_body).encode("utf-8") if json_body is not None else None

        try:
            return await self._client.request(
                method,
                path,
                params=params,
                content=content,
            )
        except httpx.DecodingError as e:
            get_metrics().record_error("decode")
            logger.warning(f"Undecodable response body for {method} {path}: {e}")
            raise DecodeError(f"failed to decode response body: {e}") from e
        except httpx.RequestError as e:
            get_metrics().record_error("transport")
            logger.warning(f"{type(e).__name__} for {method} {path}: {e}")
            raise TransportError(str(e) or type(e).__name__) from e

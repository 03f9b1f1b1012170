# ABOUTME: Async HTTP client abstraction for catalog API calls.
# ABOUTME: Provides rate limiting, retry with backoff, and injectable transport for testing.

import asyncio
import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

from bookmatch.errors import FetchError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_USER_AGENT = "bookmatch/0.1.0"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON-over-HTTP GET calls against external APIs."""

    async def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]: ...


class BookmatchHttpClient:
    """Async HTTP client with rate limiting and retry for API calls.

    Wraps httpx.AsyncClient with a minimum interval between requests and
    exponential-backoff retries for transient failures (429, 5xx). Timeouts
    and connection errors are not retried here; they surface as FetchError
    so the caller's own retry budget decides what happens next.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.5,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": _USER_AGENT},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._last_request_time: float = 0.0
        self._rate_lock = asyncio.Lock()

    async def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send a GET request and return the parsed JSON body.

        Raises:
            FetchError: On non-retryable HTTP errors, transport errors,
                invalid JSON, or exhausted retries.
        """
        return await self._request("GET", url, params=params, headers=headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        attempts = 1 + self._max_retries
        last_status = 0
        for attempt in range(attempts):
            await self._rate_limit()
            try:
                response = await self._client.request(method, url, **kwargs)
                last_status = response.status_code
            except httpx.HTTPError as exc:
                raise FetchError(f"Request failed: {url}: {exc}") from exc

            if response.status_code == 200:
                try:
                    return response.json()
                except ValueError as exc:
                    raise FetchError(f"Invalid JSON from {url}: {exc}") from exc

            if response.status_code not in _RETRYABLE_STATUS_CODES:
                raise FetchError(f"HTTP {response.status_code} from {url}")

            if attempt < attempts - 1:
                delay = self._retry_delay * (2**attempt)
                logger.warning(
                    "HTTP %d from %s, retrying in %.1fs (attempt %d/%d)",
                    response.status_code,
                    url,
                    delay,
                    attempt + 1,
                    self._max_retries,
                )
                await asyncio.sleep(delay)

        raise FetchError(f"HTTP {last_status} from {url} after {attempts} attempts")

    async def _rate_limit(self) -> None:
        """Sleep if needed to maintain minimum interval between requests."""
        if self._min_interval <= 0:
            return
        async with self._rate_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval and self._last_request_time > 0:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

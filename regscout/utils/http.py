"""
HTTP client utilities for regscout.

This module provides an asynchronous HTTP client with optional retry
logic, rate limiting, and concurrency control. One client is created per
upstream (GitHub, npm, raw index) so that each carries its own default
headers and connection pool.
"""

from __future__ import annotations

import time
import httpx
import random
import asyncio
from typing import Any, Dict, List, Mapping, Optional, cast

from regscout.utils.logger import get_logger
from regscout.__version__ import __version__
from regscout.exceptions import NetworkError, ResourceNotFoundError
from regscout.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_429_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


def _retry_after_seconds(value: Optional[str]) -> int:
    """Seconds to wait for a 429 response.

    Only the delta-seconds form of ``Retry-After`` is honoured; a missing,
    negative or HTTP-date value waits one second.
    """
    if value is None:
        return 1
    try:
        seconds = int(value.strip())
    except ValueError:
        return 1
    return seconds if seconds >= 0 else 1


class HTTPClient:
    """Asynchronous HTTP client with retries, rate limiting, and concurrency control.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retry attempts for timeouts, connection errors and 5xx.
        max_429_retries: Retry attempts for HTTP 429 responses.
        rate_limit_delay: Minimum delay (seconds) between requests.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        headers: Extra default headers sent with every request.
        max_concurrency: Maximum number of concurrent requests.
        transport: Optional httpx transport (used by tests).

    Example:
        >>> async with HTTPClient(headers={"Accept": "application/json"}) as client:
        ...     data = await client.get_json("https://registry.npmjs.org/left-pad")
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_429_retries: int = DEFAULT_MAX_429_RETRIES,
        rate_limit_delay: float = 0.0,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        max_concurrency: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.max_429_retries = max_429_retries
        self.rate_limit_delay = rate_limit_delay
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.headers: Dict[str, str] = dict(headers or {})
        self.max_concurrency = max_concurrency

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._last_request_time: float = 0.0
        self._rate_limit_lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent, **self.headers},
                transport=self._transport,
            )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _rate_limit(self) -> None:
        """Enforce a minimum delay between outgoing requests."""
        if self.rate_limit_delay <= 0:
            return

        async with self._rate_limit_lock:
            now = time.time()
            elapsed = now - self._last_request_time

            if elapsed < self.rate_limit_delay:
                delay = self.rate_limit_delay - elapsed
                self._last_request_time = now + delay
                await asyncio.sleep(delay)
            else:
                self._last_request_time = now

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry and backoff logic."""
        await self._ensure_client()
        assert self._client is not None

        last_exc: Optional[Exception] = None
        retry_429_count = 0
        attempt = 0

        while attempt <= self.max_retries:
            try:
                await self._rate_limit()

                async with self._semaphore:
                    response = await self._client.request(method, url, **kwargs)

                if response.status_code == 429:
                    retry_429_count += 1
                    if retry_429_count > self.max_429_retries:
                        raise NetworkError(
                            "Rate limit exceeded",
                            url=url,
                            status_code=429,
                        )
                    retry_after = _retry_after_seconds(response.headers.get("Retry-After"))
                    logger.warning(
                        "Rate limited (429), retrying after %ds (%d/%d)",
                        retry_after,
                        retry_429_count,
                        self.max_429_retries,
                    )
                    await asyncio.sleep(retry_after)
                    continue

                if response.status_code == 404:
                    raise ResourceNotFoundError(
                        f"Resource not found: {url}",
                        url=url,
                        status_code=404,
                    )

                response.raise_for_status()
                return response

            except httpx.TimeoutException as exc:
                last_exc = exc
                logger.debug(
                    "Request timeout (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            except httpx.RequestError as exc:
                last_exc = exc
                logger.debug(
                    "Network error (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )

            except httpx.HTTPStatusError as exc:
                if 400 <= exc.response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {exc.response.status_code} error for {url}",
                        url=url,
                        status_code=exc.response.status_code,
                        response_body=exc.response.text,
                    ) from exc
                last_exc = exc
                logger.debug(
                    "HTTP %d error (%d/%d): %s",
                    exc.response.status_code,
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            if attempt < self.max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)
            attempt += 1

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempt(s): {url}",
            url=url,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def _get_parsed(self, url: str, **kwargs: Any) -> Any:
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Fetch a URL and parse the response as a JSON object."""
        data = await self._get_parsed(url, **kwargs)
        if not isinstance(data, dict):
            raise NetworkError(f"Expected JSON object from {url}", url=url)
        return cast(Dict[str, Any], data)

    async def get_json_list(self, url: str, **kwargs: Any) -> List[Any]:
        """Fetch a URL and parse the response as a JSON array."""
        data = await self._get_parsed(url, **kwargs)
        if not isinstance(data, list):
            raise NetworkError(f"Expected JSON array from {url}", url=url)
        return data

"""Registry read path with caching, timeout and stale fallback.

:class:`RegistryService` decides, for every read, whether to serve the
cached snapshot, run a new aggregation cycle, or fall back to the previous
snapshot:

* a snapshot younger than ``cache_ttl`` is returned untouched;
* otherwise one cycle runs under ``aggregation_timeout``;
* a successful cycle replaces the snapshot, stamped with the instant the
  read began;
* a failed cycle serves the previous snapshot annotated with a warning,
  or a ``500`` failure payload when there is none.

Concurrent reads that miss the cache each run their own cycle.
"""

from __future__ import annotations

import time
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from regscout.config import RegScoutConfig
from regscout.constants import (
    CACHE_CONTROL_FRESH,
    CACHE_CONTROL_STALE,
    FAILURE_ERROR,
    STALE_WARNING,
)
from regscout.core.aggregator import run_aggregation
from regscout.core.cache import RegistryCache
from regscout.exceptions import (
    AggregationTimeoutError,
    MissingCredentialError,
    RegScoutError,
)
from regscout.models import CachedRegistry, utc_timestamp
from regscout.utils.logger import get_logger

logger = get_logger("core.service")

__all__ = ["RegistryResponse", "RegistryService", "CycleRunner"]

#: Coroutine function producing a snapshot from a GitHub token.
CycleRunner = Callable[[str], Awaitable[CachedRegistry]]


@dataclass(frozen=True)
class RegistryResponse:
    """Outcome of one :meth:`RegistryService.read`.

    Attributes:
        payload: JSON body.
        status_code: HTTP status to answer with.
        cache_control: ``Cache-Control`` header value, if any.
        state: ``"cached"``, ``"fresh"``, ``"stale"`` or ``"failed"``.
    """

    payload: Dict[str, Any]
    status_code: int = 200
    cache_control: Optional[str] = None
    state: str = "fresh"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def headers(self) -> Dict[str, str]:
        if self.cache_control is None:
            return {}
        return {"Cache-Control": self.cache_control}


class RegistryService:
    """Serve registry snapshots from an owned cache.

    Args:
        config: Budgets and credential.
        cache: Snapshot cache; a new one is created when omitted.
        run_cycle: Coroutine function producing a snapshot from a token.
            Defaults to a full aggregation built from *config*.
        clock: Monotonic clock used for cache ageing.
    """

    def __init__(
        self,
        config: RegScoutConfig,
        *,
        cache: Optional[RegistryCache] = None,
        run_cycle: Optional[CycleRunner] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.cache = cache if cache is not None else RegistryCache()
        self._run_cycle = run_cycle
        self._clock = clock

    async def read(self) -> RegistryResponse:
        """Return the registry, refreshing it when the cache has expired."""
        now = self._clock()
        cached = self.cache.get()

        if cached is not None and self.cache.is_fresh(now, self.config.cache_ttl):
            logger.info("Returning cached registry data")
            return RegistryResponse(
                payload=cached.to_json(),
                cache_control=CACHE_CONTROL_FRESH,
                state="cached",
            )

        try:
            snapshot = await self._refresh()
        except Exception as exc:
            return self._fallback(exc)

        self.cache.set(snapshot, now)
        return RegistryResponse(
            payload=snapshot.to_json(),
            cache_control=CACHE_CONTROL_FRESH,
            state="fresh",
        )

    async def _refresh(self) -> CachedRegistry:
        """Run one cycle within the aggregation budget.

        Raises:
            MissingCredentialError: No GitHub token is configured.
            AggregationTimeoutError: The cycle exceeded its budget.
        """
        token = self.config.github_token
        if not token:
            raise MissingCredentialError()

        run_cycle = self._run_cycle or self._default_cycle
        timeout = self.config.aggregation_timeout

        logger.info("Parsing registry")
        try:
            return await asyncio.wait_for(run_cycle(token), timeout)
        except asyncio.TimeoutError as exc:
            raise AggregationTimeoutError(timeout) from exc

    async def _default_cycle(self, token: str) -> CachedRegistry:
        return await run_aggregation(self.config, token)

    def _fallback(self, exc: Exception) -> RegistryResponse:
        message = exc.message if isinstance(exc, RegScoutError) else str(exc)
        previous = self.cache.get()

        if previous is not None:
            logger.warning("Serving stale registry after failed refresh: %s", message)
            payload = previous.to_json()
            payload["warning"] = STALE_WARNING
            payload["error"] = message
            return RegistryResponse(
                payload=payload,
                cache_control=CACHE_CONTROL_STALE,
                state="stale",
            )

        logger.error(
            "Failed to parse registry: %s",
            message,
            exc_info=not isinstance(exc, RegScoutError),
        )
        return RegistryResponse(
            payload={
                "error": FAILURE_ERROR,
                "message": message,
                "lastUpdatedAt": utc_timestamp(),
                "registry": {},
            },
            status_code=500,
            state="failed",
        )

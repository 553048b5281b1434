"""Registry-wide aggregation for regscout.

The aggregator downloads the registry index (a flat JSON object mapping
package identifiers to ``github:owner/repo`` references), reconciles every
entry concurrently and assembles a timestamped
:class:`~regscout.models.CachedRegistry`.

Fan-out is bounded by a per-aggregation :class:`asyncio.Semaphore`; each
HTTP client additionally limits its own in-flight requests. Results are
collected in index order regardless of completion order.

Typical usage::

    snapshot = await run_aggregation(config, token)
    print(len(snapshot), snapshot.last_updated_at)
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Tuple

from regscout.config import RegScoutConfig
from regscout.constants import DEFAULT_MAX_CONCURRENCY, REGISTRY_INDEX_URL
from regscout.core.manifest import ManifestInspector
from regscout.core.package_index import PackageIndexProber
from regscout.core.reconciler import RepositoryReconciler
from regscout.core.source_control import SourceControlProber, github_headers
from regscout.exceptions import RegScoutError
from regscout.models import CachedRegistry, VersionInfo, utc_timestamp
from regscout.utils.http import HTTPClient
from regscout.utils.logger import get_logger

logger = get_logger("core.aggregator")

__all__ = ["RegistryAggregator", "Upstreams", "run_aggregation"]


class RegistryAggregator:
    """Reconcile every registry entry into one snapshot.

    Args:
        index_client: Client used to download the index document.
        reconciler: Per-package reconciler.
        index_url: Location of the index document.
        max_concurrency: Entries reconciled at the same time.
    """

    def __init__(
        self,
        index_client: HTTPClient,
        reconciler: RepositoryReconciler,
        *,
        index_url: str = REGISTRY_INDEX_URL,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.index_client = index_client
        self.reconciler = reconciler
        self.index_url = index_url
        self.max_concurrency = max_concurrency

    async def fetch_index(self) -> List[Tuple[str, str]]:
        """Download the index as ``(identifier, reference)`` pairs.

        A failed download is treated as an empty index. Entries with an
        empty identifier or a non-string reference are dropped.
        """
        try:
            document = await self.index_client.get_json(self.index_url)
        except RegScoutError as exc:
            logger.warning("Failed to fetch registry index: %s", exc)
            return []

        entries: List[Tuple[str, str]] = []
        for identifier, reference in document.items():
            if not identifier or not isinstance(reference, str):
                logger.warning("Ignoring malformed index entry %r: %r", identifier, reference)
                continue
            entries.append((identifier, reference))

        logger.debug("Registry index lists %d package(s)", len(entries))
        return entries

    async def aggregate(self) -> CachedRegistry:
        """Reconcile the whole registry.

        Any exception raised while reconciling cancels the remaining work
        and propagates to the caller.
        """
        entries = await self.fetch_index()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(identifier: str, reference: str) -> VersionInfo:
            async with semaphore:
                return await self.reconciler.reconcile(identifier, reference)

        tasks = [asyncio.ensure_future(bounded(name, ref)) for name, ref in entries]
        try:
            results = await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        registry: Dict[str, VersionInfo] = {}
        for (identifier, _), info in zip(entries, results):
            registry[identifier] = info

        snapshot = CachedRegistry(last_updated_at=utc_timestamp(), registry=registry)
        logger.info("Aggregated %d package(s)", len(snapshot))
        return snapshot


class Upstreams:
    """HTTP clients and probers for one cycle, built from configuration.

    Use as an async context manager so the clients are closed afterwards::

        async with Upstreams(config, token) as upstreams:
            info = await upstreams.reconciler.reconcile(name, ref)
    """

    def __init__(self, config: RegScoutConfig, token: str) -> None:
        options: Dict[str, Any] = {
            "timeout": config.request_timeout,
            "max_concurrency": config.max_concurrency,
        }
        self.config = config
        self.github_http = HTTPClient(headers=github_headers(token), **options)
        self.npm_http = HTTPClient(headers={"Accept": "application/json"}, **options)
        self.index_http = HTTPClient(**options)

        source_control = SourceControlProber(self.github_http, config.github_api_url)
        self.reconciler = RepositoryReconciler(
            source_control,
            PackageIndexProber(self.npm_http, config.package_index_url),
            ManifestInspector(source_control, config.tracked_dependency),
            candidate_branches=config.candidate_branches,
            package_name_prefixes=config.package_name_prefixes,
        )
        self.aggregator = RegistryAggregator(
            self.index_http,
            self.reconciler,
            index_url=config.index_url,
            max_concurrency=config.max_concurrency,
        )

    async def __aenter__(self) -> "Upstreams":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        for client in (self.github_http, self.npm_http, self.index_http):
            await client.close()


async def run_aggregation(config: RegScoutConfig, token: str) -> CachedRegistry:
    """Run one aggregation cycle with freshly opened HTTP clients.

    Args:
        config: Endpoints, reconciliation settings and budgets.
        token: GitHub token used for every GitHub API call.
    """
    async with Upstreams(config, token) as upstreams:
        return await upstreams.aggregator.aggregate()

"""npm registry prober for regscout.

Looks up the npm package that corresponds to a registry identifier and
reports its highest published ``0.x`` and ``1.x`` versions. The name
mapping is a pure prefix rewrite (``@elizaos-plugins/foo`` →
``@elizaos/foo``); no search request is ever made.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from regscout.constants import PACKAGE_INDEX_URL, PACKAGE_NAME_PREFIXES
from regscout.exceptions import RegScoutError
from regscout.models import PackageIndexSummary, ProbeResult, Unavailable
from regscout.utils.http import HTTPClient
from regscout.utils.logger import get_logger
from regscout.utils.version_utils import resolve_major_lines

logger = get_logger("core.package_index")

__all__ = ["PackageIndexProber", "guess_package_name"]


def guess_package_name(
    identifier: str,
    prefixes: Mapping[str, str] = PACKAGE_NAME_PREFIXES,
) -> str:
    """Map a registry identifier to its npm package name.

    The first matching prefix is rewritten; unmatched identifiers are
    returned unchanged.

    Example:
        >>> guess_package_name("@elizaos-plugins/plugin-solana")
        '@elizaos/plugin-solana'
    """
    for source, target in prefixes.items():
        if identifier.startswith(source):
            return target + identifier[len(source):]
    return identifier


class PackageIndexProber:
    """Best-effort reader of npm package documents.

    Args:
        http_client: Client used for registry requests.
        url_template: Package document URL with a ``{package}`` placeholder.
    """

    def __init__(self, http_client: HTTPClient, url_template: str = PACKAGE_INDEX_URL) -> None:
        self.http_client = http_client
        self.url_template = url_template

    async def list_versions(self, name: str) -> ProbeResult[List[str]]:
        """Return every version key published for *name*."""
        url = self.url_template.format(package=name)
        try:
            document = await self.http_client.get_json(url)
        except RegScoutError as exc:
            logger.debug("npm lookup failed for %s: %s", name, exc)
            return Unavailable(str(exc))

        versions: Optional[Any] = document.get("versions")
        if not isinstance(versions, dict):
            return Unavailable(f"{name} lists no versions")
        return _keys(versions)

    async def summarize(self, name: str) -> PackageIndexSummary:
        """Highest v0 and v1 versions of *name*, or a ``found=False`` summary."""
        versions = await self.list_versions(name)
        if isinstance(versions, Unavailable):
            return PackageIndexSummary.missing(name)

        v0, v1 = resolve_major_lines(versions)
        return PackageIndexSummary(repo=name, v0=v0, v1=v1)


def _keys(versions: Dict[str, Any]) -> List[str]:
    return [key for key in versions if isinstance(key, str) and key]

"""GitHub prober for regscout.

Wraps the three GitHub REST endpoints regscout needs (branches, tags,
file contents) and converts every failure into an
:class:`~regscout.models.probe.Unavailable` marker. Nothing in this module
raises to its caller: a rate-limited, missing, or private repository
simply yields less information.

Typical usage::

    async with HTTPClient(headers=github_headers(token)) as http:
        prober = SourceControlProber(http)
        ref = RepositoryRef("elizaos-plugins", "plugin-solana")
        branches = await prober.branch_names(ref)     # ["main", "1.x", ...]
        tags = await prober.tag_summary(ref)          # TagSummary(...)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from regscout.constants import (
    BRANCH_PAGE_SIZE,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    TAG_PAGE_SIZE,
)
from regscout.exceptions import RegScoutError
from regscout.models import ProbeResult, RepositoryRef, TagSummary, Unavailable
from regscout.utils.http import HTTPClient
from regscout.utils.logger import get_logger
from regscout.utils.version_utils import clean_version, resolve_major_lines

logger = get_logger("core.source_control")

__all__ = ["SourceControlProber", "github_headers"]


def github_headers(token: str) -> Dict[str, str]:
    """Default headers for authenticated GitHub REST calls."""
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


class SourceControlProber:
    """Best-effort reader of GitHub repository metadata.

    Args:
        http_client: Client preconfigured with :func:`github_headers`.
        api_url: Base URL of the GitHub REST API.
    """

    def __init__(self, http_client: HTTPClient, api_url: str = GITHUB_API_URL) -> None:
        self.http_client = http_client
        self.api_url = api_url.rstrip("/")

    def _repo_url(self, ref: RepositoryRef, suffix: str) -> str:
        return f"{self.api_url}/repos/{ref.owner}/{ref.repo}/{suffix}"

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    async def list_branches(self, ref: RepositoryRef) -> ProbeResult[List[str]]:
        """Return the repository's branch names."""
        try:
            data = await self.http_client.get_json_list(
                self._repo_url(ref, "branches"),
                params={"per_page": BRANCH_PAGE_SIZE},
            )
        except RegScoutError as exc:
            logger.debug("Branch listing failed for %s: %s", ref, exc)
            return Unavailable(str(exc))
        return _names(data)

    async def branch_names(self, ref: RepositoryRef) -> List[str]:
        """Like :meth:`list_branches` but degrades to an empty list."""
        result = await self.list_branches(ref)
        return [] if isinstance(result, Unavailable) else result

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def list_tags(self, ref: RepositoryRef) -> ProbeResult[List[str]]:
        """Return up to 100 tag names, most recent first as GitHub orders them."""
        try:
            data = await self.http_client.get_json_list(
                self._repo_url(ref, "tags"),
                params={"per_page": TAG_PAGE_SIZE},
            )
        except RegScoutError as exc:
            return Unavailable(str(exc))
        return _names(data)

    async def tag_summary(self, ref: RepositoryRef) -> TagSummary:
        """Highest v0 and v1 release tags of *ref*.

        Tags are cleaned (``v1.2.0`` → ``1.2.0``); tags that are not
        versions are ignored. A failed listing is logged as a warning and
        yields an empty summary.
        """
        tags = await self.list_tags(ref)
        if isinstance(tags, Unavailable):
            logger.warning("Failed to fetch tags for %s: %s", ref, tags.reason)
            return TagSummary(repo=ref.full_name)

        cleaned = [version for version in map(clean_version, tags) if version]
        v0, v1 = resolve_major_lines(cleaned)
        return TagSummary(repo=ref.full_name, v0=v0, v1=v1)

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    async def get_file_content(
        self,
        ref: RepositoryRef,
        path: str,
        git_ref: str,
    ) -> ProbeResult[Dict[str, Any]]:
        """Return the contents-API payload of *path* at *git_ref*.

        Directory listings and symlinks come back without a ``content``
        field and are reported as unavailable.
        """
        try:
            data = await self.http_client.get_json(
                self._repo_url(ref, f"contents/{path}"),
                params={"ref": git_ref},
            )
        except RegScoutError as exc:
            logger.debug("No %s at %s@%s: %s", path, ref, git_ref, exc)
            return Unavailable(str(exc))

        if "content" not in data:
            return Unavailable(f"{path} at {git_ref} is not a file")
        return data


def _names(items: List[Any]) -> List[str]:
    """Extract ``name`` fields from a GitHub listing, skipping junk."""
    names: List[str] = []
    for item in items:
        name: Optional[Any] = item.get("name") if isinstance(item, dict) else None
        if isinstance(name, str) and name:
            names.append(name)
    return names

"""
Centralized constants for regscout.

This module defines immutable configuration values used across regscout,
including upstream endpoints, cache and timeout budgets, HTTP headers, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "regscout/{version}"

# ---------------------------------------------------------------------------
# Upstream endpoints
# ---------------------------------------------------------------------------

#: Registry index document: ``{"<package id>": "github:owner/repo", ...}``.
REGISTRY_INDEX_URL: Final[str] = (
    "https://raw.githubusercontent.com/elizaos-plugins/registry/refs/heads/main/index.json"
)

#: Base URL for the GitHub REST API.
GITHUB_API_URL: Final[str] = "https://api.github.com"

#: GitHub REST API version header value.
GITHUB_API_VERSION: Final[str] = "2022-11-28"

#: npm registry package document.
PACKAGE_INDEX_URL: Final[str] = "https://registry.npmjs.org/{package}"

#: Prefix of supported source-control references.
GIT_REF_PREFIX: Final[str] = "github:"

# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------

#: Dependency whose declared range decides v0 / v1 support.
TRACKED_DEPENDENCY: Final[str] = "@elizaos/core"

#: Manifest file read at every candidate branch.
MANIFEST_PATH: Final[str] = "package.json"

#: Branches inspected for a manifest, in priority order.
CANDIDATE_BRANCHES: Final[Sequence[str]] = ("main", "master", "0.x", "1.x")

#: Registry identifier prefix → npm package prefix.
PACKAGE_NAME_PREFIXES: Final[Mapping[str, str]] = {
    "@elizaos-plugins/": "@elizaos/",
}

#: Maximum number of tags requested per repository.
TAG_PAGE_SIZE: Final[int] = 100

#: Maximum number of branches requested per repository.
BRANCH_PAGE_SIZE: Final[int] = 100

#: Workspace protocol prefix in dependency ranges.
WORKSPACE_PREFIX: Final[str] = "workspace:"

#: Bare workspace symbols that mean "any version".
WORKSPACE_WILDCARDS: Final[Sequence[str]] = ("*", "^", "~")

#: Range matching every release.
UNBOUNDED_RANGE: Final[str] = ">=0.0.0"

#: Dist-tag that carries no usable major version.
LATEST_TAG: Final[str] = "latest"

# ---------------------------------------------------------------------------
# Cache and aggregation budgets
# ---------------------------------------------------------------------------

#: Seconds a snapshot is served without refreshing.
DEFAULT_CACHE_TTL: Final[int] = 30 * 60

#: Seconds a full aggregation cycle may run.
DEFAULT_AGGREGATION_TIMEOUT: Final[float] = 25.0

#: Packages reconciled concurrently.
DEFAULT_MAX_CONCURRENCY: Final[int] = 16

#: Cache-Control for a fresh snapshot.
CACHE_CONTROL_FRESH: Final[str] = "public, s-maxage=1800, stale-while-revalidate=3600"

#: Cache-Control for a stale snapshot served after a failed cycle.
CACHE_CONTROL_STALE: Final[str] = "public, s-maxage=300, stale-while-revalidate=3600"

#: Annotation attached to stale snapshots.
STALE_WARNING: Final[str] = "Data may be stale due to parsing error"

#: Error title of the total-failure payload.
FAILURE_ERROR: Final[str] = "Failed to parse registry"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 10

#: Probes are best-effort and never retried by default.
DEFAULT_MAX_RETRIES: Final[int] = 0

#: Retries on HTTP 429 before giving up.
DEFAULT_MAX_429_RETRIES: Final[int] = 0

#: Environment variables holding the GitHub token, in lookup order.
TOKEN_ENV_VARS: Final[Sequence[str]] = ("GITHUB_TOKEN", "GH_TOKEN")

# ---------------------------------------------------------------------------
# Server defaults
# ---------------------------------------------------------------------------

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8000

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

"""
Unified data model exports for regscout.

Example:
    >>> from regscout.models import VersionInfo, RepositoryRef, Unavailable
"""

from __future__ import annotations

from regscout.models.probe import ProbeResult, Unavailable, is_available
from regscout.models.repository import (
    BranchSupport,
    ManifestSnapshot,
    RepositoryRef,
    parse_repository_ref,
)
from regscout.models.verdict import (
    CachedRegistry,
    GitInfo,
    PackageIndexSummary,
    Supports,
    TagSummary,
    VersionInfo,
    VersionLine,
    utc_timestamp,
)

__all__ = [
    "ProbeResult",
    "Unavailable",
    "is_available",
    "BranchSupport",
    "ManifestSnapshot",
    "RepositoryRef",
    "parse_repository_ref",
    "CachedRegistry",
    "GitInfo",
    "PackageIndexSummary",
    "Supports",
    "TagSummary",
    "VersionInfo",
    "VersionLine",
    "utc_timestamp",
]

"""
Compatibility verdict models for regscout.

A :class:`VersionInfo` is the per-package result of reconciliation. It
combines the release tags found on GitHub, the versions published to npm,
and the branches whose manifests target each core major line. A
:class:`CachedRegistry` is the timestamped collection of all verdicts and
is the unit the registry service caches and serves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format *moment* (default: now) as ISO-8601 UTC with milliseconds.

    Example:
        >>> utc_timestamp(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
        '2024-05-01T12:00:00.000Z'
    """
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


@dataclass(frozen=True)
class TagSummary:
    """Highest release tag per major line for one repository."""

    repo: str
    v0: Optional[str] = None
    v1: Optional[str] = None


@dataclass(frozen=True)
class PackageIndexSummary:
    """Highest published npm version per major line.

    Attributes:
        repo: npm package name, or ``None`` when no lookup was attempted.
        v0: Highest ``0.x`` version.
        v1: Highest ``1.x`` version.
        found: ``False`` when the registry lookup failed or listed no
            versions; the JSON form then omits ``v0``/``v1``.
    """

    repo: Optional[str] = None
    v0: Optional[str] = None
    v1: Optional[str] = None
    found: bool = True

    @classmethod
    def missing(cls, name: Optional[str]) -> "PackageIndexSummary":
        return cls(repo=name, found=False)

    def to_json(self) -> Dict[str, Any]:
        if not self.found:
            return {"repo": self.repo}
        return {"repo": self.repo, "v0": self.v0, "v1": self.v1}


@dataclass(frozen=True)
class VersionLine:
    """Released version and supporting branch for one major line."""

    version: Optional[str] = None
    branch: Optional[str] = None

    def to_json(self) -> Dict[str, Optional[str]]:
        return {"version": self.version, "branch": self.branch}


@dataclass(frozen=True)
class GitInfo:
    """GitHub-side view of a package."""

    repo: str
    v0: VersionLine = field(default_factory=VersionLine)
    v1: VersionLine = field(default_factory=VersionLine)

    def to_json(self) -> Dict[str, Any]:
        return {"repo": self.repo, "v0": self.v0.to_json(), "v1": self.v1.to_json()}


@dataclass(frozen=True)
class Supports:
    """Whether a package works with each core major line."""

    v0: bool = False
    v1: bool = False

    def to_json(self) -> Dict[str, bool]:
        return {"v0": self.v0, "v1": self.v1}


@dataclass(frozen=True)
class VersionInfo:
    """Compatibility verdict for one registry entry.

    Attributes:
        supports: Support flags. ``supports.v0`` is ``True`` when any
            inspected manifest targets core 0.x or npm lists a 0.x
            release; likewise for ``v1``.
        git: GitHub view; absent when the registry reference could not be
            parsed.
        npm: npm view.
    """

    supports: Supports = field(default_factory=Supports)
    git: Optional[GitInfo] = None
    npm: Optional[PackageIndexSummary] = None

    @classmethod
    def unsupported(cls) -> "VersionInfo":
        """Verdict for an entry whose reference could not be parsed."""
        return cls(
            supports=Supports(v0=False, v1=False),
            npm=PackageIndexSummary(repo=None, v0=None, v1=None),
        )

    def to_json(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {}
        if self.git is not None:
            entry["git"] = self.git.to_json()
        if self.npm is not None:
            entry["npm"] = self.npm.to_json()
        entry["supports"] = self.supports.to_json()
        return entry


@dataclass(frozen=True)
class CachedRegistry:
    """One complete aggregation result.

    Attributes:
        last_updated_at: ISO-8601 UTC timestamp of assembly.
        registry: Package identifier → verdict, in index order.
    """

    last_updated_at: str
    registry: Dict[str, VersionInfo] = field(default_factory=dict)

    def to_json(self) -> Dict[str, Any]:
        return {
            "lastUpdatedAt": self.last_updated_at,
            "registry": {name: info.to_json() for name, info in self.registry.items()},
        }

    def __len__(self) -> int:
        return len(self.registry)

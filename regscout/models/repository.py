"""
Source-control data models for regscout.

Covers the parsed repository reference, the manifest read at one ref, and
the per-major branch support derived from manifests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from regscout.constants import GIT_REF_PREFIX


@dataclass(frozen=True)
class RepositoryRef:
    """A GitHub repository parsed from a registry reference.

    Attributes:
        owner: Account or organisation name.
        repo: Repository name.
    """

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """Return ``owner/repo``."""
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return self.full_name


def parse_repository_ref(ref: object) -> Optional[RepositoryRef]:
    """Parse a ``github:owner/repo`` registry reference.

    Anything after the second path segment is ignored. Returns ``None`` for
    other providers, non-string values, or an empty owner or repo.

    Example:
        >>> parse_repository_ref("github:elizaos-plugins/plugin-solana")
        RepositoryRef(owner='elizaos-plugins', repo='plugin-solana')
        >>> parse_repository_ref("gitlab:owner/repo") is None
        True
    """
    if not isinstance(ref, str) or not ref.startswith(GIT_REF_PREFIX):
        return None

    segments = ref[len(GIT_REF_PREFIX):].split("/")
    owner = segments[0]
    repo = segments[1] if len(segments) > 1 else ""
    if not owner or not repo:
        return None
    return RepositoryRef(owner=owner, repo=repo)


@dataclass(frozen=True)
class ManifestSnapshot:
    """Fields of interest from one ``package.json``.

    Attributes:
        version: The manifest's own ``version``.
        dependency_range: Range declared for the tracked dependency in
            ``dependencies`` or, failing that, ``peerDependencies``.
    """

    version: Optional[str] = None
    dependency_range: Optional[str] = None


@dataclass
class BranchSupport:
    """Branch whose manifest targets each core major line."""

    v0: Optional[str] = None
    v1: Optional[str] = None

    def record(self, major: Optional[int], branch: str) -> None:
        """Record *branch* for *major*; later calls overwrite earlier ones."""
        if major == 0:
            self.v0 = branch
        elif major == 1:
            self.v1 = branch

    def to_json(self) -> Dict[str, Optional[str]]:
        return {"v0": self.v0, "v1": self.v1}

"""Per-package reconciliation for regscout.

For one registry entry the reconciler gathers three independent signals
and folds them into a :class:`~regscout.models.VersionInfo`:

1. **Branch manifests**: ``package.json`` on each candidate branch
   (``main``, ``master``, ``0.x``, ``1.x``) declares a range for the core
   dependency; the minimum version of that range tells which core major
   line the branch targets.
2. **Release tags**: the highest ``0.x`` and ``1.x`` tags on GitHub.
3. **npm versions**: the highest ``0.x`` and ``1.x`` versions published.

Branch listing, tag listing and the npm lookup start together; manifest
fetches start as soon as the branch list is known. Every probe degrades to
an empty result on failure, so reconciliation itself never raises.

Typical usage::

    reconciler = RepositoryReconciler(source_control, package_index)
    info = await reconciler.reconcile(
        "@elizaos-plugins/plugin-solana",
        "github:elizaos-plugins/plugin-solana",
    )
    info.supports.v1   # True / False
"""

from __future__ import annotations

import asyncio
from typing import List, Mapping, Optional, Sequence, Set, Tuple

from regscout.constants import CANDIDATE_BRANCHES, PACKAGE_NAME_PREFIXES
from regscout.exceptions import InvalidRangeError
from regscout.core.manifest import ManifestInspector
from regscout.core.package_index import PackageIndexProber, guess_package_name
from regscout.core.ranges import normalize_dependency_range, range_major
from regscout.core.source_control import SourceControlProber
from regscout.models import (
    BranchSupport,
    GitInfo,
    ManifestSnapshot,
    RepositoryRef,
    Supports,
    VersionInfo,
    VersionLine,
    parse_repository_ref,
)
from regscout.utils.logger import get_logger

logger = get_logger("core.reconciler")

__all__ = ["RepositoryReconciler"]


class RepositoryReconciler:
    """Build compatibility verdicts for registry entries.

    Args:
        source_control: GitHub prober.
        package_index: npm prober.
        inspector: Manifest inspector; defaults to one built on
            *source_control*.
        candidate_branches: Branches inspected, in priority order.
        package_name_prefixes: Identifier → npm name prefix rewrites.
    """

    def __init__(
        self,
        source_control: SourceControlProber,
        package_index: PackageIndexProber,
        inspector: Optional[ManifestInspector] = None,
        *,
        candidate_branches: Sequence[str] = CANDIDATE_BRANCHES,
        package_name_prefixes: Mapping[str, str] = PACKAGE_NAME_PREFIXES,
    ) -> None:
        self.source_control = source_control
        self.package_index = package_index
        self.inspector = inspector or ManifestInspector(source_control)
        self.candidate_branches = tuple(candidate_branches)
        self.package_name_prefixes = dict(package_name_prefixes)

    async def reconcile(self, identifier: str, raw_ref: object) -> VersionInfo:
        """Produce the verdict for one registry entry.

        Entries whose reference is not ``github:owner/repo`` are reported
        as unsupported without any network activity.
        """
        ref = parse_repository_ref(raw_ref)
        if ref is None:
            logger.warning("Skipping %s: unsupported git ref → %s", identifier, raw_ref)
            return VersionInfo.unsupported()

        npm_name = guess_package_name(identifier, self.package_name_prefixes)

        branches_task = asyncio.ensure_future(self.source_control.branch_names(ref))
        tags_task = asyncio.ensure_future(self.source_control.tag_summary(ref))
        npm_task = asyncio.ensure_future(self.package_index.summarize(npm_name))

        try:
            branches = await branches_task
            candidates = [b for b in self.candidate_branches if b in branches]
            branch_support, manifest_majors = await self._inspect_branches(
                identifier, ref, candidates
            )
            tags, npm = await asyncio.gather(tags_task, npm_task)
        finally:
            for task in (branches_task, tags_task, npm_task):
                if not task.done():
                    task.cancel()

        supports_v0 = 0 in manifest_majors or bool(npm.v0)
        supports_v1 = 1 in manifest_majors or bool(npm.v1)
        logger.info("%s → v0:%s v1:%s", identifier, supports_v0, supports_v1)

        git = GitInfo(
            repo=tags.repo or npm.repo or ref.full_name,
            v0=VersionLine(version=tags.v0 or npm.v0 or None, branch=branch_support.v0),
            v1=VersionLine(version=tags.v1 or npm.v1 or None, branch=branch_support.v1),
        )
        return VersionInfo(
            git=git,
            npm=npm,
            supports=Supports(
                v0=supports_v0 or branch_support.v0 is not None,
                v1=supports_v1 or branch_support.v1 is not None,
            ),
        )

    async def _inspect_branches(
        self,
        identifier: str,
        ref: RepositoryRef,
        candidates: List[str],
    ) -> Tuple[BranchSupport, Set[Optional[int]]]:
        """Read every candidate manifest and record which major each targets.

        When several branches target the same major, the last one in
        priority order is recorded.
        """
        results = await asyncio.gather(
            *(self.inspector.inspect(ref, branch) for branch in candidates),
            return_exceptions=True,
        )

        support = BranchSupport()
        majors: Set[Optional[int]] = set()
        for branch, result in zip(candidates, results):
            if isinstance(result, BaseException):
                logger.debug("Manifest probe for %s@%s failed: %s", ref, branch, result)
                continue
            if result is None:
                continue

            major = self._manifest_major(identifier, branch, result)
            support.record(major, branch)
            majors.add(major)

        return support, majors

    @staticmethod
    def _manifest_major(
        identifier: str,
        branch: str,
        manifest: ManifestSnapshot,
    ) -> Optional[int]:
        expression = normalize_dependency_range(manifest.dependency_range)
        if expression is None:
            return None
        try:
            return range_major(expression)
        except InvalidRangeError:
            logger.warning(
                "Invalid version range for %s (%s): %s", identifier, branch, expression
            )
            return None

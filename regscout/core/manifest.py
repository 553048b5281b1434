"""Manifest inspection for regscout.

Reads ``package.json`` from one branch of a GitHub repository and extracts
the plugin's own version plus the range it declares for the tracked core
dependency. A manifest that is missing, malformed, or unreachable is a
normal outcome and is reported as ``None``.
"""

from __future__ import annotations

import json
import base64
import binascii
from typing import Any, Dict, Optional

from regscout.constants import MANIFEST_PATH, TRACKED_DEPENDENCY
from regscout.exceptions import SourceControlError
from regscout.core.source_control import SourceControlProber
from regscout.models import ManifestSnapshot, RepositoryRef, Unavailable
from regscout.utils.logger import get_logger

logger = get_logger("core.manifest")

__all__ = ["ManifestInspector", "decode_manifest", "extract_snapshot"]


class ManifestInspector:
    """Extract :class:`ManifestSnapshot` objects from repository refs.

    Args:
        prober: GitHub prober used to fetch file contents.
        tracked_dependency: Dependency whose declared range is reported.
        manifest_path: Manifest location inside the repository.
    """

    def __init__(
        self,
        prober: SourceControlProber,
        tracked_dependency: str = TRACKED_DEPENDENCY,
        manifest_path: str = MANIFEST_PATH,
    ) -> None:
        self.prober = prober
        self.tracked_dependency = tracked_dependency
        self.manifest_path = manifest_path

    async def inspect(self, ref: RepositoryRef, git_ref: str) -> Optional[ManifestSnapshot]:
        """Return the manifest snapshot at *git_ref*, or ``None``."""
        payload = await self.prober.get_file_content(ref, self.manifest_path, git_ref)
        if isinstance(payload, Unavailable):
            return None

        try:
            manifest = decode_manifest(payload, repository=ref.full_name)
        except SourceControlError as exc:
            logger.debug("Unreadable %s in %s@%s: %s", self.manifest_path, ref, git_ref, exc)
            return None

        return extract_snapshot(manifest, self.tracked_dependency)


def decode_manifest(payload: Dict[str, Any], *, repository: Optional[str] = None) -> Dict[str, Any]:
    """Decode a contents-API payload into the manifest mapping.

    Raises:
        SourceControlError: The payload is not base64 JSON describing an
            object.
    """
    content = payload.get("content")
    if not isinstance(content, str):
        raise SourceControlError("Manifest payload has no content", repository=repository)

    try:
        raw = base64.b64decode(content)
        manifest = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise SourceControlError(
            f"Malformed manifest: {exc}", repository=repository
        ) from exc

    if not isinstance(manifest, dict):
        raise SourceControlError("Manifest is not a JSON object", repository=repository)
    return manifest


def extract_snapshot(manifest: Dict[str, Any], tracked_dependency: str) -> ManifestSnapshot:
    """Pick the version and the tracked dependency range out of *manifest*.

    ``dependencies`` wins over ``peerDependencies``; empty declarations
    fall through to the next section.

    Example:
        >>> extract_snapshot(
        ...     {"version": "1.0.0", "peerDependencies": {"@elizaos/core": "^1.0.0"}},
        ...     "@elizaos/core",
        ... )
        ManifestSnapshot(version='1.0.0', dependency_range='^1.0.0')
    """
    dependency_range: Optional[str] = None
    for section in ("dependencies", "peerDependencies"):
        declared = manifest.get(section)
        if not isinstance(declared, dict):
            continue
        value = declared.get(tracked_dependency)
        if isinstance(value, str) and value:
            dependency_range = value
            break

    version = manifest.get("version")
    return ManifestSnapshot(
        version=version if isinstance(version, str) else None,
        dependency_range=dependency_range,
    )

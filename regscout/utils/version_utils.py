"""
Version helpers for regscout.

Tags and npm version keys are semver strings, parsed and ordered with
:mod:`semantic_version`. Tag names are cleaned first, so that ``v1.2.0``
and ``=1.2.0`` become ``1.2.0`` while ``nightly`` or ``1.2`` are discarded.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from semantic_version import Version

#: Loose prefixes stripped from tag names.
_LOOSE_PREFIX_RE = re.compile(r"^[=v]+")


def clean_version(raw: Optional[str]) -> Optional[str]:
    """Normalize a tag name into a semver string.

    Leading/trailing whitespace and ``=``/``v`` prefixes are removed.

    Examples:
        >>> clean_version(" v1.2.3 ")
        '1.2.3'
        >>> clean_version("release-1") is None
        True
    """
    if raw is None:
        return None
    candidate = _LOOSE_PREFIX_RE.sub("", raw.strip())
    if parse_version(candidate) is None:
        return None
    return candidate


def parse_version(raw: Optional[str]) -> Optional[Version]:
    """Parse a strict semver string, returning ``None`` when it is unusable."""
    if not raw:
        return None
    try:
        return Version(raw)
    except ValueError:
        return None


def major_of(version: Version) -> int:
    """Return the major component of *version*."""
    return version.major


def resolve_major_lines(versions: Iterable[str]) -> Tuple[Optional[str], Optional[str]]:
    """Pick the highest v0 and v1 versions from *versions*.

    Non-parseable entries are dropped, the rest are sorted newest first
    by semver precedence (stable, so equal versions keep their input
    order), and each major line takes its first match. Prereleases rank
    below their release, so ``1.0.0-1`` loses to ``1.0.0``.

    Args:
        versions: Raw version strings in any order.

    Returns:
        ``(v0, v1)``; either slot is ``None`` when no version has that
        major.

    Example:
        >>> resolve_major_lines(["1.2.0", "0.9.0", "junk", "0.10.1"])
        ('0.10.1', '1.2.0')
    """
    parsed: List[Tuple[str, Version]] = []
    for raw in versions:
        version = parse_version(raw)
        if version is not None:
            parsed.append((raw, version))

    parsed.sort(key=lambda item: item[1], reverse=True)

    v0 = next((raw for raw, v in parsed if major_of(v) == 0), None)
    v1 = next((raw for raw, v in parsed if major_of(v) == 1), None)
    return v0, v1

"""npm range reasoning for regscout.

Plugin manifests declare the core dependency with npm range syntax
(``^0.5.0``, ``~1.2``, ``>=1.0.0 <2``, ``1.x || 0.x``, ``workspace:*``).
To decide which core major line a manifest targets, regscout computes the
*minimum* version that satisfies the range and takes its major component,
following the semantics of npm's ``semver.minVersion``.

Ranges are parsed and matched by :class:`semantic_version.NpmSpec`.

Typical usage::

    from regscout.core.ranges import normalize_dependency_range, range_major

    rng = normalize_dependency_range("workspace:*")   # ">=0.0.0"
    range_major(rng)                                  # 0
    range_major("^1.0.0-next.5")                      # 1
"""

from __future__ import annotations

import re
from typing import Any, Iterator, List, Optional, Tuple

from semantic_version import NpmSpec, Version
from semantic_version.base import Range

from regscout.constants import (
    LATEST_TAG,
    UNBOUNDED_RANGE,
    WORKSPACE_PREFIX,
    WORKSPACE_WILDCARDS,
)
from regscout.exceptions import InvalidRangeError

__all__ = ["min_version", "normalize_dependency_range", "parse_range", "range_major"]

_ZERO = Version("0.0.0")

_OPERATOR_GAP_RE = re.compile(r"(<=|>=|<|>|=|\^|~>|~)\s+")


def normalize_dependency_range(raw: Optional[str]) -> Optional[str]:
    """Turn a declared dependency range into something :func:`range_major` accepts.

    ``workspace:`` prefixes are stripped and the bare workspace symbols
    (``*``, ``^``, ``~``) become ``>=0.0.0``. Missing, empty and
    ``latest`` ranges carry no major version and yield ``None``.

    Examples:
        >>> normalize_dependency_range("workspace:^")
        '>=0.0.0'
        >>> normalize_dependency_range("workspace:^1.0.0")
        '^1.0.0'
        >>> normalize_dependency_range("latest") is None
        True
    """
    if raw is None:
        return None

    expression = raw
    if expression.startswith(WORKSPACE_PREFIX):
        expression = expression[len(WORKSPACE_PREFIX):]
        if expression in WORKSPACE_WILDCARDS:
            expression = UNBOUNDED_RANGE

    if not expression or expression == LATEST_TAG:
        return None
    return expression


def _canonical(expression: str) -> str:
    """Rewrite loose npm spellings into the form NpmSpec parses.

    Operators are glued to their version (``>= 1.0.0`` becomes ``>=1.0.0``),
    ``~>`` becomes ``~`` and whitespace runs collapse to one space.
    """
    text = _OPERATOR_GAP_RE.sub(r"\1", expression)
    text = text.replace("~>", "~")
    return " ".join(text.split())


def parse_range(expression: str) -> NpmSpec:
    """Parse an npm range expression.

    Raises:
        InvalidRangeError: The expression is not valid npm range syntax
            (dist-tags, URLs, ``npm:`` aliases, garbage).
    """
    # Malformed hyphen ranges surface as AttributeError from the parser
    try:
        return NpmSpec(_canonical(expression) or UNBOUNDED_RANGE)
    except (ValueError, AttributeError) as exc:
        raise InvalidRangeError(
            f"Invalid range '{expression}'", range_expression=expression
        ) from exc


def _comparators(clause: Any) -> Iterator[Tuple[str, Version]]:
    """Yield every ``(operator, target)`` pair of a parsed clause tree."""
    if isinstance(clause, Range):
        yield clause.operator, clause.target
        return
    for nested in getattr(clause, "clauses", ()):
        yield from _comparators(nested)


def _lower_bound(operator: str, target: Version) -> Optional[Version]:
    if operator == Range.OP_GT:
        if target.prerelease:
            return Version(
                major=target.major,
                minor=target.minor,
                patch=target.patch,
                prerelease=tuple(target.prerelease) + ("0",),
            )
        return Version(major=target.major, minor=target.minor, patch=target.patch + 1)
    if operator in (Range.OP_GTE, Range.OP_EQ):
        return target
    return None


def min_version(spec: NpmSpec) -> Optional[Version]:
    """Return the lowest version satisfying *spec*, or ``None``.

    The minimum of a comparator set is either ``0.0.0`` or one of its lower
    bounds, so those candidates are tried and the smallest match is kept.
    """
    candidates: List[Version] = [_ZERO]
    for operator, target in _comparators(spec.clause):
        bound = _lower_bound(operator, target)
        if bound is not None:
            candidates.append(bound)

    matching = [candidate for candidate in candidates if spec.match(candidate)]
    if not matching:
        return None
    return min(matching)


def range_major(expression: str) -> Optional[int]:
    """Return the major of the minimum version satisfying *expression*.

    Returns ``None`` when nothing satisfies the range.

    Raises:
        InvalidRangeError: *expression* is not a valid npm range.

    Examples:
        >>> range_major("^0.5.0")
        0
        >>> range_major(">=1.0.0 <2.0.0")
        1
        >>> range_major("<0.0.0") is None
        True
    """
    minimum = min_version(parse_range(expression))
    if minimum is None:
        return None
    return minimum.major

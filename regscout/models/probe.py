"""
Probe result sum type.

Raw upstream operations return either their data or an
:class:`Unavailable` marker. Callers branch with ``isinstance`` instead of
catching exceptions, which keeps failure containment local to each probe.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Unavailable:
    """Marker for a probe that produced no data.

    Attributes:
        reason: Short human-readable cause, used for logging only.
    """

    reason: str

    def __bool__(self) -> bool:
        return False


ProbeResult = Union[T, Unavailable]


def is_available(result: object) -> bool:
    """Return ``True`` unless *result* is an :class:`Unavailable` marker."""
    return not isinstance(result, Unavailable)

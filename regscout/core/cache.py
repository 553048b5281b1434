"""In-memory snapshot cache for the registry service."""

from __future__ import annotations

from typing import Optional

from regscout.models import CachedRegistry

__all__ = ["RegistryCache"]


class RegistryCache:
    """Holds the most recent successful :class:`CachedRegistry`.

    The stored timestamp is a monotonic clock reading taken when the
    producing read began, not when the snapshot was assembled. It only
    changes on a successful :meth:`set`, so a stale snapshot keeps ageing
    while refreshes keep failing.

    The cache is owned by a single event loop and needs no locking.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[CachedRegistry] = None
        self._timestamp: Optional[float] = None

    @property
    def timestamp(self) -> Optional[float]:
        """Clock reading of the last successful store, or ``None``."""
        return self._timestamp

    def get(self) -> Optional[CachedRegistry]:
        return self._snapshot

    def set(self, snapshot: CachedRegistry, timestamp: float) -> None:
        self._snapshot = snapshot
        self._timestamp = timestamp

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Whether a snapshot exists and is younger than *ttl* seconds."""
        if self._snapshot is None or self._timestamp is None:
            return False
        return now - self._timestamp < ttl

    def clear(self) -> None:
        self._snapshot = None
        self._timestamp = None

    def __repr__(self) -> str:
        size = len(self._snapshot) if self._snapshot is not None else 0
        return f"RegistryCache(entries={size}, timestamp={self._timestamp})"

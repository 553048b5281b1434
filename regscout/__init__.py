"""
regscout: plugin registry compatibility aggregator

regscout reads a plugin registry index (package identifier → GitHub
repository), probes every repository and the npm registry concurrently,
and reduces the signals into one compatibility verdict per plugin:
which core major lines (v0 / v1) the plugin supports, from which
branch, and at which released version.

Features include:
    • Concurrent, bounded fan-out over GitHub and npm
    • npm range reasoning for the tracked core dependency
    • In-process snapshot cache with stale-on-error fallback
    • JSON HTTP endpoint and a CLI for one-shot reports
"""

from __future__ import annotations

from regscout.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "regscout Contributors"
__license__ = "Apache-2.0"
__description__ = "Plugin registry compatibility aggregator for GitHub and npm."

__all__ = [
    "__version__",
]

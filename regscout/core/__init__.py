"""
Core functionality exports for regscout.

Importing from here keeps user-facing imports clean and stable:

    from regscout.core import RegistryService, RepositoryReconciler
"""

from __future__ import annotations

from regscout.core.cache import RegistryCache
from regscout.core.manifest import ManifestInspector
from regscout.core.ranges import (
    min_version,
    normalize_dependency_range,
    parse_range,
    range_major,
)
from regscout.core.reconciler import RepositoryReconciler
from regscout.core.package_index import PackageIndexProber, guess_package_name
from regscout.core.source_control import SourceControlProber, github_headers
from regscout.core.aggregator import RegistryAggregator, Upstreams, run_aggregation
from regscout.core.service import RegistryResponse, RegistryService

__all__ = [
    "parse_range",
    "min_version",
    "normalize_dependency_range",
    "range_major",
    "ManifestInspector",
    "SourceControlProber",
    "github_headers",
    "PackageIndexProber",
    "guess_package_name",
    "RepositoryReconciler",
    "RegistryAggregator",
    "Upstreams",
    "run_aggregation",
    "RegistryCache",
    "RegistryResponse",
    "RegistryService",
]

"""Shaded-jar exclusion resolution.

This package provides:
- models.py: coordinates, manifests, the project dependency set and the exclusion set
- manifest.py: reading what a shaded archive already bundles
- resolver.py: folding bundle manifests into exclusion patterns
- dependencies.py: loading the project's resolved dependency listing
- repository.py: locating bundle archives in local Maven repositories
"""

from .errors import (  # noqa: F401
    ShadeDiffError,
    ReferenceUnresolvable,
    ManifestError,
    ManifestMissing,
    ManifestUnreadable,
    MalformedEntry,
    DependencyListError,
)
from .models import (  # noqa: F401
    Coordinate,
    VersionedComponent,
    BundleReference,
    BundleManifest,
    ManifestFormat,
    ProjectDependencySet,
    ExclusionSet,
)
from .manifest import read_manifest  # noqa: F401
from .resolver import ExclusionResolver, resolve  # noqa: F401
from .dependencies import load_dependencies, parse_dependency_lines  # noqa: F401
from .repository import LocalRepositoryFetcher  # noqa: F401

__all__ = [
    # Errors
    "ShadeDiffError",
    "ReferenceUnresolvable",
    "ManifestError",
    "ManifestMissing",
    "ManifestUnreadable",
    "MalformedEntry",
    "DependencyListError",
    # Models
    "Coordinate",
    "VersionedComponent",
    "BundleReference",
    "BundleManifest",
    "ManifestFormat",
    "ProjectDependencySet",
    "ExclusionSet",
    # Core
    "read_manifest",
    "ExclusionResolver",
    "resolve",
    # Adapters
    "load_dependencies",
    "parse_dependency_lines",
    "LocalRepositoryFetcher",
]

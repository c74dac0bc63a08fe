"""Reconcile the project's dependencies against already-shaded bundles.

A dependency is excluded from the project's own uber-jar only when a
referenced bundle already carries the very same coordinate at the very same
version string. Anything else stays in: bundling a second copy is safe,
leaving out a copy at a different version is not.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled
from .errors import ReferenceUnresolvable
from .manifest import ArchiveHandle, read_manifest
from .models import BundleManifest, BundleReference, ExclusionSet, ProjectDependencySet

logger = logging.getLogger(__name__)

Fetcher = Callable[[BundleReference], Optional[ArchiveHandle]]
ManifestReader = Callable[[ArchiveHandle], BundleManifest]


class ExclusionResolver:
    """Fold bundle manifests into an exclusion set.

    Args:
        fetch: Turns a BundleReference into an archive handle. Download,
            caching and retries are its business, not ours.
        read: Manifest reader, replaceable for tests.
    """

    def __init__(self, fetch: Fetcher, read: ManifestReader = read_manifest):
        self.fetch = fetch
        self.read = read

    def _fetch(self, ref: BundleReference) -> ArchiveHandle:
        try:
            archive = self.fetch(ref)
        except ReferenceUnresolvable:
            raise
        except OSError as e:
            raise ReferenceUnresolvable(ref, str(e)) from e
        if archive is None:
            raise ReferenceUnresolvable(ref)
        return archive

    def fold(self, project_deps: ProjectDependencySet, manifest: BundleManifest,
             excludes: ExclusionSet) -> None:
        """Add patterns for every manifest component the project needs at the same version."""
        for component in manifest:
            wanted = project_deps.version_of(component.coordinate)
            if wanted is None:
                continue
            if wanted != component.version:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Keeping %s %s, %s bundles %s",
                        component.coordinate, wanted, manifest.source, component.version,
                        extra=extra_context(
                            event="decision",
                            component="resolver",
                            action="fold",
                            outcome="version_mismatch",
                            bundle=manifest.source,
                        ),
                    )
                continue
            pattern = component.coordinate.exclusion_pattern
            if excludes.add(pattern, manifest.source):
                logger.info(
                    "Excluding from shaded jar: %s (already included in %s)",
                    pattern, manifest.source,
                )

    def resolve(self, project_deps: ProjectDependencySet,
                refs: Sequence[BundleReference]) -> ExclusionSet:
        """Compute the exclusion set for ``refs`` in declaration order.

        Raises:
            ReferenceUnresolvable: a reference produced no archive.
            ManifestMissing: a bundle carries no manifest.
            ManifestUnreadable: a bundle's manifest could not be read.
        """
        excludes = ExclusionSet()
        for ref in refs:
            archive = self._fetch(ref)
            manifest = self.read(archive)
            if is_debug_enabled(logger):
                logger.debug(
                    "Comparing bundle contents",
                    extra=extra_context(
                        event="function_entry",
                        component="resolver",
                        action="resolve",
                        bundle=manifest.source,
                        count=len(manifest),
                    ),
                )
            self.fold(project_deps, manifest, excludes)
        return excludes


def resolve(project_deps: ProjectDependencySet, refs: Sequence[BundleReference],
            fetch: Fetcher) -> ExclusionSet:
    """Compute which project dependencies are already bundled at the same version."""
    return ExclusionResolver(fetch).resolve(project_deps, refs)

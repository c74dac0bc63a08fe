"""Locate bundle archives in local Maven repository directories."""
from __future__ import annotations

import logging
import os
from typing import List, Sequence

from constants import Constants
from .errors import ReferenceUnresolvable
from .models import BundleReference

logger = logging.getLogger(__name__)


def artifact_path(root: str, ref: BundleReference) -> str:
    """Path of ``ref`` under a repository root using the standard Maven layout.

    Args:
        root: Repository base directory.
        ref: Bundle reference.

    Returns:
        ``<root>/<group path>/<name>/<version>/<name>-<version>[-<classifier>].jar``
    """
    filename = f"{ref.name}-{ref.version}"
    if ref.classifier:
        filename += f"-{ref.classifier}"
    filename += f".{Constants.BUNDLE_TYPE}"
    return os.path.join(root, *ref.group.split("."), ref.name, ref.version, filename)


class LocalRepositoryFetcher:
    """Archive resolver backed by one or more local repository directories.

    Roots are searched in order; the first existing file wins. Nothing is
    downloaded.
    """

    def __init__(self, roots: Sequence[str]):
        if not roots:
            roots = [Constants.DEFAULT_LOCAL_REPOSITORY]
        self.roots: List[str] = [os.path.expanduser(r) for r in roots]

    def __call__(self, ref: BundleReference) -> str:
        tried = []
        for root in self.roots:
            candidate = artifact_path(root, ref)
            if os.path.isfile(candidate):
                logger.debug("Resolved %s to %s", ref, candidate)
                return candidate
            tried.append(candidate)
        raise ReferenceUnresolvable(ref, "not found at " + ", ".join(tried))

"""Load the current project's resolved dependency list from a file.

Two inputs are understood:

* ``dependency-list``: the text printed or written by ``mvn dependency:list``
  (``group:name:type[:classifier]:version:scope`` per line, possibly wrapped
  in ``[INFO]`` prefixes and ``-- module`` suffixes);
* ``coordinates``: bare ``group:name:type[:classifier]:version`` lines.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Sequence

from constants import Constants, DependencyFormats
from .errors import DependencyListError, MalformedEntry
from .models import Coordinate, ProjectDependencySet, VersionedComponent

logger = logging.getLogger(__name__)

_LEVEL_PREFIX = re.compile(r"^\[[A-Z]+\]\s*")
_OPTIONAL_SUFFIX = " (optional)"


def _parse_listing_line(line: str) -> Optional[tuple]:
    """Return (component, scope) for a dependency:list line, or None when it is not one."""
    text = _LEVEL_PREFIX.sub("", line.strip())
    text = text.split(" -- ", 1)[0].strip()
    if text.endswith(_OPTIONAL_SUFFIX):
        text = text[: -len(_OPTIONAL_SUFFIX)].strip()
    if not text or any(ch.isspace() for ch in text):
        return None
    items = text.split(":")
    if len(items) == 5:
        group, name, type_, version, scope = items
        classifier = ""
    elif len(items) == 6:
        group, name, type_, classifier, version, scope = items
    else:
        return None
    if not (group and name and type_ and version):
        return None
    return VersionedComponent(Coordinate(group, name, type_, classifier), version), scope.lower()


def parse_dependency_lines(
    lines: Iterable[str],
    fmt: str = DependencyFormats.DEPENDENCY_LIST.value,
    scopes: Optional[Sequence[str]] = None,
) -> ProjectDependencySet:
    """Build a ProjectDependencySet from listing lines.

    Args:
        lines: Raw text lines.
        fmt: One of Constants.SUPPORTED_DEPENDENCY_FORMATS.
        scopes: Scopes to keep for ``dependency-list`` input; defaults to the
            runtime classpath (compile and runtime). An empty sequence keeps all.

    Returns:
        ProjectDependencySet
    """
    if fmt not in Constants.SUPPORTED_DEPENDENCY_FORMATS:
        raise DependencyListError(f"Unsupported dependency list format: {fmt}")
    if scopes is None:
        scopes = Constants.DEFAULT_SCOPES
    wanted_scopes = {s.lower() for s in scopes}

    deps = ProjectDependencySet()
    for line in lines:
        if fmt == DependencyFormats.COORDINATES.value:
            text = line.strip()
            if not text or text.startswith("#"):
                continue
            try:
                deps.add(VersionedComponent.parse(text))
            except MalformedEntry:
                logger.warning("Invalid dependency coordinate, skipping: %s", text)
            continue

        parsed = _parse_listing_line(line)
        if parsed is None:
            continue
        component, scope = parsed
        if wanted_scopes and scope not in wanted_scopes:
            logger.debug("Ignoring %s in scope %s", component, scope)
            continue
        deps.add(component)
    return deps


def load_dependencies(
    path: str,
    fmt: str = DependencyFormats.DEPENDENCY_LIST.value,
    scopes: Optional[Sequence[str]] = None,
) -> ProjectDependencySet:
    """Read a dependency listing from ``path``.

    Raises:
        DependencyListError: the file cannot be read or the format is unknown.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise DependencyListError(f"Failed to read dependency list {path}: {e}") from e
    deps = parse_dependency_lines(lines, fmt=fmt, scopes=scopes)
    logger.info("Loaded %d resolved dependencies from %s", len(deps), path)
    return deps

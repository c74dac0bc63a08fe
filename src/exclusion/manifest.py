"""Read the list of components folded into a shaded archive.

Two record formats are understood, tried in order:

1. ``META-INF/maven-shade-included-artifacts.list``: one
   ``group:name:type[:classifier]:version`` per line.
2. Every ``META-INF/*/pom.properties`` entry, one per bundled component.

The first is written by the shade plugin itself and is authoritative when
present. The second is what ends up in most uber-jars by default, so it is
scanned exhaustively as a fallback.
"""
from __future__ import annotations

import fnmatch
import logging
import os
import zipfile
import zlib
from typing import BinaryIO, Dict, List, Union

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from .errors import MalformedEntry, ManifestMissing, ManifestUnreadable
from .models import BundleManifest, Coordinate, ManifestFormat, VersionedComponent

logger = logging.getLogger(__name__)

ArchiveHandle = Union[str, "os.PathLike[str]", BinaryIO]


def _describe(archive: ArchiveHandle) -> str:
    if isinstance(archive, (str, os.PathLike)):
        return os.fspath(archive)
    return str(getattr(archive, "name", repr(archive)))


def _read_text(zf: zipfile.ZipFile, entry: str, source: str) -> str:
    # zlib.error: corrupt deflate stream; NotImplementedError: unsupported
    # compression method; RuntimeError: encrypted entry.
    try:
        return zf.read(entry).decode("utf-8")
    except (OSError, zipfile.BadZipFile, zlib.error, NotImplementedError,
            RuntimeError, UnicodeDecodeError) as e:
        raise ManifestUnreadable(source, str(e), entry=entry) from e


def parse_properties(text: str) -> Dict[str, str]:
    """Parse the subset of Java properties syntax Maven writes.

    Handles ``#``/``!`` comments and ``=``/``:`` separators; line
    continuations and escapes do not occur in pom.properties.
    """
    props: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        cut = min((i for i in (line.find("="), line.find(":")) if i >= 0), default=-1)
        if cut < 0:
            props[line] = ""
            continue
        props[line[:cut].strip()] = line[cut + 1:].strip()
    return props


def component_from_properties(props: Dict[str, str], raw: str = "") -> VersionedComponent:
    """Build a component from a pom.properties mapping.

    Raises:
        MalformedEntry: when groupId, artifactId or version is missing.
    """
    missing = [key for key in ("groupId", "artifactId", "version") if not props.get(key)]
    if missing:
        raise MalformedEntry(raw, f"missing {', '.join(missing)}")
    coordinate = Coordinate(
        props["groupId"],
        props["artifactId"],
        props.get("type") or Constants.DEFAULT_TYPE,
        props.get("classifier", ""),
    )
    return VersionedComponent(coordinate, props["version"])


def _read_included_artifacts_list(zf: zipfile.ZipFile, source: str) -> BundleManifest:
    manifest = BundleManifest(source, ManifestFormat.INCLUDED_ARTIFACTS_LIST)
    text = _read_text(zf, Constants.SHADED_JAR_CONTENTS_ENTRY, source)
    for line in text.splitlines():
        if not line.strip():
            continue
        try:
            manifest.components.append(VersionedComponent.parse(line))
        except MalformedEntry as e:
            logger.warning(
                "Invalid full artifact ID line from %s's list of included jars, skipping: %s",
                source, line,
            )
            manifest.skipped.append(e.raw)
    return manifest


def _read_pom_properties(zf: zipfile.ZipFile, entries: List[str], source: str) -> BundleManifest:
    manifest = BundleManifest(source, ManifestFormat.POM_PROPERTIES)
    for entry in entries:
        props = parse_properties(_read_text(zf, entry, source))
        try:
            manifest.components.append(component_from_properties(props, raw=entry))
        except MalformedEntry as e:
            logger.warning("Incomplete %s in %s (%s), skipping", entry, source, e.reason)
            manifest.skipped.append(entry)
    return manifest


def read_manifest(archive: ArchiveHandle) -> BundleManifest:
    """Read the components bundled into ``archive``.

    Args:
        archive: Path to a jar/zip, or a seekable binary file object.

    Returns:
        BundleManifest in the order the archive lists its components.

    Raises:
        ManifestMissing: neither record format is present.
        ManifestUnreadable: the archive or a record could not be read.
    """
    source = _describe(archive)
    with Timer() as timer:
        try:
            zf = zipfile.ZipFile(archive)
        except (OSError, zipfile.BadZipFile) as e:
            raise ManifestUnreadable(source, str(e)) from e

        with zf:
            names = zf.namelist()
            if Constants.SHADED_JAR_CONTENTS_ENTRY in names:
                manifest = _read_included_artifacts_list(zf, source)
            else:
                entries = [
                    name for name in names
                    if fnmatch.fnmatchcase(name, Constants.POM_PROPERTIES_PATTERN)
                ]
                if not entries:
                    raise ManifestMissing(
                        source,
                        f"{Constants.SHADED_JAR_CONTENTS_ENTRY} or {Constants.POM_PROPERTIES_PATTERN}",
                    )
                manifest = _read_pom_properties(zf, entries, source)

    if is_debug_enabled(logger):
        logger.debug(
            "Read bundle manifest",
            extra=extra_context(
                event="function_exit",
                component="manifest",
                action="read_manifest",
                outcome=manifest.format.value,
                target=source,
                count=len(manifest),
                duration_ms=timer.duration_ms(),
            ),
        )
    return manifest

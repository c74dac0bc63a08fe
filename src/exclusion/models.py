"""Data models for bundle manifests and exclusion resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from constants import Constants
from .errors import MalformedEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Coordinate:
    """Version-independent identity of a dependency."""
    group: str
    name: str
    type: str = Constants.DEFAULT_TYPE
    classifier: str = ""

    @property
    def exclusion_pattern(self) -> str:
        """Wildcard rule over type, classifier and version."""
        return f"{self.group}:{self.name}:*"

    def __str__(self) -> str:
        value = f"{self.group}:{self.name}:{self.type}"
        if self.classifier:
            value += f":{self.classifier}"
        return value


@dataclass(frozen=True)
class VersionedComponent:
    """A coordinate at a specific version."""
    coordinate: Coordinate
    version: str

    @classmethod
    def parse(cls, text: str) -> "VersionedComponent":
        """Parse ``group:name:type[:classifier]:version``.

        Raises:
            MalformedEntry: when the field count is not 4 or 5, or group,
                name, type or version is empty.
        """
        items = text.strip().split(":")
        if len(items) < 4 or len(items) > 5:
            raise MalformedEntry(text, f"expected 4 or 5 fields, got {len(items)}")
        if not all(items[:3]) or not items[-1]:
            raise MalformedEntry(text, "empty group, name, type or version")
        classifier = items[3] if len(items) == 5 else ""
        return cls(Coordinate(items[0], items[1], items[2], classifier), items[-1])

    def __str__(self) -> str:
        return f"{self.coordinate}:{self.version}"


@dataclass(frozen=True)
class BundleReference:
    """Names a shaded archive whose contents should not be bundled again."""
    group: str
    name: str
    version: str
    classifier: str = ""

    @classmethod
    def parse(cls, token: str) -> "BundleReference":
        """Parse ``group:name:version[:classifier]``."""
        items = [item.strip() for item in token.strip().split(":")]
        if len(items) not in (3, 4) or not all(items[:3]):
            raise ValueError(
                f"Invalid bundle reference {token!r}, expected groupId:artifactId:version[:classifier]"
            )
        classifier = items[3] if len(items) == 4 else ""
        return cls(items[0], items[1], items[2], classifier)

    def __str__(self) -> str:
        return (
            f"groupId={self.group}, artifactId={self.name}, "
            f"version={self.version}, classifier={self.classifier or None}"
        )


class ManifestFormat(Enum):
    """Where a bundle manifest was read from."""
    INCLUDED_ARTIFACTS_LIST = "included-artifacts-list"
    POM_PROPERTIES = "pom-properties"


@dataclass
class BundleManifest:
    """Components packaged into one bundle archive, in manifest order."""
    source: str
    format: ManifestFormat
    components: List[VersionedComponent] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # raw malformed lines/records

    def __iter__(self) -> Iterator[VersionedComponent]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)


class ProjectDependencySet:
    """Resolved dependencies of the current project, keyed by coordinate."""

    def __init__(self, components: Iterable[VersionedComponent] = ()):
        self._versions: Dict[Coordinate, str] = {}
        for component in components:
            self.add(component)

    def add(self, component: VersionedComponent) -> None:
        """Record a dependency; a repeated coordinate keeps the last version."""
        previous = self._versions.get(component.coordinate)
        if previous is not None and previous != component.version:
            logger.warning(
                "Dependency %s listed with versions %s and %s, using %s",
                component.coordinate, previous, component.version, component.version,
            )
        self._versions[component.coordinate] = component.version

    def version_of(self, coordinate: Coordinate) -> Optional[str]:
        """Version the project resolved for ``coordinate``, or None."""
        return self._versions.get(coordinate)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._versions

    def __len__(self) -> int:
        return len(self._versions)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._versions)

    def items(self) -> Iterable[Tuple[Coordinate, str]]:
        """Coordinate and version pairs in insertion order."""
        return self._versions.items()


class ExclusionSet:
    """Deduplicated ``group:name:*`` patterns, always iterated in sorted order.

    The first bundle that contributed each pattern is remembered for
    diagnostics; it does not take part in equality.
    """

    def __init__(self) -> None:
        self._origins: Dict[str, str] = {}

    def add(self, pattern: str, origin: str = "") -> bool:
        """Add a pattern; return False when it was already present."""
        if pattern in self._origins:
            return False
        self._origins[pattern] = origin
        return True

    def origin_of(self, pattern: str) -> Optional[str]:
        """Bundle that first contributed ``pattern``."""
        return self._origins.get(pattern)

    @property
    def patterns(self) -> List[str]:
        """Patterns in sorted order."""
        return sorted(self._origins)

    def render(self) -> str:
        """Comma-joined patterns, the value handed to the packaging step."""
        return ",".join(self.patterns)

    def __iter__(self) -> Iterator[str]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self._origins)

    def __bool__(self) -> bool:
        return bool(self._origins)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._origins

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExclusionSet):
            return self.patterns == other.patterns
        return NotImplemented

    def __repr__(self) -> str:
        return f"ExclusionSet({self.patterns!r})"

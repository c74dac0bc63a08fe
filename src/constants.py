"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 2
    MANIFEST_ERROR = 3


class DependencyFormats(Enum):
    """Input formats accepted for the project's resolved dependency list.

    Args:
        Enum (string): Dependency list formats.
    """

    DEPENDENCY_LIST = "dependency-list"
    COORDINATES = "coordinates"


class OutputFormats(Enum):
    """Renderings of the exclusion set.

    Args:
        Enum (string): Output formats.
    """

    CSV = "csv"
    PROPERTIES = "properties"
    JSON = "json"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SHADED_JAR_CONTENTS_ENTRY = "META-INF/maven-shade-included-artifacts.list"
    POM_PROPERTIES_PATTERN = "META-INF/*/pom.properties"
    DEFAULT_TYPE = "jar"
    BUNDLE_TYPE = "jar"
    EXCLUDES_PROPERTY = "maven.shade.plugin.additionalExcludes"

    DEFAULT_LOCAL_REPOSITORY = "~/.m2/repository"
    DEFAULT_SCOPES = ["compile", "runtime"]
    SUPPORTED_DEPENDENCY_FORMATS = [f.value for f in DependencyFormats]
    SUPPORTED_OUTPUT_FORMATS = [f.value for f in OutputFormats]

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "SHADEDIFF_LOG_LEVEL"
    ENV_LOG_FILE = "SHADEDIFF_LOG_FILE"
    ENV_LOCAL_REPOSITORY = "SHADEDIFF_LOCAL_REPOSITORY"

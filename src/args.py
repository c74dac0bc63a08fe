"""Argument parsing functionality for shadediff."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="shadediff",
        description=(
            "shadediff - Exclude dependencies already bundled in shaded jars "
            "from an uber-jar"
        ),
        add_help=True,
    )

    parser.add_argument("-d", "--dependencies",
                        dest="DEPENDENCIES",
                        help="File listing the project's resolved dependencies",
                        action="store",
                        type=str)
    parser.add_argument("--dependency-format",
                        dest="DEPENDENCY_FORMAT",
                        help="Format of the dependency file (default: dependency-list)",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_DEPENDENCY_FORMATS)
    parser.add_argument("-s", "--scope",
                        dest="SCOPES",
                        help="Dependency scope to consider, can be used multiple times "
                             "(default: compile, runtime)",
                        action="append",
                        type=str.lower)
    parser.add_argument("-b", "--bundle",
                        dest="BUNDLES",
                        help="Shaded jar to exclude the contents of, as "
                             "groupId:artifactId:version[:classifier]. Can be used multiple times.",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("-R", "--repository",
                        dest="REPOSITORIES",
                        help="Local Maven repository to look up shaded jars in, "
                             "can be used multiple times (default: ~/.m2/repository)",
                        action="append",
                        type=str,
                        default=[])

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (default: stdout)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (default: csv)",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_OUTPUT_FORMATS)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only log errors.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)

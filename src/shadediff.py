"""shadediff - exclude dependencies already bundled in shaded jars from an uber-jar.

    Reads the project's resolved dependencies and the manifests of one or more
    shaded jars, and prints the exclusion patterns for the shade step's
    ``maven.shade.plugin.additionalExcludes`` setting.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import Constants, ExitCodes, OutputFormats
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import ConfigError, RunConfig, build_run_config
from exclusion import (
    DependencyListError,
    ExclusionResolver,
    ExclusionSet,
    LocalRepositoryFetcher,
    ManifestError,
    ReferenceUnresolvable,
    load_dependencies,
)

logger = logging.getLogger(__name__)


def render(excludes: ExclusionSet, fmt: str) -> str:
    """Render the exclusion set in the requested output format.

    Args:
        excludes (ExclusionSet): Resolved exclusions.
        fmt (str): One of Constants.SUPPORTED_OUTPUT_FORMATS.

    Returns:
        str: Text to write, newline-terminated; empty for an empty
        ``properties`` rendering.
    """
    if fmt == OutputFormats.JSON.value:
        payload = {"property": Constants.EXCLUDES_PROPERTY, "excludes": excludes.patterns}
        return json.dumps(payload, indent=2) + "\n"
    if fmt == OutputFormats.PROPERTIES.value:
        if not excludes:
            return ""
        return f"{Constants.EXCLUDES_PROPERTY}={excludes.render()}\n"
    return excludes.render() + "\n"


def write_output(text: str, path=None) -> None:
    """Write rendered output to ``path`` or stdout."""
    if path:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
        logger.info("Wrote exclusions to %s", path)
    else:
        sys.stdout.write(text)


def run(cfg: RunConfig) -> ExclusionSet:
    """Resolve exclusions for a merged run configuration."""
    if not cfg.bundles:
        logger.info("No shaded jars specified to exclude the contents of, nothing to do")
        return ExclusionSet()

    project_deps = load_dependencies(cfg.dependencies_file, fmt=cfg.dependency_format, scopes=cfg.scopes)
    resolver = ExclusionResolver(LocalRepositoryFetcher(cfg.repositories))
    excludes = resolver.resolve(project_deps, cfg.bundles)
    logger.info(
        "%d of %d dependencies already bundled in %d shaded jar(s)",
        len(excludes), len(project_deps), len(cfg.bundles),
    )
    return excludes


def _setup_logging(args) -> None:
    """Honor --loglevel/--logfile by passing them to the centralized logger via env."""
    level = "ERROR" if getattr(args, "QUIET", False) else getattr(args, "LOG_LEVEL", None)
    if level:
        os.environ[Constants.ENV_LOG_LEVEL] = str(level).upper()
    if getattr(args, "LOG_FILE", None):
        os.environ[Constants.ENV_LOG_FILE] = args.LOG_FILE
    configure_logging()


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        cfg = build_run_config(args)
        excludes = run(cfg)
    except (ConfigError, DependencyListError) as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except ReferenceUnresolvable as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)
    except ManifestError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.MANIFEST_ERROR.value)

    try:
        write_output(render(excludes, cfg.output_format), cfg.output_file)
    except OSError as e:
        logger.error("Failed to write output: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()

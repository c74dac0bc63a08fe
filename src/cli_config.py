"""Run configuration: YAML config file merged with CLI overrides.

The config file is optional. When present it is parsed with PyYAML and
validated against CONFIG_SCHEMA before use; CLI flags take precedence over
scalar values and append to list values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft7Validator

from constants import Constants, DependencyFormats, OutputFormats
from exclusion.errors import ShadeDiffError
from exclusion.models import BundleReference

logger = logging.getLogger(__name__)

_NON_EMPTY = {"type": "string", "minLength": 1}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "bundles": {
            "type": "array",
            "items": {
                "oneOf": [
                    _NON_EMPTY,
                    {
                        "type": "object",
                        "additionalProperties": False,
                        "required": ["groupId", "artifactId", "version"],
                        "properties": {
                            "groupId": _NON_EMPTY,
                            "artifactId": _NON_EMPTY,
                            "version": _NON_EMPTY,
                            "classifier": {"type": "string"},
                        },
                    },
                ]
            },
        },
        "repositories": {"type": "array", "items": _NON_EMPTY},
        "dependencies": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "file": _NON_EMPTY,
                "format": {"enum": Constants.SUPPORTED_DEPENDENCY_FORMATS},
                "scopes": {"type": "array", "items": _NON_EMPTY},
            },
        },
        "output": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "format": {"enum": Constants.SUPPORTED_OUTPUT_FORMATS},
                "file": _NON_EMPTY,
            },
        },
    },
}


class ConfigError(ShadeDiffError):
    """Raised when the configuration file or CLI options are invalid."""


@dataclass
class RunConfig:
    """Everything a run needs, after merging file and CLI settings."""
    bundles: List[BundleReference] = field(default_factory=list)
    repositories: List[str] = field(default_factory=list)
    dependencies_file: Optional[str] = None
    dependency_format: str = DependencyFormats.DEPENDENCY_LIST.value
    scopes: List[str] = field(default_factory=lambda: list(Constants.DEFAULT_SCOPES))
    output_format: str = OutputFormats.CSV.value
    output_file: Optional[str] = None


def validate_config(data: Dict[str, Any]) -> None:
    """Validate a parsed config mapping; raise ConfigError on the first problem."""
    validator = Draft7Validator(CONFIG_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ConfigError(f"Invalid configuration at '{path}': {first.message}")


def load_config(config_path: str) -> Dict[str, Any]:
    """Load and validate a YAML (or JSON) configuration file.

    Args:
        config_path: Path to the config file.

    Returns:
        Parsed configuration dict; empty when the file is empty.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping at the top level")
    validate_config(data)
    return data


def _bundle_from_config(item: Any) -> BundleReference:
    if isinstance(item, str):
        return BundleReference.parse(item)
    return BundleReference(
        item["groupId"], item["artifactId"], item["version"], item.get("classifier", "")
    )


def _relative_to(base_dir: str, path: str) -> str:
    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return path
    return os.path.join(base_dir, path)


def default_repositories() -> List[str]:
    """Local repository roots used when none are configured."""
    env_repo = os.environ.get(Constants.ENV_LOCAL_REPOSITORY)
    if env_repo and env_repo.strip():
        return [env_repo.strip()]
    return [Constants.DEFAULT_LOCAL_REPOSITORY]


def build_run_config(args) -> RunConfig:
    """Merge the optional config file with CLI arguments.

    Args:
        args: argparse namespace from args.parse_args().

    Returns:
        RunConfig ready for the resolver.
    """
    cfg = RunConfig()
    config_path = getattr(args, "CONFIG", None)
    if config_path:
        data = load_config(config_path)
        base_dir = os.path.dirname(os.path.abspath(config_path))
        try:
            cfg.bundles = [_bundle_from_config(item) for item in data.get("bundles", [])]
        except ValueError as e:
            raise ConfigError(str(e)) from e
        cfg.repositories = [_relative_to(base_dir, r) for r in data.get("repositories", [])]
        deps = data.get("dependencies", {})
        if deps.get("file"):
            cfg.dependencies_file = _relative_to(base_dir, deps["file"])
        cfg.dependency_format = deps.get("format", cfg.dependency_format)
        if "scopes" in deps:
            cfg.scopes = list(deps["scopes"])
        output = data.get("output", {})
        cfg.output_format = output.get("format", cfg.output_format)
        if output.get("file"):
            cfg.output_file = _relative_to(base_dir, output["file"])

    try:
        cfg.bundles.extend(BundleReference.parse(t) for t in getattr(args, "BUNDLES", None) or [])
    except ValueError as e:
        raise ConfigError(str(e)) from e
    cfg.repositories.extend(getattr(args, "REPOSITORIES", None) or [])
    if not cfg.repositories:
        cfg.repositories = default_repositories()
    if getattr(args, "DEPENDENCIES", None):
        cfg.dependencies_file = args.DEPENDENCIES
    if getattr(args, "DEPENDENCY_FORMAT", None):
        cfg.dependency_format = args.DEPENDENCY_FORMAT
    if getattr(args, "SCOPES", None):
        cfg.scopes = list(args.SCOPES)
    if getattr(args, "OUTPUT_FORMAT", None):
        cfg.output_format = args.OUTPUT_FORMAT
    if getattr(args, "OUTPUT", None):
        cfg.output_file = args.OUTPUT

    if cfg.bundles and not cfg.dependencies_file:
        raise ConfigError("A dependency list is required (--dependencies or dependencies.file)")
    logger.debug("Run configuration: %s", cfg)
    return cfg

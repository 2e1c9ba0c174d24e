"""
Configuration loader — reads dotstrap.yml into a BootstrapConfig.

The file is optional: without one every run uses the built-in defaults
and asks the operator for anything it needs.  The ``DRY_RUN``
environment variable is folded in here so the rest of the code only
ever looks at ``config.dry_run``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from dotstrap.core.errors import DotstrapError
from dotstrap.core.models.config import BootstrapConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "dotstrap.yml"

DRY_RUN_ENV = "DRY_RUN"
_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(DotstrapError):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for dotstrap.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to dotstrap.yml, or None if not found.
    """
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def dry_run_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Read the dry-run toggle (``DRY_RUN=true``)."""
    env = os.environ if environ is None else environ
    return env.get(DRY_RUN_ENV, "").strip().lower() in _TRUTHY


def load_config(
    path: Path | None = None,
    *,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
    search: bool = True,
) -> BootstrapConfig:
    """Load and validate the bootstrap configuration.

    Args:
        path: Explicit path to dotstrap.yml. If None, searches upward
            from the cwd (unless ``search`` is False).
        home: Override the home directory every ``~`` resolves against.
        environ: Environment mapping (default: ``os.environ``).
        search: Whether to look for a config file when ``path`` is None.

    Returns:
        Validated, frozen BootstrapConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        data = _read_yaml(path)

    data["dry_run"] = dry_run_from_env(environ) or bool(data.get("dry_run", False))
    if home is not None:
        data["home"] = home
    if path is not None:
        data["source_path"] = path.resolve()

    try:
        config = BootstrapConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if path is not None:
        logger.debug("Loaded config from %s", path)
    return config


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data

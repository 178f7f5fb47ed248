"""
Configuration loader — reads multifile.yml into LoaderOptions.

The file holds the host options the bundler would pass to the loader.
They may sit at the top level or under a ``vue:`` key, the way bundler
configs usually nest them.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from multifile_loader.core.models.options import LoaderOptions

logger = logging.getLogger(__name__)

# Default config filename
OPTIONS_FILE = "multifile.yml"

# Key the options may be nested under
OPTIONS_SECTION = "vue"


class ConfigError(Exception):
    """Raised when the options file is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for multifile.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to multifile.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / OPTIONS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def parse_options(data: object, source: str = "<options>") -> LoaderOptions:
    """Validate a raw options mapping.

    Raises:
        ConfigError: If the data is not a mapping or fails validation.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {source}, got {type(data).__name__}")

    section = data.get(OPTIONS_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{OPTIONS_SECTION}' in {source} must be a mapping")

    try:
        return LoaderOptions.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid loader options in {source}: {e}") from e


def load_options(path: Path | None = None, *, required: bool = False) -> LoaderOptions:
    """Load and validate loader options.

    Args:
        path: Explicit path to multifile.yml. If None, searches upward.
        required: Fail when no file is found instead of using defaults.

    Returns:
        Validated LoaderOptions.

    Raises:
        ConfigError: If the file is missing (explicit or required) or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        if required:
            raise ConfigError(f"No {OPTIONS_FILE} found. Create one or specify --config.")
        logger.debug("No %s found, using default options", OPTIONS_FILE)
        return LoaderOptions()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading loader options from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    options = parse_options(data, str(path))
    logger.info("Loaded loader options from %s", path)
    return options
"""
Configuration loader — reads devsetup.yml into a SetupConfig.

The file is optional. Without one, every setting takes its default.
When present it is parsed as YAML and validated against the Pydantic
schema; anything malformed is a ConfigError, reported before any
installation work starts.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from devsetup.core.models.config import SetupConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "devsetup.yml"


class ConfigError(Exception):
    """Raised when setup configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for devsetup.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to devsetup.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None, project_root: Path | None = None) -> SetupConfig:
    """Load and validate setup configuration.

    Args:
        path: Explicit path to a config file. Must exist when given.
        project_root: Where to start searching when ``path`` is None.

    Returns:
        Validated SetupConfig (defaults when no file is found).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file(project_root)
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return SetupConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading setup config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return SetupConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "setup" key or be flat
    setup_data = data.get("setup", data) if "setup" in data else data
    if not isinstance(setup_data, dict):
        raise ConfigError(f"Expected 'setup' to be a mapping in {path}")

    try:
        config = SetupConfig.model_validate(setup_data)
    except Exception as e:
        raise ConfigError(f"Invalid setup configuration: {e}") from e

    logger.info("Loaded setup config from %s", path)
    return config

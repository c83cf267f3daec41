"""
Configuration loader — reads gmx-install.yml into InstallerConfig.

The file is optional: with no file, built-in defaults apply.  It reads
YAML, validates against the Pydantic schema, and returns a typed,
frozen settings object.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from gmx_installer.core.config.settings import InstallerConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "gmx-install.yml"

# Env var naming an explicit config file
CONFIG_ENV_VAR = "GMXI_CONFIG"


class ConfigError(Exception):
    """Raised when installer configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for gmx-install.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to gmx-install.yml, or None if not found.
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


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load and validate installer configuration.

    Resolution order: explicit ``path``, then ``$GMXI_CONFIG``, then an
    upward search for ``gmx-install.yml``.  If none is found the
    defaults are returned.

    Raises:
        ConfigError: If an explicitly named file is missing, or any
            file found is not valid YAML or fails validation.
    """
    explicit = path is not None
    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])
        explicit = True
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return InstallerConfig()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return InstallerConfig()

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return InstallerConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under an "installer" key or be flat
    if "installer" in data:
        data = data["installer"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected 'installer' to be a mapping in {path}")

    try:
        config = InstallerConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.info("Loaded installer config from %s (prefix %s)", path, config.install_dir)
    return config

"""
Configuration loader for release_notes_generator.

Settings are read from an optional JSON file named ``config.json`` in
the ``~/.relnotes/`` directory. The file may set any of:

* ``api_url`` (str): base URL of the GitHub API;
* ``request_timeout`` (int or float): HTTP timeout in seconds;
* ``per_page`` (int, 1 to 100): page size for listing requests;
* ``source`` (str): ``"commits"`` or ``"pull-requests"``.

Missing keys take their defaults. If the file is malformed or holds a
value of the wrong type, a :class:`ConfigError` is raised. Access tokens
are never read from this file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE_NAME = "config.json"
SOURCES = ("commits", "pull-requests")

DEFAULT_CONFIG: Dict[str, Any] = {
    "api_url": "https://api.github.com",
    "request_timeout": 30,
    "per_page": 100,
    "source": "commits",
}


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the configuration file (``~/.relnotes``)."""
    return Path.home() / ".relnotes"


def _validate(data: Dict[str, Any]) -> None:
    if "api_url" in data and not isinstance(data["api_url"], str):
        raise ConfigError("'api_url' must be a string")
    if "request_timeout" in data:
        timeout = data["request_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError("'request_timeout' must be a number")
        if timeout <= 0:
            raise ConfigError("'request_timeout' must be positive")
    if "per_page" in data:
        per_page = data["per_page"]
        if isinstance(per_page, bool) or not isinstance(per_page, int):
            raise ConfigError("'per_page' must be an integer")
        if not 1 <= per_page <= 100:
            raise ConfigError("'per_page' must be between 1 and 100")
    if "source" in data and data["source"] not in SOURCES:
        raise ConfigError(f"'source' must be one of: {', '.join(SOURCES)}")


def load_config() -> Dict[str, Any]:
    """Load the configuration, falling back to defaults.

    Returns
    -------
    Dict[str, Any]
        Every key of :data:`DEFAULT_CONFIG`, overridden by values from the
        configuration file when it exists.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not a JSON object, or contains
        invalid values.
    """
    config_path = _get_config_directory() / CONFIG_FILE_NAME
    config = dict(DEFAULT_CONFIG)

    if not config_path.exists():
        logger.debug("No configuration file at '%s'; using defaults", config_path)
        return config

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        logger.error("Configuration file '%s' does not contain an object", config_path)
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    try:
        _validate(data)
    except ConfigError as exc:
        logger.error("Invalid configuration in '%s': %s", config_path, exc)
        raise

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
    config.update({key: value for key, value in data.items() if key in DEFAULT_CONFIG})

    logger.debug("Loaded configuration from: %s", config_path)
    return config

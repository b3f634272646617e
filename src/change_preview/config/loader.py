"""
Configuration loader for change_preview.

Settings are read from a JSON file named ``.change_preview.json``. The
loader looks for it in the current working directory first and then in
the ``~/.change_preview/`` directory. Unlike the diff options passed on
the command line, the file is optional: when none is found the built-in
defaults are returned.

If a configuration file exists but is malformed, or a key has the wrong
type or an out-of-range value, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
# Attach a null handler so that library use without logging configured
# stays silent. The CLI configures the root logger explicitly.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILENAME = ".change_preview.json"

FORMAT_CHOICES = ("unified", "side-by-side", "inline", "html", "markdown", "terminal")

DEFAULTS: Dict[str, Any] = {
    "context_lines": 3,
    "ignore_whitespace": False,
    "format": "unified",
    "max_workers": 1,
    "critical_files": [],
}


class ConfigError(Exception):
    """Raised when the configuration or the diff options are invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the user-level configuration directory (``~/.change_preview``)."""
    return Path.home() / ".change_preview"


def find_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Locate the configuration file.

    An explicit path must exist, otherwise :class:`ConfigError` is raised.
    Without one the working directory and then the user configuration
    directory are searched; ``None`` is returned when neither has a file.
    """
    if explicit_path is not None:
        if not explicit_path.is_file():
            raise ConfigError(f"Configuration file not found: {explicit_path}")
        return explicit_path

    for directory in (Path.cwd(), _get_config_directory()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def validate_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a configuration mapping and merge it over the defaults.

    Unknown keys are ignored (and logged) so that newer configuration
    files keep working with older releases.

    Raises
    ------
    ConfigError
        If a known key has the wrong type or an invalid value.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        logger.debug("Ignoring unknown configuration keys: %s", unknown)

    # bool is a subclass of int, so exclude it explicitly
    context_lines = data.get("context_lines", DEFAULTS["context_lines"])
    if not isinstance(context_lines, int) or isinstance(context_lines, bool):
        raise ConfigError("'context_lines' must be an integer")
    if context_lines < 0:
        raise ConfigError("'context_lines' must not be negative")

    ignore_whitespace = data.get("ignore_whitespace", DEFAULTS["ignore_whitespace"])
    if not isinstance(ignore_whitespace, bool):
        raise ConfigError("'ignore_whitespace' must be a boolean")

    fmt = data.get("format", DEFAULTS["format"])
    if fmt not in FORMAT_CHOICES:
        raise ConfigError(
            f"'format' must be one of: {', '.join(FORMAT_CHOICES)}"
        )

    max_workers = data.get("max_workers", DEFAULTS["max_workers"])
    if not isinstance(max_workers, int) or isinstance(max_workers, bool) or max_workers < 1:
        raise ConfigError("'max_workers' must be a positive integer")

    critical_files = data.get("critical_files", DEFAULTS["critical_files"])
    if not isinstance(critical_files, list) or not all(isinstance(n, str) for n in critical_files):
        raise ConfigError("'critical_files' must be a list of strings")

    return {
        "context_lines": context_lines,
        "ignore_whitespace": ignore_whitespace,
        "format": fmt,
        "max_workers": max_workers,
        "critical_files": list(critical_files),
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load and validate the change_preview configuration.

    Args:
        config_path: Explicit configuration file. When omitted the file is
            searched for as described in :func:`find_config_file`.

    Returns:
        A dictionary with the keys ``context_lines``, ``ignore_whitespace``,
        ``format``, ``max_workers`` and ``critical_files``. Defaults are
        returned when no configuration file exists.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON or holds
            invalid values.
    """
    path = find_config_file(config_path)
    if path is None:
        logger.debug("No configuration file found, using defaults")
        return dict(DEFAULTS, critical_files=[])

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    config = validate_config(data)
    logger.debug("Loaded configuration from: %s", path)
    logger.debug("Configuration data: %s", config)
    return config

"""
Optional JSON configuration for projstamp.

Example ``projstamp.json``::

    {
      "strategy": "NewMinor",
      "reset_build": true,
      "recursive": true,
      "fail_fast": false,
      "backup": {"enabled": true, "max_backups": 3},
      "logging": {"level": "INFO", "log_to_file": false, "log_file": "projstamp.log"}
    }

Command-line flags override these values.
"""
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from projstamp.backup import DEFAULT_MAX_BACKUPS
from projstamp.constants import DEFAULT_LOG_FILE_NAME
from projstamp.errors import ConfigError
from projstamp.versioning import Strategy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "strategy": Strategy.FULL_REVISION.value,
    "reset_build": False,
    "recursive": True,
    "fail_fast": False,
    "backup": {"enabled": False, "max_backups": DEFAULT_MAX_BACKUPS},
    "logging": {"level": "WARNING", "log_to_file": False, "log_file": DEFAULT_LOG_FILE_NAME},
}

_BOOL_KEYS = ("reset_build", "recursive", "fail_fast")


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Return the effective configuration.

    With no *path* the built-in defaults are returned.  Sections present in
    the file are merged over the defaults key by key.

    Raises:
        ConfigError: if the file cannot be read, is not JSON, or holds
            values of the wrong type.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return config

    path = Path(path).expanduser()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError("config file not found", path) from e
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e}", path) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON at line {e.lineno}: {e.msg}", path) from e

    if not isinstance(data, dict):
        raise ConfigError("top-level value must be a JSON object", path)

    for key, value in data.items():
        if key not in config:
            logger.debug(f"config: ignoring unknown key '{key}'")
            continue
        if isinstance(config[key], dict):
            if not isinstance(value, dict):
                raise ConfigError(f"'{key}' must be an object", path)
            config[key].update(value)
        else:
            config[key] = value

    _validate(config, path)
    logger.debug(f"config: loaded {path}")
    return config


def _validate(config: Dict[str, Any], path: Path) -> None:
    try:
        config["strategy"] = Strategy.parse(config["strategy"]).value
    except ValueError as e:
        raise ConfigError(str(e), path) from e

    for key in _BOOL_KEYS:
        if not isinstance(config[key], bool):
            raise ConfigError(f"'{key}' must be true or false", path)

    backup = config["backup"]
    if not isinstance(backup.get("enabled"), bool):
        raise ConfigError("'backup.enabled' must be true or false", path)
    max_backups = backup.get("max_backups")
    if isinstance(max_backups, bool) or not isinstance(max_backups, int) or max_backups < 1:
        raise ConfigError("'backup.max_backups' must be a positive integer", path)

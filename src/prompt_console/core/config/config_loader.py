"""
Environment overrides for the application configuration.

Every setting can be overridden through a ``PROMPT_CONSOLE_*`` variable. A
``.env`` file in the working directory is read first (python-dotenv) without
replacing variables that are already set.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROMPT_CONSOLE_"

# Environment variable suffix -> (section, field, converter)
_ENV_FIELDS: dict[str, tuple[str | None, str, str]] = {
    "HOST": (None, "host", "str"),
    "PORT": (None, "port", "int"),
    "LOG_LEVEL": ("logging", "level", "upper"),
    "LOG_FILE": ("logging", "log_file", "str"),
    "SUGGESTION_THRESHOLD": ("prompt", "suggestion_threshold", "float"),
    "RESOURCES_DIR": ("prompt", "resources_dir", "str"),
    "COMMAND_MODULES": ("prompt", "command_modules", "list"),
    "DISABLED_COMMANDS": ("prompt", "disabled_commands", "list"),
    "COMMAND_SET_FILE": ("prompt", "command_set_file", "str"),
    "WATCH_COMMAND_SET": ("prompt", "watch_command_set", "bool"),
    "AUDIT_ENABLED": ("prompt", "audit_enabled", "bool"),
    "PORTAL_ID": ("host_context", "portal_id", "int"),
    "PORTAL_NAME": ("host_context", "portal_name", "str"),
    "USER_ID": ("host_context", "user_id", "int"),
    "USERNAME": ("host_context", "username", "str"),
    "IS_SUPERUSER": ("host_context", "is_superuser", "bool"),
}


def load_dotenv_file(path: str | Path | None = None) -> bool:
    """Load a ``.env`` file into ``os.environ``; returns whether one was found."""
    dotenv_path = Path(path) if path else Path.cwd() / ".env"
    if not dotenv_path.exists():
        return False
    loaded = load_dotenv(dotenv_path, override=False)
    if loaded and logger.isEnabledFor(logging.DEBUG):
        logger.debug("Loaded environment from %s", dotenv_path)
    return loaded


def _str_to_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _str_to_list(val: str) -> list[str]:
    return [item.strip() for item in val.split(",") if item.strip()]


def _convert(raw: str, converter: str, name: str) -> Any:
    if converter == "int":
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not an integer", name, raw)
            return None
    if converter == "float":
        try:
            return float(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a number", name, raw)
            return None
    if converter == "bool":
        return _str_to_bool(raw)
    if converter == "list":
        return _str_to_list(raw)
    if converter == "upper":
        return raw.strip().upper()
    return raw


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect configuration overrides from ``PROMPT_CONSOLE_*`` variables.

    Returns:
        A nested mapping shaped like the configuration file.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for suffix, (section, field_name, converter) in _ENV_FIELDS.items():
        name = f"{ENV_PREFIX}{suffix}"
        if name not in env:
            continue
        value = _convert(env[name], converter, name)
        if value is None:
            continue
        target = overrides if section is None else overrides.setdefault(section, {})
        target[field_name] = value
    return overrides


def merge_dicts(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base`` (in place) and return it."""
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            merge_dicts(base[key], value)
        else:
            base[key] = value
    return base

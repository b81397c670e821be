"""
Localization services.

Resource files are flat YAML mappings of resource key to string, one file per
area (``prompt.resources.yaml``, ``users.resources.yaml``). Strings use
``str.format`` positional placeholders (``{0}``).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from importlib import resources
from pathlib import Path

import yaml

from prompt_console.core.common.exceptions import ConfigurationError
from prompt_console.core.interfaces.localization_interface import ILocalizationService

logger = logging.getLogger(__name__)


def default_resources_dir() -> Path:
    """Directory of the resource files shipped with the package."""
    return Path(str(resources.files("prompt_console") / "resources"))


class YamlLocalizationService(ILocalizationService):
    """Loads resource files from a directory and caches them per file."""

    def __init__(self, resources_dir: str | Path | None = None) -> None:
        self._resources_dir = Path(resources_dir) if resources_dir else default_resources_dir()
        self._cache: dict[str, Mapping[str, str]] = {}
        self._lock = threading.Lock()

    @property
    def resources_dir(self) -> Path:
        return self._resources_dir

    def get_string(self, key: str, resource_file: str) -> str:
        table = self._get_table(resource_file)
        value = table.get(key)
        if value is None:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Missing resource %s in %s", key, resource_file)
            return key
        return value

    def reload(self) -> None:
        """Drop cached resource tables so edited files are picked up."""
        with self._lock:
            self._cache = {}

    def _get_table(self, resource_file: str) -> Mapping[str, str]:
        table = self._cache.get(resource_file)
        if table is not None:
            return table
        with self._lock:
            table = self._cache.get(resource_file)
            if table is None:
                table = self._load(resource_file)
                self._cache[resource_file] = table
        return table

    def _load(self, resource_file: str) -> Mapping[str, str]:
        path = self._resources_dir / resource_file
        if not path.exists():
            logger.warning("Resource file not found: %s", path)
            return {}
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                message="Invalid resource file", details={"path": str(path), "hint": str(e)}
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                message="Invalid resource file",
                details={"path": str(path), "hint": "Top-level must be a mapping"},
            )
        return {str(k): str(v) for k, v in data.items() if v is not None}


class DictLocalizationService(ILocalizationService):
    """In-memory localization, keyed by resource file then resource key."""

    def __init__(self, tables: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._tables = {name: dict(table) for name, table in (tables or {}).items()}

    def get_string(self, key: str, resource_file: str) -> str:
        return self._tables.get(resource_file, {}).get(key, key)

"""
Command set loading.

A command set is a list of importable modules, each exposing
``register_commands(builder, environment)``. The loader imports them, lets
them register their descriptors, drops disabled commands and returns a new
registry snapshot. The list can come from configuration or from a small YAML
file::

    command_modules:
      - prompt_console.core.domain.commands.users
    disabled_commands:
      - users.list-users
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from prompt_console.core.common.exceptions import (
    DuplicateCommandError,
    RegistryLoadError,
)
from prompt_console.core.domain.commands.command_registry import (
    CommandRegistry,
    CommandRegistryBuilder,
)
from prompt_console.core.interfaces.localization_interface import ILocalizationService
from prompt_console.core.interfaces.user_repository_interface import IUserRepository
from prompt_console.core.services.argument_binder import ArgumentBinder

logger = logging.getLogger(__name__)

REGISTER_FUNCTION = "register_commands"
DEFAULT_COMMAND_MODULES = ("prompt_console.core.domain.commands.users",)


@dataclass
class CommandEnvironment:
    """Collaborators handed to command modules when they build handler factories."""

    localization: ILocalizationService
    user_repository: IUserRepository
    binder: ArgumentBinder = field(default_factory=ArgumentBinder)


@dataclass(frozen=True)
class CommandSet:
    """Modules to load and commands to leave out."""

    command_modules: tuple[str, ...] = DEFAULT_COMMAND_MODULES
    disabled_commands: tuple[str, ...] = ()

    @classmethod
    def from_file(cls, path: str | Path) -> CommandSet:
        """Read a command set file.

        Raises:
            RegistryLoadError: If the file cannot be read or is malformed
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RegistryLoadError(
                f"Cannot read command set file '{path}': {e}",
                details={"path": str(path)},
            ) from e
        if not isinstance(data, dict):
            raise RegistryLoadError(
                f"Command set file '{path}' must contain a mapping",
                details={"path": str(path)},
            )
        modules = data.get("command_modules", list(DEFAULT_COMMAND_MODULES))
        disabled = data.get("disabled_commands", [])
        if not isinstance(modules, list) or not isinstance(disabled, list):
            raise RegistryLoadError(
                f"Command set file '{path}': 'command_modules' and "
                "'disabled_commands' must be lists",
                details={"path": str(path)},
            )
        return cls(
            command_modules=tuple(str(m) for m in modules),
            disabled_commands=tuple(str(d) for d in disabled),
        )


class CommandSetLoader:
    """Builds registry snapshots from command sets."""

    def __init__(self, environment: CommandEnvironment) -> None:
        self._environment = environment

    @property
    def environment(self) -> CommandEnvironment:
        return self._environment

    def load(self, command_set: CommandSet) -> CommandRegistry:
        """Import every module of ``command_set`` and build a registry.

        Raises:
            RegistryLoadError: If a module cannot be imported or has no
                ``register_commands`` function
            DuplicateCommandError: If two modules register the same key
        """
        builder = CommandRegistryBuilder()
        for module_name in command_set.command_modules:
            self._load_module(builder, module_name)
        self._disable(builder, command_set.disabled_commands)
        registry = builder.build()
        logger.info(
            "Loaded %d console commands from %d modules",
            len(registry),
            len(command_set.command_modules),
        )
        return registry

    def load_modules(
        self, modules: Sequence[str], disabled: Iterable[str] = ()
    ) -> CommandRegistry:
        return self.load(CommandSet(tuple(modules), tuple(disabled)))

    def _load_module(self, builder: CommandRegistryBuilder, module_name: str) -> None:
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise RegistryLoadError(
                f"Cannot import command module '{module_name}': {e}",
                module_name=module_name,
            ) from e

        register = getattr(module, REGISTER_FUNCTION, None)
        if not callable(register):
            raise RegistryLoadError(
                f"Command module '{module_name}' has no {REGISTER_FUNCTION}() function",
                module_name=module_name,
            )
        try:
            register(builder, self._environment)
        except DuplicateCommandError:
            raise
        except Exception as e:
            raise RegistryLoadError(
                f"Command module '{module_name}' failed to register: {e}",
                module_name=module_name,
            ) from e
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Registered commands from %s", module_name)

    def _disable(self, builder: CommandRegistryBuilder, disabled: Iterable[str]) -> None:
        for key_or_name in disabled:
            if builder.remove(key_or_name):
                logger.info("Disabled console command %s", key_or_name)
            else:
                logger.warning("Disabled command %s is not registered", key_or_name)

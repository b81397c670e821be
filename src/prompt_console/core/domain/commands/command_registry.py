"""
Registry for console command descriptors.

A registry is an immutable snapshot built once through
``CommandRegistryBuilder``. ``RegistryHolder`` owns the snapshot currently in
use and swaps in a rebuilt one atomically, so concurrent readers never need a
lock and never observe a partially built registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from prompt_console.core.common.exceptions import DuplicateCommandError
from prompt_console.core.domain.command_descriptor import CommandDescriptor

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Read-only mapping of uppercase command keys to descriptors."""

    def __init__(self, descriptors: Mapping[str, CommandDescriptor]) -> None:
        self._by_key: Mapping[str, CommandDescriptor] = MappingProxyType(dict(descriptors))
        by_bare: dict[str, list[CommandDescriptor]] = {}
        for descriptor in self._by_key.values():
            by_bare.setdefault(descriptor.bare_key, []).append(descriptor)
        self._by_bare_name: Mapping[str, tuple[CommandDescriptor, ...]] = MappingProxyType(
            {name: tuple(items) for name, items in by_bare.items()}
        )

    @classmethod
    def empty(cls) -> CommandRegistry:
        return cls({})

    def lookup(self, key: str) -> CommandDescriptor | None:
        """Return the descriptor registered under ``key`` (case-insensitive)."""
        return self._by_key.get(key.upper())

    def all_by_bare_name(self, name: str) -> tuple[CommandDescriptor, ...]:
        """Return every descriptor whose name, ignoring namespace, is ``name``."""
        return self._by_bare_name.get(name.upper(), ())

    def all(self) -> list[CommandDescriptor]:
        return sorted(self._by_key.values(), key=lambda descriptor: descriptor.key)

    def keys(self) -> list[str]:
        return sorted(self._by_key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.upper() in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self.all())


class CommandRegistryBuilder:
    """Collects descriptors at startup and produces a registry snapshot."""

    def __init__(self) -> None:
        self._descriptors: dict[str, CommandDescriptor] = {}

    def register(self, descriptor: CommandDescriptor) -> None:
        """
        Register a command descriptor.

        Args:
            descriptor: The descriptor to add

        Raises:
            DuplicateCommandError: If the descriptor's key is already registered
        """
        key = descriptor.key
        if key in self._descriptors:
            raise DuplicateCommandError(
                f"Command '{key}' is already registered.", command_key=key
            )
        self._descriptors[key] = descriptor
        logger.debug("Registered console command: %s", key)

    def register_all(self, descriptors: Iterable[CommandDescriptor]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def remove(self, key_or_name: str) -> bool:
        """Drop a command by full key or bare name; returns whether any was removed."""
        target = key_or_name.upper()
        matches = [
            key
            for key, descriptor in self._descriptors.items()
            if key == target or descriptor.bare_key == target
        ]
        for key in matches:
            del self._descriptors[key]
        return bool(matches)

    def build(self) -> CommandRegistry:
        return CommandRegistry(self._descriptors)


class RegistryHolder:
    """Process-scoped owner of the registry snapshot in use."""

    def __init__(self, registry: CommandRegistry | None = None) -> None:
        self._registry = registry or CommandRegistry.empty()
        self._swap_lock = threading.Lock()
        self._generation = 0

    @property
    def current(self) -> CommandRegistry:
        return self._registry

    @property
    def generation(self) -> int:
        """Number of swaps performed; changes whenever a new snapshot is installed."""
        return self._generation

    def swap(self, registry: CommandRegistry) -> CommandRegistry:
        """Install ``registry`` and return the snapshot it replaced."""
        with self._swap_lock:
            previous = self._registry
            self._registry = registry
            self._generation += 1
        logger.info(
            "Command registry swapped (generation %d, %d commands)",
            self._generation,
            len(registry),
        )
        return previous

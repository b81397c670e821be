"""
Command descriptors.

A descriptor is the registered metadata of one invocable command: its name,
namespace, flag schema and the factory that creates a fresh handler for every
dispatch. Descriptors are immutable once built and owned by the registry.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prompt_console.core.domain.flags import FlagDescriptor, validate_flag_schema
from prompt_console.core.interfaces.model_bases import DomainModel, InternalDTO

if TYPE_CHECKING:
    from prompt_console.core.interfaces.console_command_interface import (
        IConsoleCommand,
    )

NAMESPACE_SEPARATOR = "."


def make_command_key(namespace: str, name: str) -> str:
    """Build the case-insensitive registry key ``NAMESPACE.NAME``."""
    if namespace:
        return f"{namespace}{NAMESPACE_SEPARATOR}{name}".upper()
    return name.upper()


@dataclass(frozen=True)
class CommandDescriptor(InternalDTO):
    """Registered metadata for one command.

    Attributes:
        name: Bare command name as typed by users (``list-users``).
        namespace: Grouping prefix (``users``); may be empty.
        description_key: Resource key of the one-line description.
        resource_file: Resource file used to localize the command's strings.
        flags: Ordered flag schema.
        handler_factory: Zero-argument callable returning a new handler.
        handler_type_name: Fully qualified handler type name for audit records.
        version: Version string reported by the command listing.
        result_html_key: Optional resource key with extended help text.
    """

    name: str
    namespace: str
    description_key: str
    resource_file: str
    flags: tuple[FlagDescriptor, ...]
    handler_factory: Callable[[], IConsoleCommand] = field(compare=False)
    handler_type_name: str = ""
    version: str = "1.0.0"
    result_html_key: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Command name must be a non-empty string.")
        if NAMESPACE_SEPARATOR in self.name:
            raise ValueError(
                f"Command name '{self.name}' must not contain '{NAMESPACE_SEPARATOR}'."
            )
        if not callable(self.handler_factory):
            raise TypeError("Command handler factory must be a callable.")
        object.__setattr__(self, "flags", validate_flag_schema(self.flags))

    @property
    def key(self) -> str:
        return make_command_key(self.namespace, self.name)

    @property
    def bare_key(self) -> str:
        return self.name.upper()

    def get_flag(self, name: str) -> FlagDescriptor | None:
        lowered = name.lower()
        for flag in self.flags:
            if flag.name == lowered:
                return flag
        return None

    @classmethod
    def for_command(
        cls,
        command_type: type[IConsoleCommand],
        *,
        namespace: str,
        factory: Callable[[], IConsoleCommand] | None = None,
        version: str = "1.0.0",
    ) -> CommandDescriptor:
        """Build a descriptor from the attributes a command class declares.

        Args:
            command_type: Handler class declaring ``command_name``,
                ``description_key``, ``flags`` and ``resource_file``.
            namespace: Namespace the command is registered under.
            factory: Optional factory; defaults to calling the class.
            version: Version string for listings.
        """
        flags: Iterable[FlagDescriptor] = getattr(command_type, "flags", ())
        return cls(
            name=command_type.command_name,
            namespace=namespace,
            description_key=command_type.description_key,
            resource_file=command_type.resource_file,
            flags=tuple(flags),
            handler_factory=factory or command_type,
            handler_type_name=f"{command_type.__module__}.{command_type.__qualname__}",
            version=version,
            result_html_key=getattr(command_type, "result_html_key", None),
        )

    def to_summary(self, description: str) -> CommandSummary:
        return CommandSummary(
            key=self.key,
            name=self.name,
            namespace=self.namespace,
            description=description,
            version=self.version,
        )


class CommandSummary(DomainModel):
    """Command listing entry returned to autocomplete and help UIs."""

    key: str
    name: str
    namespace: str
    description: str
    version: str
